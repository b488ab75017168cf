from decimal import Decimal

from rest_framework import serializers
from rest_framework.exceptions import NotFound

from academic.serializers import ActiveSemesterField, DepartmentSummarySerializer, ClassSummarySerializer
from backend.exceptions import AlreadyExists
from students.models import Student
from .models import TuitionPayment


class PaymentStudentSerializer(serializers.ModelSerializer):
    department = DepartmentSummarySerializer(read_only=True)
    academic_class = ClassSummarySerializer(read_only=True)

    class Meta:
        model = Student
        fields = ['id', 'student_id', 'first_name', 'last_name', 'department', 'academic_class']


class TuitionPaymentSerializer(serializers.ModelSerializer):
    """
    Serializer for recorded tuition payments
    """
    student = PaymentStudentSerializer(read_only=True)

    class Meta:
        model = TuitionPayment
        fields = ['id', 'student', 'amount', 'semester', 'year', 'note', 'paid_at', 'created_at']
        read_only_fields = fields


class PaymentRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = TuitionPayment
        fields = ['id', 'semester', 'year', 'amount', 'paid_at']


class TuitionPaymentCreateSerializer(serializers.Serializer):
    """
    Record a tuition payment for a student identified by student ID
    (STD-YYYY-NNNN). Amount defaults to the department tuition fee.
    """
    student_id = serializers.CharField(max_length=20)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    semester = ActiveSemesterField(max_length=50)
    year = serializers.IntegerField(min_value=1900, max_value=3000)
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate_student_id(self, value):
        student = Student.objects.select_related('department').filter(student_id=value.strip()).first()
        if student is None:
            raise NotFound('Student not found')
        return student

    def validate(self, attrs):
        student = attrs['student_id']
        amount = attrs.get('amount')
        if amount is None:
            amount = student.department.tuition_fee or Decimal('0')
        if amount <= 0:
            raise serializers.ValidationError({'amount': 'Amount must be greater than 0'})
        attrs['amount'] = amount

        semester = attrs['semester']
        year = attrs['year']
        if TuitionPayment.objects.filter(student=student, semester=semester, year=year).exists():
            raise AlreadyExists(f'Student has already paid for {semester} {year}')
        return attrs

    def create(self, validated_data):
        return TuitionPayment.objects.create(
            student=validated_data['student_id'],
            amount=validated_data['amount'],
            semester=validated_data['semester'],
            year=validated_data['year'],
            note=validated_data.get('note') or None,
        )
