from rest_framework import serializers

from academic.models import Department, Class
from academic.serializers import DepartmentSummarySerializer, ClassSummarySerializer
from backend.validators import ensure_unique
from .models import Student


class StudentSummarySerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Student
        fields = ['id', 'student_id', 'first_name', 'last_name', 'full_name']


class StudentSerializer(serializers.ModelSerializer):
    """
    Serializer for Student admissions
    """
    full_name = serializers.CharField(read_only=True)
    department = DepartmentSummarySerializer(read_only=True)
    department_id = serializers.PrimaryKeyRelatedField(
        queryset=Department.objects.all(),
        source='department',
        write_only=True
    )
    academic_class = ClassSummarySerializer(read_only=True)
    class_id = serializers.PrimaryKeyRelatedField(
        queryset=Class.objects.all(),
        source='academic_class',
        write_only=True,
        required=False,
        allow_null=True
    )

    class Meta:
        model = Student
        fields = [
            'id', 'student_id', 'first_name', 'last_name', 'full_name',
            'mother_name', 'parent_phone', 'email', 'phone', 'date_of_birth',
            'gender', 'address', 'department', 'department_id',
            'academic_class', 'class_id', 'program', 'image', 'status',
            'admission_date', 'created_at', 'updated_at'
        ]
        read_only_fields = ['student_id', 'created_at', 'updated_at']
        extra_kwargs = {
            'email': {'validators': []},
        }

    def validate_first_name(self, value):
        return value.strip()

    def validate_last_name(self, value):
        return value.strip()

    def validate_email(self, value):
        if not value:
            return None
        email = value.lower().strip()
        ensure_unique(
            Student.objects.filter(email=email),
            'A student with this email already exists',
            self.instance
        )
        return email


class StudentDetailSerializer(StudentSerializer):
    """
    Student with department fee and tuition history, used for lookups
    by student ID
    """
    tuition_fee = serializers.DecimalField(
        source='department.tuition_fee',
        max_digits=10,
        decimal_places=2,
        read_only=True
    )
    tuition_payments = serializers.SerializerMethodField()

    class Meta(StudentSerializer.Meta):
        fields = StudentSerializer.Meta.fields + ['tuition_fee', 'tuition_payments']

    def get_tuition_payments(self, obj):
        payments = obj.tuition_payments.order_by('-year', 'semester')
        return [
            {
                'id': payment.id,
                'semester': payment.semester,
                'year': payment.year,
                'amount': payment.amount,
                'paid_at': payment.paid_at,
            }
            for payment in payments
        ]
