from django.db import transaction
from rest_framework import serializers

from academic.models import Class
from backend.exceptions import AlreadyExists
from students.models import Student
from students.serializers import StudentSummarySerializer
from .models import AttendanceSession, AttendanceRecord


class AttendanceClassSerializer(serializers.ModelSerializer):
    course = serializers.SerializerMethodField()

    class Meta:
        model = Class
        fields = ['id', 'name', 'course']

    def get_course(self, obj):
        course = obj.course
        return {'id': course.id, 'name': course.name, 'code': course.code}


class TakenBySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    email = serializers.EmailField()


class AttendanceRecordSerializer(serializers.ModelSerializer):
    student = StudentSummarySerializer(read_only=True)

    class Meta:
        model = AttendanceRecord
        fields = ['id', 'student', 'status', 'note']


class AttendanceRecordInputSerializer(serializers.Serializer):
    """
    Incoming {student_id, status, note} row
    """
    student_id = serializers.PrimaryKeyRelatedField(queryset=Student.objects.all())
    status = serializers.ChoiceField(choices=AttendanceRecord.STATUS_CHOICES)
    note = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)


def _validate_record_rows(rows):
    seen = set()
    for row in rows:
        student = row['student_id']
        if student.pk in seen:
            raise serializers.ValidationError(
                f'Student {student.student_id} appears more than once'
            )
        seen.add(student.pk)
    return rows


class AttendanceSessionListSerializer(serializers.ModelSerializer):
    """
    Session row with per-status counts (annotated by the view)
    """
    class_id = serializers.IntegerField(source='academic_class_id', read_only=True)
    academic_class = AttendanceClassSerializer(read_only=True)
    taken_by = TakenBySerializer(read_only=True)
    total_records = serializers.IntegerField(read_only=True)
    present = serializers.IntegerField(read_only=True)
    absent = serializers.IntegerField(read_only=True)
    late = serializers.IntegerField(read_only=True)
    excused = serializers.IntegerField(read_only=True)

    class Meta:
        model = AttendanceSession
        fields = [
            'id', 'class_id', 'academic_class', 'date', 'shift', 'taken_by',
            'taken_at', 'note', 'total_records', 'present', 'absent', 'late',
            'excused', 'created_at'
        ]


class AttendanceSessionSerializer(serializers.ModelSerializer):
    """
    Full session with its records, ordered by student first name
    """
    class_id = serializers.IntegerField(source='academic_class_id', read_only=True)
    academic_class = AttendanceClassSerializer(read_only=True)
    taken_by = TakenBySerializer(read_only=True)
    records = serializers.SerializerMethodField()

    class Meta:
        model = AttendanceSession
        fields = [
            'id', 'class_id', 'academic_class', 'date', 'shift', 'taken_by',
            'taken_at', 'note', 'records', 'created_at', 'updated_at'
        ]

    def get_records(self, obj):
        records = obj.records.select_related('student').order_by('student__first_name')
        return AttendanceRecordSerializer(records, many=True).data


class AttendanceSessionCreateSerializer(serializers.Serializer):
    """
    Take attendance for a class on a date and shift
    """
    class_id = serializers.PrimaryKeyRelatedField(queryset=Class.objects.all())
    date = serializers.DateField()
    shift = serializers.ChoiceField(
        choices=AttendanceSession.SHIFT_CHOICES,
        error_messages={'invalid_choice': 'Shift must be Morning, Afternoon, or Evening'}
    )
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    records = AttendanceRecordInputSerializer(many=True)

    def validate_records(self, value):
        if not value:
            raise serializers.ValidationError('At least one attendance record is required')
        return _validate_record_rows(value)

    def validate(self, attrs):
        academic_class = attrs['class_id']
        date = attrs['date']
        shift = attrs['shift']
        if AttendanceSession.objects.filter(
            academic_class=academic_class, date=date, shift=shift
        ).exists():
            raise AlreadyExists(
                f'Attendance for this class on {date.isoformat()} ({shift} shift) has already been taken'
            )
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        request = self.context.get('request')
        session = AttendanceSession.objects.create(
            academic_class=validated_data['class_id'],
            date=validated_data['date'],
            shift=validated_data['shift'],
            note=validated_data.get('note') or None,
            taken_by=request.user if request else None,
        )
        AttendanceRecord.objects.bulk_create([
            AttendanceRecord(
                session=session,
                student=row['student_id'],
                status=row['status'],
                note=row.get('note') or None,
            )
            for row in validated_data['records']
        ])
        return session


class AttendanceSessionUpdateSerializer(serializers.Serializer):
    """
    Update the session note and/or upsert records by student
    """
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    records = AttendanceRecordInputSerializer(many=True, required=False)

    def validate_records(self, value):
        return _validate_record_rows(value)

    @transaction.atomic
    def update(self, instance, validated_data):
        if 'note' in validated_data:
            instance.note = validated_data['note'] or None
            instance.save(update_fields=['note', 'updated_at'])

        for row in validated_data.get('records', []):
            AttendanceRecord.objects.update_or_create(
                session=instance,
                student=row['student_id'],
                defaults={
                    'status': row['status'],
                    'note': row.get('note') or None,
                }
            )
        return instance
