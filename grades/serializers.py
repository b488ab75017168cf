from decimal import Decimal

from rest_framework import serializers

from academic.models import Course
from academic.serializers import ActiveSemesterField, DepartmentSummarySerializer
from backend.validators import ensure_unique
from students.models import Student
from .grading import MARK_COMPONENTS
from .models import ExamRecord


def _mark_field():
    return serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        required=False,
        allow_null=True
    )


class ExamStudentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Student
        fields = ['id', 'student_id', 'first_name', 'last_name', 'department_id']


class ExamCourseSerializer(serializers.ModelSerializer):
    department = DepartmentSummarySerializer(read_only=True)

    class Meta:
        model = Course
        fields = ['id', 'name', 'code', 'credit_hours', 'department']


class ExamRecordSerializer(serializers.ModelSerializer):
    """
    Serializer for exam records; marks are range-checked per component and
    the total/grade/grade points are derived by the model
    """
    student = ExamStudentSerializer(read_only=True)
    student_id = serializers.PrimaryKeyRelatedField(
        queryset=Student.objects.all(),
        source='student',
        write_only=True
    )
    course = ExamCourseSerializer(read_only=True)
    course_id = serializers.PrimaryKeyRelatedField(
        queryset=Course.objects.all(),
        source='course',
        write_only=True
    )
    semester = ActiveSemesterField(max_length=50)

    mid_exam = _mark_field()
    final_exam = _mark_field()
    assessment = _mark_field()
    project = _mark_field()
    assignment = _mark_field()
    presentation = _mark_field()

    class Meta:
        model = ExamRecord
        fields = [
            'id', 'student', 'student_id', 'course', 'course_id', 'semester',
            'year', 'mid_exam', 'final_exam', 'assessment', 'project',
            'assignment', 'presentation', 'total_marks', 'grade',
            'grade_points', 'created_at', 'updated_at'
        ]
        read_only_fields = ['total_marks', 'grade', 'grade_points', 'created_at', 'updated_at']
        validators = []

    def validate(self, attrs):
        for component in MARK_COMPONENTS:
            if component.key not in attrs:
                continue
            value = attrs[component.key]
            if value is None:
                value = attrs[component.key] = Decimal('0')
            if value < 0 or value > component.max_marks:
                raise serializers.ValidationError({
                    component.key: f'{component.label} must be 0-{component.max_marks}'
                })

        student = attrs.get('student', getattr(self.instance, 'student', None))
        course = attrs.get('course', getattr(self.instance, 'course', None))
        semester = attrs.get('semester', getattr(self.instance, 'semester', None))
        year = attrs.get('year', getattr(self.instance, 'year', None))
        ensure_unique(
            ExamRecord.objects.filter(student=student, course=course, semester=semester, year=year),
            'Exam record for this student/course/semester/year already exists',
            self.instance
        )
        return attrs


class GPAStudentSerializer(serializers.ModelSerializer):
    department = DepartmentSummarySerializer(read_only=True)

    class Meta:
        model = Student
        fields = ['id', 'student_id', 'first_name', 'last_name', 'image', 'department']


class ExamImportSerializer(serializers.Serializer):
    file = serializers.FileField()
    class_id = serializers.IntegerField()
