from django.db.models import Q
from rest_framework import serializers

from backend.validators import ensure_unique
from .models import Faculty, Department, Course, Semester, Class


class FacultySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Faculty
        fields = ['id', 'name', 'code']


class DepartmentSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Department
        fields = ['id', 'name', 'code']


class CourseSummarySerializer(serializers.ModelSerializer):
    department = DepartmentSummarySerializer(read_only=True)

    class Meta:
        model = Course
        fields = ['id', 'name', 'code', 'credit_hours', 'department']


class ClassSummarySerializer(serializers.ModelSerializer):
    course_code = serializers.CharField(source='course.code', read_only=True)

    class Meta:
        model = Class
        fields = ['id', 'name', 'semester', 'year', 'course_code']


class FacultySerializer(serializers.ModelSerializer):
    """
    Serializer for Faculty
    """
    department_count = serializers.SerializerMethodField()

    class Meta:
        model = Faculty
        fields = [
            'id', 'name', 'code', 'description', 'program', 'is_active',
            'department_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {
            'name': {'validators': []},
            'code': {'validators': []},
        }

    def get_department_count(self, obj):
        return obj.departments.count()

    def validate_name(self, value):
        return value.strip()

    def validate_code(self, value):
        return value.strip().upper()

    def validate(self, attrs):
        name = attrs.get('name', getattr(self.instance, 'name', None))
        code = attrs.get('code', getattr(self.instance, 'code', None))
        ensure_unique(
            Faculty.objects.filter(Q(name=name) | Q(code=code)),
            'A faculty with this name or code already exists',
            self.instance
        )
        return attrs


class DepartmentSerializer(serializers.ModelSerializer):
    """
    Serializer for Department
    """
    faculty = FacultySummarySerializer(read_only=True)
    faculty_id = serializers.PrimaryKeyRelatedField(
        queryset=Faculty.objects.all(),
        source='faculty',
        write_only=True
    )

    class Meta:
        model = Department
        fields = [
            'id', 'name', 'code', 'description', 'faculty', 'faculty_id',
            'tuition_fee', 'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {
            'name': {'validators': []},
            'code': {'validators': []},
        }

    def validate_name(self, value):
        return value.strip()

    def validate_code(self, value):
        return value.strip().upper()

    def validate(self, attrs):
        name = attrs.get('name', getattr(self.instance, 'name', None))
        code = attrs.get('code', getattr(self.instance, 'code', None))
        ensure_unique(
            Department.objects.filter(Q(name=name) | Q(code=code)),
            'A department with this name or code already exists',
            self.instance
        )
        return attrs


class CourseSerializer(serializers.ModelSerializer):
    """
    Serializer for Course
    """
    department = DepartmentSummarySerializer(read_only=True)
    department_id = serializers.PrimaryKeyRelatedField(
        queryset=Department.objects.all(),
        source='department',
        write_only=True
    )
    class_count = serializers.SerializerMethodField()

    class Meta:
        model = Course
        fields = [
            'id', 'name', 'code', 'description', 'credit_hours', 'department',
            'department_id', 'is_active', 'class_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {
            'name': {'validators': []},
            'code': {'validators': []},
        }

    def get_class_count(self, obj):
        return obj.classes.count()

    def validate_name(self, value):
        return value.strip()

    def validate_code(self, value):
        return value.strip().upper()

    def validate(self, attrs):
        name = attrs.get('name', getattr(self.instance, 'name', None))
        code = attrs.get('code', getattr(self.instance, 'code', None))
        ensure_unique(
            Course.objects.filter(Q(name=name) | Q(code=code)),
            'A course with this name or code already exists',
            self.instance
        )
        return attrs


class SemesterSerializer(serializers.ModelSerializer):
    """
    Serializer for Semester registry entries
    """
    class Meta:
        model = Semester
        fields = ['id', 'name', 'sort_order', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {
            'name': {'validators': []},
        }

    def validate_name(self, value):
        name = value.strip()
        if not name:
            raise serializers.ValidationError('Name is required')
        ensure_unique(
            Semester.objects.filter(name=name),
            'A semester with this name already exists',
            self.instance
        )
        return name


class ActiveSemesterField(serializers.CharField):
    """
    Semester label that must name an active registry entry
    """
    default_error_messages = {
        'inactive': 'Invalid semester. Use a semester from the Semesters settings.',
    }

    def to_internal_value(self, data):
        value = super().to_internal_value(data).strip()
        if not Semester.objects.is_valid_name(value):
            self.fail('inactive')
        return value


class ClassSerializer(serializers.ModelSerializer):
    """
    Serializer for Class
    """
    course = CourseSummarySerializer(read_only=True)
    course_id = serializers.PrimaryKeyRelatedField(
        queryset=Course.objects.all(),
        source='course',
        write_only=True
    )
    semester = ActiveSemesterField(max_length=50)
    student_count = serializers.SerializerMethodField()

    class Meta:
        model = Class
        fields = [
            'id', 'name', 'course', 'course_id', 'semester', 'year', 'room',
            'schedule', 'capacity', 'is_active', 'student_count',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['created_at', 'updated_at']
        validators = []

    def get_student_count(self, obj):
        return obj.students.count()

    def validate_name(self, value):
        return value.strip()

    def validate(self, attrs):
        name = attrs.get('name', getattr(self.instance, 'name', None))
        semester = attrs.get('semester', getattr(self.instance, 'semester', None))
        year = attrs.get('year', getattr(self.instance, 'year', None))
        ensure_unique(
            Class.objects.filter(name=name, semester=semester, year=year),
            'A class with this name in the same semester/year already exists',
            self.instance
        )
        return attrs
