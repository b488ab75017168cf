from rest_framework import viewsets

from authentication.permissions import HasModulePermission
from backend.exceptions import DeleteConflict
from backend.query_params import int_param
from backend.mixins import SuccessDestroyMixin
from .models import Faculty, Department, Course, Semester, Class
from .serializers import (
    FacultySerializer, DepartmentSerializer, CourseSerializer,
    SemesterSerializer, ClassSerializer
)


def _flag(value):
    return value.lower() == 'true'


class FacultyViewSet(SuccessDestroyMixin, viewsets.ModelViewSet):
    """
    ViewSet for managing faculties
    """
    queryset = Faculty.objects.all()
    serializer_class = FacultySerializer
    permission_classes = [HasModulePermission]
    permission_module = 'faculties'

    def get_queryset(self):
        queryset = super().get_queryset()
        is_active = self.request.query_params.get('is_active', None)

        if is_active is not None:
            queryset = queryset.filter(is_active=_flag(is_active))

        return queryset

    def perform_destroy(self, instance):
        if instance.departments.exists():
            raise DeleteConflict('Cannot delete a faculty that has departments. Remove departments first.')
        instance.delete()


class DepartmentViewSet(SuccessDestroyMixin, viewsets.ModelViewSet):
    """
    ViewSet for managing departments
    """
    queryset = Department.objects.select_related('faculty').all()
    serializer_class = DepartmentSerializer
    permission_classes = [HasModulePermission]
    permission_module = 'departments'

    def get_queryset(self):
        queryset = super().get_queryset()
        faculty_id = int_param(self.request, 'faculty_id')
        is_active = self.request.query_params.get('is_active', None)

        if faculty_id:
            queryset = queryset.filter(faculty_id=faculty_id)
        if is_active is not None:
            queryset = queryset.filter(is_active=_flag(is_active))

        return queryset

    def perform_destroy(self, instance):
        course_count = instance.courses.count()
        student_count = instance.students.count()
        if course_count or student_count:
            raise DeleteConflict(
                f'Cannot delete. This department has {course_count} course(s) '
                f'and {student_count} student(s).'
            )
        instance.delete()


class CourseViewSet(SuccessDestroyMixin, viewsets.ModelViewSet):
    """
    ViewSet for managing courses
    """
    queryset = Course.objects.select_related('department').all()
    serializer_class = CourseSerializer
    permission_classes = [HasModulePermission]
    permission_module = 'courses'

    def get_queryset(self):
        queryset = super().get_queryset()
        department_id = int_param(self.request, 'department_id')
        is_active = self.request.query_params.get('is_active', None)

        if department_id:
            queryset = queryset.filter(department_id=department_id)
        if is_active is not None:
            queryset = queryset.filter(is_active=_flag(is_active))

        return queryset

    def perform_destroy(self, instance):
        if instance.classes.exists():
            raise DeleteConflict('Cannot delete a course that has classes. Remove classes first.')
        if instance.exam_records.exists():
            raise DeleteConflict('Cannot delete a course that has exam records.')
        instance.delete()


class SemesterViewSet(SuccessDestroyMixin, viewsets.ModelViewSet):
    """
    ViewSet for the semester registry
    ?active=true lists only active semesters
    """
    queryset = Semester.objects.all()
    serializer_class = SemesterSerializer
    permission_classes = [HasModulePermission]
    permission_module = 'semesters'

    def get_queryset(self):
        queryset = super().get_queryset()
        if _flag(self.request.query_params.get('active', '')):
            queryset = queryset.active()
        return queryset.order_by('sort_order', 'name')

    def perform_destroy(self, instance):
        from finance.models import TuitionPayment
        from grades.models import ExamRecord

        class_count = Class.objects.filter(semester=instance.name).count()
        payment_count = TuitionPayment.objects.filter(semester=instance.name).count()
        exam_count = ExamRecord.objects.filter(semester=instance.name).count()
        if class_count or payment_count or exam_count:
            raise DeleteConflict(
                f'Cannot delete. This semester is used by {class_count} class(es), '
                f'{payment_count} payment(s), and {exam_count} exam record(s). '
                f'Deactivate it instead.'
            )
        instance.delete()


class ClassViewSet(SuccessDestroyMixin, viewsets.ModelViewSet):
    """
    ViewSet for managing classes
    """
    queryset = Class.objects.select_related('course__department').all()
    serializer_class = ClassSerializer
    permission_classes = [HasModulePermission]
    permission_module = 'classes'

    def get_queryset(self):
        queryset = super().get_queryset()
        course_id = int_param(self.request, 'course_id')
        department_id = int_param(self.request, 'department_id')
        semester = self.request.query_params.get('semester', None)
        year = int_param(self.request, 'year')

        if course_id:
            queryset = queryset.filter(course_id=course_id)
        if department_id:
            queryset = queryset.filter(course__department_id=department_id)
        if semester:
            queryset = queryset.filter(semester=semester)
        if year:
            queryset = queryset.filter(year=year)

        return queryset

    def perform_destroy(self, instance):
        student_count = instance.students.count()
        session_count = instance.attendance_sessions.count()
        if student_count or session_count:
            raise DeleteConflict(
                f'Cannot delete. This class has {student_count} student(s) '
                f'and {session_count} attendance session(s).'
            )
        instance.delete()
