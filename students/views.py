import logging

from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from authentication.permissions import HasModulePermission
from backend.mixins import SuccessDestroyMixin
from backend.query_params import int_param
from .models import Student
from .serializers import StudentSerializer, StudentDetailSerializer

logger = logging.getLogger(__name__)


class StudentViewSet(SuccessDestroyMixin, viewsets.ModelViewSet):
    """
    ViewSet for managing student admissions
    """
    queryset = Student.objects.select_related(
        'department', 'academic_class__course'
    ).all()
    serializer_class = StudentSerializer
    permission_classes = [HasModulePermission]
    permission_module = 'admission'

    def get_queryset(self):
        queryset = super().get_queryset()
        department_id = int_param(self.request, 'department_id')
        class_id = int_param(self.request, 'class_id')
        status = self.request.query_params.get('status', None)
        search = self.request.query_params.get('search', None)

        if department_id:
            queryset = queryset.filter(department_id=department_id)
        if class_id:
            queryset = queryset.filter(academic_class_id=class_id)
        if status:
            queryset = queryset.filter(status=status)
        if search:
            queryset = queryset.filter(
                Q(first_name__icontains=search)
                | Q(last_name__icontains=search)
                | Q(student_id__icontains=search)
            )

        return queryset

    def perform_create(self, serializer):
        student = serializer.save()
        logger.info('Student %s admitted by %s', student.student_id, self.request.user)

    def perform_destroy(self, instance):
        image = instance.image
        instance.delete()
        if image:
            image.delete(save=False)

    @action(
        detail=False,
        methods=['get'],
        url_path=r'by-student-id/(?P<student_id>[^/]+)'
    )
    def by_student_id(self, request, student_id=None):
        """
        Look up a student by the generated student ID (STD-YYYY-NNNN)
        """
        student = get_object_or_404(
            Student.objects.select_related('department', 'academic_class__course'),
            student_id=student_id
        )
        serializer = StudentDetailSerializer(student, context=self.get_serializer_context())
        return Response(serializer.data)
