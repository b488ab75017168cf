import logging

from django.db.models import Count, Q
from rest_framework import viewsets
from rest_framework.response import Response

from authentication.permissions import HasModulePermission
from backend.mixins import SuccessDestroyMixin
from backend.query_params import int_param, date_param
from .models import AttendanceSession
from .serializers import (
    AttendanceSessionListSerializer, AttendanceSessionSerializer,
    AttendanceSessionCreateSerializer, AttendanceSessionUpdateSerializer
)

logger = logging.getLogger(__name__)


def _status_count(status):
    return Count('records', filter=Q(records__status=status))


class AttendanceSessionViewSet(SuccessDestroyMixin, viewsets.ModelViewSet):
    """
    ViewSet for attendance sessions
    """
    queryset = AttendanceSession.objects.select_related(
        'academic_class__course', 'taken_by'
    ).all()
    permission_classes = [HasModulePermission]
    permission_module = 'attendance'
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_serializer_class(self):
        if self.action == 'list':
            return AttendanceSessionListSerializer
        if self.action == 'create':
            return AttendanceSessionCreateSerializer
        if self.action == 'partial_update':
            return AttendanceSessionUpdateSerializer
        return AttendanceSessionSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        class_id = int_param(self.request, 'class_id')
        date_from = date_param(self.request, 'date_from')
        date_to = date_param(self.request, 'date_to')

        if class_id:
            queryset = queryset.filter(academic_class_id=class_id)
        if date_from:
            queryset = queryset.filter(date__gte=date_from)
        if date_to:
            queryset = queryset.filter(date__lte=date_to)

        if self.action == 'list':
            queryset = queryset.annotate(
                total_records=Count('records'),
                present=_status_count('Present'),
                absent=_status_count('Absent'),
                late=_status_count('Late'),
                excused=_status_count('Excused'),
            )

        return queryset.order_by('-date', 'shift')

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session = serializer.save()
        logger.info(
            'Attendance taken for class %s on %s (%s) by %s',
            session.academic_class_id, session.date, session.shift, request.user
        )
        return Response(AttendanceSessionSerializer(session).data, status=201)

    def partial_update(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        session = serializer.save()
        return Response(AttendanceSessionSerializer(session).data)
