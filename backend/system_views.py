"""
System information views
"""
import logging
import os
import sys

import django
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import connection, DatabaseError
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from academic.models import Faculty, Department, Course, Class
from attendance.models import AttendanceSession
from authentication.permissions import IsStaffUser
from finance.models import TuitionPayment
from grades.models import ExamRecord
from students.models import Student

logger = logging.getLogger(__name__)

User = get_user_model()


def _database_info():
    db_engine = settings.DATABASES['default']['ENGINE'].split('.')[-1]
    status = 'connected'
    version = 'Unknown'
    try:
        with connection.cursor() as cursor:
            if 'postgresql' in db_engine:
                cursor.execute("SELECT version()")
                # "PostgreSQL 16.2 on ..."
                version = cursor.fetchone()[0].split()[1]
            elif 'sqlite' in db_engine:
                cursor.execute("SELECT sqlite_version()")
                version = cursor.fetchone()[0]
            else:
                cursor.execute("SELECT 1")
    except DatabaseError:
        logger.warning('Database health check failed', exc_info=True)
        status = 'disconnected'

    return {
        'engine': 'PostgreSQL' if 'postgresql' in db_engine else 'SQLite' if 'sqlite' in db_engine else db_engine,
        'version': version,
        'status': status,
    }


def _media_usage():
    media_root = settings.MEDIA_ROOT
    total_size = 0
    file_count = 0

    if os.path.exists(media_root):
        for dirpath, dirnames, filenames in os.walk(media_root):
            for filename in filenames:
                total_size += os.path.getsize(os.path.join(dirpath, filename))
                file_count += 1

    return {
        'total_files': file_count,
        'used_mb': round(total_size / (1024 ** 2), 2),
        'media_root': str(media_root),
    }


@api_view(['GET'])
@permission_classes([IsStaffUser])
def system_info(request):
    """
    Returns runtime, database and storage information plus record counts
    """
    python_version = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"

    return Response({
        'status': 'operational',
        'system': {
            'environment': 'development' if settings.DEBUG else 'production',
            'debug_mode': settings.DEBUG,
            'server_time': timezone.now(),
        },
        'backend': {
            'framework': 'Django',
            'version': django.get_version(),
            'python_version': python_version,
        },
        'database': _database_info(),
        'storage': _media_usage(),
        'statistics': {
            'total_users': User.objects.count(),
            'total_students': Student.objects.count(),
            'total_faculties': Faculty.objects.count(),
            'total_departments': Department.objects.count(),
            'total_courses': Course.objects.count(),
            'total_classes': Class.objects.count(),
            'total_attendance_sessions': AttendanceSession.objects.count(),
            'total_exam_records': ExamRecord.objects.count(),
            'total_payments': TuitionPayment.objects.count(),
        },
    })
