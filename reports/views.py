"""
Dashboard and report views
"""
from decimal import Decimal, ROUND_HALF_UP

from django.contrib.auth import get_user_model
from django.db.models import Count, Q
from rest_framework.response import Response
from rest_framework.views import APIView

from academic.models import Faculty, Department, Course, Class
from academic.serializers import DepartmentSummarySerializer
from attendance.models import AttendanceSession
from authentication.permissions import HasModulePermission
from backend.query_params import int_param, date_param
from grades.models import ExamRecord
from grades.serializers import ExamRecordSerializer
from students.models import Student
from students.serializers import StudentSerializer
from users.models import Role

User = get_user_model()

ATTENDANCE_STATUSES = ['Present', 'Absent', 'Late', 'Excused']


def _with_status_counts(sessions):
    return sessions.annotate(
        total=Count('records'),
        **{
            status.lower(): Count('records', filter=Q(records__status=status))
            for status in ATTENDANCE_STATUSES
        }
    )


def _session_row(session):
    academic_class = session.academic_class
    course = academic_class.course
    taken_by = session.taken_by
    return {
        'id': session.id,
        'academic_class': {
            'id': academic_class.id,
            'name': academic_class.name,
            'semester': academic_class.semester,
            'year': academic_class.year,
            'course': {
                'id': course.id,
                'name': course.name,
                'code': course.code,
                'department': DepartmentSummarySerializer(course.department).data,
            },
        },
        'date': session.date,
        'shift': session.shift,
        'taken_by': {
            'id': taken_by.id,
            'name': taken_by.name,
            'email': taken_by.email,
        } if taken_by else None,
        'taken_at': session.taken_at,
        'present': session.present,
        'absent': session.absent,
        'late': session.late,
        'excused': session.excused,
        'total': session.total,
    }


class DashboardView(APIView):
    """
    Counts and recent activity for the admin dashboard
    GET /api/reports/dashboard/
    """
    permission_classes = [HasModulePermission]
    permission_module = 'dashboard'

    def get(self, request):
        recent_students = Student.objects.select_related('department').order_by('-created_at')[:5]
        recent_sessions = _with_status_counts(
            AttendanceSession.objects.select_related(
                'academic_class__course__department', 'taken_by'
            )
        ).order_by('-taken_at')[:5]

        by_status = Student.objects.values('status').annotate(count=Count('id')).order_by('status')
        by_department = Student.objects.filter(status='Admitted').values(
            'department_id', 'department__name', 'department__code'
        ).annotate(count=Count('id')).order_by('department__name')

        return Response({
            'counts': {
                'users': User.objects.filter(is_active=True).count(),
                'students': Student.objects.count(),
                'admitted': Student.objects.filter(status='Admitted').count(),
                'roles': Role.objects.count(),
                'faculties': Faculty.objects.filter(is_active=True).count(),
                'departments': Department.objects.filter(is_active=True).count(),
                'courses': Course.objects.filter(is_active=True).count(),
                'classes': Class.objects.filter(is_active=True).count(),
                'attendance': AttendanceSession.objects.count(),
                'exam_records': ExamRecord.objects.count(),
            },
            'recent_students': [
                {
                    'id': student.id,
                    'student_id': student.student_id,
                    'first_name': student.first_name,
                    'last_name': student.last_name,
                    'status': student.status,
                    'admission_date': student.admission_date,
                    'department': DepartmentSummarySerializer(student.department).data,
                }
                for student in recent_students
            ],
            'recent_attendance': [_session_row(session) for session in recent_sessions],
            'students_by_status': [
                {'status': row['status'], 'count': row['count']}
                for row in by_status
            ],
            'students_by_department': [
                {
                    'department': {
                        'id': row['department_id'],
                        'name': row['department__name'],
                        'code': row['department__code'],
                    },
                    'count': row['count'],
                }
                for row in by_department
            ],
        })


class AdmissionReportView(APIView):
    """
    Students filtered by department, class attendance and status
    GET /api/reports/admission/?department_id=&class_id=&status=
    """
    permission_classes = [HasModulePermission]
    permission_module = 'reports'

    def get(self, request):
        department_id = int_param(request, 'department_id')
        class_id = int_param(request, 'class_id')
        status = request.query_params.get('status', None)

        students = Student.objects.select_related('department', 'academic_class__course')
        if department_id:
            students = students.filter(department_id=department_id)
        if class_id:
            # students who appear in the class's attendance
            students = students.filter(attendance_records__session__academic_class_id=class_id).distinct()
        if status and status != 'all':
            students = students.filter(status=status)

        students = list(students.order_by('-admission_date', '-created_at'))

        by_status = {}
        for student in students:
            by_status[student.status] = by_status.get(student.status, 0) + 1

        return Response({
            'students': StudentSerializer(students, many=True, context={'request': request}).data,
            'summary': {
                'total': len(students),
                'by_status': by_status,
            },
        })


class AttendanceReportView(APIView):
    """
    Attendance sessions with per-status counts and overall totals
    GET /api/reports/attendance/?department_id=&class_id=&date_from=&date_to=
    """
    permission_classes = [HasModulePermission]
    permission_module = 'reports'

    def get(self, request):
        department_id = int_param(request, 'department_id')
        class_id = int_param(request, 'class_id')
        date_from = date_param(request, 'date_from')
        date_to = date_param(request, 'date_to')

        sessions = AttendanceSession.objects.select_related(
            'academic_class__course__department', 'taken_by'
        )
        if department_id:
            sessions = sessions.filter(academic_class__course__department_id=department_id)
        if class_id:
            sessions = sessions.filter(academic_class_id=class_id)
        if date_from:
            sessions = sessions.filter(date__gte=date_from)
        if date_to:
            sessions = sessions.filter(date__lte=date_to)

        rows = [
            _session_row(session)
            for session in _with_status_counts(sessions).order_by('-date', 'shift')
        ]

        summary = {
            'total_sessions': len(rows),
            'total_present': sum(row['present'] for row in rows),
            'total_absent': sum(row['absent'] for row in rows),
            'total_late': sum(row['late'] for row in rows),
            'total_excused': sum(row['excused'] for row in rows),
        }

        return Response({'sessions': rows, 'summary': summary})


class ExamReportView(APIView):
    """
    Exam records with grade distribution and average grade points.
    A class filter narrows to the class's course, semester and year.
    GET /api/reports/exam/?department_id=&class_id=&semester=&year=
    """
    permission_classes = [HasModulePermission]
    permission_module = 'reports'

    def get(self, request):
        department_id = int_param(request, 'department_id')
        class_id = int_param(request, 'class_id')
        semester = request.query_params.get('semester', None)
        year = int_param(request, 'year')

        records = ExamRecord.objects.select_related('student', 'course__department')
        academic_class = Class.objects.filter(pk=class_id).first() if class_id else None

        if academic_class:
            records = records.filter(
                course_id=academic_class.course_id,
                semester=academic_class.semester,
                year=academic_class.year
            )
        else:
            if department_id:
                records = records.filter(course__department_id=department_id)
            if semester and semester != 'all':
                records = records.filter(semester=semester)
            if year:
                records = records.filter(year=year)

        records = list(records.order_by('-year', 'semester', 'student__first_name'))

        by_grade = {}
        total_points = Decimal('0')
        for record in records:
            grade = record.grade or 'N/A'
            by_grade[grade] = by_grade.get(grade, 0) + 1
            total_points += record.grade_points or Decimal('0')

        average = Decimal('0')
        if records:
            average = total_points / len(records)

        return Response({
            'records': ExamRecordSerializer(records, many=True).data,
            'summary': {
                'total': len(records),
                'by_grade': by_grade,
                'avg_grade_points': average.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP),
            },
        })
