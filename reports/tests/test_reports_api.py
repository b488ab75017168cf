import datetime
from decimal import Decimal

from django.test import TestCase

from attendance.models import AttendanceSession, AttendanceRecord
from backend.testing import api_client, create_admin, create_academic_structure, create_user_with_permissions
from grades.models import ExamRecord
from students.models import Student

FULL_MARKS = {
    'mid_exam': 20, 'final_exam': 40, 'assessment': 10,
    'project': 10, 'assignment': 10, 'presentation': 10,
}


class ReportsTestCase(TestCase):
    def setUp(self):
        self.admin = create_admin()
        self.client = api_client(self.admin)
        _, self.department, self.course, self.academic_class = create_academic_structure()
        self.ali = Student.objects.create(
            first_name='Ali', last_name='Omar', department=self.department, academic_class=self.academic_class
        )
        self.hodan = Student.objects.create(
            first_name='Hodan', last_name='Ahmed', department=self.department,
            academic_class=self.academic_class, status='Pending'
        )

    def take_attendance(self, date, shift='Morning', **statuses):
        session = AttendanceSession.objects.create(
            academic_class=self.academic_class, date=date, shift=shift, taken_by=self.admin
        )
        for student, status in statuses.values():
            AttendanceRecord.objects.create(session=session, student=student, status=status)
        return session


class DashboardTests(ReportsTestCase):
    def test_counts_and_breakdowns(self):
        self.take_attendance(datetime.date(2025, 10, 1), ali=(self.ali, 'Present'))
        ExamRecord.objects.create(student=self.ali, course=self.course, semester='Fall', year=2025, **FULL_MARKS)

        response = self.client.get('/api/reports/dashboard/')
        self.assertEqual(response.status_code, 200)

        counts = response.data['counts']
        self.assertEqual(counts['students'], 2)
        self.assertEqual(counts['admitted'], 1)
        self.assertEqual(counts['courses'], 1)
        self.assertEqual(counts['classes'], 1)
        self.assertEqual(counts['attendance'], 1)
        self.assertEqual(counts['exam_records'], 1)

        self.assertEqual(len(response.data['recent_students']), 2)
        self.assertEqual(response.data['recent_attendance'][0]['present'], 1)
        self.assertEqual(
            response.data['students_by_status'],
            [{'status': 'Admitted', 'count': 1}, {'status': 'Pending', 'count': 1}]
        )
        self.assertEqual(response.data['students_by_department'][0]['count'], 1)
        self.assertEqual(response.data['students_by_department'][0]['department']['code'], 'CS')

    def test_requires_dashboard_permission(self):
        client = api_client(create_user_with_permissions('clerk@example.com', 'reports.view'))
        self.assertEqual(client.get('/api/reports/dashboard/').status_code, 403)


class AdmissionReportTests(ReportsTestCase):
    def test_summary_by_status(self):
        response = self.client.get('/api/reports/admission/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['summary'], {'total': 2, 'by_status': {'Admitted': 1, 'Pending': 1}})

    def test_status_filter(self):
        response = self.client.get('/api/reports/admission/?status=Pending')
        self.assertEqual([row['student_id'] for row in response.data['students']], [self.hodan.student_id])

    def test_class_filter_uses_attendance(self):
        self.take_attendance(datetime.date(2025, 10, 1), ali=(self.ali, 'Present'))
        self.take_attendance(datetime.date(2025, 10, 2), ali=(self.ali, 'Late'))

        response = self.client.get(f'/api/reports/admission/?class_id={self.academic_class.id}')
        self.assertEqual(response.data['summary']['total'], 1)
        self.assertEqual(response.data['students'][0]['student_id'], self.ali.student_id)

    def test_invalid_id(self):
        response = self.client.get('/api/reports/admission/?department_id=abc')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['field'], 'department_id')


class AttendanceReportTests(ReportsTestCase):
    def test_totals(self):
        self.take_attendance(
            datetime.date(2025, 10, 1), ali=(self.ali, 'Present'), hodan=(self.hodan, 'Absent')
        )
        self.take_attendance(
            datetime.date(2025, 10, 2), ali=(self.ali, 'Late'), hodan=(self.hodan, 'Excused')
        )

        response = self.client.get('/api/reports/attendance/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['summary'], {
            'total_sessions': 2,
            'total_present': 1,
            'total_absent': 1,
            'total_late': 1,
            'total_excused': 1,
        })
        self.assertEqual(response.data['sessions'][0]['date'], datetime.date(2025, 10, 2))
        self.assertEqual(response.data['sessions'][0]['total'], 2)

    def test_date_range(self):
        self.take_attendance(datetime.date(2025, 10, 1), ali=(self.ali, 'Present'))
        self.take_attendance(datetime.date(2025, 11, 1), ali=(self.ali, 'Present'))

        response = self.client.get('/api/reports/attendance/?date_from=2025-10-15&date_to=2025-11-30')
        self.assertEqual(response.data['summary']['total_sessions'], 1)

    def test_invalid_date(self):
        response = self.client.get('/api/reports/attendance/?date_to=tomorrow')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'error': 'Invalid date_to. Use YYYY-MM-DD.', 'field': 'date_to'})


class ExamReportTests(ReportsTestCase):
    def test_grade_distribution_and_average(self):
        ExamRecord.objects.create(student=self.ali, course=self.course, semester='Fall', year=2025, **FULL_MARKS)
        ExamRecord.objects.create(
            student=self.hodan, course=self.course, semester='Fall', year=2025, mid_exam=20, final_exam=40
        )

        response = self.client.get(f'/api/reports/exam/?class_id={self.academic_class.id}')
        self.assertEqual(response.status_code, 200)
        summary = response.data['summary']
        self.assertEqual(summary['total'], 2)
        self.assertEqual(summary['by_grade'], {'A': 1, 'C': 1})
        self.assertEqual(summary['avg_grade_points'], Decimal('3.00'))

    def test_empty(self):
        response = self.client.get('/api/reports/exam/?year=2030')
        self.assertEqual(response.data['summary'], {'total': 0, 'by_grade': {}, 'avg_grade_points': Decimal('0.00')})


class SystemInfoTests(ReportsTestCase):
    def test_staff_only(self):
        self.assertEqual(api_client().get('/api/system/info/').status_code, 401)

        clerk = create_user_with_permissions('clerk@example.com', 'dashboard.view')
        self.assertEqual(api_client(clerk).get('/api/system/info/').status_code, 403)

        response = self.client.get('/api/system/info/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['status'], 'operational')
        self.assertEqual(response.data['database']['status'], 'connected')
        self.assertEqual(response.data['statistics']['total_students'], 2)
