import datetime

from django.test import TestCase

from attendance.models import AttendanceSession, AttendanceRecord
from backend.testing import api_client, create_admin, create_academic_structure
from students.models import Student


class AttendanceApiTests(TestCase):
    def setUp(self):
        self.admin = create_admin()
        self.client = api_client(self.admin)
        _, self.department, _, self.academic_class = create_academic_structure()
        self.ali = Student.objects.create(
            first_name='Ali', last_name='Omar', department=self.department, academic_class=self.academic_class
        )
        self.hodan = Student.objects.create(
            first_name='Hodan', last_name='Ahmed', department=self.department, academic_class=self.academic_class
        )

    def take(self, date='2025-09-01', shift='Morning', records=None):
        if records is None:
            records = [
                {'student_id': self.ali.id, 'status': 'Present'},
                {'student_id': self.hodan.id, 'status': 'Late', 'note': 'Bus'},
            ]
        return self.client.post('/api/attendance/', {
            'class_id': self.academic_class.id,
            'date': date,
            'shift': shift,
            'records': records,
        }, format='json')

    def test_take_attendance(self):
        response = self.take()
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['class_id'], self.academic_class.id)
        self.assertEqual(response.data['taken_by']['email'], self.admin.email)
        self.assertEqual([r['student']['first_name'] for r in response.data['records']], ['Ali', 'Hodan'])
        self.assertEqual(AttendanceRecord.objects.count(), 2)

    def test_same_class_date_and_shift_is_rejected(self):
        self.take()
        response = self.take()
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {
            'error': 'Attendance for this class on 2025-09-01 (Morning shift) has already been taken'
        })

    def test_other_shift_is_allowed(self):
        self.take()
        self.assertEqual(self.take(shift='Evening').status_code, 201)

    def test_invalid_shift(self):
        response = self.take(shift='Night')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'error': 'Shift must be Morning, Afternoon, or Evening', 'field': 'shift'})

    def test_records_required(self):
        response = self.take(records=[])
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'At least one attendance record is required')

    def test_student_listed_twice(self):
        response = self.take(records=[
            {'student_id': self.ali.id, 'status': 'Present'},
            {'student_id': self.ali.id, 'status': 'Absent'},
        ])
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['field'], 'records')

    def test_invalid_record_status_names_the_row(self):
        response = self.take(records=[
            {'student_id': self.ali.id, 'status': 'Present'},
            {'student_id': self.hodan.id, 'status': 'Sleeping'},
        ])
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['field'], 'records[1].status')

    def test_list_counts_statuses(self):
        self.take()
        response = self.client.get('/api/attendance/')
        self.assertEqual(response.status_code, 200)
        row = response.data[0]
        self.assertEqual(row['total_records'], 2)
        self.assertEqual(row['present'], 1)
        self.assertEqual(row['late'], 1)
        self.assertEqual(row['absent'], 0)
        self.assertEqual(row['excused'], 0)

    def test_list_filters_by_date_range(self):
        self.take(date='2025-09-01')
        self.take(date='2025-09-10')
        response = self.client.get('/api/attendance/?date_from=2025-09-05&date_to=2025-09-30')
        self.assertEqual([row['date'] for row in response.data], ['2025-09-10'])

    def test_update_upserts_records_by_student(self):
        session_id = self.take(records=[{'student_id': self.ali.id, 'status': 'Present'}]).data['id']
        response = self.client.patch(f'/api/attendance/{session_id}/', {
            'note': 'Corrected',
            'records': [
                {'student_id': self.ali.id, 'status': 'Excused'},
                {'student_id': self.hodan.id, 'status': 'Absent'},
            ],
        }, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['note'], 'Corrected')
        statuses = {r['student']['first_name']: r['status'] for r in response.data['records']}
        self.assertEqual(statuses, {'Ali': 'Excused', 'Hodan': 'Absent'})
        self.assertEqual(AttendanceRecord.objects.filter(session_id=session_id).count(), 2)

    def test_delete_session(self):
        session_id = self.take().data['id']
        response = self.client.delete(f'/api/attendance/{session_id}/')
        self.assertEqual(response.status_code, 200)
        self.assertFalse(AttendanceSession.objects.filter(pk=session_id).exists())
        self.assertEqual(AttendanceRecord.objects.count(), 0)

    def test_class_with_attendance_cannot_be_deleted(self):
        AttendanceSession.objects.create(
            academic_class=self.academic_class, date=datetime.date(2025, 9, 1), shift='Morning'
        )
        self.ali.academic_class = None
        self.ali.save()
        self.hodan.academic_class = None
        self.hodan.save()
        response = self.client.delete(f'/api/academic/classes/{self.academic_class.id}/')
        self.assertEqual(response.status_code, 400)
        self.assertIn('1 attendance session(s)', response.data['error'])

    def test_malformed_filters_are_rejected(self):
        response = self.client.get('/api/attendance/?class_id=abc')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'error': 'Invalid class_id', 'field': 'class_id'})

        response = self.client.get('/api/attendance/?date_from=2025-02-30')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['field'], 'date_from')
