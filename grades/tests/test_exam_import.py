from decimal import Decimal
from io import BytesIO

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from openpyxl import Workbook, load_workbook

from academic.models import Class
from attendance.models import AttendanceSession, AttendanceRecord
from backend.testing import api_client, create_admin, create_academic_structure, create_user_with_permissions
from grades.models import ExamRecord
from grades.spreadsheets import XLSX_CONTENT_TYPE, template_headers
from students.models import Student


def xlsx_upload(rows, headers=None):
    wb = Workbook()
    ws = wb.active
    ws.append(headers or template_headers())
    for row in rows:
        ws.append(row)
    buffer = BytesIO()
    wb.save(buffer)
    return SimpleUploadedFile('marks.xlsx', buffer.getvalue(), content_type=XLSX_CONTENT_TYPE)


class ExamImportTests(TestCase):
    def setUp(self):
        self.client = api_client(create_admin())
        _, self.department, self.course, self.academic_class = create_academic_structure()
        self.ali = Student.objects.create(first_name='Ali', last_name='Omar', department=self.department)
        self.hodan = Student.objects.create(first_name='Hodan', last_name='Ahmed', department=self.department)

    def upload(self, upload, class_id=None):
        return self.client.post('/api/grades/exam-records/import/', {
            'file': upload,
            'class_id': class_id or self.academic_class.id,
        }, format='multipart')

    def test_creates_and_updates_records_for_class_term(self):
        ExamRecord.objects.create(
            student=self.ali, course=self.course, semester='Fall', year=2025, mid_exam=5, final_exam=10
        )

        response = self.upload(xlsx_upload([
            [self.ali.student_id, 'Ali', 'Omar', 20, 40, 10, 10, 10, 10],
            [self.hodan.student_id, 'Hodan', 'Ahmed', 15, 30, 8, 7, 8, 7],
        ]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, {'created': 1, 'updated': 1, 'errors': []})
        self.assertEqual(ExamRecord.objects.count(), 2)

        ali = ExamRecord.objects.get(student=self.ali)
        self.assertEqual(ali.total_marks, Decimal('100'))
        self.assertEqual(ali.grade, 'A')

        hodan = ExamRecord.objects.get(student=self.hodan)
        self.assertEqual((hodan.course, hodan.semester, hodan.year), (self.course, 'Fall', 2025))
        self.assertEqual(hodan.grade, 'B')

    def test_unknown_student_is_reported_by_row(self):
        response = self.upload(xlsx_upload([
            ['STD-1999-0001', 'Nobody', 'Here', 10, 20, 5, 5, 5, 5],
            [self.hodan.student_id, 'Hodan', 'Ahmed', 15, 30, 8, 7, 8, 7],
        ]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['created'], 1)
        self.assertEqual(response.data['errors'], ['Row 2: Student "STD-1999-0001" not found'])

    def test_mark_out_of_range_skips_row(self):
        response = self.upload(xlsx_upload([
            [self.ali.student_id, 'Ali', 'Omar', 25, 30, 8, 7, 8, 7],
            [self.hodan.student_id, 'Hodan', 'Ahmed', 15, 30, 8, 7, 8, 11],
        ]))

        self.assertEqual(response.data['created'], 0)
        self.assertEqual(response.data['errors'], [
            'Row 2: Mid Exam must be 0-20',
            'Row 3: Presentation must be 0-10',
        ])
        self.assertFalse(ExamRecord.objects.exists())

    def test_missing_marks_count_as_zero(self):
        response = self.upload(xlsx_upload([[self.ali.student_id, 'Ali', 'Omar', 20, 40]]))
        self.assertEqual(response.data['created'], 1)
        self.assertEqual(ExamRecord.objects.get(student=self.ali).total_marks, Decimal('60'))

    def test_student_id_column_required(self):
        response = self.upload(xlsx_upload([['Ali', 20]], headers=['Name', 'Mid Exam (/20)']))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'error': "Excel must contain a 'Student ID' column", 'field': 'file'})

    def test_rejects_non_spreadsheet(self):
        upload = SimpleUploadedFile('marks.xlsx', b'not a workbook', content_type=XLSX_CONTENT_TYPE)
        response = self.upload(upload)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['field'], 'file')

    def test_unknown_class(self):
        response = self.upload(xlsx_upload([[self.ali.student_id]]), class_id=9999)
        self.assertEqual(response.status_code, 404)

    def test_requires_create_permission(self):
        client = api_client(create_user_with_permissions('viewer@example.com', 'examinations.view'))
        response = client.post('/api/grades/exam-records/import/', {
            'file': xlsx_upload([[self.ali.student_id]]),
            'class_id': self.academic_class.id,
        }, format='multipart')
        self.assertEqual(response.status_code, 403)


class ExamTemplateTests(TestCase):
    def setUp(self):
        self.client = api_client(create_admin())
        _, self.department, self.course, self.academic_class = create_academic_structure()
        self.ali = Student.objects.create(first_name='Ali', last_name='Omar', department=self.department)
        self.hodan = Student.objects.create(first_name='Hodan', last_name='Ahmed', department=self.department)

    def sheet_rows(self, response):
        wb = load_workbook(BytesIO(response.content))
        return [list(row) for row in wb.active.iter_rows(values_only=True)]

    def test_lists_admitted_department_students(self):
        Student.objects.create(
            first_name='Bashir', last_name='Noor', department=self.department, status='Pending'
        )

        response = self.client.get(f'/api/grades/exam-records/template/?class_id={self.academic_class.id}')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['Content-Type'], XLSX_CONTENT_TYPE)
        self.assertIn('Exam_Template_CS201_CS201-A_Fall_2025.xlsx', response['Content-Disposition'])

        rows = self.sheet_rows(response)
        self.assertEqual(rows[0], template_headers())
        self.assertEqual([row[0] for row in rows[1:]], [self.ali.student_id, self.hodan.student_id])

    def test_prefers_students_from_class_attendance(self):
        session = AttendanceSession.objects.create(
            academic_class=self.academic_class, date='2025-10-01', shift='Morning'
        )
        AttendanceRecord.objects.create(session=session, student=self.hodan, status='Present')

        response = self.client.get(f'/api/grades/exam-records/template/?class_id={self.academic_class.id}')
        rows = self.sheet_rows(response)
        self.assertEqual([row[0] for row in rows[1:]], [self.hodan.student_id])

    def test_class_id_required(self):
        response = self.client.get('/api/grades/exam-records/template/')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'error': 'class_id is required', 'field': 'class_id'})

    def test_unknown_class(self):
        other = Class.objects.create(name='CS201-B', course=self.course, semester='Fall', year=2025)
        other_id = other.id
        other.delete()
        response = self.client.get(f'/api/grades/exam-records/template/?class_id={other_id}')
        self.assertEqual(response.status_code, 404)
