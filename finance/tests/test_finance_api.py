import datetime
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from academic.models import Class, Semester
from backend.testing import api_client, create_admin, create_academic_structure, create_user_with_permissions
from finance.models import TuitionPayment
from students.models import Student


class FinanceTestCase(TestCase):
    def setUp(self):
        self.client = api_client(create_admin())
        _, self.department, self.course, self.academic_class = create_academic_structure(
            tuition_fee=Decimal('500.00'), semester='Fall', year=2025
        )
        self.ali = Student.objects.create(
            first_name='Ali', last_name='Omar', department=self.department,
            academic_class=self.academic_class, phone='0612345678'
        )
        self.hodan = Student.objects.create(
            first_name='Hodan', last_name='Ahmed', department=self.department,
            academic_class=self.academic_class, phone='0699999999'
        )

    def pay(self, student, semester, year, amount=Decimal('500.00'), paid_at=None):
        payment = TuitionPayment.objects.create(student=student, semester=semester, year=year, amount=amount)
        if paid_at:
            TuitionPayment.objects.filter(pk=payment.pk).update(paid_at=paid_at)
        return payment


class PaymentApiTests(FinanceTestCase):
    def test_amount_defaults_to_department_fee(self):
        response = self.client.post('/api/finance/payments/', {
            'student_id': self.ali.student_id, 'semester': 'Fall', 'year': 2025,
        }, format='json')
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['amount'], Decimal('500.00'))
        self.assertEqual(response.data['student']['student_id'], self.ali.student_id)

    def test_explicit_amount(self):
        response = self.client.post('/api/finance/payments/', {
            'student_id': self.ali.student_id, 'semester': 'Spring', 'year': 2025, 'amount': '250.50', 'note': 'Half',
        }, format='json')
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['amount'], Decimal('250.50'))
        self.assertEqual(response.data['note'], 'Half')

    def test_amount_must_be_positive(self):
        self.department.tuition_fee = None
        self.department.save()
        response = self.client.post('/api/finance/payments/', {
            'student_id': self.ali.student_id, 'semester': 'Fall', 'year': 2025,
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'error': 'Amount must be greater than 0', 'field': 'amount'})

    def test_unknown_student(self):
        response = self.client.post('/api/finance/payments/', {
            'student_id': 'STD-1900-0001', 'semester': 'Fall', 'year': 2025,
        }, format='json')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data, {'error': 'Student not found'})

    def test_inactive_semester(self):
        Semester.objects.filter(name='Summer').update(is_active=False)
        response = self.client.post('/api/finance/payments/', {
            'student_id': self.ali.student_id, 'semester': 'Summer', 'year': 2025,
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['error'], 'Invalid semester. Use a semester from the Semesters settings.')

    def test_one_payment_per_semester(self):
        self.pay(self.ali, 'Fall', 2025)
        response = self.client.post('/api/finance/payments/', {
            'student_id': self.ali.student_id, 'semester': 'Fall', 'year': 2025,
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'error': 'Student has already paid for Fall 2025'})

    def test_list_filters(self):
        self.pay(self.ali, 'Fall', 2025)
        self.pay(self.hodan, 'Fall', 2025)
        self.pay(self.ali, 'Spring', 2024)
        response = self.client.get(f'/api/finance/payments/?student_id={self.ali.student_id}&year=2025')
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['semester'], 'Fall')

    def test_finance_view_permission_cannot_create(self):
        client = api_client(create_user_with_permissions('viewer@example.com', 'finance.view'))
        self.assertEqual(client.get('/api/finance/payments/').status_code, 200)
        response = client.post('/api/finance/payments/', {
            'student_id': self.ali.student_id, 'semester': 'Fall', 'year': 2025,
        }, format='json')
        self.assertEqual(response.status_code, 403)


class StudentsTransactionsTests(FinanceTestCase):
    def test_unpaid_semesters_for_year(self):
        self.pay(self.ali, 'Fall', 2025)
        self.pay(self.ali, 'Fall', 2024, amount=Decimal('400.00'))

        response = self.client.get('/api/finance/students-transactions/?year=2025')
        self.assertEqual(response.status_code, 200)
        rows = {row['student_id']: row for row in response.data}

        ali = rows[self.ali.student_id]
        self.assertEqual(ali['paid_semesters'], ['Fall-2025'])
        self.assertEqual(ali['unpaid_semesters'], ['Spring-2025', 'Summer-2025'])
        self.assertEqual(ali['paid_count'], 1)
        self.assertEqual(ali['unpaid_count'], 2)
        self.assertEqual(ali['total_paid'], Decimal('500.00'))
        self.assertEqual(ali['tuition_fee'], Decimal('500.00'))

        hodan = rows[self.hodan.student_id]
        self.assertEqual(hodan['unpaid_semesters'], ['Spring-2025', 'Summer-2025', 'Fall-2025'])
        self.assertEqual(hodan['total_paid'], Decimal('0'))

    def test_without_year_counts_every_payment(self):
        self.pay(self.ali, 'Fall', 2024, amount=Decimal('400.00'))
        response = self.client.get('/api/finance/students-transactions/')
        ali = next(row for row in response.data if row['student_id'] == self.ali.student_id)
        year = timezone.localdate().year
        self.assertEqual(ali['paid_semesters'], ['Fall-2024'])
        self.assertIn(f'Fall-{year}', ali['unpaid_semesters'])
        self.assertEqual(ali['total_paid'], Decimal('400.00'))

    def test_inactive_semesters_are_not_owed(self):
        Semester.objects.filter(name__in=['Spring', 'Summer']).update(is_active=False)
        self.pay(self.ali, 'Fall', 2025)
        response = self.client.get(f'/api/finance/students-transactions/?year=2025&class_id={self.academic_class.id}')
        ali = next(row for row in response.data if row['student_id'] == self.ali.student_id)
        self.assertEqual(ali['unpaid_semesters'], [])

    def test_only_admitted_students(self):
        self.hodan.status = 'Pending'
        self.hodan.save()
        response = self.client.get('/api/finance/students-transactions/?year=2025')
        self.assertEqual([row['student_id'] for row in response.data], [self.ali.student_id])

    def test_phone_and_date_filters(self):
        self.pay(self.ali, 'Fall', 2025, paid_at=timezone.make_aware(datetime.datetime(2025, 9, 15, 10, 0)))
        self.pay(self.ali, 'Spring', 2025, paid_at=timezone.make_aware(datetime.datetime(2025, 2, 1, 10, 0)))

        response = self.client.get('/api/finance/students-transactions/?phone=1234&date_from=2025-09-01&date_to=2025-09-30')
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['paid_semesters'], ['Fall-2025'])

    def test_invalid_date(self):
        response = self.client.get('/api/finance/students-transactions/?date_from=yesterday')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['field'], 'date_from')


class UnpaidStudentsTests(FinanceTestCase):
    def test_lists_students_without_payment_for_class_term(self):
        self.pay(self.ali, 'Fall', 2025)
        self.pay(self.hodan, 'Spring', 2025)

        response = self.client.get(
            f'/api/finance/unpaid-students/?semester=Fall&year=2025&class_id={self.academic_class.id}'
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['total_unpaid'], 1)
        self.assertEqual(response.data['unpaid_students'][0]['student_id'], self.hodan.student_id)
        self.assertEqual(response.data['unpaid_students'][0]['tuition_fee'], Decimal('500.00'))
        self.assertEqual(response.data['class']['name'], 'CS201-A')

    def test_class_term_must_match(self):
        response = self.client.get(
            f'/api/finance/unpaid-students/?semester=Spring&year=2025&class_id={self.academic_class.id}'
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'error': 'Class semester/year does not match the selected semester and year'})

    def test_parameters_required(self):
        response = self.client.get('/api/finance/unpaid-students/?semester=Fall&year=2025')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['field'], 'class_id')

    def test_unknown_class(self):
        response = self.client.get('/api/finance/unpaid-students/?semester=Fall&year=2025&class_id=9999')
        self.assertEqual(response.status_code, 404)


class ClassRevenueTests(FinanceTestCase):
    def test_revenue_per_class(self):
        other = Class.objects.create(name='CS201-B', course=self.course, semester='Fall', year=2025)
        self.pay(self.ali, 'Fall', 2025)
        self.pay(self.ali, 'Spring', 2025, amount=Decimal('300.00'))
        self.pay(self.hodan, 'Fall', 2024)

        response = self.client.get('/api/finance/class-revenue/?year=2025')
        self.assertEqual(response.status_code, 200)
        rows = {row['name']: row for row in response.data}

        self.assertEqual(rows['CS201-A']['student_count'], 2)
        self.assertEqual(rows['CS201-A']['paid_count'], 1)
        self.assertEqual(rows['CS201-A']['unpaid_count'], 1)
        self.assertEqual(rows['CS201-A']['revenue'], Decimal('800.00'))
        self.assertEqual(rows[other.name]['student_count'], 0)
        self.assertEqual(rows[other.name]['revenue'], Decimal('0'))

    def test_malformed_year_is_rejected(self):
        response = self.client.get('/api/finance/class-revenue/?year=abc')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data, {'error': 'Invalid year', 'field': 'year'})
