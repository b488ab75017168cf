import logging
from decimal import Decimal

from django.db.models import Prefetch
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import mixins, viewsets, status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from academic.models import Class, Semester
from academic.serializers import DepartmentSummarySerializer, CourseSummarySerializer
from authentication.permissions import HasModulePermission
from backend.query_params import int_param, date_param
from students.models import Student
from .models import TuitionPayment
from .reconciliation import TuitionPaymentInput, reconcile
from .serializers import (
    TuitionPaymentSerializer, TuitionPaymentCreateSerializer,
    PaymentRecordSerializer, PaymentStudentSerializer
)

logger = logging.getLogger(__name__)


def _payment_inputs(payments):
    return [
        TuitionPaymentInput(semester=p.semester, year=p.year, amount=p.amount)
        for p in payments
    ]


class TuitionPaymentViewSet(mixins.ListModelMixin,
                            mixins.CreateModelMixin,
                            viewsets.GenericViewSet):
    """
    ViewSet for recording and listing tuition payments
    """
    queryset = TuitionPayment.objects.select_related(
        'student__department', 'student__academic_class__course'
    ).all()
    serializer_class = TuitionPaymentSerializer
    permission_classes = [HasModulePermission]
    permission_module = 'finance'

    def get_serializer_class(self):
        if self.action == 'create':
            return TuitionPaymentCreateSerializer
        return TuitionPaymentSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        student_id = self.request.query_params.get('student_id', None)
        semester = self.request.query_params.get('semester', None)
        year = int_param(self.request, 'year')

        if student_id:
            queryset = queryset.filter(student__student_id=student_id.strip())
        if semester:
            queryset = queryset.filter(semester=semester)
        if year:
            queryset = queryset.filter(year=year)

        return queryset.order_by('-year', 'semester', '-paid_at')

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = serializer.save()
        logger.info(
            'Tuition payment of %s recorded for %s (%s %s) by %s',
            payment.amount, payment.student.student_id, payment.semester,
            payment.year, request.user
        )
        return Response(TuitionPaymentSerializer(payment).data, status=status.HTTP_201_CREATED)


class StudentsTransactionsView(APIView):
    """
    Paid and unpaid semesters of every admitted student for a year
    GET /api/finance/students-transactions/?year=&department_id=&class_id=&phone=&date_from=&date_to=

    Unpaid semesters are the active semesters of `year` (default: current
    year) without a payment. Payments can be narrowed by year and paid date.
    """
    permission_classes = [HasModulePermission]
    permission_module = 'finance'

    def get(self, request):
        department_id = int_param(request, 'department_id')
        class_id = int_param(request, 'class_id')
        year = int_param(request, 'year')
        phone = request.query_params.get('phone', '').strip()
        date_from = date_param(request, 'date_from')
        date_to = date_param(request, 'date_to')

        students = Student.objects.filter(status='Admitted')
        if department_id:
            students = students.filter(department_id=department_id)
        if class_id:
            students = students.filter(academic_class_id=class_id)
        if phone:
            students = students.filter(phone__contains=phone)

        payments = TuitionPayment.objects.order_by('-year', 'semester')
        if year:
            payments = payments.filter(year=year)
        if date_from:
            payments = payments.filter(paid_at__date__gte=date_from)
        if date_to:
            payments = payments.filter(paid_at__date__lte=date_to)

        students = students.select_related(
            'department', 'academic_class__course'
        ).prefetch_related(
            Prefetch('tuition_payments', queryset=payments, to_attr='filtered_payments')
        ).order_by('student_id')

        target_year = year or timezone.localdate().year
        active_names = Semester.objects.active_names()

        results = []
        for student in students:
            paid = student.filtered_payments
            summary = reconcile(_payment_inputs(paid), active_names, target_year)
            row = PaymentStudentSerializer(student).data
            row.update({
                'tuition_fee': student.department.tuition_fee,
                'payments': PaymentRecordSerializer(paid, many=True).data,
                'paid_count': len(paid),
                'unpaid_count': len(summary.unpaid_semester_keys),
                'paid_semesters': list(summary.paid_semester_keys),
                'unpaid_semesters': list(summary.unpaid_semester_keys),
                'total_paid': summary.total_paid_amount,
            })
            results.append(row)

        return Response(results)


class UnpaidStudentsView(APIView):
    """
    Admitted students of a class with no payment for the class's own
    semester and year
    GET /api/finance/unpaid-students/?semester=&year=&class_id=
    """
    permission_classes = [HasModulePermission]
    permission_module = 'finance'

    def get(self, request):
        semester = request.query_params.get('semester', '').strip()
        if not semester:
            raise ValidationError({'semester': 'semester is required'})
        year = int_param(request, 'year', required=True)
        class_id = int_param(request, 'class_id', required=True)

        academic_class = get_object_or_404(
            Class.objects.select_related('course__department'), pk=class_id
        )
        if academic_class.semester != semester or academic_class.year != year:
            raise ValidationError(
                'Class semester/year does not match the selected semester and year'
            )

        students = Student.objects.filter(
            academic_class=academic_class, status='Admitted'
        ).select_related('department').prefetch_related(
            Prefetch(
                'tuition_payments',
                queryset=TuitionPayment.objects.filter(semester=semester, year=year),
                to_attr='term_payments'
            )
        ).order_by('student_id')

        unpaid = []
        for student in students:
            summary = reconcile(_payment_inputs(student.term_payments), [semester], year)
            if not summary.unpaid_semester_keys:
                continue
            unpaid.append({
                'id': student.id,
                'student_id': student.student_id,
                'first_name': student.first_name,
                'last_name': student.last_name,
                'email': student.email,
                'phone': student.phone,
                'department': DepartmentSummarySerializer(student.department).data,
                'tuition_fee': student.department.tuition_fee,
            })

        return Response({
            'class': {
                'id': academic_class.id,
                'name': academic_class.name,
                'semester': academic_class.semester,
                'year': academic_class.year,
                'course': CourseSummarySerializer(academic_class.course).data,
            },
            'semester': semester,
            'year': year,
            'unpaid_students': unpaid,
            'total_unpaid': len(unpaid),
        })


class ClassRevenueView(APIView):
    """
    Tuition collected per class for a year
    GET /api/finance/class-revenue/?year=&semester=&department_id=
    """
    permission_classes = [HasModulePermission]
    permission_module = 'finance'

    def get(self, request):
        year = int_param(request, 'year') or timezone.localdate().year
        semester = request.query_params.get('semester', None)
        department_id = int_param(request, 'department_id')

        classes = Class.objects.filter(year=year)
        if semester:
            classes = classes.filter(semester=semester)
        if department_id:
            classes = classes.filter(course__department_id=department_id)

        classes = classes.select_related('course__department').prefetch_related(
            Prefetch(
                'students__tuition_payments',
                queryset=TuitionPayment.objects.filter(year=year),
                to_attr='year_payments'
            )
        ).order_by('-year', 'semester', 'name')

        results = []
        for academic_class in classes:
            students = list(academic_class.students.all())
            revenue = sum(
                (payment.amount for student in students for payment in student.year_payments),
                Decimal('0')
            )
            paid_count = sum(1 for student in students if student.year_payments)
            results.append({
                'id': academic_class.id,
                'name': academic_class.name,
                'semester': academic_class.semester,
                'year': academic_class.year,
                'course': CourseSummarySerializer(academic_class.course).data,
                'department': DepartmentSummarySerializer(academic_class.course.department).data,
                'student_count': len(students),
                'paid_count': paid_count,
                'unpaid_count': len(students) - paid_count,
                'revenue': revenue,
            })

        return Response(results)
