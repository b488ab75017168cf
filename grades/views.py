import logging

from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.response import Response
from rest_framework.views import APIView

from academic.models import Class
from authentication.permissions import HasModulePermission
from backend.mixins import SuccessDestroyMixin
from backend.query_params import int_param
from students.models import Student
from .models import ExamRecord
from .pdf_generator import TranscriptPDFGenerator
from .serializers import ExamRecordSerializer, ExamImportSerializer, GPAStudentSerializer
from .services import student_exam_records, gpa_report, template_students, import_exam_rows
from .spreadsheets import XLSX_CONTENT_TYPE, SpreadsheetError, build_template, read_exam_sheet

logger = logging.getLogger(__name__)


class ExamRecordViewSet(SuccessDestroyMixin, viewsets.ModelViewSet):
    """
    ViewSet for managing exam records
    """
    queryset = ExamRecord.objects.select_related(
        'student', 'course__department'
    ).all()
    serializer_class = ExamRecordSerializer
    permission_classes = [HasModulePermission]
    permission_module = 'examinations'

    def get_queryset(self):
        queryset = super().get_queryset()
        student_id = int_param(self.request, 'student_id')
        course_id = int_param(self.request, 'course_id')
        semester = self.request.query_params.get('semester', None)
        year = int_param(self.request, 'year')

        if student_id:
            queryset = queryset.filter(student_id=student_id)
        if course_id:
            queryset = queryset.filter(course_id=course_id)
        if semester:
            queryset = queryset.filter(semester=semester)
        if year:
            queryset = queryset.filter(year=year)

        return queryset.order_by('-year', 'semester', 'student__first_name')

    @action(
        detail=False,
        methods=['post'],
        url_path='import',
        url_name='import',
        parser_classes=[MultiPartParser, FormParser]
    )
    def import_records(self, request):
        """
        Bulk upsert marks for a class from an .xlsx sheet
        POST /api/grades/exam-records/import/ (multipart: file, class_id)
        """
        serializer = ExamImportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        academic_class = get_object_or_404(
            Class.objects.select_related('course'), pk=serializer.validated_data['class_id']
        )

        try:
            rows = read_exam_sheet(serializer.validated_data['file'])
        except SpreadsheetError as exc:
            raise ValidationError({'file': str(exc)})

        return Response(import_exam_rows(academic_class, rows))

    @action(detail=False, methods=['get'], url_path='template', url_name='template')
    def template(self, request):
        """
        Download the mark sheet for a class
        GET /api/grades/exam-records/template/?class_id=
        """
        class_id = int_param(request, 'class_id', required=True)
        academic_class = get_object_or_404(Class.objects.select_related('course'), pk=class_id)
        course = academic_class.course

        workbook = build_template(
            template_students(academic_class),
            f'Exam {course.code} {academic_class.semester} {academic_class.year}'
        )

        filename = (
            f'Exam_Template_{course.code}_{academic_class.name}_'
            f'{academic_class.semester}_{academic_class.year}.xlsx'
        )
        response = HttpResponse(content_type=XLSX_CONTENT_TYPE)
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        workbook.save(response)
        return response


class GPAView(APIView):
    """
    Semester and cumulative GPA for a student
    GET /api/grades/gpa/?student_id={id}
    """
    permission_classes = [HasModulePermission]
    permission_module = 'examinations'

    def get(self, request):
        student_id = int_param(request, 'student_id', required=True)

        student = get_object_or_404(Student.objects.select_related('department'), pk=student_id)
        records = list(student_exam_records(student))
        report = gpa_report(records)

        return Response({
            'student': GPAStudentSerializer(student, context={'request': request}).data,
            'records': ExamRecordSerializer(records, many=True).data,
            'gpa': report.as_dict(),
        })


class TranscriptPDFView(APIView):
    """
    Export a student's transcript as PDF
    GET /api/grades/gpa/{student_id}/transcript.pdf
    """
    permission_classes = [HasModulePermission]
    permission_module = 'examinations'

    def get(self, request, student_id):
        student = get_object_or_404(Student.objects.select_related('department'), pk=student_id)

        pdf_buffer = TranscriptPDFGenerator(student).generate()

        filename = f"transcript_{student.student_id}.pdf"
        response = HttpResponse(pdf_buffer, content_type='application/pdf')
        response['Content-Disposition'] = f'attachment; filename="{filename}"'

        logger.info("Transcript PDF generated for student %s", student.student_id)

        return response
