"""
PDF Generation for Transcripts
Renders a student's exam records grouped by semester with semester and
cumulative GPA
"""

from io import BytesIO
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib.enums import TA_CENTER
from django.utils import timezone

from .services import student_exam_records, gpa_report

HEADER_COLOR = colors.HexColor('#1e40af')


class TranscriptPDFGenerator:
    """Generate a transcript PDF for one student"""

    def __init__(self, student):
        self.student = student
        self.records = list(student_exam_records(student))
        self.report = gpa_report(self.records)

    def generate(self):
        """Generate the PDF and return as BytesIO buffer"""
        buffer = BytesIO()

        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=36,
            leftMargin=36,
            topMargin=36,
            bottomMargin=36,
            title=f"Transcript {self.student.student_id}"
        )

        elements = []

        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            'TranscriptTitle',
            parent=styles['Heading1'],
            fontSize=18,
            textColor=HEADER_COLOR,
            spaceAfter=12,
            alignment=TA_CENTER
        )
        info_style = ParagraphStyle(
            'Info',
            parent=styles['Normal'],
            fontSize=10,
            alignment=TA_CENTER,
            spaceAfter=16
        )
        semester_style = ParagraphStyle(
            'Semester',
            parent=styles['Heading3'],
            textColor=HEADER_COLOR,
            spaceBefore=10,
            spaceAfter=6
        )

        elements.append(Paragraph("Academic Transcript", title_style))

        department = self.student.department
        issued = timezone.localdate().strftime('%d/%m/%Y')
        info_text = (
            f"{self.student.full_name} | {self.student.student_id} | "
            f"{department.name} | Issued: {issued}"
        )
        elements.append(Paragraph(info_text, info_style))

        if not self.records:
            elements.append(Paragraph("No exam records found.", styles['Normal']))
        else:
            for summary in self.report.semesters:
                elements.append(Paragraph(f"{summary.semester} {summary.year}", semester_style))
                elements.append(self._create_semester_table(summary))

        elements.append(Spacer(1, 0.3 * inch))
        elements.append(self._create_summary_table())

        doc.build(elements)

        buffer.seek(0)
        return buffer

    def _create_semester_table(self, summary):
        """Course rows for one semester plus the semester GPA"""
        data = [['Code', 'Course', 'Credits', 'Total', 'Grade', 'Points']]

        for record in self.records:
            if (record.semester, record.year) != (summary.semester, summary.year):
                continue
            data.append([
                record.course.code,
                record.course.name,
                str(record.course.credit_hours),
                f"{record.total_marks:.2f}",
                record.grade,
                f"{record.grade_points or 0:.2f}",
            ])

        data.append(['', 'Semester GPA', str(summary.total_credit_hours), '', '', f"{summary.semester_gpa:.2f}"])

        table = Table(data, colWidths=[0.9 * inch, 2.8 * inch, 0.7 * inch, 0.8 * inch, 0.7 * inch, 0.7 * inch], repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), HEADER_COLOR),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('ALIGN', (2, 0), (-1, -1), 'CENTER'),
            ('BACKGROUND', (0, -1), (-1, -1), colors.HexColor('#e5e7eb')),
            ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ]))
        return table

    def _create_summary_table(self):
        """Cumulative totals"""
        data = [
            ['Cumulative Credit Hours', str(self.report.cumulative_credit_hours)],
            ['Cumulative GPA', f"{self.report.cumulative_gpa:.2f}"],
        ]
        table = Table(data, colWidths=[2.5 * inch, 1.2 * inch])
        table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('ALIGN', (1, 0), (1, -1), 'CENTER'),
            ('BOX', (0, 0), (-1, -1), 1, colors.black),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ]))
        return table
