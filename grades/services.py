"""
Bridges stored exam records, the GPA calculation and the bulk mark import.
"""
import logging

from django.db import transaction

from students.models import Student
from .gpa import ExamRecordInput, calculate_gpa
from .models import ExamRecord

logger = logging.getLogger(__name__)


def student_exam_records(student):
    """Exam records of a student, newest year first"""
    return ExamRecord.objects.filter(
        student=student
    ).select_related('course__department').order_by('-year', 'semester', 'course__code')


def gpa_report(records):
    return calculate_gpa(
        ExamRecordInput(
            semester=record.semester,
            year=record.year,
            grade_points=record.grade_points,
            credit_hours=record.course.credit_hours,
        )
        for record in records
    )


def template_students(academic_class):
    """
    Students listed on a class's mark template: those who appear in the
    class's attendance, otherwise the admitted students of its department
    """
    students = Student.objects.filter(
        attendance_records__session__academic_class=academic_class
    ).distinct()
    if not students.exists():
        students = Student.objects.filter(
            department_id=academic_class.course.department_id,
            status='Admitted'
        )
    return students.order_by('first_name', 'last_name')


@transaction.atomic
def import_exam_rows(academic_class, rows):
    """
    Upsert one exam record per sheet row on the class's course, semester
    and year. Rows that fail are reported and skipped.
    """
    created = 0
    updated = 0
    errors = []

    for row in rows:
        if row.error:
            errors.append(row.error)
            continue

        student = Student.objects.filter(student_id=row.student_id).first()
        if student is None:
            errors.append(f'Row {row.number}: Student "{row.student_id}" not found')
            continue

        record = ExamRecord.objects.filter(
            student=student,
            course_id=academic_class.course_id,
            semester=academic_class.semester,
            year=academic_class.year
        ).first()
        if record is None:
            record = ExamRecord(
                student=student,
                course_id=academic_class.course_id,
                semester=academic_class.semester,
                year=academic_class.year
            )
            created += 1
        else:
            updated += 1

        for key, value in row.marks.items():
            setattr(record, key, value)
        record.save()

    logger.info(
        'Exam import for class %s: %d created, %d updated, %d errors',
        academic_class.id, created, updated, len(errors)
    )
    return {'created': created, 'updated': updated, 'errors': errors}
