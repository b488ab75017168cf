from decimal import Decimal

from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from academic.models import Course
from students.models import Student
from .grading import calculate_total, get_grade_info


def _marks_field(max_marks):
    return models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(0), MaxValueValidator(max_marks)]
    )


class ExamRecord(models.Model):
    """
    A student's marks for one course in one semester/year.
    Total, letter grade and grade points are derived from the marks on save.
    """
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='exam_records')
    course = models.ForeignKey(Course, on_delete=models.PROTECT, related_name='exam_records')
    semester = models.CharField(max_length=50)
    year = models.IntegerField(validators=[MinValueValidator(1900), MaxValueValidator(3000)])

    mid_exam = _marks_field(20)
    final_exam = _marks_field(40)
    assessment = _marks_field(10)
    project = _marks_field(10)
    assignment = _marks_field(10)
    presentation = _marks_field(10)

    total_marks = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal('0'))
    grade = models.CharField(max_length=2, blank=True)
    grade_points = models.DecimalField(max_digits=3, decimal_places=2, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'exam_records'
        verbose_name = 'Exam Record'
        verbose_name_plural = 'Exam Records'
        ordering = ['-year', 'semester', 'student__first_name']
        unique_together = [['student', 'course', 'semester', 'year']]

    def __str__(self):
        return f"{self.student.student_id} - {self.course.code} ({self.semester} {self.year}): {self.grade}"

    def marks(self):
        return {
            'mid_exam': self.mid_exam,
            'final_exam': self.final_exam,
            'assessment': self.assessment,
            'project': self.project,
            'assignment': self.assignment,
            'presentation': self.presentation,
        }

    def compute_result(self):
        self.total_marks = calculate_total(self.marks())
        info = get_grade_info(self.total_marks)
        self.grade = info.grade
        self.grade_points = info.grade_points

    def save(self, *args, **kwargs):
        self.compute_result()
        super().save(*args, **kwargs)
