from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.utils import timezone

from students.models import Student


class TuitionPayment(models.Model):
    """
    Tuition paid by a student for one semester of a year
    """
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='tuition_payments')
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    semester = models.CharField(max_length=50)
    year = models.IntegerField(validators=[MinValueValidator(1900), MaxValueValidator(3000)])
    note = models.TextField(blank=True, null=True)
    paid_at = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'tuition_payments'
        verbose_name = 'Tuition Payment'
        verbose_name_plural = 'Tuition Payments'
        ordering = ['-year', 'semester', '-paid_at']
        unique_together = [['student', 'semester', 'year']]

    def __str__(self):
        return f"{self.student.student_id} - {self.semester} {self.year}: {self.amount}"
