from django.db import models
from django.db.models import IntegerField, Max
from django.db.models.functions import Cast, Substr
from django.utils import timezone

from academic.models import Department, Class


class Student(models.Model):
    """
    Admitted (or applying) student
    """
    STATUS_CHOICES = [
        ('Pending', 'Pending'),
        ('Admitted', 'Admitted'),
        ('Rejected', 'Rejected'),
        ('Graduated', 'Graduated'),
    ]

    GENDER_CHOICES = [
        ('Male', 'Male'),
        ('Female', 'Female'),
    ]

    ID_PREFIX = 'STD'

    student_id = models.CharField(max_length=20, unique=True, editable=False)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    mother_name = models.CharField(max_length=200, blank=True, null=True)
    parent_phone = models.CharField(max_length=30, blank=True, null=True)
    email = models.EmailField(unique=True, blank=True, null=True)
    phone = models.CharField(max_length=30, blank=True, null=True)
    date_of_birth = models.DateField(blank=True, null=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    department = models.ForeignKey(Department, on_delete=models.PROTECT, related_name='students')
    academic_class = models.ForeignKey(
        Class,
        on_delete=models.SET_NULL,
        related_name='students',
        blank=True,
        null=True
    )
    program = models.CharField(max_length=200, blank=True, null=True)
    image = models.ImageField(upload_to='students/', blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Admitted')
    admission_date = models.DateField(default=timezone.localdate)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'students'
        verbose_name = 'Student'
        verbose_name_plural = 'Students'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.student_id} - {self.full_name}"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    @classmethod
    def next_student_id(cls, year=None):
        """
        Next sequential ID for the year, e.g. STD-2026-0001
        """
        year = year or timezone.localdate().year
        prefix = f"{cls.ID_PREFIX}-{year}-"
        # compare the sequence numerically so 10000 follows 9999
        last_number = cls.objects.filter(
            student_id__startswith=prefix
        ).aggregate(
            last=Max(Cast(Substr('student_id', len(prefix) + 1), IntegerField()))
        )['last']

        next_number = (last_number or 0) + 1
        return f"{prefix}{next_number:04d}"

    def save(self, *args, **kwargs):
        if not self.student_id:
            self.student_id = self.next_student_id()
        super().save(*args, **kwargs)
