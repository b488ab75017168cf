from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator


class Faculty(models.Model):
    """
    Model for faculties (top-level academic units)
    """
    name = models.CharField(max_length=200, unique=True)
    code = models.CharField(max_length=20, unique=True)
    description = models.TextField(blank=True, null=True)
    program = models.CharField(max_length=200, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'faculties'
        verbose_name = 'Faculty'
        verbose_name_plural = 'Faculties'
        ordering = ['name']

    def __str__(self):
        return f"{self.code} - {self.name}"


class Department(models.Model):
    """
    Model for departments; the tuition fee is charged per semester
    """
    name = models.CharField(max_length=200, unique=True)
    code = models.CharField(max_length=20, unique=True)
    description = models.TextField(blank=True, null=True)
    faculty = models.ForeignKey(Faculty, on_delete=models.PROTECT, related_name='departments')
    tuition_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        blank=True,
        null=True,
        validators=[MinValueValidator(0)]
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'departments'
        verbose_name = 'Department'
        verbose_name_plural = 'Departments'
        ordering = ['name']

    def __str__(self):
        return f"{self.code} - {self.name}"


class Course(models.Model):
    """
    Model for courses; credit hours weight grade points in GPA
    """
    name = models.CharField(max_length=200, unique=True)
    code = models.CharField(max_length=20, unique=True)
    description = models.TextField(blank=True, null=True)
    credit_hours = models.IntegerField(default=3, validators=[MinValueValidator(1)])
    department = models.ForeignKey(Department, on_delete=models.PROTECT, related_name='courses')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'courses'
        verbose_name = 'Course'
        verbose_name_plural = 'Courses'
        ordering = ['name']

    def __str__(self):
        return f"{self.code} - {self.name}"


class SemesterQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def active_names(self):
        """Active semester labels in display order"""
        return list(self.active().order_by('sort_order', 'name').values_list('name', flat=True))

    def is_valid_name(self, name):
        return self.active().filter(name=str(name).strip()).exists()


class Semester(models.Model):
    """
    Semester registry (Spring, Summer, Fall...). Classes, exam records and
    tuition payments reference semesters by name.
    """
    name = models.CharField(max_length=50, unique=True)
    sort_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = SemesterQuerySet.as_manager()

    class Meta:
        db_table = 'semesters'
        verbose_name = 'Semester'
        verbose_name_plural = 'Semesters'
        ordering = ['sort_order', 'name']

    def __str__(self):
        return self.name


class Class(models.Model):
    """
    A class (section) of a course offered in a given semester and year
    """
    name = models.CharField(max_length=100)
    course = models.ForeignKey(Course, on_delete=models.PROTECT, related_name='classes')
    semester = models.CharField(max_length=50)
    year = models.IntegerField(validators=[MinValueValidator(1900), MaxValueValidator(3000)])
    room = models.CharField(max_length=100, blank=True, null=True)
    schedule = models.CharField(max_length=200, blank=True, null=True)
    capacity = models.IntegerField(default=40, validators=[MinValueValidator(1)])
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'classes'
        verbose_name = 'Class'
        verbose_name_plural = 'Classes'
        ordering = ['-year', 'semester', 'name']
        unique_together = [['name', 'semester', 'year']]

    def __str__(self):
        return f"{self.name} ({self.semester} {self.year})"
