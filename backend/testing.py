"""
Fixtures shared by the API test suites.
"""
from decimal import Decimal

from rest_framework.test import APIClient

from academic.models import Faculty, Department, Course, Class
from users.defaults import seed_admin_role, seed_semesters
from users.models import User, Role, Permission


def create_admin(email='admin@example.com', password='admin123', **extra):
    extra.setdefault('name', 'Admin')
    extra.setdefault('is_staff', True)
    return User.objects.create_user(email=email, password=password, role=seed_admin_role(), **extra)


def create_user_with_permissions(email, *permission_names, password='secret123'):
    seed_admin_role()
    role = Role.objects.create(name=f'Role for {email}')
    role.permissions.add(*Permission.objects.filter(name__in=permission_names))
    return User.objects.create_user(email=email, password=password, name=email.split('@')[0], role=role)


def api_client(user=None):
    client = APIClient()
    if user is not None:
        client.force_authenticate(user=user)
    return client


def create_academic_structure(tuition_fee=Decimal('500.00'), semester='Fall', year=2025):
    """Faculty -> department -> course -> class, with the default semesters"""
    seed_semesters()
    faculty = Faculty.objects.create(name='Engineering', code='ENG')
    department = Department.objects.create(
        name='Computer Science', code='CS', faculty=faculty, tuition_fee=tuition_fee
    )
    course = Course.objects.create(name='Algorithms', code='CS201', credit_hours=3, department=department)
    academic_class = Class.objects.create(name='CS201-A', course=course, semester=semester, year=year)
    return faculty, department, course, academic_class
