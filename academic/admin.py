from django.contrib import admin
from .models import Faculty, Department, Course, Semester, Class

@admin.register(Faculty)
class FacultyAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'program', 'is_active']
    list_filter = ['is_active']
    search_fields = ['code', 'name']
    ordering = ['name']

@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'faculty', 'tuition_fee', 'is_active']
    list_filter = ['faculty', 'is_active']
    search_fields = ['code', 'name', 'faculty__name']
    ordering = ['name']

@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'department', 'credit_hours', 'is_active']
    list_filter = ['department', 'credit_hours', 'is_active']
    search_fields = ['code', 'name']
    ordering = ['name']

@admin.register(Semester)
class SemesterAdmin(admin.ModelAdmin):
    list_display = ['name', 'sort_order', 'is_active']
    list_filter = ['is_active']
    ordering = ['sort_order', 'name']

@admin.register(Class)
class ClassAdmin(admin.ModelAdmin):
    list_display = ['name', 'course', 'semester', 'year', 'room', 'capacity', 'is_active']
    list_filter = ['semester', 'year', 'is_active']
    search_fields = ['name', 'course__code', 'course__name']
    ordering = ['-year', 'semester', 'name']
