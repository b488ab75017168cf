from django.contrib import admin

from .models import Student


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ['student_id', 'first_name', 'last_name', 'department', 'academic_class', 'status', 'admission_date']
    list_filter = ['status', 'department', 'gender']
    search_fields = ['student_id', 'first_name', 'last_name', 'email']
    readonly_fields = ['student_id', 'created_at', 'updated_at']
