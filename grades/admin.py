from django.contrib import admin

from .models import ExamRecord


@admin.register(ExamRecord)
class ExamRecordAdmin(admin.ModelAdmin):
    list_display = ['student', 'course', 'semester', 'year', 'total_marks', 'grade', 'grade_points']
    list_filter = ['semester', 'year', 'grade']
    search_fields = ['student__student_id', 'student__first_name', 'student__last_name', 'course__code']
    readonly_fields = ['total_marks', 'grade', 'grade_points', 'created_at', 'updated_at']
