from django.contrib import admin

from .models import AttendanceSession, AttendanceRecord


class AttendanceRecordInline(admin.TabularInline):
    model = AttendanceRecord
    extra = 0


@admin.register(AttendanceSession)
class AttendanceSessionAdmin(admin.ModelAdmin):
    list_display = ['academic_class', 'date', 'shift', 'taken_by', 'taken_at']
    list_filter = ['shift', 'date']
    search_fields = ['academic_class__name', 'note']
    inlines = [AttendanceRecordInline]
