from django.contrib import admin

from .models import TuitionPayment


@admin.register(TuitionPayment)
class TuitionPaymentAdmin(admin.ModelAdmin):
    list_display = ['student', 'semester', 'year', 'amount', 'paid_at']
    list_filter = ['semester', 'year']
    search_fields = ['student__student_id', 'student__first_name', 'student__last_name']
    date_hierarchy = 'paid_at'
