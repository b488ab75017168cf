from django.urls import path

from .views import DashboardView, AdmissionReportView, AttendanceReportView, ExamReportView

urlpatterns = [
    path('dashboard/', DashboardView.as_view(), name='dashboard'),
    path('admission/', AdmissionReportView.as_view(), name='admission-report'),
    path('attendance/', AttendanceReportView.as_view(), name='attendance-report'),
    path('exam/', ExamReportView.as_view(), name='exam-report'),
]
