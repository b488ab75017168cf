from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import ExamRecordViewSet, GPAView, TranscriptPDFView

router = DefaultRouter()
router.register(r'exam-records', ExamRecordViewSet, basename='exam-record')

urlpatterns = [
    path('', include(router.urls)),
    path('gpa/', GPAView.as_view(), name='gpa'),
    path('gpa/<int:student_id>/transcript.pdf', TranscriptPDFView.as_view(), name='transcript-pdf'),
]
