from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    TuitionPaymentViewSet, StudentsTransactionsView,
    UnpaidStudentsView, ClassRevenueView
)

router = DefaultRouter()
router.register(r'payments', TuitionPaymentViewSet, basename='tuition-payment')

urlpatterns = [
    path('', include(router.urls)),
    path('students-transactions/', StudentsTransactionsView.as_view(), name='students-transactions'),
    path('unpaid-students/', UnpaidStudentsView.as_view(), name='unpaid-students'),
    path('class-revenue/', ClassRevenueView.as_view(), name='class-revenue'),
]
