from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import AttendanceSessionViewSet

router = SimpleRouter()
router.register(r'', AttendanceSessionViewSet, basename='attendance')

urlpatterns = [
    path('', include(router.urls)),
]
