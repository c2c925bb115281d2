from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import (
    AttendanceViewSet,
    OvertimeViewSet,
    MarkAttendanceManually,
    AttendanceMonthlySummaryAPIView,
)


router = DefaultRouter()
router.register(r'attendance', AttendanceViewSet, basename='attendance')
router.register(r'overtime', OvertimeViewSet, basename='overtime')

urlpatterns = [
    path('mark-attendance/', MarkAttendanceManually.as_view(), name='mark_attendance'),
    path('summary/', AttendanceMonthlySummaryAPIView.as_view(), name='attendance_summary'),

    path('', include(router.urls)),
]
