from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import (
    AdminLoginView,
    EmployeeProfileViewSet,
    MyProfileAPIView,
)

router = DefaultRouter()
router.register(r'profiles', EmployeeProfileViewSet, basename='employeeprofile')

urlpatterns = [
    path('admin-login/', AdminLoginView.as_view(), name='admin_login'),
    path('me/', MyProfileAPIView.as_view(), name='my_profile'),
    path('', include(router.urls)),
]
