from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import JobTypeViewSet, ProductViewSet

router = DefaultRouter()
router.register(r'products', ProductViewSet, basename='product')
router.register(r'job-types', JobTypeViewSet, basename='jobtype')

urlpatterns = [
    path('', include(router.urls)),
]
