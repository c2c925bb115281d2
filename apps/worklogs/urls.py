from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import PartyViewSet, TransporterLogViewSet, WorkLogViewSet

router = DefaultRouter()
router.register(r'work-logs', WorkLogViewSet, basename='worklog')
router.register(r'transporter-logs', TransporterLogViewSet, basename='transporterlog')
router.register(r'parties', PartyViewSet, basename='party')

urlpatterns = [
    path('', include(router.urls)),
]
