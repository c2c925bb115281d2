from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import (
    UpadEntryViewSet,
    LoanViewSet,
    LoanTransactionViewSet,
    LoanSummaryAPIView,
    LoanDataAPIView,
    ApplyMissingInstallmentsAPIView,
)

router = DefaultRouter()
router.register(r'upad', UpadEntryViewSet, basename='upad')
router.register(r'loans', LoanViewSet, basename='loan')
router.register(r'loan-transactions', LoanTransactionViewSet, basename='loan-transaction')

urlpatterns = [
    path('loans/summary/<int:employee_id>/', LoanSummaryAPIView.as_view(), name='loan-summary'),
    path('loans/data/<int:employee_id>/', LoanDataAPIView.as_view(), name='loan-data'),
    path('loans/apply-missing/<int:employee_id>/', ApplyMissingInstallmentsAPIView.as_view(), name='loan-apply-missing'),

    path('', include(router.urls)),
]
