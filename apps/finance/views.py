import logging

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.employees.models import EmployeeProfile
from apps.salary.records import ZERO, check_period, money_str
from apps.salary.sources import DjangoLedgerSource
from forgetrack.exceptions import NotFoundError, ValidationError
from . import services
from .ledger import loan_summary
from .models import Loan, LoanTransaction, UpadEntry
from .serializers import LoanSerializer, LoanTransactionSerializer, UpadEntrySerializer

logger = logging.getLogger(__name__)


def period_params(params):
    month = params.get("month")
    year = params.get("year")
    if not month or not year:
        raise ValidationError("month and year are required.")
    return check_period(month, year)


def employee_or_404(employee_id):
    try:
        return EmployeeProfile.objects.get(pk=employee_id)
    except EmployeeProfile.DoesNotExist:
        raise NotFoundError("Employee not found.")


class UpadEntryViewSet(viewsets.ModelViewSet):
    serializer_class = UpadEntrySerializer
    permission_classes = [IsAdminUser]

    def get_queryset(self):
        qs = UpadEntry.objects.select_related("employee")
        params = self.request.query_params
        if params.get("employee"):
            qs = qs.filter(employee_id=params["employee"])
        if params.get("month"):
            qs = qs.filter(month=params["month"])
        if params.get("year"):
            qs = qs.filter(year=params["year"])
        return qs

    def perform_destroy(self, instance):
        logger.info("Upad %s deleted by %s", instance.pk, self.request.user.username)
        instance.delete()


class LoanViewSet(viewsets.ModelViewSet):
    serializer_class = LoanSerializer
    permission_classes = [IsAdminUser]

    def get_queryset(self):
        qs = Loan.objects.select_related("employee").prefetch_related("transactions")
        params = self.request.query_params
        employee_id = params.get("employee_id") or params.get("employee")
        if employee_id:
            qs = qs.filter(employee_id=employee_id)
        if params.get("status"):
            qs = qs.filter(status=params["status"])
        return qs

    def perform_update(self, serializer):
        old_principal = serializer.instance.principal
        loan = serializer.save()
        # An explicit status from the admin is kept as given
        if "status" not in serializer.validated_data and loan.principal != old_principal:
            services.refresh_loan_status(loan)
        logger.info("Loan %s updated by %s", loan.pk, self.request.user.username)

    def perform_destroy(self, instance):
        logger.info("Loan %s deleted by %s", instance.pk, self.request.user.username)
        instance.delete()

    @action(detail=True, methods=["get", "post"])
    def transactions(self, request, pk=None):
        loan = self.get_object()
        if request.method == "GET":
            serializer = LoanTransactionSerializer(loan.transactions.all(), many=True)
            return Response(serializer.data)

        serializer = LoanTransactionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        tx = services.create_loan_transaction(
            loan.pk,
            data["month"],
            data["year"],
            data["amount"],
            data.get("mode") or services.SALARY_DEDUCTION,
        )
        return Response(LoanTransactionSerializer(tx).data, status=status.HTTP_201_CREATED)


class LoanTransactionViewSet(
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = LoanTransactionSerializer
    permission_classes = [IsAdminUser]
    queryset = LoanTransaction.objects.select_related("loan", "employee")

    def perform_destroy(self, instance):
        logger.info("Loan transaction %s deleted by %s", instance.pk, self.request.user.username)
        services.delete_loan_transaction(instance)


class LoanSummaryAPIView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request, employee_id):
        month, year = period_params(request.query_params)
        employee = employee_or_404(employee_id)
        summary = loan_summary(employee.pk, month, year, DjangoLedgerSource())
        data = summary.as_dict()
        data.update({"employeeId": employee.pk, "month": month, "year": year})
        return Response(data)


class LoanDataAPIView(APIView):
    """Every loan of an employee with its transactions and running totals."""
    permission_classes = [IsAdminUser]

    def get(self, request, employee_id):
        employee = employee_or_404(employee_id)
        loans = Loan.objects.filter(employee=employee).prefetch_related("transactions")
        total_principal = ZERO
        total_paid = ZERO
        rows = []
        for loan in loans:
            paid = services.paid_total(loan)
            total_principal += loan.principal
            total_paid += paid
            row = LoanSerializer(loan).data
            row["transactions"] = LoanTransactionSerializer(loan.transactions.all(), many=True).data
            rows.append(row)
        return Response({
            "employeeId": employee.pk,
            "employeeName": employee.name,
            "loans": rows,
            "stats": {
                "loanCount": len(rows),
                "activeCount": sum(1 for row in rows if row["status"] == "active"),
                "totalPrincipal": money_str(total_principal),
                "totalPaid": money_str(total_paid),
                "totalPending": money_str(max(ZERO, total_principal - total_paid)),
            },
        })


class ApplyMissingInstallmentsAPIView(APIView):
    permission_classes = [IsAdminUser]

    def post(self, request, employee_id):
        month, year = period_params(request.data)
        created = services.apply_missing_installments(employee_id, month, year)
        return Response(
            {
                "created": len(created),
                "transactions": LoanTransactionSerializer(created, many=True).data,
            },
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
