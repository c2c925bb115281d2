import logging

from django.db.models import Count, Max, Sum
from django.utils.dateparse import parse_date
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response

from apps.catalog.views import IsAdminOrReadOnly
from apps.employees.models import EmployeeProfile
from apps.salary.records import check_period
from apps.salary.utils import month_bounds
from forgetrack.exceptions import ValidationError
from .models import Party, TransporterLog, WorkLog
from .serializers import PartySerializer, TransporterLogSerializer, WorkLogSerializer

logger = logging.getLogger(__name__)


def profile_for(user):
    profile = EmployeeProfile.objects.filter(user=user, is_active=True).first()
    if profile is None:
        raise PermissionDenied("No active employee profile is linked to this login.")
    return profile


def parse_day(value, name):
    try:
        day = parse_date(value)
    except ValueError:
        day = None
    if day is None:
        raise ValidationError({name: "Use YYYY-MM-DD."})
    return day


def totals(row):
    total = row["total_parts"] or 0
    rejection = row["total_rejection"] or 0
    return {"total_parts": total, "total_rejection": rejection, "ok_parts": total - rejection}


class LogAnalyticsMixin:
    """Admin-only aggregate endpoints over the log table."""

    analytics_filters = ()

    def analytics_queryset(self):
        qs = self.model.objects.all()
        params = self.request.query_params
        if params.get("employee"):
            qs = qs.filter(employee_id=params["employee"])
        if params.get("date"):
            qs = qs.filter(work_date=parse_day(params["date"], "date"))
        else:
            if params.get("from"):
                qs = qs.filter(work_date__gte=parse_day(params["from"], "from"))
            if params.get("to"):
                qs = qs.filter(work_date__lte=parse_day(params["to"], "to"))
        for name in self.analytics_filters:
            if params.get(name):
                qs = qs.filter(**{name: params[name]})
        return qs

    @action(detail=False, methods=["get"], permission_classes=[IsAdminUser])
    def stats(self, request):
        row = self.analytics_queryset().aggregate(
            total_logs=Count("id"),
            total_parts=Sum("total_parts"),
            total_rejection=Sum("rejection"),
            unique_employees=Count("employee", distinct=True),
        )
        data = {"total_logs": row["total_logs"], "unique_employees": row["unique_employees"]}
        data.update(totals(row))
        return Response(data)


class OwnLogsViewSet(viewsets.ModelViewSet):
    """
    Workers create and list their own logs; staff see everything and are
    the only ones allowed to correct or delete an entry.
    """
    permission_classes = [IsAuthenticated]
    model = None

    def base_queryset(self):
        return self.model.objects.select_related("employee")

    def get_queryset(self):
        qs = self.base_queryset()
        user = self.request.user
        params = self.request.query_params
        if not user.is_staff:
            qs = qs.filter(employee__user=user)
        elif params.get("employee"):
            qs = qs.filter(employee_id=params["employee"])
        if user.is_staff and params.get("department"):
            qs = qs.filter(employee__department=params["department"])
        if params.get("date"):
            qs = qs.filter(work_date=params["date"])
        if params.get("month") and params.get("year"):
            month, year = check_period(params["month"], params["year"])
            start, end = month_bounds(year, month)
            qs = qs.filter(work_date__gte=start, work_date__lte=end)
        return qs

    def perform_create(self, serializer):
        user = self.request.user
        if user.is_staff:
            if serializer.validated_data.get("employee") is None:
                raise ValidationError({"employee": "Employee is required."})
            instance = serializer.save()
        else:
            instance = serializer.save(employee=profile_for(user))
        logger.info("%s %s created by %s", self.model.__name__, instance.pk, user.username)

    def perform_update(self, serializer):
        if not self.request.user.is_staff:
            raise PermissionDenied("Only an admin can correct a log entry.")
        instance = serializer.save()
        logger.info("%s %s corrected by %s", self.model.__name__, instance.pk, self.request.user.username)

    def perform_destroy(self, instance):
        if not self.request.user.is_staff:
            raise PermissionDenied("Only an admin can delete a log entry.")
        logger.info("%s %s deleted by %s", self.model.__name__, instance.pk, self.request.user.username)
        instance.delete()


class WorkLogViewSet(LogAnalyticsMixin, OwnLogsViewSet):
    serializer_class = WorkLogSerializer
    model = WorkLog
    analytics_filters = ("part_type",)

    def base_queryset(self):
        return WorkLog.objects.select_related("employee", "product").order_by("-work_date", "-created_at")

    def get_queryset(self):
        qs = super().get_queryset()
        part_type = self.request.query_params.get("part_type")
        if part_type:
            qs = qs.filter(part_type=part_type)
        return qs

    @action(detail=False, methods=["get"], permission_classes=[IsAdminUser])
    def daily(self, request):
        rows = (
            self.analytics_queryset()
            .values("work_date")
            .annotate(count=Count("id"), total_parts=Sum("total_parts"), total_rejection=Sum("rejection"))
            .order_by("work_date")
        )
        series = []
        for row in rows:
            item = {"date": row["work_date"].isoformat(), "count": row["count"]}
            item.update(totals(row))
            series.append(item)
        return Response(series)

    @action(detail=False, methods=["get"], url_path="by-employee", permission_classes=[IsAdminUser])
    def by_employee(self, request):
        rows = (
            self.analytics_queryset()
            .values("employee_id")
            .annotate(
                name=Max("employee_name"),
                count=Count("id"),
                total_parts=Sum("total_parts"),
                total_rejection=Sum("rejection"),
            )
            .order_by("-total_parts", "employee_id")
        )
        data = []
        for row in rows:
            item = {"employee_id": row["employee_id"], "employee_name": row["name"], "count": row["count"]}
            item.update(totals(row))
            data.append(item)
        return Response(data)


class TransporterLogViewSet(LogAnalyticsMixin, OwnLogsViewSet):
    serializer_class = TransporterLogSerializer
    model = TransporterLog
    analytics_filters = ("party_name", "job_type")

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params
        if params.get("party_name"):
            qs = qs.filter(party_name=params["party_name"])
        if params.get("job_type"):
            qs = qs.filter(job_type=params["job_type"])
        return qs


class PartyViewSet(viewsets.ModelViewSet):
    serializer_class = PartySerializer
    permission_classes = [IsAdminOrReadOnly]

    def get_queryset(self):
        qs = Party.objects.all()
        party_type = self.request.query_params.get("party_type")
        if party_type:
            qs = qs.filter(party_type=party_type)
        return qs
