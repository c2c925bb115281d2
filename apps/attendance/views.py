import logging
from datetime import datetime

from django.db.models import Count, Q
from rest_framework import status, viewsets
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.employees.models import EmployeeProfile
from apps.salary.records import check_period
from apps.salary.utils import month_bounds
from forgetrack.exceptions import NotFoundError, ValidationError
from .models import Attendance, Overtime
from .serializers import AttendanceSerializer, OvertimeSerializer

logger = logging.getLogger(__name__)


def month_filter(params, field="date"):
    month = params.get("month")
    year = params.get("year")
    if not month or not year:
        raise ValidationError("month and year are required.")
    month, year = check_period(month, year)
    start, end = month_bounds(year, month)
    return {f"{field}__gte": start, f"{field}__lte": end}


class AttendanceViewSet(viewsets.ModelViewSet):
    serializer_class = AttendanceSerializer
    permission_classes = [IsAdminUser]

    def get_queryset(self):
        qs = Attendance.objects.select_related("employee")
        params = self.request.query_params
        if self.action == "list":
            qs = qs.filter(**month_filter(params))
        if params.get("employee"):
            qs = qs.filter(employee_id=params["employee"])
        return qs


class MarkAttendanceManually(APIView):
    permission_classes = [IsAdminUser]

    def post(self, request):
        data = request.data

        employee_id = data.get("employee")
        attendance_date = data.get("date")
        present = data.get("present", True)
        note = data.get("note") or ""

        if not employee_id or not attendance_date:
            return Response({"error": "Employee and date are required."}, status=400)

        try:
            employee = EmployeeProfile.objects.get(id=employee_id)
        except (EmployeeProfile.DoesNotExist, ValueError):
            raise NotFoundError("Employee not found.")

        try:
            attendance_date_obj = datetime.strptime(attendance_date, "%Y-%m-%d").date()
        except (TypeError, ValueError):
            return Response({"error": "Invalid date format. Use YYYY-MM-DD."}, status=400)

        attendance, created = Attendance.objects.update_or_create(
            employee=employee,
            date=attendance_date_obj,
            defaults={
                "present": present not in (False, 0, "false", "False", "0"),
                "note": note,
            },
        )
        logger.info("Attendance %s for employee %s on %s", "created" if created else "updated", employee.pk, attendance_date_obj)

        serializer = AttendanceSerializer(attendance)
        return Response(serializer.data, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)


class AttendanceMonthlySummaryAPIView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request):
        bounds = month_filter(request.query_params, field="attendance__date")
        employees = EmployeeProfile.objects.annotate(
            present_days=Count("attendance", filter=Q(attendance__present=True, **bounds)),
            recorded_days=Count("attendance", filter=Q(**bounds)),
        ).order_by("name")
        data = []
        for emp in employees:
            data.append({
                "employee_id": emp.id,
                "employee_name": emp.name,
                "present_days": emp.present_days,
                "absent_days": max(0, emp.recorded_days - emp.present_days),
            })
        return Response(data)


class OvertimeViewSet(viewsets.ModelViewSet):
    serializer_class = OvertimeSerializer
    permission_classes = [IsAdminUser]

    def get_queryset(self):
        qs = Overtime.objects.select_related("employee")
        params = self.request.query_params
        if self.action == "list":
            if not params.get("employee"):
                raise ValidationError("employee, month and year are required.")
            qs = qs.filter(employee_id=params["employee"], **month_filter(params))
        return qs
