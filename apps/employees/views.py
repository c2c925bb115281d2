import logging

from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.views import TokenObtainPairView

from forgetrack.exceptions import NotFoundError
from .models import EmployeeProfile, EmployeeRateHistory
from .serializers import EmployeeProfileSerializer, EmployeeRateHistorySerializer

logger = logging.getLogger(__name__)


class AdminTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_staff:
            raise serializers.ValidationError("You are not authorized as an admin.")
        return data


class AdminLoginView(TokenObtainPairView):
    serializer_class = AdminTokenObtainPairSerializer


class EmployeeProfileViewSet(viewsets.ModelViewSet):
    serializer_class = EmployeeProfileSerializer
    permission_classes = [IsAdminUser]

    def get_queryset(self):
        qs = EmployeeProfile.objects.prefetch_related("rate_history").all()
        params = self.request.query_params
        if params.get("include_inactive") not in ("1", "true", "True"):
            qs = qs.filter(is_active=True)
        if params.get("employment_type"):
            qs = qs.filter(employment_type=params["employment_type"])
        if params.get("department"):
            qs = qs.filter(department=params["department"])
        return qs

    def get_object(self):
        # Deactivated employees stay reachable by id
        try:
            return EmployeeProfile.objects.get(pk=self.kwargs["pk"])
        except (EmployeeProfile.DoesNotExist, ValueError):
            raise NotFoundError("Employee not found.")

    def perform_destroy(self, instance):
        # Work logs must survive, so employees are only deactivated
        instance.is_active = False
        instance.save()
        if instance.user is not None:
            instance.user.is_active = False
            instance.user.save(update_fields=["is_active"])
        logger.info("Employee %s deactivated", instance.pk)

    @action(detail=True, methods=["get", "post"], url_path="rates")
    def rates(self, request, pk=None):
        employee = self.get_object()
        if request.method == "GET":
            qs = EmployeeRateHistory.objects.filter(employee=employee)
            return Response(EmployeeRateHistorySerializer(qs, many=True).data)

        serializer = EmployeeRateHistorySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry, _ = EmployeeRateHistory.objects.update_or_create(
            employee=employee,
            kind=serializer.validated_data["kind"],
            effective_from_year=serializer.validated_data["effective_from_year"],
            effective_from_month=serializer.validated_data["effective_from_month"],
            defaults={"rate": serializer.validated_data["rate"]},
        )
        # The latest entry also becomes the base rate
        latest = EmployeeRateHistory.objects.filter(employee=employee, kind=entry.kind).last()
        field = "salary_per_day" if entry.kind == "salary" else "daily_roj_rate"
        setattr(employee, field, latest.rate)
        employee.save()
        return Response(EmployeeRateHistorySerializer(entry).data, status=status.HTTP_201_CREATED)


class MyProfileAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        profile = EmployeeProfile.objects.filter(user=request.user).first()
        if profile is None:
            raise NotFoundError("No employee profile is linked to this login.")
        return Response(EmployeeProfileSerializer(profile).data)
