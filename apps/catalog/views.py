import logging

from django.db import IntegrityError, transaction
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from forgetrack.exceptions import DuplicateEntryError
from .models import JobType, JobTypeRateHistory, Product
from .serializers import JobTypeRateHistorySerializer, JobTypeSerializer, ProductSerializer

logger = logging.getLogger(__name__)


class IsAdminOrReadOnly(permissions.BasePermission):
    """Any signed-in user may read the catalog; only staff may change it."""

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        return request.method in permissions.SAFE_METHODS or request.user.is_staff


class ProductViewSet(viewsets.ModelViewSet):
    serializer_class = ProductSerializer
    permission_classes = [IsAdminOrReadOnly]

    def get_queryset(self):
        qs = Product.objects.all()
        part_type = self.request.query_params.get("part_type")
        if part_type:
            qs = qs.filter(part_type=part_type.lower())
        return qs


class JobTypeViewSet(viewsets.ModelViewSet):
    serializer_class = JobTypeSerializer
    permission_classes = [IsAdminOrReadOnly]

    def get_queryset(self):
        qs = JobType.objects.prefetch_related("rate_history").all()
        part_type = self.request.query_params.get("part_type")
        if part_type:
            qs = qs.filter(part_type=part_type.lower())
        return qs

    def perform_create(self, serializer):
        try:
            with transaction.atomic():
                job_type = serializer.save()
        except IntegrityError as exc:
            raise DuplicateEntryError("Duplicate job type.") from exc
        logger.info("Job type %s created with rate %s", job_type, job_type.rate)

    def perform_update(self, serializer):
        try:
            with transaction.atomic():
                job_type = serializer.save()
        except IntegrityError as exc:
            raise DuplicateEntryError("Another job type with this name exists for this part type.") from exc
        logger.info("Job type %s updated, rate %s", job_type, job_type.rate)

    @action(detail=True, methods=["post"], url_path="rates")
    def add_rate(self, request, pk=None):
        job_type = self.get_object()
        serializer = JobTypeRateHistorySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry, _ = JobTypeRateHistory.objects.update_or_create(
            job_type=job_type,
            effective_from_year=serializer.validated_data["effective_from_year"],
            effective_from_month=serializer.validated_data["effective_from_month"],
            defaults={"rate": serializer.validated_data["rate"]},
        )
        latest = job_type.rate_history.order_by("effective_from_year", "effective_from_month").last()
        if latest is not None and latest.pk == entry.pk:
            job_type.rate = entry.rate
            job_type.save()
        logger.info("Rate %s effective %02d/%s added to %s", entry.rate, entry.effective_from_month, entry.effective_from_year, job_type)
        return Response(JobTypeRateHistorySerializer(entry).data, status=status.HTTP_201_CREATED)
