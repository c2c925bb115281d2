import logging

from django.conf import settings
from django.db import models
from django.utils import timezone

from apps.catalog.models import PART_TYPE_CHOICES, PART_TYPES, Product
from apps.employees.models import EmployeeProfile
from apps.salary.records import check_part_counts
from forgetrack.exceptions import ValidationError

logger = logging.getLogger(__name__)


class WorkLog(models.Model):
    employee = models.ForeignKey(EmployeeProfile, on_delete=models.PROTECT, related_name="work_logs")
    part_type = models.CharField(max_length=10, choices=PART_TYPE_CHOICES)
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, null=True, blank=True)
    part_size = models.CharField(max_length=30, blank=True)
    special_size = models.CharField(max_length=30, blank=True)
    # Operation label (CASTING, BORE GRINDING, ...); blank means part-level rate
    job_name = models.CharField(max_length=100, blank=True)
    total_parts = models.PositiveIntegerField()
    rejection = models.PositiveIntegerField(default=0)
    work_date = models.DateField()
    # Rate resolved at creation when FORGETRACK_SNAPSHOT_RATES is on
    rate_snapshot = models.DecimalField(max_digits=10, decimal_places=4, null=True, blank=True)

    # Display snapshots kept for deactivated employees
    employee_name = models.CharField(max_length=100, blank=True)
    employee_department = models.CharField(max_length=30, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["work_date", "created_at", "id"]
        indexes = [
            models.Index(fields=["employee", "work_date"]),
            models.Index(fields=["part_type", "work_date"]),
        ]

    @property
    def ok_parts(self):
        return self.total_parts - self.rejection

    RATE_FIELDS = ("part_type", "job_name", "work_date")

    def _stored(self):
        if not self.pk:
            return None
        return WorkLog.objects.filter(pk=self.pk).values("employee_id", *self.RATE_FIELDS).first()

    def save(self, *args, **kwargs):
        if self.part_type not in PART_TYPES:
            raise ValidationError({"part_type": f"Unknown part type '{self.part_type}'."})
        check_part_counts(self.total_parts, self.rejection)
        self.job_name = (self.job_name or "").strip()
        stored = self._stored()

        if stored is None or stored["employee_id"] != self.employee_id or not self.employee_name:
            self.employee_name = self.employee.name
            self.employee_department = self.employee.department or ""

        if stored is not None:
            self.updated_at = timezone.now()
        if settings.FORGETRACK_SNAPSHOT_RATES:
            rate_changed = stored is not None and any(stored[f] != getattr(self, f) for f in self.RATE_FIELDS)
            if self.rate_snapshot is None or rate_changed:
                from apps.salary.rates import RateResolver

                self.rate_snapshot = RateResolver().resolve(
                    self.part_type, self.job_name, self.work_date.year, self.work_date.month
                )
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.employee_name} {self.work_date} {self.part_type}:{self.job_name or '-'} {self.total_parts}/{self.rejection}"


class Party(models.Model):
    PARTY_TYPE_CHOICES = (
        ("outside-rod", "Outside Rod"),
        ("outside-pin", "Outside Pin"),
        ("outside-sleeve", "Outside Sleeve"),
    )

    party_type = models.CharField(max_length=20, choices=PARTY_TYPE_CHOICES)
    party_name = models.CharField(max_length=100)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["party_name"]
        unique_together = ("party_type", "party_name")

    def __str__(self):
        return f"{self.party_name} ({self.party_type})"


class TransporterLog(models.Model):
    JOB_TYPE_CHOICES = (
        ("outside-rod", "Outside Rod"),
        ("outside-pin", "Outside Pin"),
    )

    employee = models.ForeignKey(EmployeeProfile, on_delete=models.PROTECT, related_name="transporter_logs")
    job_type = models.CharField(max_length=20, choices=JOB_TYPE_CHOICES)
    party_name = models.CharField(max_length=100)
    part_name = models.CharField(max_length=100, blank=True)
    total_parts = models.PositiveIntegerField()
    rejection = models.PositiveIntegerField(default=0)
    work_date = models.DateField()
    employee_name = models.CharField(max_length=100, blank=True)
    employee_department = models.CharField(max_length=30, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-work_date", "-created_at"]
        indexes = [
            models.Index(fields=["employee", "work_date"]),
            models.Index(fields=["party_name", "work_date"]),
        ]

    def save(self, *args, **kwargs):
        if self.total_parts is None or self.total_parts < 1:
            raise ValidationError({"total_parts": "Total parts must be at least 1."})
        check_part_counts(self.total_parts, self.rejection)
        if not self.employee_name:
            self.employee_name = self.employee.name
            self.employee_department = self.employee.department or ""
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.employee_name} {self.work_date} {self.job_type} {self.party_name}"
