from django.conf import settings
from django.db import models
from django.utils import timezone


class EmployeeProfile(models.Model):
    ROLE_CHOICES = (
        ("worker", "Worker"),
        ("transporter", "Transporter"),
    )
    DEPARTMENT_CHOICES = (
        ("Sleeve Workshop", "Sleeve Workshop"),
        ("Rod/Pin Workshop", "Rod/Pin Workshop"),
        ("Packing", "Packing"),
        ("Transporter", "Transporter"),
    )
    EMPLOYMENT_TYPE_CHOICES = (
        ("contract", "Contract"),
        ("monthly", "Monthly"),
        ("daily_roj", "Daily Roj"),
    )

    # Login account; workers and transporters sign in through the JWT endpoints
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="employee_profile"
    )
    name = models.CharField(max_length=100)
    username = models.CharField(max_length=30, unique=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default="worker")
    department = models.CharField(max_length=30, choices=DEPARTMENT_CHOICES, null=True, blank=True)
    contact = models.CharField(max_length=50, blank=True)
    address = models.CharField(max_length=255, blank=True)

    # Salary classification
    employment_type = models.CharField(max_length=20, choices=EMPLOYMENT_TYPE_CHOICES, default="contract")
    salary_per_day = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    daily_roj_rate = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    # Soft delete; work logs stay attached after deactivation
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["name"]

    def save(self, *args, **kwargs):
        if self.pk:
            self.updated_at = timezone.now()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.name} ({self.username})"


class EmployeeRateHistory(models.Model):
    KIND_CHOICES = (
        ("salary", "Salary per day"),
        ("roj", "Daily roj rate"),
    )

    employee = models.ForeignKey(EmployeeProfile, on_delete=models.CASCADE, related_name="rate_history")
    kind = models.CharField(max_length=10, choices=KIND_CHOICES)
    rate = models.DecimalField(max_digits=10, decimal_places=2)
    effective_from_year = models.PositiveIntegerField()
    effective_from_month = models.PositiveSmallIntegerField()
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["effective_from_year", "effective_from_month"]
        unique_together = ("employee", "kind", "effective_from_year", "effective_from_month")

    def __str__(self):
        return f"{self.employee.name} {self.kind} {self.rate} from {self.effective_from_month:02d}/{self.effective_from_year}"
