from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone

from apps.employees.models import EmployeeProfile

MONTH_VALIDATORS = [MinValueValidator(1), MaxValueValidator(12)]
YEAR_VALIDATORS = [MinValueValidator(2000), MaxValueValidator(9999)]


class UpadEntry(models.Model):
    employee = models.ForeignKey(EmployeeProfile, on_delete=models.CASCADE, related_name="upad_entries")
    month = models.PositiveSmallIntegerField(validators=MONTH_VALIDATORS)
    year = models.PositiveIntegerField(validators=YEAR_VALIDATORS)
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    note = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-year", "-month", "-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["employee", "year", "month"], name="uq_upad_employee_month"),
        ]

    def save(self, *args, **kwargs):
        if self.pk:
            self.updated_at = timezone.now()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.employee.name} - upad {self.month:02d}/{self.year} ({self.amount})"


class Loan(models.Model):
    STATUS_CHOICES = (
        ("active", "Active"),
        ("closed", "Closed"),
        ("cancelled", "Cancelled"),
    )

    employee = models.ForeignKey(EmployeeProfile, on_delete=models.CASCADE, related_name="loans")
    start_month = models.PositiveSmallIntegerField(validators=MONTH_VALIDATORS)
    start_year = models.PositiveIntegerField(validators=YEAR_VALIDATORS)
    principal = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    default_installment = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    note = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default="active")
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [models.Index(fields=["employee", "status"])]

    def save(self, *args, **kwargs):
        if self.pk:
            self.updated_at = timezone.now()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.employee.name} - loan {self.principal} from {self.start_month:02d}/{self.start_year} [{self.status}]"


class LoanTransaction(models.Model):
    MODE_CHOICES = (
        ("salary-deduction", "Salary deduction"),
        ("manual-payment", "Manual payment"),
    )

    loan = models.ForeignKey(Loan, on_delete=models.CASCADE, related_name="transactions")
    employee = models.ForeignKey(EmployeeProfile, on_delete=models.CASCADE, related_name="loan_transactions")
    month = models.PositiveSmallIntegerField(validators=MONTH_VALIDATORS)
    year = models.PositiveIntegerField(validators=YEAR_VALIDATORS)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    mode = models.CharField(max_length=20, choices=MODE_CHOICES, default="salary-deduction")
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-year", "-month", "-created_at"]
        indexes = [
            models.Index(fields=["employee", "year", "month"]),
            models.Index(fields=["loan", "year", "month"]),
        ]
        constraints = [
            # One automatic installment per loan and month; manual payments are unrestricted
            models.UniqueConstraint(
                fields=["loan", "year", "month"],
                condition=Q(mode="salary-deduction"),
                name="uq_loan_salary_deduction_month",
            ),
        ]

    def __str__(self):
        return f"{self.employee.name} - {self.mode} {self.amount} for {self.month:02d}/{self.year}"
