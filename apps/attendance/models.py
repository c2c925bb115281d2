from django.db import models
from django.utils import timezone

from apps.employees.models import EmployeeProfile


class Attendance(models.Model):
    employee = models.ForeignKey(EmployeeProfile, on_delete=models.CASCADE, related_name="attendance")
    date = models.DateField()
    present = models.BooleanField(default=True)
    note = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["date"]
        unique_together = ('employee', 'date')

    def __str__(self):
        return f"{self.employee.name} {self.date} {'present' if self.present else 'absent'}"


class Overtime(models.Model):
    employee = models.ForeignKey(EmployeeProfile, on_delete=models.CASCADE, related_name="overtime")
    date = models.DateField()
    hours = models.DecimalField(max_digits=5, decimal_places=2)
    # Per-hour rate; falls back to roj rate / FORGETRACK_OVERTIME_DIVISOR
    rate = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["date", "id"]
        indexes = [models.Index(fields=["employee", "date"])]

    def __str__(self):
        return f"{self.employee.name} {self.date} {self.hours}h"
