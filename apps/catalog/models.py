from django.db import models
from django.db.models.functions import Lower
from django.utils import timezone

PART_TYPE_CHOICES = (
    ("sleeve", "Sleeve"),
    ("rod", "Rod"),
    ("pin", "Pin"),
)
PART_TYPES = tuple(value for value, _ in PART_TYPE_CHOICES)

# Job type holding the part-level rate for entries logged without an operation
PART_LEVEL_JOB_NAME = "Standard"


class Product(models.Model):
    part_type = models.CharField(max_length=10, choices=PART_TYPE_CHOICES)
    # Code for sleeves, part name for rods and pins
    identifier = models.CharField(max_length=100, unique=True)
    sizes = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["part_type", "identifier"]

    @property
    def code(self):
        return self.identifier if self.part_type == "sleeve" else ""

    @property
    def part_name(self):
        return self.identifier if self.part_type != "sleeve" else ""

    def __str__(self):
        return f"{self.get_part_type_display()} {self.identifier}"


class JobType(models.Model):
    part_type = models.CharField(max_length=10, choices=PART_TYPE_CHOICES)
    job_name = models.CharField(max_length=100)
    # Rs per ok part; the base rate when no history entry applies
    rate = models.DecimalField(max_digits=10, decimal_places=4, default=0)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["part_type", "job_name"]
        constraints = [
            models.UniqueConstraint("part_type", Lower("job_name"), name="uq_jobtype_part_name_ci"),
        ]

    def save(self, *args, **kwargs):
        self.job_name = (self.job_name or "").strip()
        if self.pk:
            self.updated_at = timezone.now()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.part_type}:{self.job_name}"


class JobTypeRateHistory(models.Model):
    job_type = models.ForeignKey(JobType, on_delete=models.CASCADE, related_name="rate_history")
    rate = models.DecimalField(max_digits=10, decimal_places=4)
    effective_from_year = models.PositiveIntegerField()
    effective_from_month = models.PositiveSmallIntegerField()

    class Meta:
        ordering = ["effective_from_year", "effective_from_month"]
        unique_together = ("job_type", "effective_from_year", "effective_from_month")

    def __str__(self):
        return f"{self.job_type} {self.rate} from {self.effective_from_month:02d}/{self.effective_from_year}"
