from django.contrib import admin
from .models import JobType, JobTypeRateHistory, Product


class JobTypeRateHistoryInline(admin.TabularInline):
    model = JobTypeRateHistory
    extra = 0


@admin.register(JobType)
class JobTypeAdmin(admin.ModelAdmin):
    list_display = ("part_type", "job_name", "rate", "updated_at")
    list_filter = ("part_type",)
    search_fields = ("job_name",)
    inlines = [JobTypeRateHistoryInline]


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("part_type", "identifier", "created_at")
    list_filter = ("part_type",)
    search_fields = ("identifier",)
