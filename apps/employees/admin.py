from django.contrib import admin
from .models import EmployeeProfile, EmployeeRateHistory


class EmployeeRateHistoryInline(admin.TabularInline):
    model = EmployeeRateHistory
    extra = 0


@admin.register(EmployeeProfile)
class EmployeeProfileAdmin(admin.ModelAdmin):
    list_display = (
        "username",
        "name",
        "role",
        "department",
        "employment_type",
        "salary_per_day",
        "daily_roj_rate",
        "is_active",
    )
    search_fields = ("username", "name", "contact")
    list_filter = ("role", "department", "employment_type", "is_active")
    readonly_fields = ("created_at", "updated_at")
    inlines = [EmployeeRateHistoryInline]
