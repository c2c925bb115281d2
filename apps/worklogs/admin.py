from django.contrib import admin
from .models import Party, TransporterLog, WorkLog


@admin.register(WorkLog)
class WorkLogAdmin(admin.ModelAdmin):
    list_display = ("work_date", "employee_name", "part_type", "job_name", "total_parts", "rejection", "rate_snapshot")
    list_filter = ("part_type", "work_date")
    search_fields = ("employee_name", "job_name")
    readonly_fields = ("created_at", "updated_at")


@admin.register(TransporterLog)
class TransporterLogAdmin(admin.ModelAdmin):
    list_display = ("work_date", "employee_name", "job_type", "party_name", "part_name", "total_parts", "rejection")
    list_filter = ("job_type",)
    search_fields = ("employee_name", "party_name", "part_name")


admin.site.register(Party)
