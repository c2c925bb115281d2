from django.contrib import admin
from .models import Attendance, Overtime


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ("date", "employee", "present", "note")
    list_filter = ("present", "date")


@admin.register(Overtime)
class OvertimeAdmin(admin.ModelAdmin):
    list_display = ("date", "employee", "hours", "rate")
