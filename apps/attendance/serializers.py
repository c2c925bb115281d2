from rest_framework import serializers
from .models import Attendance, Overtime


class AttendanceSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.name", read_only=True)

    class Meta:
        model = Attendance
        fields = ["id", "employee", "employee_name", "date", "present", "note", "created_at"]
        read_only_fields = ["created_at"]


class OvertimeSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.name", read_only=True)

    class Meta:
        model = Overtime
        fields = ["id", "employee", "employee_name", "date", "hours", "rate", "created_at"]
        read_only_fields = ["created_at"]

    def validate(self, attrs):
        hours = attrs.get("hours", getattr(self.instance, "hours", None))
        if hours is None or hours <= 0:
            raise serializers.ValidationError({"hours": "Hours must be greater than 0."})
        rate = attrs.get("rate")
        if rate is not None and rate < 0:
            raise serializers.ValidationError({"rate": "Rate cannot be negative."})

        employee = attrs.get("employee", getattr(self.instance, "employee", None))
        day = attrs.get("date", getattr(self.instance, "date", None))
        if not Attendance.objects.filter(employee=employee, date=day, present=True).exists():
            raise serializers.ValidationError(
                {"date": f"Employee was absent on {day}. Cannot register overtime."}
            )
        return attrs
