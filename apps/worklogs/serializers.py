from rest_framework import serializers

from apps.employees.models import EmployeeProfile
from apps.salary.records import check_part_counts
from .models import Party, TransporterLog, WorkLog


class WorkLogSerializer(serializers.ModelSerializer):
    employee = serializers.PrimaryKeyRelatedField(queryset=EmployeeProfile.objects.all(), required=False)
    code = serializers.SerializerMethodField()
    part_name = serializers.SerializerMethodField()
    ok_parts = serializers.IntegerField(read_only=True)

    class Meta:
        model = WorkLog
        fields = [
            "id",
            "employee",
            "employee_name",
            "employee_department",
            "part_type",
            "product",
            "code",
            "part_name",
            "part_size",
            "special_size",
            "job_name",
            "total_parts",
            "rejection",
            "ok_parts",
            "work_date",
            "rate_snapshot",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["employee_name", "employee_department", "rate_snapshot", "created_at", "updated_at"]

    def get_code(self, obj):
        return obj.product.code if obj.product else ""

    def get_part_name(self, obj):
        return obj.product.part_name if obj.product else ""

    def validate(self, attrs):
        total = attrs.get("total_parts", getattr(self.instance, "total_parts", None))
        rejection = attrs.get("rejection", getattr(self.instance, "rejection", 0))
        check_part_counts(total, rejection)

        part_type = attrs.get("part_type", getattr(self.instance, "part_type", None))
        product = attrs.get("product", getattr(self.instance, "product", None))
        if product is not None and product.part_type != part_type:
            raise serializers.ValidationError({"product": "Product does not belong to this part type."})

        part_size = attrs.get("part_size", getattr(self.instance, "part_size", ""))
        special_size = attrs.get("special_size", getattr(self.instance, "special_size", ""))
        if product is not None and not (part_size or special_size):
            raise serializers.ValidationError({"part_size": "Either part size or special size is required."})
        if product is not None and part_size and product.sizes and part_size not in product.sizes:
            raise serializers.ValidationError({"part_size": "Size is not available for this product."})
        return attrs


class PartySerializer(serializers.ModelSerializer):
    class Meta:
        model = Party
        fields = ["id", "party_type", "party_name", "created_at"]
        read_only_fields = ["created_at"]

    def validate_party_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Party name is required.")
        return value


class TransporterLogSerializer(serializers.ModelSerializer):
    employee = serializers.PrimaryKeyRelatedField(queryset=EmployeeProfile.objects.all(), required=False)

    class Meta:
        model = TransporterLog
        fields = [
            "id",
            "employee",
            "employee_name",
            "employee_department",
            "job_type",
            "party_name",
            "part_name",
            "total_parts",
            "rejection",
            "work_date",
            "created_at",
        ]
        read_only_fields = ["employee_name", "employee_department", "created_at"]

    def validate(self, attrs):
        total = attrs.get("total_parts", getattr(self.instance, "total_parts", None))
        rejection = attrs.get("rejection", getattr(self.instance, "rejection", 0))
        if total is not None and total < 1:
            raise serializers.ValidationError({"total_parts": "Total parts must be at least 1."})
        check_part_counts(total, rejection)
        return attrs
