from rest_framework import serializers

from apps.salary.records import ZERO
from . import services
from .models import Loan, LoanTransaction, UpadEntry


class UpadEntrySerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.name", read_only=True)

    class Meta:
        model = UpadEntry
        fields = ["id", "employee", "employee_name", "month", "year", "amount", "note", "created_at", "updated_at"]
        read_only_fields = ["created_at", "updated_at"]
        # uniqueness is reported by the service as a 409, not a 400
        validators = []

    def create(self, validated_data):
        return services.create_upad(
            validated_data["employee"].pk,
            validated_data["month"],
            validated_data["year"],
            validated_data["amount"],
            validated_data.get("note", ""),
        )

    def update(self, instance, validated_data):
        return services.update_upad(
            instance,
            month=validated_data.get("month"),
            year=validated_data.get("year"),
            amount=validated_data.get("amount"),
            note=validated_data.get("note"),
        )


class LoanTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = LoanTransaction
        fields = ["id", "loan", "employee", "month", "year", "amount", "mode", "created_at"]
        read_only_fields = ["loan", "employee", "created_at"]
        validators = []

    def update(self, instance, validated_data):
        return services.update_loan_transaction(
            instance,
            month=validated_data.get("month"),
            year=validated_data.get("year"),
            amount=validated_data.get("amount"),
            mode=validated_data.get("mode"),
        )


class LoanSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source="employee.name", read_only=True)
    paid_total = serializers.SerializerMethodField()
    pending = serializers.SerializerMethodField()

    class Meta:
        model = Loan
        fields = [
            "id",
            "employee",
            "employee_name",
            "start_month",
            "start_year",
            "principal",
            "default_installment",
            "note",
            "status",
            "paid_total",
            "pending",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def get_paid_total(self, obj):
        return str(services.paid_total(obj))

    def get_pending(self, obj):
        return str(max(ZERO, obj.principal - services.paid_total(obj)))

    def create(self, validated_data):
        return services.create_loan(
            validated_data["employee"].pk,
            validated_data["start_month"],
            validated_data["start_year"],
            validated_data["principal"],
            validated_data["default_installment"],
            validated_data.get("note", ""),
        )
