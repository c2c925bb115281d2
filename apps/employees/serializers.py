from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import serializers

from apps.salary.records import check_period
from .models import EmployeeProfile, EmployeeRateHistory

User = get_user_model()


class EmployeeRateHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = EmployeeRateHistory
        fields = ["id", "kind", "rate", "effective_from_year", "effective_from_month", "created_at"]
        read_only_fields = ["created_at"]

    def validate(self, attrs):
        check_period(attrs.get("effective_from_month"), attrs.get("effective_from_year"))
        if attrs.get("rate") is not None and attrs["rate"] < 0:
            raise serializers.ValidationError({"rate": "Rate cannot be negative."})
        return attrs


class EmployeeProfileSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, required=False, min_length=6)
    rate_history = EmployeeRateHistorySerializer(many=True, read_only=True)

    class Meta:
        model = EmployeeProfile
        fields = [
            "id",
            "name",
            "username",
            "password",
            "role",
            "department",
            "contact",
            "address",
            "employment_type",
            "salary_per_day",
            "daily_roj_rate",
            "is_active",
            "rate_history",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def validate(self, attrs):
        for name in ("salary_per_day", "daily_roj_rate"):
            value = attrs.get(name)
            if value is not None and value < 0:
                raise serializers.ValidationError({name: "Rate cannot be negative."})
        if self.instance is None and attrs.get("password"):
            if User.objects.filter(username=attrs["username"]).exists():
                raise serializers.ValidationError({"username": "A login with this username already exists."})
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        password = validated_data.pop("password", None)
        employee = EmployeeProfile.objects.create(**validated_data)
        if password:
            user = User(username=employee.username, first_name=employee.name[:150])
            user.set_password(password)
            user.save()
            employee.user = user
            employee.save(update_fields=["user"])
        return employee

    @transaction.atomic
    def update(self, instance, validated_data):
        password = validated_data.pop("password", None)
        instance = super().update(instance, validated_data)
        if instance.user is not None:
            user = instance.user
            user.is_active = instance.is_active
            if password:
                user.set_password(password)
            user.save()
        elif password:
            user = User(username=instance.username, first_name=instance.name[:150])
            user.set_password(password)
            user.save()
            instance.user = user
            instance.save(update_fields=["user", "updated_at"])
        return instance
