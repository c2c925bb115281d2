from rest_framework import serializers

from apps.salary.records import check_period
from forgetrack.exceptions import DuplicateEntryError
from .models import PART_TYPES, JobType, JobTypeRateHistory, Product


class ProductSerializer(serializers.ModelSerializer):
    code = serializers.CharField(read_only=True)
    part_name = serializers.CharField(read_only=True)

    class Meta:
        model = Product
        fields = ["id", "part_type", "identifier", "code", "part_name", "sizes", "created_at"]
        read_only_fields = ["created_at"]

    def validate_sizes(self, value):
        if not isinstance(value, list) or not all(isinstance(s, str) and s.strip() for s in value):
            raise serializers.ValidationError("Sizes must be a list of non-empty strings.")
        cleaned = [s.strip() for s in value]
        if len(set(cleaned)) != len(cleaned):
            raise serializers.ValidationError("Sizes must be unique.")
        return cleaned


class JobTypeRateHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = JobTypeRateHistory
        fields = ["id", "rate", "effective_from_year", "effective_from_month"]

    def validate(self, attrs):
        check_period(attrs.get("effective_from_month"), attrs.get("effective_from_year"))
        if attrs["rate"] < 0:
            raise serializers.ValidationError({"rate": "Rate cannot be negative."})
        return attrs


class JobTypeSerializer(serializers.ModelSerializer):
    rate_history = JobTypeRateHistorySerializer(many=True, read_only=True)

    class Meta:
        model = JobType
        fields = ["id", "part_type", "job_name", "rate", "rate_history", "created_at", "updated_at"]
        read_only_fields = ["created_at", "updated_at"]
        # duplicates are checked case-insensitively in validate()
        validators = []

    def validate_part_type(self, value):
        value = (value or "").strip().lower()
        if value not in PART_TYPES:
            raise serializers.ValidationError("Invalid part type.")
        return value

    def validate_job_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Job name is required.")
        return value

    def validate_rate(self, value):
        if value < 0:
            raise serializers.ValidationError("Rate cannot be negative.")
        return value

    def validate(self, attrs):
        part_type = attrs.get("part_type", getattr(self.instance, "part_type", None))
        job_name = attrs.get("job_name", getattr(self.instance, "job_name", ""))
        dup = JobType.objects.filter(part_type=part_type, job_name__iexact=job_name)
        if self.instance is not None:
            dup = dup.exclude(pk=self.instance.pk)
        if dup.exists():
            raise DuplicateEntryError("Job type already exists for this part type.")
        return attrs
