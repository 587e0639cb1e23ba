from decimal import Decimal

from django.utils import timezone
from rest_framework import serializers

from .models import Project


class ProjectSerializer(serializers.ModelSerializer):
    owner_name = serializers.CharField(source='owner.username', read_only=True)
    funding_percentage = serializers.DecimalField(max_digits=7, decimal_places=2, read_only=True)
    remaining_amount = serializers.DecimalField(max_digits=15, decimal_places=2, read_only=True)

    class Meta:
        model = Project
        fields = [
            'id',
            'owner',
            'owner_name',
            'title',
            'description',
            'long_description',
            'target_amount',
            'raised_amount',
            'remaining_amount',
            'funding_percentage',
            'category',
            'country',
            'contract_type',
            'sharia_compliant',
            'status',
            'deadline',
            'expected_return',
            'risk_level',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ProjectWriteSerializer(serializers.ModelSerializer):
    """
    Input validation for create/update. Status, owner and raised amount are
    never writable; they move through the lifecycle endpoints only.
    """
    title = serializers.CharField(min_length=5, max_length=200)
    description = serializers.CharField(min_length=10, max_length=500)
    long_description = serializers.CharField(max_length=5000, required=False, allow_blank=True)
    target_amount = serializers.DecimalField(
        max_digits=15, decimal_places=2, min_value=Decimal("0.01")
    )
    expected_return = serializers.DecimalField(
        max_digits=5, decimal_places=2,
        min_value=Decimal("0"), max_value=Decimal("100"),
        required=False, allow_null=True,
    )

    class Meta:
        model = Project
        fields = [
            'title',
            'description',
            'long_description',
            'target_amount',
            'category',
            'country',
            'contract_type',
            'sharia_compliant',
            'deadline',
            'expected_return',
            'risk_level',
        ]

    def validate_deadline(self, value):
        if value <= timezone.now():
            raise serializers.ValidationError("Deadline must be in the future.")
        return value
