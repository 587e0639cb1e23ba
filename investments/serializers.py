from decimal import Decimal

from rest_framework import serializers

from users.serializers import PartySerializer
from .models import Investment


class InvestmentSerializer(serializers.ModelSerializer):
    investor = PartySerializer(read_only=True)
    project_title = serializers.CharField(source='project.title', read_only=True)
    funds_applied = serializers.BooleanField(source='is_funds_applied', read_only=True)
    contract_id = serializers.SerializerMethodField()

    class Meta:
        model = Investment
        fields = [
            'id',
            'project',
            'project_title',
            'investor',
            'amount',
            'status',
            'payment_reference',
            'payment_method',
            'funds_applied',
            'contract_id',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_contract_id(self, obj):
        contract = getattr(obj, 'contract', None)
        return str(contract.pk) if contract is not None else None


class InvestmentCreateSerializer(serializers.Serializer):
    project_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=Decimal("0.01"))
    payment_method = serializers.ChoiceField(
        choices=Investment.PaymentMethod.choices,
        default=Investment.PaymentMethod.MOBILE_MONEY,
    )


class InitiatePaymentSerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(
        choices=Investment.PaymentMethod.choices,
        required=False,
    )


class ConfirmPaymentSerializer(serializers.Serializer):
    payment_reference = serializers.CharField(max_length=64, required=False, allow_blank=True)
