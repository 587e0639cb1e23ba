from rest_framework import serializers

from core.policies import SIGNER_ROLES
from investments.serializers import InvestmentSerializer
from .models import Contract


class ContractSerializer(serializers.ModelSerializer):
    investment = InvestmentSerializer(read_only=True)
    terms = serializers.JSONField(read_only=True)
    is_fully_signed = serializers.BooleanField(read_only=True)

    class Meta:
        model = Contract
        fields = [
            'id',
            'investment',
            'contract_type',
            'terms',
            'contract_pdf_url',
            'status',
            'investor_signed_at',
            'entrepreneur_signed_at',
            'admin_signed_at',
            'is_fully_signed',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class GenerateContractSerializer(serializers.Serializer):
    investment_id = serializers.UUIDField()


class SignContractSerializer(serializers.Serializer):
    signer = serializers.ChoiceField(choices=SIGNER_ROLES)
