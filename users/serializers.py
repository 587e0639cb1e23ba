from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'role',
            'phone',
            'kyc_status',
            'aml_status',
            'date_joined',
        ]
        read_only_fields = fields


class PartySerializer(serializers.ModelSerializer):
    """Minimal identity shown to the other parties of an investment."""

    class Meta:
        model = User
        fields = ['id', 'username', 'email']
        read_only_fields = fields


class UpdateProfileSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, required=False)

    class Meta:
        model = User
        fields = ['username', 'phone', 'first_name', 'last_name', 'password']

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance


class KYCStatusSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['kyc_status', 'aml_status', 'kyc_rejection_reason', 'kyc_reviewed_at']
        read_only_fields = fields


class RejectKYCSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, max_length=500, default="")
