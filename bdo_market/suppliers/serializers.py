# suppliers/serializers.py
from rest_framework import serializers

from .models import SupplierProfile


class SupplierProfileSerializer(serializers.ModelSerializer):
    email = serializers.ReadOnlyField(source="user.email")

    class Meta:
        model = SupplierProfile
        fields = [
            "id", "email", "business_name", "business_name_ar", "iban", "tax_number",
            "is_tax_registered", "description", "description_ar", "logo_url",
            "status", "rejection_reason", "approved_at", "created_at",
        ]
        # approval fields only move through the admin endpoints
        read_only_fields = ["id", "email", "status", "rejection_reason", "approved_at", "created_at"]


class SupplierSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = SupplierProfile
        fields = ["id", "business_name", "business_name_ar", "logo_url"]


class RejectSupplierSerializer(serializers.Serializer):
    reason = serializers.CharField()
