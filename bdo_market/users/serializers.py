# users/serializers.py
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.db import transaction
from rest_framework import serializers

from suppliers.models import SupplierProfile
from suppliers.serializers import SupplierProfileSerializer
from .models import Address

User = get_user_model()


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=6)
    name = serializers.CharField(required=False, allow_blank=True, default="")
    role = serializers.ChoiceField(
        choices=[User.Role.BUYER, User.Role.SUPPLIER], default=User.Role.BUYER
    )
    businessName = serializers.CharField(required=False)
    businessNameAr = serializers.CharField(required=False)
    iban = serializers.CharField(required=False, allow_blank=True, default="")
    taxNumber = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already in use")
        return value.lower()

    def validate_password(self, value):
        validate_password(value)
        return value

    @transaction.atomic
    def create(self, validated_data):
        user = User.objects.create_user(
            username=validated_data["email"],
            email=validated_data["email"],
            password=validated_data["password"],
            first_name=validated_data.get("name", ""),
            role=validated_data["role"],
        )
        business_name = validated_data.get("businessName")
        business_name_ar = validated_data.get("businessNameAr")
        if user.role == User.Role.SUPPLIER and business_name and business_name_ar:
            SupplierProfile.objects.create(
                user=user,
                business_name=business_name,
                business_name_ar=business_name_ar,
                iban=validated_data.get("iban", ""),
                tax_number=validated_data.get("taxNumber", ""),
            )
        return user


class MeSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source="display_name", read_only=True)
    supplier_profile = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "email", "name", "phone", "role", "supplier_profile"]
        read_only_fields = fields

    def get_supplier_profile(self, obj):
        profile = getattr(obj, "supplier_profile", None)
        if obj.role != User.Role.SUPPLIER or profile is None:
            return None
        return SupplierProfileSerializer(profile).data


class AddressSerializer(serializers.ModelSerializer):
    class Meta:
        model = Address
        fields = ["id", "label", "city", "district", "street", "postal_code", "is_default", "created_at"]
        read_only_fields = ["id", "created_at"]
