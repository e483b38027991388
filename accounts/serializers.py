"""
Accounts Serializers

Serializers for signup, login, password reset and user administration.

Serializers:
- SevaTokenObtainPairSerializer: JWT pair with role, email and name claims
- SignupSerializer: Self registration with OTP verification
- LoginSerializer / VerifyOtpSerializer / ResetPasswordSerializer
- UserSerializer: Admin view of an account and its profile
- UserWriteSerializer: Admin create / partial update

Author: Seva Development Team
Version: 1.0.0
"""

from typing import Any, Dict

from django.conf import settings
from django.contrib.auth.models import User
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from .models import Profile, Role


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def email_taken(email: str, exclude_pk=None) -> bool:
    queryset = User.objects.filter(username__iexact=email)
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)
    return queryset.exists()


def _check_password_strength(password: str) -> str:
    try:
        validate_password(password)
    except DjangoValidationError as e:
        raise serializers.ValidationError(list(e.messages))
    return password


class SevaTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    JWT pair carrying the claims the frontend reads without an extra call:
    ``role``, ``email`` and ``name``.
    """

    @classmethod
    def get_token(cls, user: User) -> RefreshToken:
        token = super().get_token(user)
        profile, _ = Profile.objects.get_or_create(user=user)
        token["role"] = profile.role
        token["email"] = user.email
        token["name"] = profile.name
        return token


class SignupSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=20)
    password = serializers.CharField(write_only=True)
    address = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_email(self, value: str) -> str:
        return normalize_email(value)

    def validate_password(self, value: str) -> str:
        return _check_password_strength(value)

    def create(self, validated_data: Dict[str, Any]) -> User:
        user = User.objects.create_user(
            username=validated_data["email"],
            email=validated_data["email"],
            password=validated_data["password"],
        )
        profile = user.profile
        profile.name = validated_data["name"]
        profile.phone = validated_data["phone"]
        profile.address = validated_data.get("address", "")
        profile.role = Role.USER
        profile.save()
        return user


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate_email(self, value: str) -> str:
        return normalize_email(value)


class VerifyOtpSerializer(serializers.Serializer):
    email = serializers.EmailField()
    otp = serializers.CharField(max_length=6)

    def validate_email(self, value: str) -> str:
        return normalize_email(value)


class EmailOnlySerializer(serializers.Serializer):
    email = serializers.EmailField()

    def validate_email(self, value: str) -> str:
        return normalize_email(value)


class ResetPasswordSerializer(serializers.Serializer):
    token = serializers.CharField()
    newPassword = serializers.CharField(write_only=True)

    def validate_newPassword(self, value: str) -> str:
        return _check_password_strength(value)


class UserSerializer(serializers.ModelSerializer):
    """Read representation used by the admin user list and detail."""

    name = serializers.CharField(source="profile.name", read_only=True)
    phone = serializers.CharField(source="profile.phone", read_only=True)
    address = serializers.CharField(source="profile.address", read_only=True)
    role = serializers.CharField(source="profile.role", read_only=True)
    isVerified = serializers.BooleanField(source="profile.is_verified", read_only=True)
    createdAt = serializers.DateTimeField(source="date_joined", read_only=True)
    updatedAt = serializers.DateTimeField(source="profile.updated_at", read_only=True)

    class Meta:
        model = User
        fields = (
            "id", "name", "email", "phone", "address", "role",
            "isVerified", "createdAt", "updatedAt",
        )


class UserWriteSerializer(serializers.Serializer):
    """
    Admin side create and partial update.

    On create name, email and phone are required and the configured default
    password is used when none is given. On update only the provided fields
    change and an empty update is rejected.
    """

    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=20)
    address = serializers.CharField(required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=Role.choices, required=False)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True)

    def to_internal_value(self, data):
        if hasattr(data, "get") and isinstance(data.get("role"), str):
            data = data.copy()
            data["role"] = data["role"].lower()
        return super().to_internal_value(data)

    def validate_email(self, value: str) -> str:
        value = normalize_email(value)
        exclude_pk = self.instance.pk if self.instance is not None else None
        if email_taken(value, exclude_pk):
            raise serializers.ValidationError("Email already exists")
        return value

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        if self.partial and not attrs:
            raise serializers.ValidationError("No fields provided to update")
        return attrs

    @transaction.atomic
    def create(self, validated_data: Dict[str, Any]) -> User:
        email = validated_data["email"]
        user = User.objects.create_user(
            username=email,
            email=email,
            password=validated_data.get("password") or settings.DEFAULT_USER_PASSWORD,
        )
        profile = user.profile
        profile.name = validated_data["name"]
        profile.phone = validated_data["phone"]
        profile.address = validated_data.get("address", "")
        profile.role = validated_data.get("role", Role.USER)
        # Accounts created by an admin skip the OTP step
        profile.is_verified = True
        profile.save()
        return user

    @transaction.atomic
    def update(self, user: User, validated_data: Dict[str, Any]) -> User:
        if "email" in validated_data:
            user.email = user.username = validated_data["email"]
        password = validated_data.get("password")
        if password and password.strip():
            user.set_password(password)
        user.save()

        profile = user.profile
        for field in ("name", "phone", "address", "role"):
            if field in validated_data:
                setattr(profile, field, validated_data[field])
        profile.save()
        return user


class RoleSerializer(serializers.Serializer):
    role = serializers.CharField()

    def validate_role(self, value: str) -> str:
        value = value.strip().lower()
        if value not in Role.values:
            raise serializers.ValidationError("Invalid role. Must be admin, subadmin, or user")
        return value
