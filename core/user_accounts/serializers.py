from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from django.core.validators import EmailValidator, RegexValidator
from .models import CustomUser, Role
import re


PHONE_VALIDATOR = RegexValidator(
    regex=r'^(\+?\d{1,3})?[-.\s]?\(?\d{1,4}\)?[-.\s]?\d{1,4}[-.\s]?\d{1,9}$',
    message="Enter a valid phone number"
)


def check_password_strength(value):
    """Shared password rules for account creation and password change"""
    if len(value) < 8:
        raise serializers.ValidationError("Password must be at least 8 characters long")

    if not re.search(r'[A-Z]', value):
        raise serializers.ValidationError("Password must contain at least one uppercase letter")

    if not re.search(r'[a-z]', value):
        raise serializers.ValidationError("Password must contain at least one lowercase letter")

    if not re.search(r'\d', value):
        raise serializers.ValidationError("Password must contain at least one number")

    validate_password(value)
    return value


class AdminUserCreationSerializer(serializers.ModelSerializer):
    """
    Serializer for admins creating accounts with a specific role.
    Permission checks happen in the view.
    """
    password = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )
    confirm_password = serializers.CharField(
        write_only=True,
        required=True,
        style={'input_type': 'password'}
    )
    role = serializers.ChoiceField(choices=Role.choices, default=Role.USER)

    class Meta:
        model = CustomUser
        fields = ['email', 'name', 'phone_number', 'password', 'confirm_password', 'role']

    def validate_email(self, value):
        """Validate email format"""
        validator = EmailValidator(message="Enter a valid email address")
        validator(value)

        if CustomUser.objects.filter(email=value).exists():
            raise serializers.ValidationError("Email already registered")

        return value

    def validate_phone_number(self, value):
        PHONE_VALIDATOR(value)
        return value

    def validate_password(self, value):
        return check_password_strength(value)

    def validate(self, attrs):
        """Validate that passwords match"""
        if attrs['password'] != attrs['confirm_password']:
            raise serializers.ValidationError({"confirm_password": "Passwords do not match"})
        return attrs

    def create(self, validated_data):
        validated_data.pop('confirm_password')
        return CustomUser.objects.create_user(
            email=validated_data['email'],
            name=validated_data['name'],
            phone_number=validated_data['phone_number'],
            password=validated_data['password'],
            role=validated_data.get('role', Role.USER),
        )


class AdminUserUpdateSerializer(serializers.ModelSerializer):
    """
    Serializer for admins updating account details including role.
    Permission checks happen in the view.
    """
    role = serializers.ChoiceField(choices=Role.choices, required=False)

    class Meta:
        model = CustomUser
        fields = ['email', 'name', 'phone_number', 'role', 'is_active']
        read_only_fields = ['email']  # Email cannot be changed

    def validate_phone_number(self, value):
        PHONE_VALIDATOR(value)
        return value

    def validate_role(self, value):
        """An admin cannot demote their own account"""
        request = self.context.get('request')
        instance = self.instance

        if request and instance and request.user.pk == instance.pk and value != Role.ADMIN:
            raise serializers.ValidationError("You cannot change your own role")
        return value


class UserListSerializer(serializers.ModelSerializer):
    """Serializer for listing users (admin view)"""

    class Meta:
        model = CustomUser
        fields = ['id', 'email', 'name', 'phone_number', 'role', 'is_active']
        read_only_fields = fields


class UserProfileSerializer(serializers.ModelSerializer):
    """Serializer for user profile (users viewing/updating their own profile)"""

    class Meta:
        model = CustomUser
        fields = ['id', 'email', 'name', 'phone_number', 'role']
        read_only_fields = ['id', 'role', 'email']

    def validate_phone_number(self, value):
        PHONE_VALIDATOR(value)
        return value


class ChangePasswordSerializer(serializers.Serializer):
    """Serializer for changing password"""
    old_password = serializers.CharField(required=True, write_only=True)
    new_password = serializers.CharField(required=True, write_only=True)
    confirm_password = serializers.CharField(required=True, write_only=True)

    def validate_new_password(self, value):
        return check_password_strength(value)

    def validate(self, attrs):
        """Validate that new passwords match"""
        if attrs['new_password'] != attrs['confirm_password']:
            raise serializers.ValidationError({"confirm_password": "Passwords do not match"})
        return attrs
