from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError

from .models import User, DISPLAY_NAME_MAX_LENGTH


class RoommateSerializer(serializers.ModelSerializer):
    """How a user appears inside rooms, expenses and settlements."""

    class Meta:
        model = User
        fields = ['id', 'email', 'display_name', 'avatar_url']
        read_only_fields = fields


class ProfileSerializer(serializers.ModelSerializer):
    """The signed-in user's own account."""

    class Meta:
        model = User
        fields = ['id', 'email', 'display_name', 'avatar_url', 'joined_at', 'last_login']
        read_only_fields = fields


class RegistrationSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        style={'input_type': 'password'}
    )
    display_name = serializers.CharField(
        max_length=DISPLAY_NAME_MAX_LENGTH,
        required=False,
        allow_blank=True,
        default=''
    )
    avatar_url = serializers.URLField(required=False, allow_blank=True, default='')

    def validate(self, attrs):
        # Password validators compare against the other fields
        candidate = User(email=attrs['email'], display_name=attrs.get('display_name', ''))
        try:
            validate_password(attrs['password'], user=candidate)
        except DjangoValidationError as e:
            raise serializers.ValidationError({'password': list(e.messages)})
        return attrs


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        style={'input_type': 'password'}
    )


class ProfileUpdateSerializer(serializers.Serializer):
    display_name = serializers.CharField(max_length=DISPLAY_NAME_MAX_LENGTH, required=False)
    avatar_url = serializers.URLField(required=False, allow_blank=True)
