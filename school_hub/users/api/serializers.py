from typing import Any

from django.contrib.auth import authenticate
from django.db.models import Q
from rest_framework import serializers
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.exceptions import PermissionDenied

from school_hub.policies import ensure_allowed
from school_hub.users.models import CONTACT_INFO_FIELDS
from school_hub.users.models import User

MIN_PASSWORD_LENGTH = 6
MIN_USERNAME_LENGTH = 3


class InvalidCredentials(APIException):
    """401 that does not depend on the view having authenticators."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid email or password"
    default_code = "invalid_credentials"


class UserSummarySerializer(serializers.ModelSerializer[User]):
    """Compact public view of a user, embedded in other resources."""

    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = ["id", "username", "first_name", "last_name", "full_name", "role"]
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer[User]):
    full_name = serializers.CharField(read_only=True)
    id = serializers.IntegerField(read_only=True)

    # Identity fields are fixed at registration
    username = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "full_name",
            "role",
            "status",
            "avatar",
            "preferences",
            "contact_info",
            "last_login",
            "created_at",
        ]
        read_only_fields = ["last_login", "created_at"]

    def validate_preferences(self, value: Any) -> dict[str, Any]:
        if not isinstance(value, dict):
            msg = "Preferences must be an object."
            raise serializers.ValidationError(msg)
        return value

    def validate_contact_info(self, value: Any) -> dict[str, Any]:
        if not isinstance(value, dict):
            msg = "Contact info must be an object."
            raise serializers.ValidationError(msg)
        unknown = sorted(set(value) - set(CONTACT_INFO_FIELDS))
        if unknown:
            msg = f"Unknown contact fields: {', '.join(unknown)}"
            raise serializers.ValidationError(msg)
        return value

    def update(self, instance, validated_data):
        request = self.context.get("request")
        actor = getattr(request, "user", None)
        changes_access = any(
            field in validated_data and validated_data[field] != getattr(instance, field)
            for field in ("role", "status")
        )
        if changes_access:
            ensure_allowed(
                actor,
                instance,
                "manage",
                "Only an admin can change role or status.",
            )

        for field in ("first_name", "last_name", "avatar", "role", "status"):
            if field in validated_data:
                setattr(instance, field, validated_data[field])
        if "preferences" in validated_data:
            instance.preferences = {
                **(instance.preferences or {}),
                **validated_data["preferences"],
            }
        if "contact_info" in validated_data:
            instance.contact_info = {
                **(instance.contact_info or {}),
                **validated_data["contact_info"],
            }
        instance.save()
        return instance


class RegisterSerializer(serializers.ModelSerializer[User]):
    password = serializers.CharField(
        write_only=True,
        min_length=MIN_PASSWORD_LENGTH,
        style={"input_type": "password"},
    )
    username = serializers.CharField(min_length=MIN_USERNAME_LENGTH, max_length=150)
    email = serializers.EmailField()
    first_name = serializers.CharField(max_length=150)
    last_name = serializers.CharField(max_length=150)
    role = serializers.ChoiceField(choices=User.Role.choices)

    class Meta:
        model = User
        fields = ["id", "username", "email", "password", "first_name", "last_name", "role"]
        read_only_fields = ["id"]

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        exists = User.objects.filter(
            Q(email__iexact=attrs["email"]) | Q(username__iexact=attrs["username"])
        ).exists()
        if exists:
            msg = "User already exists"
            raise serializers.ValidationError(msg)
        return attrs

    def create(self, validated_data: dict[str, Any]) -> User:
        password = validated_data.pop("password")
        return User.objects.create_user(password=password, **validated_data)


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(style={"input_type": "password"})

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        request = self.context.get("request")
        email = attrs["email"].strip().lower()
        user = authenticate(request, username=email, password=attrs["password"])
        if user is None:
            # Right credentials on a deactivated account are a 403, not a 401
            blocked = User.objects.filter(email__iexact=email, is_active=False).first()
            if blocked is not None and blocked.check_password(attrs["password"]):
                msg = "Account is not active"
                raise PermissionDenied(msg)
            raise InvalidCredentials
        attrs["user"] = user
        return attrs


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(style={"input_type": "password"})
    new_password = serializers.CharField(
        min_length=MIN_PASSWORD_LENGTH,
        style={"input_type": "password"},
    )
