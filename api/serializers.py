from django.contrib.auth.hashers import check_password
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.tokens import RefreshToken

from users.serializers import CreateUserSerializer
from users.services import UsersService


def tokens_for(user):
    refresh = RefreshToken.for_user(user)
    return {
        "access": str(refresh.access_token),
        "refresh": str(refresh),
        "user": {
            "id": user.id,
            "email": user.email,
            "name": user.name,
            "phone": user.phone,
            "role": user.role,
        },
    }


class RegisterSerializer(CreateUserSerializer):

    def create(self, validated_data):
        user = UsersService().create(**validated_data)
        return tokens_for(user)


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, data):
        user = UsersService().find_by_email_for_auth(data["email"])
        if user is None or not check_password(data["password"], user.password_hash):
            raise AuthenticationFailed("Invalid credentials.")
        if not user.is_active:
            raise AuthenticationFailed("User is inactive.")

        data["user"] = user
        return data

    def create(self, validated_data):
        return tokens_for(validated_data["user"])
