from rest_framework import serializers

from common.pagination import PaginationQuerySerializer


class CreateUserSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    name = serializers.CharField(min_length=2, max_length=150)
    phone = serializers.RegexField(r"^\+?[0-9]{7,15}$", required=False, allow_null=True)

    def validate_email(self, value):
        return value.lower()


class UpdateUserSerializer(serializers.Serializer):
    name = serializers.CharField(min_length=2, max_length=150, required=False)
    phone = serializers.RegexField(r"^\+?[0-9]{7,15}$", required=False)
    isActive = serializers.BooleanField(required=False)


class UserQuerySerializer(PaginationQuerySerializer):
    search = serializers.CharField(required=False)
    isActive = serializers.BooleanField(required=False, allow_null=True, default=None)


class UserResponseSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    email = serializers.EmailField()
    name = serializers.CharField()
    phone = serializers.CharField(allow_null=True)
    role = serializers.CharField()
    isActive = serializers.BooleanField(source="is_active")
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")
