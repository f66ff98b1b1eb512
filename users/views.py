from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from api.permissions import IsAdmin

from .serializers import (
    CreateUserSerializer,
    UpdateUserSerializer,
    UserQuerySerializer,
    UserResponseSerializer,
)
from .services import UsersService


class UserManagementView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]
    service_class = UsersService

    def get_service(self):
        return self.service_class()

    def get(self, request, pk=None):
        service = self.get_service()
        if pk:
            user = service.find_by_id(pk)
            return Response(UserResponseSerializer(user).data)

        query = UserQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data
        result = service.find_all(
            search=params.get("search"),
            is_active=params.get("isActive"),
            page=params["page"],
            limit=params["limit"],
            sort_by=params["sortBy"],
            sort_order=params["sortOrder"],
        )
        result["items"] = UserResponseSerializer(result["items"], many=True).data
        return Response(result)

    def post(self, request, pk=None):
        serializer = CreateUserSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = self.get_service().create(**serializer.validated_data)
        return Response(UserResponseSerializer(user).data, status=status.HTTP_201_CREATED)

    def patch(self, request, pk=None):
        if not pk:
            return Response({"detail": "User ID required for update."}, status=status.HTTP_400_BAD_REQUEST)

        serializer = UpdateUserSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        user = self.get_service().update(
            pk,
            name=data.get("name"),
            phone=data.get("phone"),
            is_active=data.get("isActive"),
        )
        return Response(UserResponseSerializer(user).data)

    def delete(self, request, pk=None):
        if not pk:
            return Response({"detail": "User ID required for delete."}, status=status.HTTP_400_BAD_REQUEST)
        self.get_service().delete(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
