"""
Accounts User Management CRUD Views

Admin user management: paginated search, create with a default password,
partial update, role changes and deletion.

Permissions:
- Requires the admin role (IsAdminRole)

Author: Seva Development Team
Version: 1.0.0
"""

import logging
from typing import Optional

from django.contrib.auth.models import User
from django.db.models import Count, Q, QuerySet
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from core.utils import paginate, parse_positive_int
from ..models import Profile, Role
from ..permissions import IsAdminRole
from ..serializers import RoleSerializer, UserSerializer, UserWriteSerializer

logger = logging.getLogger(__name__)


class UserCrudViewSet(viewsets.ModelViewSet):
    """
    Complete user management ViewSet for administrative operations.

    List query parameters:
        page (default 1), limit (default 6), search (name, email or phone),
        role (admin, subadmin or user)
    """

    serializer_class = UserSerializer
    permission_classes = [IsAdminRole]
    http_method_names = ["get", "post", "put", "patch", "delete", "head", "options"]

    def get_queryset(self) -> QuerySet[User]:
        return User.objects.select_related("profile").order_by("-date_joined", "-id")

    def list(self, request: Request, *args, **kwargs) -> Response:
        queryset = self.get_queryset()

        search = request.query_params.get("search", "").strip()
        if search:
            queryset = queryset.filter(
                Q(profile__name__icontains=search)
                | Q(email__icontains=search)
                | Q(profile__phone__icontains=search)
            )
        role = request.query_params.get("role", "").strip().lower()
        if role:
            queryset = queryset.filter(profile__role=role)

        page = parse_positive_int(request.query_params.get("page"), 1)
        limit = parse_positive_int(request.query_params.get("limit"), 6, maximum=100)
        users, total, total_pages = paginate(queryset, page, limit)

        role_counts = Profile.objects.aggregate(
            admins=Count("id", filter=Q(role=Role.ADMIN)),
            subadmins=Count("id", filter=Q(role=Role.SUBADMIN)),
            users=Count("id", filter=Q(role=Role.USER)),
        )

        return Response(
            {
                "success": True,
                "data": UserSerializer(users, many=True).data,
                "pagination": {
                    "currentPage": page,
                    "totalPages": total_pages,
                    "totalUsers": total,
                    "perPage": limit,
                    "hasNextPage": page * limit < total,
                    "hasPrevPage": page > 1,
                },
                "stats": {"total": total, **role_counts},
            }
        )

    def retrieve(self, request: Request, *args, **kwargs) -> Response:
        return Response({"success": True, "data": UserSerializer(self.get_object()).data})

    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = UserWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("Admin %s created user %s", request.user.pk, user.pk)
        return Response(
            {
                "success": True,
                "message": "User created successfully",
                "data": UserSerializer(user).data,
            },
            status=status.HTTP_201_CREATED,
        )

    def update(self, request: Request, *args, **kwargs) -> Response:
        user = self.get_object()
        # PUT behaves like PATCH: only provided fields change
        serializer = UserWriteSerializer(user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(
            {
                "success": True,
                "message": "User updated successfully",
                "data": UserSerializer(user).data,
            }
        )

    def destroy(self, request: Request, *args, **kwargs) -> Response:
        user = self.get_object()
        if user.pk == request.user.pk:
            return Response(
                {"success": False, "message": "Cannot delete your own account"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        user.delete()
        logger.info("Admin %s deleted user %s", request.user.pk, kwargs.get("pk"))
        return Response({"success": True, "message": "User deleted successfully"})

    @action(detail=True, methods=["patch"], url_path="role")
    def update_role(self, request: Request, pk: Optional[str] = None) -> Response:
        user = self.get_object()
        serializer = RoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        profile = user.profile
        profile.role = serializer.validated_data["role"]
        profile.save(update_fields=["role", "updated_at"])
        return Response(
            {
                "success": True,
                "message": "User role updated successfully",
                "data": {
                    "id": user.pk,
                    "name": profile.name,
                    "email": user.email,
                    "role": profile.role,
                },
            }
        )
