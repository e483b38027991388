"""
Foundation and Gopal Pariwar Views

Admin CRUD for the foundations shown on the landing page and for the
Gopal Pariwar profiles. Both keep a dense manual ``order``; creating
appends, deleting closes the gap and an explicit ``order`` on update moves
the row.

Foundation payloads are multipart: the logo is a file, the nested
``stats``, ``activities``, ``objectives`` and ``contact`` are JSON
strings. Nested lists are replaced as a whole inside one transaction.

Author: Seva Development Team
Version: 1.0.0
"""

import logging

from django.db import transaction
from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import status, viewsets
from rest_framework.request import Request
from rest_framework.response import Response

from accounts.permissions import ReadOnlyOrAdmin
from core import cache as content_cache
from core.storage import get_storage_service
from core.uploads import validate_upload
from core.utils import as_bool, error_response, paginate, parse_positive_int

from ..models import (
    Foundation,
    FoundationActivity,
    FoundationContact,
    FoundationObjective,
    FoundationStat,
    GopalPariwar,
)
from ..ordering import close_gap, move_to, next_order
from ..serializers import FoundationSerializer, FoundationWriteSerializer, GopalPariwarSerializer

logger = logging.getLogger(__name__)


def invalidate_foundation_caches(foundation_id=None) -> None:
    content_cache.bump_namespace(content_cache.FOUNDATIONS_NAMESPACE)
    keys = [content_cache.FOUNDATION_LANDING_KEY]
    if foundation_id is not None:
        keys.append(f"foundation:{foundation_id}")
    content_cache.invalidate(*keys)


def _foundation_queryset():
    return Foundation.objects.select_related("contact").prefetch_related(
        "stats", "activities", "objectives"
    )


def _replace_nested(foundation: Foundation, data: dict) -> None:
    """Rewrite the nested rows present in ``data``; absent keys stay untouched."""
    if data.get("stats") is not None:
        foundation.stats.all().delete()
        FoundationStat.objects.bulk_create(
            [FoundationStat(foundation=foundation, **item) for item in data["stats"]]
        )
    if data.get("activities") is not None:
        foundation.activities.all().delete()
        FoundationActivity.objects.bulk_create(
            [FoundationActivity(foundation=foundation, **item) for item in data["activities"]]
        )
    if data.get("objectives") is not None:
        foundation.objectives.all().delete()
        FoundationObjective.objects.bulk_create(
            [FoundationObjective(foundation=foundation, **item) for item in data["objectives"]]
        )
    if data.get("contact") is not None:
        FoundationContact.objects.update_or_create(
            foundation=foundation, defaults=dict(data["contact"])
        )


class FoundationViewSet(viewsets.ViewSet):
    """
    List query parameters:
        page (default 1), limit (default 10), search (name or description),
        isActive (true/false)
    """

    permission_classes = [ReadOnlyOrAdmin]
    lookup_value_regex = r"\d+"

    def list(self, request: Request) -> Response:
        page = parse_positive_int(request.query_params.get("page"), 1)
        limit = parse_positive_int(request.query_params.get("limit"), 10, maximum=100)
        search = request.query_params.get("search", "").strip()
        is_active = as_bool(request.query_params.get("isActive"))

        def produce():
            queryset = _foundation_queryset()
            if search:
                queryset = queryset.filter(
                    Q(name__icontains=search) | Q(description__icontains=search)
                )
            if is_active is not None:
                queryset = queryset.filter(is_active=is_active)
            foundations, total, total_pages = paginate(queryset, page, limit)
            return {
                "data": FoundationSerializer(foundations, many=True).data,
                "pagination": {
                    "total": total,
                    "page": page,
                    "limit": limit,
                    "totalPages": total_pages,
                },
            }

        key = content_cache.namespaced_key(
            content_cache.FOUNDATIONS_NAMESPACE, page, limit, search, is_active
        )
        return Response(content_cache.cached(key, content_cache.FOUNDATION_DETAIL_TTL, produce))

    def retrieve(self, request: Request, pk=None) -> Response:
        def produce():
            foundation = _foundation_queryset().filter(pk=pk).first()
            return FoundationSerializer(foundation).data if foundation else None

        data = content_cache.cached(f"foundation:{pk}", content_cache.FOUNDATION_DETAIL_TTL, produce)
        if data is None:
            return error_response("Foundation not found", status.HTTP_404_NOT_FOUND)
        return Response(data)

    def create(self, request: Request) -> Response:
        logo = request.FILES.get("logo")
        if not logo:
            return error_response("Logo is required")
        validate_upload(logo, "image")

        serializer = FoundationWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        stored = get_storage_service().upload(logo, "foundations")
        with transaction.atomic():
            foundation = Foundation.objects.create(
                name=data["name"],
                tagline=data.get("tagline", ""),
                description=data.get("description", ""),
                established_year=data.get("established_year"),
                is_active=data.get("is_active", True),
                logo_url=stored.url,
                logo_key=stored.key,
                order=next_order(Foundation),
            )
            _replace_nested(foundation, data)

        invalidate_foundation_caches()
        logger.info("Foundation %s created", foundation.pk)
        return Response(
            FoundationSerializer(_foundation_queryset().get(pk=foundation.pk)).data,
            status=status.HTTP_201_CREATED,
        )

    def update(self, request: Request, pk=None) -> Response:
        foundation = Foundation.objects.filter(pk=pk).first()
        if foundation is None:
            return error_response("Foundation not found", status.HTTP_404_NOT_FOUND)

        serializer = FoundationWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        logo = request.FILES.get("logo")
        old_logo_key = None
        if logo:
            validate_upload(logo, "image")
            stored = get_storage_service().upload(logo, "foundations")
            old_logo_key = foundation.logo_key
            foundation.logo_url, foundation.logo_key = stored.url, stored.key

        new_order = data.pop("order", None)
        with transaction.atomic():
            for field in ("name", "tagline", "description", "established_year", "is_active"):
                if field in data:
                    setattr(foundation, field, data[field])
            foundation.save()
            if new_order is not None and new_order != foundation.order:
                move_to(foundation, new_order)
            _replace_nested(foundation, data)

        if old_logo_key:
            get_storage_service().delete(old_logo_key)
        invalidate_foundation_caches(foundation.pk)
        return Response(FoundationSerializer(_foundation_queryset().get(pk=foundation.pk)).data)

    def destroy(self, request: Request, pk=None) -> Response:
        foundation = Foundation.objects.filter(pk=pk).first()
        if foundation is None:
            return error_response("Foundation not found", status.HTTP_404_NOT_FOUND)

        with transaction.atomic():
            deleted_order = foundation.order
            foundation.delete()
            close_gap(Foundation, deleted_order)

        get_storage_service().delete(foundation.logo_key)
        invalidate_foundation_caches(pk)
        return Response({"message": "Foundation deleted successfully"})


class GopalPariwarViewSet(viewsets.ViewSet):
    permission_classes = [ReadOnlyOrAdmin]
    lookup_value_regex = r"\d+"

    def list(self, request: Request) -> Response:
        return Response(GopalPariwarSerializer(GopalPariwar.objects.all(), many=True).data)

    def retrieve(self, request: Request, pk=None) -> Response:
        profile = GopalPariwar.objects.filter(pk=pk).first()
        if profile is None:
            return error_response("GopalPariwar not found", status.HTTP_404_NOT_FOUND)
        return Response(GopalPariwarSerializer(profile).data)

    def create(self, request: Request) -> Response:
        photo = request.FILES.get("photo")
        if not photo:
            return error_response("No file uploaded")
        validate_upload(photo, "image")

        serializer = GopalPariwarSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.validated_data.pop("order", None)

        stored = get_storage_service().upload(photo, "gopalpariwar")
        profile = serializer.save(
            hero_image=stored.url,
            hero_image_key=stored.key,
            order=next_order(GopalPariwar),
        )
        content_cache.invalidate(content_cache.GOPAL_PARIWAR_KEY)
        return Response(GopalPariwarSerializer(profile).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk=None) -> Response:
        profile = GopalPariwar.objects.filter(pk=pk).first()
        if profile is None:
            return error_response("Record not found", status.HTTP_404_NOT_FOUND)

        serializer = GopalPariwarSerializer(profile, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        new_order = serializer.validated_data.pop("order", None)

        extra = {}
        old_image_key = None
        photo = request.FILES.get("photo")
        if photo:
            validate_upload(photo, "image")
            stored = get_storage_service().upload(photo, "gopalpariwar")
            old_image_key = profile.hero_image_key
            extra = {"hero_image": stored.url, "hero_image_key": stored.key}

        with transaction.atomic():
            profile = serializer.save(**extra)
            if new_order is not None:
                move_to(profile, new_order)

        if old_image_key:
            get_storage_service().delete(old_image_key)
        content_cache.invalidate(content_cache.GOPAL_PARIWAR_KEY)
        return Response(GopalPariwarSerializer(profile).data)

    def destroy(self, request: Request, pk=None) -> Response:
        profile = get_object_or_404(GopalPariwar, pk=pk)
        with transaction.atomic():
            deleted_order = profile.order
            profile.delete()
            close_gap(GopalPariwar, deleted_order)
        get_storage_service().delete(profile.hero_image_key)
        content_cache.invalidate(content_cache.GOPAL_PARIWAR_KEY)
        return Response({"message": "Deleted successfully"})
