"""
Audio Views

Bhajan catalogues (jeevan sutra and gaumata bhajans), their categories,
and byte-range streaming of the stored audio files.

Audio objects live under the ``audio/`` folder of the bucket and are
served through this API (``audio/stream/<filename>/``) so players can
seek with HTTP Range requests. Images are public objects.

Author: Seva Development Team
Version: 1.0.0
"""

import logging

from django.db.models import Count, Q
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminOrSubadmin, IsAdminRole
from core.exceptions import StorageObjectNotFound
from core.storage import RangeNotSatisfiable, get_storage_service
from core.streaming import content_disposition, ranged_response, sanitize_filename
from core.uploads import validate_upload
from core.utils import error_response, first_error, missing_fields

from ..models import Bhajan, BhajanCategory, GaumataBhajan
from ..serializers import (
    BhajanCategorySerializer,
    BhajanSerializer,
    BhajanWriteSerializer,
    GaumataBhajanSerializer,
)

logger = logging.getLogger(__name__)

AUDIO_FOLDER = "audio"
IMAGE_FOLDER = "audio/images"


class BhajanViewSet(viewsets.ViewSet):
    """
    Jeevan sutra bhajans. Subclasses swap the model and serializer.

    Reads are public; create, update and delete require the admin role.
    """

    model = Bhajan
    serializer_class = BhajanSerializer
    lookup_value_regex = r"\d+"

    def get_permissions(self):
        if self.action in ("create", "update", "partial_update", "destroy"):
            return [IsAdminRole()]
        return [AllowAny()]

    def get_queryset(self):
        return self.model.objects.all()

    def _render(self, instance_or_queryset, many=False):
        return self.serializer_class(
            instance_or_queryset, many=many, context={"request": self.request}
        ).data

    def _get(self, pk):
        return self.get_queryset().filter(pk=pk).first()

    def _extra_fields(self, data) -> dict:
        return {}

    def list(self, request: Request) -> Response:
        return Response(self._render(self.get_queryset(), many=True))

    def retrieve(self, request: Request, pk=None) -> Response:
        bhajan = self._get(pk)
        if bhajan is None:
            return error_response("Bhajan not found", status.HTTP_404_NOT_FOUND)
        return Response(self._render(bhajan))

    def create(self, request: Request) -> Response:
        if missing_fields(request.data, "name", "artist"):
            return error_response("Name and artist are required")
        audio = request.FILES.get("audio")
        if not audio:
            return error_response("Audio file is required")

        serializer = BhajanWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response(first_error(serializer.errors))
        data = serializer.validated_data

        validate_upload(audio, "audio")
        image = request.FILES.get("image")
        if image:
            validate_upload(image, "image")

        storage = get_storage_service()
        stored_audio = storage.upload(audio, AUDIO_FOLDER, public=False)
        stored_image = storage.upload(image, IMAGE_FOLDER) if image else None

        bhajan = self.model.objects.create(
            name=data["name"],
            artist=data["artist"],
            album=data.get("album"),
            duration=data.get("duration") or "0:00",
            audio_key=stored_audio.key,
            image_url=stored_image.url if stored_image else None,
            image_key=stored_image.key if stored_image else "",
            **self._extra_fields(data),
        )
        logger.info("%s %s uploaded (%s)", self.model.__name__, bhajan.pk, stored_audio.key)
        return Response(self._render(bhajan), status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk=None) -> Response:
        bhajan = self._get(pk)
        if bhajan is None:
            return error_response("Bhajan not found", status.HTTP_404_NOT_FOUND)

        serializer = BhajanWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return error_response(first_error(serializer.errors))
        data = serializer.validated_data

        for field in ("name", "artist"):
            if data.get(field):
                setattr(bhajan, field, data[field])
        if "album" in data:
            bhajan.album = data["album"]
        if data.get("duration"):
            bhajan.duration = data["duration"]
        for field, value in self._extra_fields(data).items():
            setattr(bhajan, field, value)

        storage = get_storage_service()
        replaced_keys = []
        audio = request.FILES.get("audio")
        if audio:
            validate_upload(audio, "audio")
            replaced_keys.append(bhajan.audio_key)
            bhajan.audio_key = storage.upload(audio, AUDIO_FOLDER, public=False).key
        image = request.FILES.get("image")
        if image:
            validate_upload(image, "image")
            replaced_keys.append(bhajan.image_key)
            stored_image = storage.upload(image, IMAGE_FOLDER)
            bhajan.image_url, bhajan.image_key = stored_image.url, stored_image.key

        bhajan.save()
        for key in replaced_keys:
            storage.delete(key)
        return Response(self._render(bhajan))

    def destroy(self, request: Request, pk=None) -> Response:
        bhajan = self._get(pk)
        if bhajan is None:
            return error_response("Bhajan not found", status.HTTP_404_NOT_FOUND)
        bhajan.delete()
        storage = get_storage_service()
        storage.delete(bhajan.audio_key)
        storage.delete(bhajan.image_key)
        return Response({"message": "Bhajan deleted successfully"})

    @action(detail=False, methods=["get"])
    def search(self, request: Request) -> Response:
        query = request.query_params.get("query", "").strip()
        if not query:
            return error_response("Search query is required")
        results = self.get_queryset().filter(
            Q(name__icontains=query) | Q(artist__icontains=query) | Q(album__icontains=query)
        )
        return Response(self._render(results, many=True))


class GaumataBhajanViewSet(BhajanViewSet):
    """Gaumata bhajans; the ``category`` name is resolved or created on write."""

    model = GaumataBhajan
    serializer_class = GaumataBhajanSerializer

    def get_queryset(self):
        return GaumataBhajan.objects.select_related("category")

    def _extra_fields(self, data) -> dict:
        name = (data.get("category") or "").strip()
        if not name:
            return {}
        category, created = BhajanCategory.objects.get_or_create(name=name)
        if created:
            logger.info("Created bhajan category %s", name)
        return {"category": category}


# ------------------------------------------------------------
# Streaming
# ------------------------------------------------------------


class AudioStreamView(APIView):
    """Public byte-range streaming of a stored audio file."""

    def get(self, request: Request, filename: str):
        key = f"{AUDIO_FOLDER}/{sanitize_filename(filename)}"
        try:
            obj = get_storage_service().open_range(key, request.headers.get("Range"))
        except StorageObjectNotFound:
            return error_response("Audio not found", status.HTTP_404_NOT_FOUND)
        except RangeNotSatisfiable as e:
            response = error_response(e.message, status.HTTP_416_REQUESTED_RANGE_NOT_SATISFIABLE)
            response["Content-Range"] = f"bytes */{e.details.get('total_size', '*')}"
            return response
        return ranged_response(obj)


class AudioDownloadView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request: Request, filename: str):
        safe_name = sanitize_filename(filename)
        try:
            obj = get_storage_service().open_range(f"{AUDIO_FOLDER}/{safe_name}")
        except StorageObjectNotFound:
            return error_response("File not found", status.HTTP_404_NOT_FOUND)
        return ranged_response(obj, disposition=content_disposition("attachment", safe_name))


# ------------------------------------------------------------
# Categories
# ------------------------------------------------------------


class BhajanCategoryViewSet(viewsets.ViewSet):
    lookup_value_regex = r"\d+"

    def get_permissions(self):
        if self.action == "destroy":
            return [IsAdminRole()]
        if self.action in ("create", "update", "partial_update"):
            return [IsAdminOrSubadmin()]
        return [AllowAny()]

    def get_queryset(self):
        return BhajanCategory.objects.annotate(bhajan_count=Count("bhajans"))

    def list(self, request: Request) -> Response:
        return Response(BhajanCategorySerializer(self.get_queryset(), many=True).data)

    def retrieve(self, request: Request, pk=None) -> Response:
        category = self.get_queryset().filter(pk=pk).first()
        if category is None:
            return error_response("Category not found", status.HTTP_404_NOT_FOUND)
        return Response(BhajanCategorySerializer(category).data)

    def create(self, request: Request) -> Response:
        name = str(request.data.get("name") or "").strip()
        if not name:
            return error_response("Category name is required")
        if BhajanCategory.objects.filter(name__iexact=name).exists():
            return error_response("Category already exists")
        category = BhajanCategory.objects.create(name=name)
        return Response(BhajanCategorySerializer(category).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk=None) -> Response:
        category = BhajanCategory.objects.filter(pk=pk).first()
        if category is None:
            return error_response("Category not found", status.HTTP_404_NOT_FOUND)
        name = str(request.data.get("name") or "").strip()
        if not name:
            return error_response("Category name is required")
        if BhajanCategory.objects.filter(name__iexact=name).exclude(pk=category.pk).exists():
            return error_response("Category name already exists")
        category.name = name
        category.save(update_fields=["name", "updated_at"])
        return Response(BhajanCategorySerializer(self.get_queryset().get(pk=category.pk)).data)

    def destroy(self, request: Request, pk=None) -> Response:
        category = self.get_queryset().filter(pk=pk).first()
        if category is None:
            return error_response("Category not found", status.HTTP_404_NOT_FOUND)
        if category.bhajan_count:
            return error_response(
                f"Cannot delete category. It has {category.bhajan_count} bhajan(s) associated with it."
            )
        category.delete()
        return Response({"message": "Category deleted successfully"})
