"""
Directory Views

Gaushala (cow shelter) and sansthan (institution) directories.

Author: Seva Development Team
Version: 1.0.0
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db.models import Q, Sum
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from accounts.permissions import ReadOnlyOrAdmin
from core.storage import get_storage_service
from core.uploads import validate_upload
from core.utils import error_response, first_error, missing_fields

from ..models import Gaushala, Sansthan
from ..serializers import GaushalaSerializer, SansthanSerializer

logger = logging.getLogger(__name__)

GAUSHALA_REQUIRED_FIELDS = (
    "name",
    "address",
    "city",
    "state",
    "pincode",
    "establishmentDate",
    "totalCows",
    "capacity",
    "contactPerson",
    "phone",
    "email",
)


def gaushala_statistics() -> dict:
    totals = Gaushala.objects.aggregate(cows=Sum("total_cows"), capacity=Sum("capacity"))
    count = Gaushala.objects.count()
    total_cows = totals["cows"] or 0
    total_capacity = totals["capacity"] or 0

    utilization = Decimal("0")
    if total_capacity:
        utilization = Decimal(total_cows * 100) / Decimal(total_capacity)

    return {
        "totalGauShalas": count,
        "totalCows": total_cows,
        "totalCapacity": total_capacity,
        "avgCowsPerShala": int((Decimal(total_cows) / count).quantize(Decimal("1"), ROUND_HALF_UP)) if count else 0,
        "utilizationPercentage": str(utilization.quantize(Decimal("0.01"), ROUND_HALF_UP)),
    }


class GaushalaViewSet(viewsets.ViewSet):
    permission_classes = [ReadOnlyOrAdmin]
    lookup_value_regex = r"\d+"

    def list(self, request: Request) -> Response:
        data = GaushalaSerializer(Gaushala.objects.all(), many=True).data
        return Response({"success": True, "data": data, "count": len(data)})

    def retrieve(self, request: Request, pk=None) -> Response:
        gaushala = Gaushala.objects.filter(pk=pk).first()
        if gaushala is None:
            return error_response("Gau Shala not found", status.HTTP_404_NOT_FOUND)
        return Response({"success": True, "data": GaushalaSerializer(gaushala).data})

    def create(self, request: Request) -> Response:
        photo = request.FILES.get("photo")
        if not photo:
            return error_response("No file uploaded")
        if missing_fields(request.data, *GAUSHALA_REQUIRED_FIELDS):
            return error_response("Missing required fields")
        validate_upload(photo, "image")

        serializer = GaushalaSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response(first_error(serializer.errors))

        stored = get_storage_service().upload(photo, "gaushalas")
        gaushala = serializer.save(photo_url=stored.url, photo_key=stored.key)
        logger.info("Gaushala %s created", gaushala.pk)
        return Response(
            {"success": True, "message": "Gau Shala created", "data": GaushalaSerializer(gaushala).data},
            status=status.HTTP_201_CREATED,
        )

    def update(self, request: Request, pk=None) -> Response:
        gaushala = Gaushala.objects.filter(pk=pk).first()
        if gaushala is None:
            return error_response("Gaushala not found", status.HTTP_404_NOT_FOUND)

        serializer = GaushalaSerializer(gaushala, data=request.data, partial=True)
        if not serializer.is_valid():
            return error_response(first_error(serializer.errors))

        extra = {}
        old_photo_key = None
        photo = request.FILES.get("photo")
        if photo:
            validate_upload(photo, "image")
            stored = get_storage_service().upload(photo, "gaushalas")
            old_photo_key = gaushala.photo_key
            extra = {"photo_url": stored.url, "photo_key": stored.key}

        gaushala = serializer.save(**extra)
        if old_photo_key:
            get_storage_service().delete(old_photo_key)
        return Response(
            {
                "success": True,
                "message": "Gaushala updated successfully",
                "data": GaushalaSerializer(gaushala).data,
            }
        )

    def destroy(self, request: Request, pk=None) -> Response:
        gaushala = Gaushala.objects.filter(pk=pk).first()
        if gaushala is None:
            return error_response("Gau Shala not found", status.HTTP_404_NOT_FOUND)
        gaushala.delete()
        get_storage_service().delete(gaushala.photo_key)
        return Response({"success": True, "message": "Gau Shala deleted"})

    @action(detail=False, methods=["get"])
    def statistics(self, request: Request) -> Response:
        return Response({"success": True, "data": gaushala_statistics()})

    @action(detail=False, methods=["get"])
    def search(self, request: Request) -> Response:
        query = request.query_params.get("q", "").strip()
        if not query:
            return error_response("Search query is required")
        results = Gaushala.objects.filter(
            Q(name__icontains=query)
            | Q(city__icontains=query)
            | Q(state__icontains=query)
            | Q(description__icontains=query)
        )
        data = GaushalaSerializer(results, many=True).data
        return Response({"success": True, "data": data, "count": len(data)})


def compose_sansthan_description(data, fallback: str = "") -> str:
    """
    Fold the optional postal address into the description.

    The address is only used when all four parts are present:
    ``"<address>, <city>, <state> - <pincode>"``.
    """
    parts = [str(data.get(name) or "").strip() for name in ("address", "city", "state", "pincode")]
    full_address = f"{parts[0]}, {parts[1]}, {parts[2]} - {parts[3]}" if all(parts) else ""
    description = str(data.get("description") or "").strip()

    if full_address and description:
        return f"{description}\n\nAddress: {full_address}"
    return description or full_address or fallback


class SansthanViewSet(viewsets.ViewSet):
    permission_classes = [ReadOnlyOrAdmin]
    lookup_value_regex = r"\d+"

    def list(self, request: Request) -> Response:
        data = SansthanSerializer(Sansthan.objects.all(), many=True).data
        return Response({"success": True, "count": len(data), "data": data})

    def retrieve(self, request: Request, pk=None) -> Response:
        sansthan = Sansthan.objects.filter(pk=pk).first()
        if sansthan is None:
            return error_response("Sansthan not found", status.HTTP_404_NOT_FOUND)
        return Response({"success": True, "data": SansthanSerializer(sansthan).data})

    def create(self, request: Request) -> Response:
        if missing_fields(request.data, "name", "email", "phone"):
            return error_response("Name, email, and phone are required fields")

        serializer = SansthanSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response(first_error(serializer.errors))

        extra = {"description": compose_sansthan_description(request.data)}
        image = request.FILES.get("image")
        if image:
            validate_upload(image, "image")
            stored = get_storage_service().upload(image, "sansthans")
            extra.update(image_url=stored.url, image_key=stored.key)

        sansthan = serializer.save(**extra)
        return Response(
            {
                "success": True,
                "message": "Sansthan created successfully",
                "data": SansthanSerializer(sansthan).data,
            },
            status=status.HTTP_201_CREATED,
        )

    def update(self, request: Request, pk=None) -> Response:
        sansthan = Sansthan.objects.filter(pk=pk).first()
        if sansthan is None:
            return error_response("Sansthan not found", status.HTTP_404_NOT_FOUND)

        serializer = SansthanSerializer(sansthan, data=request.data, partial=True)
        if not serializer.is_valid():
            return error_response(first_error(serializer.errors))

        extra = {"description": compose_sansthan_description(request.data, sansthan.description)}
        old_image_key = None
        image = request.FILES.get("image")
        if image:
            validate_upload(image, "image")
            stored = get_storage_service().upload(image, "sansthans")
            old_image_key = sansthan.image_key
            extra.update(image_url=stored.url, image_key=stored.key)

        sansthan = serializer.save(**extra)
        if old_image_key:
            get_storage_service().delete(old_image_key)
        return Response(
            {
                "success": True,
                "message": "Sansthan updated successfully",
                "data": SansthanSerializer(sansthan).data,
            }
        )

    def destroy(self, request: Request, pk=None) -> Response:
        sansthan = Sansthan.objects.filter(pk=pk).first()
        if sansthan is None:
            return error_response("Sansthan not found", status.HTTP_404_NOT_FOUND)
        sansthan.delete()
        get_storage_service().delete(sansthan.image_key)
        return Response({"success": True, "message": "Sansthan deleted successfully"})
