"""
Landing Page Views

Public, cached reads for the landing page blocks and the admin endpoints
that maintain them.

Endpoints:
- landing/banners/, landing/quote/, landing/cards/, landing/foundations/,
  landing/gopal-pariwar/ : public reads served from the cache
- admin/banners/  : list, upload, delete, reorder (admin)
- admin/messages/ : director messages (admin)
- admin/cards/    : link cards (admin)

Author: Seva Development Team
Version: 1.0.0
"""

import logging

from django.conf import settings
from django.shortcuts import get_object_or_404
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminRole
from core import cache as content_cache
from core.storage import get_storage_service
from core.uploads import validate_upload
from core.utils import error_response, missing_fields, parse_positive_int

from ..models import Banner, Card, DirectorMessage, Foundation, GopalPariwar
from ..ordering import InvalidOrderList, apply_order, parse_order_list
from ..serializers import (
    BannerSerializer,
    CardSerializer,
    DirectorMessageSerializer,
    FoundationLandingSerializer,
    GopalPariwarSerializer,
)

logger = logging.getLogger(__name__)


# ------------------------------------------------------------
# Public reads
# ------------------------------------------------------------


class LandingBannersView(APIView):
    def get(self, request: Request) -> Response:
        banners = content_cache.cached(
            content_cache.BANNER_KEY,
            content_cache.BANNER_TTL,
            lambda: BannerSerializer(Banner.objects.all(), many=True).data,
        )
        return Response(banners)


class LandingQuoteView(APIView):
    def get(self, request: Request) -> Response:
        def latest_message():
            message = DirectorMessage.objects.first()
            return DirectorMessageSerializer(message).data if message else None

        message = content_cache.cached(
            content_cache.DIRECTOR_MESSAGE_KEY,
            content_cache.DIRECTOR_MESSAGE_TTL,
            latest_message,
        )
        if message is None:
            return error_response("Message not found", status.HTTP_404_NOT_FOUND)
        return Response(message)


class LandingCardsView(APIView):
    def get(self, request: Request) -> Response:
        cards = content_cache.cached(
            content_cache.CARDS_KEY,
            content_cache.CARDS_TTL,
            lambda: CardSerializer(Card.objects.all(), many=True).data,
        )
        return Response(cards)


class LandingFoundationsView(APIView):
    def get(self, request: Request) -> Response:
        foundations = content_cache.cached(
            content_cache.FOUNDATION_LANDING_KEY,
            content_cache.FOUNDATION_LANDING_TTL,
            lambda: FoundationLandingSerializer(
                Foundation.objects.filter(is_active=True), many=True
            ).data,
        )
        return Response({"foundations": foundations})


class LandingGopalPariwarView(APIView):
    def get(self, request: Request) -> Response:
        profiles = content_cache.cached(
            content_cache.GOPAL_PARIWAR_KEY,
            content_cache.GOPAL_PARIWAR_TTL,
            lambda: GopalPariwarSerializer(GopalPariwar.objects.all(), many=True).data,
        )
        return Response(profiles)


# ------------------------------------------------------------
# Admin: banners
# ------------------------------------------------------------


class BannerAdminViewSet(viewsets.ViewSet):
    """
    Banner management. Uploaded images go to the ``banners`` folder of
    the bucket; deleting a banner removes its object as well.
    """

    permission_classes = [IsAdminRole]

    def list(self, request: Request) -> Response:
        return Response(BannerSerializer(Banner.objects.all(), many=True).data)

    def create(self, request: Request) -> Response:
        uploaded = request.FILES.get("file")
        if not uploaded:
            return error_response("No file uploaded")
        try:
            validate_upload(uploaded, "image", settings.BANNER_MAX_SIZE)
        except ValidationError as e:
            return error_response(e.detail[0])

        stored = get_storage_service().upload(uploaded, "banners")
        banner = Banner.objects.create(
            title=request.data.get("title", ""),
            image_url=stored.url,
            image_key=stored.key,
            order=parse_positive_int(request.data.get("order"), 0),
        )
        content_cache.invalidate(content_cache.BANNER_KEY)
        logger.info("Banner %s uploaded by %s", banner.pk, request.user.pk)
        return Response(
            {"message": "Banner uploaded successfully", "banner": BannerSerializer(banner).data},
            status=status.HTTP_201_CREATED,
        )

    def destroy(self, request: Request, pk=None) -> Response:
        banner = get_object_or_404(Banner, pk=pk)
        get_storage_service().delete(banner.image_key)
        banner.delete()
        content_cache.invalidate(content_cache.BANNER_KEY)
        return Response({"message": "Banner deleted successfully"})

    @action(detail=False, methods=["put"])
    def reorder(self, request: Request) -> Response:
        try:
            pairs = parse_order_list(request.data.get("orderList"))
        except InvalidOrderList as e:
            return error_response(str(e))
        apply_order(Banner, pairs)
        content_cache.invalidate(content_cache.BANNER_KEY)
        return Response({"success": True, "message": "Banner order updated"})


# ------------------------------------------------------------
# Admin: director messages
# ------------------------------------------------------------


class DirectorMessageAdminViewSet(viewsets.ViewSet):
    permission_classes = [IsAdminRole]

    def list(self, request: Request) -> Response:
        return Response(DirectorMessageSerializer(DirectorMessage.objects.all(), many=True).data)

    def create(self, request: Request) -> Response:
        if missing_fields(request.data, "info"):
            return error_response("Message info is required")
        message = DirectorMessage.objects.create(info=request.data["info"])
        content_cache.invalidate(content_cache.DIRECTOR_MESSAGE_KEY)
        return Response(
            {"message": "Message added successfully", "data": DirectorMessageSerializer(message).data},
            status=status.HTTP_201_CREATED,
        )

    def destroy(self, request: Request, pk=None) -> Response:
        message = get_object_or_404(DirectorMessage, pk=pk)
        message.delete()
        content_cache.invalidate(content_cache.DIRECTOR_MESSAGE_KEY)
        return Response({"message": "Message deleted successfully"})


# ------------------------------------------------------------
# Admin: cards
# ------------------------------------------------------------


class CardAdminViewSet(viewsets.ViewSet):
    permission_classes = [IsAdminRole]

    def list(self, request: Request) -> Response:
        return Response(CardSerializer(Card.objects.all(), many=True).data)

    def create(self, request: Request) -> Response:
        if missing_fields(request.data, "title", "link"):
            return error_response("Title and link are required")
        serializer = CardSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        card = serializer.save()
        content_cache.invalidate(content_cache.CARDS_KEY)
        return Response(
            {"message": "Card added successfully", "card": CardSerializer(card).data},
            status=status.HTTP_201_CREATED,
        )

    def update(self, request: Request, pk=None) -> Response:
        card = get_object_or_404(Card, pk=pk)
        serializer = CardSerializer(card, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        card = serializer.save()
        content_cache.invalidate(content_cache.CARDS_KEY)
        return Response({"message": "Card updated successfully", "card": CardSerializer(card).data})

    def destroy(self, request: Request, pk=None) -> Response:
        card = get_object_or_404(Card, pk=pk)
        card.delete()
        content_cache.invalidate(content_cache.CARDS_KEY)
        return Response({"message": "Card deleted successfully"})

    @action(detail=False, methods=["put"])
    def reorder(self, request: Request) -> Response:
        try:
            pairs = parse_order_list(request.data.get("orderList"))
        except InvalidOrderList as e:
            return error_response(str(e))
        apply_order(Card, pairs)
        content_cache.invalidate(content_cache.CARDS_KEY)
        return Response({"success": True, "message": "Card order updated"})
