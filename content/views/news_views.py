"""
News Views

Public news listing with category/search/featured filters, detail reads
that count views, related articles and the editor endpoints.

Permissions:
- Reads are public
- Create and update: admin or subadmin
- Delete: admin

Author: Seva Development Team
Version: 1.0.0
"""

import logging

from django.db.models import Count, F, Q
from django.shortcuts import get_object_or_404
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response

from accounts.permissions import IsAdminOrSubadmin, IsAdminRole
from core.storage import get_storage_service
from core.uploads import validate_upload
from core.utils import error_response, paginate, parse_positive_int, unique_slug

from ..models import News
from ..serializers import NewsSerializer, NewsWriteSerializer

logger = logging.getLogger(__name__)

RELATED_LIMIT = 3


class NewsViewSet(viewsets.ViewSet):
    """
    List query parameters:
        category (``all`` disables the filter), search (title, English
        title or excerpt), featured=true, page (default 1), limit (default 10)
    """

    lookup_value_regex = r"\d+"

    def get_permissions(self):
        if self.action == "destroy":
            return [IsAdminRole()]
        if self.action in ("create", "update", "partial_update"):
            return [IsAdminOrSubadmin()]
        return [AllowAny()]

    def list(self, request: Request) -> Response:
        queryset = News.objects.all()

        category = request.query_params.get("category")
        if category and category != "all":
            queryset = queryset.filter(category=category)

        search = request.query_params.get("search", "").strip()
        if search:
            queryset = queryset.filter(
                Q(title__icontains=search)
                | Q(title_en__icontains=search)
                | Q(excerpt__icontains=search)
            )

        if request.query_params.get("featured") == "true":
            queryset = queryset.filter(featured=True)

        page = parse_positive_int(request.query_params.get("page"), 1)
        limit = parse_positive_int(request.query_params.get("limit"), 10, maximum=100)
        news, total, total_pages = paginate(queryset, page, limit)

        return Response(
            {
                "success": True,
                "data": NewsSerializer(news, many=True).data,
                "pagination": {
                    "page": page,
                    "limit": limit,
                    "total": total,
                    "totalPages": total_pages,
                },
            }
        )

    def _read(self, **lookup) -> Response:
        news = News.objects.filter(**lookup).first()
        if news is None:
            return error_response("News not found", status.HTTP_404_NOT_FOUND)
        News.objects.filter(pk=news.pk).update(views=F("views") + 1)
        news.refresh_from_db(fields=["views"])
        return Response({"success": True, "data": NewsSerializer(news).data})

    def retrieve(self, request: Request, pk=None) -> Response:
        return self._read(pk=pk)

    @action(detail=False, methods=["get"], url_path=r"slug/(?P<slug>[-\w]+)")
    def by_slug(self, request: Request, slug=None) -> Response:
        return self._read(slug=slug)

    @action(detail=False, methods=["get"], url_path=r"related/(?P<news_id>\d+)")
    def related(self, request: Request, news_id=None) -> Response:
        news = News.objects.filter(pk=news_id).first()
        if news is None:
            return error_response("News not found", status.HTTP_404_NOT_FOUND)
        related = News.objects.filter(category=news.category).exclude(pk=news.pk)[:RELATED_LIMIT]
        return Response({"success": True, "data": NewsSerializer(related, many=True).data})

    @action(detail=False, methods=["get"])
    def categories(self, request: Request) -> Response:
        rows = News.objects.values("category").annotate(count=Count("id")).order_by("category")
        return Response({"success": True, "data": list(rows)})

    def create(self, request: Request) -> Response:
        serializer = NewsWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        image = request.FILES.get("image")
        image_url, image_key = "", ""
        if image:
            validate_upload(image, "image")
            stored = get_storage_service().upload(image, "news")
            image_url, image_key = stored.url, stored.key

        news = News.objects.create(
            title=data["title"],
            title_en=data["title_en"],
            slug=unique_slug(News, data["title_en"]),
            excerpt=data["excerpt"],
            category=data["category"],
            date=data["date"],
            read_time=data["read_time"],
            author=data.get("author", ""),
            featured=data.get("featured", False),
            content=data.get("content", []),
            tags=data.get("tags", []),
            image_url=image_url,
            image_key=image_key,
        )
        logger.info("News %s (%s) created", news.pk, news.slug)
        return Response(
            {"success": True, "message": "News created successfully", "data": NewsSerializer(news).data},
            status=status.HTTP_201_CREATED,
        )

    def update(self, request: Request, pk=None) -> Response:
        news = get_object_or_404(News, pk=pk)
        serializer = NewsWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if "title_en" in data and data["title_en"] != news.title_en:
            news.slug = unique_slug(News, data["title_en"], instance_pk=news.pk)

        for field, value in data.items():
            setattr(news, field, value)

        image = request.FILES.get("image")
        if image:
            validate_upload(image, "image")
            storage = get_storage_service()
            stored = storage.upload(image, "news")
            storage.delete(news.image_key)
            news.image_url, news.image_key = stored.url, stored.key

        news.save()
        return Response(
            {"success": True, "message": "News updated successfully", "data": NewsSerializer(news).data}
        )

    def destroy(self, request: Request, pk=None) -> Response:
        news = get_object_or_404(News, pk=pk)
        get_storage_service().delete(news.image_key)
        news.delete()
        return Response({"success": True, "message": "News deleted successfully"})
