"""
Book Views

PDF book catalogue with admin management and purchase-gated streaming.

Endpoints:
- GET    books/                      : catalogue with search, sort and pagination
- GET    books/<id>/                 : single book
- POST   books/                      : upload (editor; multipart ``pdf`` + ``image``)
- PUT    books/<id>/                 : update, optional file replacements (editor)
- DELETE books/<id>/                 : delete unless purchased (editor)
- GET    books/<id>/stream/          : inline PDF for buyers, Range aware
- GET    books/pdf/download/<name>/  : attachment download (admin)

PDFs are private storage objects; covers are public.

Author: Seva Development Team
Version: 1.0.0
"""

import logging
import os

from django.db.models import Count, Q
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminOrSubadmin, IsAdminRole, IsUserRole
from core.exceptions import StorageObjectNotFound
from core.storage import RangeNotSatisfiable, get_storage_service
from core.streaming import NO_CACHE_HEADERS, content_disposition, ranged_response, sanitize_filename
from core.uploads import format_file_size, validate_upload
from core.utils import error_response, first_error, missing_fields, paginate, parse_positive_int

from ..models import Book, BookPurchase
from ..serializers import BookDetailSerializer, BookSerializer, BookWriteSerializer

logger = logging.getLogger(__name__)

PDF_FOLDER = "books/pdfs"
COVER_FOLDER = "books/covers"

SORT_ORDERS = {
    "newest": ("-created_at", "-id"),
    "oldest": ("created_at", "id"),
    "name": ("name",),
    "price-low": ("price",),
    "price-high": ("-price",),
}

PDF_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Content-Security-Policy": "default-src 'self'",
    **NO_CACHE_HEADERS,
}


def _range_not_satisfiable(error: RangeNotSatisfiable) -> Response:
    response = error_response(error.message, status.HTTP_416_REQUESTED_RANGE_NOT_SATISFIABLE)
    response["Content-Range"] = f"bytes */{error.details.get('total_size', '*')}"
    return response


class BookViewSet(viewsets.ViewSet):
    lookup_value_regex = r"\d+"

    def get_permissions(self):
        if self.action in ("create", "update", "partial_update", "destroy"):
            return [IsAdminOrSubadmin()]
        if self.action == "stream":
            return [IsUserRole()]
        return [AllowAny()]

    def list(self, request: Request) -> Response:
        params = request.query_params
        page = parse_positive_int(params.get("page"), 1)
        limit = parse_positive_int(params.get("limit"), 20, maximum=100)

        books = Book.objects.all()
        search = params.get("search", "").strip()
        if search:
            books = books.filter(
                Q(name__icontains=search) | Q(author__icontains=search) | Q(description__icontains=search)
            )
        books = books.order_by(*SORT_ORDERS.get(params.get("sortBy"), SORT_ORDERS["newest"]))

        items, total, total_pages = paginate(books, page, limit)
        return Response(
            {
                "success": True,
                "data": {
                    "books": BookSerializer(items, many=True).data,
                    "pagination": {
                        "total": total,
                        "page": page,
                        "limit": limit,
                        "totalPages": total_pages,
                    },
                },
            }
        )

    def retrieve(self, request: Request, pk=None) -> Response:
        book = Book.objects.annotate(purchase_count=Count("purchases")).filter(pk=pk).first()
        if book is None:
            return error_response("Book not found", status.HTTP_404_NOT_FOUND)
        return Response({"success": True, "data": {"book": BookDetailSerializer(book).data}})

    def create(self, request: Request) -> Response:
        pdf = request.FILES.get("pdf")
        image = request.FILES.get("image")
        if missing_fields(request.data, "name", "author", "price") or not pdf or not image:
            return error_response("Name, author, price, and PDF file are required")

        serializer = BookWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response(first_error(serializer.errors))
        data = serializer.validated_data

        validate_upload(pdf, "pdf")
        validate_upload(image, "image")
        storage = get_storage_service()
        stored_pdf = storage.upload(pdf, PDF_FOLDER, public=False)
        stored_cover = storage.upload(image, COVER_FOLDER)

        book = Book.objects.create(
            name=data["name"],
            author=data["author"],
            price=data["price"],
            description=data.get("description") or None,
            cover_image=stored_cover.url,
            cover_image_key=stored_cover.key,
            file_key=stored_pdf.key,
            file_name=os.path.basename(stored_pdf.key),
            file_size=format_file_size(stored_pdf.size),
        )
        logger.info("Book %s uploaded (%s, %s)", book.pk, stored_pdf.key, book.file_size)
        return Response(
            {"success": True, "message": "Book created successfully", "data": {"book": BookSerializer(book).data}},
            status=status.HTTP_201_CREATED,
        )

    def update(self, request: Request, pk=None) -> Response:
        book = Book.objects.filter(pk=pk).first()
        if book is None:
            return error_response("Book not found", status.HTTP_404_NOT_FOUND)

        serializer = BookWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return error_response(first_error(serializer.errors))
        data = serializer.validated_data

        for field in ("name", "author", "price"):
            if data.get(field):
                setattr(book, field, data[field])
        if "description" in data:
            book.description = data["description"]

        storage = get_storage_service()
        replaced_keys = []
        pdf = request.FILES.get("pdf")
        if pdf:
            validate_upload(pdf, "pdf")
            stored_pdf = storage.upload(pdf, PDF_FOLDER, public=False)
            replaced_keys.append(book.file_key)
            book.file_key = stored_pdf.key
            book.file_name = os.path.basename(stored_pdf.key)
            book.file_size = format_file_size(stored_pdf.size)
        image = request.FILES.get("image")
        if image:
            validate_upload(image, "image")
            stored_cover = storage.upload(image, COVER_FOLDER)
            replaced_keys.append(book.cover_image_key)
            book.cover_image, book.cover_image_key = stored_cover.url, stored_cover.key

        book.save()
        for key in replaced_keys:
            storage.delete(key)
        return Response(
            {"success": True, "message": "Book updated successfully", "data": {"book": BookSerializer(book).data}}
        )

    def destroy(self, request: Request, pk=None) -> Response:
        book = Book.objects.annotate(purchase_count=Count("purchases")).filter(pk=pk).first()
        if book is None:
            return error_response("Book not found", status.HTTP_404_NOT_FOUND)
        if book.purchase_count:
            return error_response(
                f"Cannot delete book. {book.purchase_count} user(s) have purchased this book."
            )
        book.delete()
        storage = get_storage_service()
        storage.delete(book.file_key)
        storage.delete(book.cover_image_key)
        logger.info("Book %s deleted", pk)
        return Response({"success": True, "message": "Book deleted successfully"})

    @action(detail=True, methods=["get"])
    def stream(self, request: Request, pk=None):
        purchase = (
            BookPurchase.objects.select_related("book")
            .filter(user=request.user, book_id=pk, access_granted=True)
            .first()
        )
        if purchase is None:
            return error_response(
                "You do not have access to this book. Please purchase it first.",
                status.HTTP_403_FORBIDDEN,
            )

        book = purchase.book
        try:
            obj = get_storage_service().open_range(book.file_key, request.headers.get("Range"))
        except StorageObjectNotFound:
            logger.error("PDF object %s of book %s is missing", book.file_key, book.pk)
            return error_response("PDF file not found on server", status.HTTP_404_NOT_FOUND)
        except RangeNotSatisfiable as e:
            return _range_not_satisfiable(e)

        filename = f"{sanitize_filename(book.name, default='book')}.pdf"
        return ranged_response(
            obj,
            content_type="application/pdf",
            disposition=content_disposition("inline", filename),
            extra_headers=PDF_SECURITY_HEADERS,
        )


class BookPdfDownloadView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request: Request, filename: str):
        safe_name = sanitize_filename(filename)
        try:
            obj = get_storage_service().open_range(f"{PDF_FOLDER}/{safe_name}")
        except StorageObjectNotFound:
            return error_response("File not found", status.HTTP_404_NOT_FOUND)
        return ranged_response(
            obj,
            content_type="application/pdf",
            disposition=content_disposition("attachment", safe_name),
        )
