"""
Coupon Views

Admin management of book coupons and the checkout-time validation used
by the book page to preview a discount.
"""

import logging

from django.db.models import Count
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from accounts.permissions import IsAdminOrSubadmin, IsAdminRole, IsUserRole
from core.utils import error_response, first_error, missing_fields

from ..models import Book, BookCoupon
from ..pricing import CouponError, check_coupon, find_coupon, quote
from ..serializers import BookCouponSerializer, BookCouponWriteSerializer

logger = logging.getLogger(__name__)


class BookCouponViewSet(viewsets.ViewSet):
    lookup_value_regex = r"\d+"

    def get_permissions(self):
        if self.action == "destroy":
            return [IsAdminRole()]
        if self.action == "validate":
            return [IsUserRole()]
        return [IsAdminOrSubadmin()]

    def get_queryset(self):
        return BookCoupon.objects.annotate(order_count=Count("orders"))

    def _get(self, pk):
        return self.get_queryset().filter(pk=pk).first()

    def list(self, request: Request) -> Response:
        coupons = BookCouponSerializer(self.get_queryset(), many=True).data
        return Response({"success": True, "data": {"coupons": coupons}})

    def retrieve(self, request: Request, pk=None) -> Response:
        coupon = self._get(pk)
        if coupon is None:
            return error_response("Coupon not found", status.HTTP_404_NOT_FOUND)
        return Response({"success": True, "data": {"coupon": BookCouponSerializer(coupon).data}})

    def create(self, request: Request) -> Response:
        if missing_fields(request.data, "code", "discount", "type"):
            return error_response("Code, discount, and type are required")

        serializer = BookCouponWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response(first_error(serializer.errors))
        data = serializer.validated_data

        if BookCoupon.objects.filter(code=data["code"]).exists():
            return error_response("Coupon code already exists")

        coupon = BookCoupon.objects.create(**data)
        logger.info("Coupon %s created", coupon.code)
        return Response(
            {
                "success": True,
                "message": "Coupon created successfully",
                "data": {"coupon": BookCouponSerializer(self._get(coupon.pk)).data},
            },
            status=status.HTTP_201_CREATED,
        )

    def update(self, request: Request, pk=None) -> Response:
        coupon = BookCoupon.objects.filter(pk=pk).first()
        if coupon is None:
            return error_response("Coupon not found", status.HTTP_404_NOT_FOUND)

        serializer = BookCouponWriteSerializer(coupon, data=request.data, partial=True)
        if not serializer.is_valid():
            return error_response(first_error(serializer.errors))
        data = serializer.validated_data

        if "code" in data and BookCoupon.objects.filter(code=data["code"]).exclude(pk=coupon.pk).exists():
            return error_response("Coupon code already exists")

        for field, value in data.items():
            setattr(coupon, field, value)
        coupon.save()
        return Response(
            {
                "success": True,
                "message": "Coupon updated successfully",
                "data": {"coupon": BookCouponSerializer(self._get(coupon.pk)).data},
            }
        )

    def destroy(self, request: Request, pk=None) -> Response:
        coupon = self._get(pk)
        if coupon is None:
            return error_response("Coupon not found", status.HTTP_404_NOT_FOUND)
        if coupon.order_count:
            return error_response(
                f"Cannot delete coupon. It has been used in {coupon.order_count} order(s)."
            )
        coupon.delete()
        logger.info("Coupon %s deleted", coupon.code)
        return Response({"success": True, "message": "Coupon deleted successfully"})

    @action(detail=False, methods=["patch"], url_path=r"toggle/(?P<coupon_id>\d+)")
    def toggle(self, request: Request, coupon_id=None) -> Response:
        coupon = BookCoupon.objects.filter(pk=coupon_id).first()
        if coupon is None:
            return error_response("Coupon not found", status.HTTP_404_NOT_FOUND)
        coupon.active = not coupon.active
        coupon.save(update_fields=["active", "updated_at"])
        state = "activated" if coupon.active else "deactivated"
        return Response(
            {
                "success": True,
                "message": f"Coupon {state} successfully",
                "data": {"coupon": BookCouponSerializer(self._get(coupon.pk)).data},
            }
        )

    @action(detail=False, methods=["post"])
    def validate(self, request: Request) -> Response:
        code = request.data.get("code")
        book_id = request.data.get("bookId")
        if not code or not book_id:
            return error_response("Coupon code and bookId are required")

        try:
            coupon = check_coupon(find_coupon(code))
        except CouponError as e:
            return error_response(e.message, e.status_code)

        book = Book.objects.filter(pk=book_id).first() if str(book_id).isdigit() else None
        if book is None:
            return error_response("Book not found", status.HTTP_404_NOT_FOUND)

        price = quote(book.price, coupon)
        return Response(
            {
                "success": True,
                "message": "Coupon applied successfully",
                "data": {
                    "coupon": {
                        "id": coupon.pk,
                        "code": coupon.code,
                        "discount": coupon.discount,
                        "type": coupon.type,
                        "description": coupon.description,
                    },
                    "discountAmount": price.discount,
                    "finalAmount": price.final,
                },
            }
        )
