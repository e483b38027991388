"""
User dashboard data: profile plus everything the account bought or gave.
"""

from django.contrib.auth.models import User
from django.shortcuts import get_object_or_404
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from commerce.models import BookPurchase, Donation, MembershipPayment
from commerce.serializers import (
    BookPurchaseSerializer,
    DonationSerializer,
    MembershipPaymentSerializer,
)
from ..permissions import is_owner_or_admin
from ..serializers import UserSerializer


class UserDataView(APIView):
    """GET users/<id>/data/ for the account itself or an admin."""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request, user_id: int) -> Response:
        if not is_owner_or_admin(request.user, user_id):
            return Response({"success": False, "message": "Forbidden"}, status=403)

        user = get_object_or_404(User.objects.select_related("profile"), pk=user_id)
        purchases = (
            BookPurchase.objects.filter(user=user, access_granted=True)
            .select_related("book")
            .order_by("-purchased_at")
        )
        donations = Donation.objects.filter(user=user).order_by("-created_at")
        memberships = MembershipPayment.objects.filter(user=user).order_by("-created_at")

        return Response(
            {
                "success": True,
                "data": {
                    "user": UserSerializer(user).data,
                    "purchasedBooks": BookPurchaseSerializer(purchases, many=True).data,
                    "donations": DonationSerializer(donations, many=True).data,
                    "memberships": MembershipPaymentSerializer(memberships, many=True).data,
                },
            }
        )
