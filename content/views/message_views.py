"""
Message Views

Public forms that notify the organisation by email: the contact form
and gau katha booking requests.

Author: Seva Development Team
Version: 1.0.0
"""

import logging
import secrets

from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from core.notifications import get_email_service
from core.utils import error_response, first_error, missing_fields

from ..models import GauKathaBooking
from ..serializers import ContactMessageSerializer, GauKathaBookingSerializer

logger = logging.getLogger(__name__)


def generate_booking_id() -> str:
    return f"GK{secrets.token_hex(4).upper()}"


class SendMessageView(APIView):
    def post(self, request: Request) -> Response:
        if missing_fields(request.data, "name", "email", "mobile", "message"):
            return error_response("All fields are required")

        serializer = ContactMessageSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response(first_error(serializer.errors))
        data = serializer.validated_data

        get_email_service().send_contact_message(
            data["name"], data["email"], data["mobile"], data["message"]
        )
        logger.info("Contact message from %s forwarded", data["email"])
        return Response({"success": True, "message": "Message sent successfully! Check your email for confirmation."})


class GauKathaBookingView(APIView):
    def post(self, request: Request) -> Response:
        if missing_fields(request.data, "name", "contact", "state", "city", "email"):
            return error_response("सभी फ़ील्ड आवश्यक हैं / All fields are required")

        serializer = GauKathaBookingSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response(first_error(serializer.errors))

        booking = GauKathaBooking.objects.create(
            booking_id=generate_booking_id(), **serializer.validated_data
        )
        get_email_service().send_gau_katha_booking(
            {
                "booking_id": booking.booking_id,
                "name": booking.name,
                "contact": booking.contact,
                "email": booking.email,
                "state": booking.state,
                "city": booking.city,
            }
        )
        return Response(
            {
                "success": True,
                "message": (
                    "आपका आवेदन सफलतापूर्वक जमा हो गया है! / "
                    "Your booking request has been submitted successfully!"
                ),
                "bookingId": booking.booking_id,
            }
        )
