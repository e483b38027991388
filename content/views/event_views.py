"""
Event Views

Events disappear once their end date has passed: expired rows are purged
before every listing, on detail reads and by the ``cleanup`` endpoint and
the ``cleanup_expired_events`` management command.

Author: Seva Development Team
Version: 1.0.0
"""

import logging

from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from accounts.permissions import IsAdminRole, ReadOnlyOrAdmin
from core.utils import error_response, first_error, missing_fields, parse_positive_int

from ..models import Event
from ..serializers import EventSerializer
from ..services import delete_expired_events

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "startDate", "endDate", "location", "duration")


class EventViewSet(viewsets.ViewSet):
    permission_classes = [ReadOnlyOrAdmin]
    lookup_value_regex = r"\d+"

    def list(self, request: Request) -> Response:
        delete_expired_events()
        events = Event.objects.all()
        upcoming = parse_positive_int(request.query_params.get("upcoming"), 0)
        if upcoming:
            events = events[:upcoming]
        data = EventSerializer(events, many=True).data
        return Response({"success": True, "count": len(data), "data": data})

    def retrieve(self, request: Request, pk=None) -> Response:
        event = Event.objects.filter(pk=pk).first()
        if event is None:
            return error_response("Event not found", status.HTTP_404_NOT_FOUND)
        if event.is_expired:
            event.delete()
            return error_response("Event has expired and been removed", status.HTTP_404_NOT_FOUND)
        return Response({"success": True, "data": EventSerializer(event).data})

    def create(self, request: Request) -> Response:
        if missing_fields(request.data, *REQUIRED_FIELDS):
            return error_response(
                "Title, start date, end date, location, and duration are required fields"
            )
        serializer = EventSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response(first_error(serializer.errors))
        if serializer.validated_data["end_date"] < timezone.localdate():
            return error_response("Cannot create an event with a past end date")

        event = serializer.save()
        logger.info("Event %s created for %s", event.pk, event.start_date)
        return Response(
            {"success": True, "message": "Event created successfully", "data": EventSerializer(event).data},
            status=status.HTTP_201_CREATED,
        )

    def update(self, request: Request, pk=None) -> Response:
        event = get_object_or_404(Event, pk=pk)
        serializer = EventSerializer(event, data=request.data, partial=True)
        if not serializer.is_valid():
            return error_response(first_error(serializer.errors))
        event = serializer.save()
        return Response(
            {"success": True, "message": "Event updated successfully", "data": EventSerializer(event).data}
        )

    def destroy(self, request: Request, pk=None) -> Response:
        event = Event.objects.filter(pk=pk).first()
        if event is None:
            return error_response("Event not found", status.HTTP_404_NOT_FOUND)
        event.delete()
        return Response({"success": True, "message": "Event deleted successfully"})

    @action(detail=False, methods=["get"], permission_classes=[IsAdminRole])
    def cleanup(self, request: Request) -> Response:
        count = delete_expired_events()
        return Response(
            {
                "success": True,
                "message": f"Cleanup completed. {count} expired events removed.",
                "deletedCount": count,
            }
        )
