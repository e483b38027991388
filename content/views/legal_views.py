"""
Legal Page Views

Privacy policy and terms & conditions. Each page is a single document;
saving replaces the previous document together with its sections and
contact block.

Author: Seva Development Team
Version: 1.0.0
"""

import logging

from django.db import transaction
from django.http import JsonResponse
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import ReadOnlyOrAdmin

from ..models import LegalContact, LegalDocument, LegalSection
from ..serializers import LegalDocumentSerializer

logger = logging.getLogger(__name__)


class LegalDocumentView(APIView):
    kind = LegalDocument.PRIVACY
    permission_classes = [ReadOnlyOrAdmin]

    def get(self, request: Request) -> Response:
        document = (
            LegalDocument.objects.filter(kind=self.kind)
            .select_related("contact")
            .prefetch_related("sections")
            .first()
        )
        if document is None:
            # Literal JSON null until the first save
            return JsonResponse(None, safe=False)
        return Response(LegalDocumentSerializer(document).data)

    def post(self, request: Request) -> Response:
        serializer = LegalDocumentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        sections = data.pop("sections", [])
        contact = data.pop("contact", {})

        with transaction.atomic():
            LegalDocument.objects.filter(kind=self.kind).delete()
            document = LegalDocument.objects.create(kind=self.kind, **data)
            LegalContact.objects.create(document=document, **contact)
            LegalSection.objects.bulk_create(
                [LegalSection(document=document, **section) for section in sections]
            )

        logger.info("%s replaced by user %s", document.get_kind_display(), request.user.pk)
        return Response(LegalDocumentSerializer(document).data)


class PrivacyPolicyView(LegalDocumentView):
    kind = LegalDocument.PRIVACY


class TermsConditionsView(LegalDocumentView):
    kind = LegalDocument.TERMS
