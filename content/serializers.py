"""
Content Serializers

Output serializers render the camelCase JSON the frontend expects.
Write serializers parse multipart form input, where nested structures
arrive as JSON strings.

Author: Seva Development Team
Version: 1.0.0
"""

from django.urls import reverse
from rest_framework import serializers

from core.utils import parse_json_field

from .models import (
    Banner,
    BhajanCategory,
    Card,
    DirectorMessage,
    Event,
    Foundation,
    FoundationActivity,
    FoundationContact,
    FoundationObjective,
    FoundationStat,
    Gaushala,
    GopalPariwar,
    LegalContact,
    LegalDocument,
    LegalSection,
    News,
    Sansthan,
)


class JSONStringField(serializers.Field):
    """Accepts a list/dict either natively or as a JSON encoded form value."""

    def to_internal_value(self, data):
        return parse_json_field(data, self.field_name)

    def to_representation(self, value):
        return value


# ------------------------------------------------------------
# Landing page
# ------------------------------------------------------------


class BannerSerializer(serializers.ModelSerializer):
    imageUrl = serializers.CharField(source="image_url", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Banner
        fields = ["id", "title", "imageUrl", "order", "createdAt"]


class CardSerializer(serializers.ModelSerializer):
    titleEn = serializers.CharField(source="title_en", required=False, allow_blank=True)
    image = serializers.CharField(required=False, allow_blank=True)
    order = serializers.IntegerField(required=False)

    class Meta:
        model = Card
        fields = ["id", "title", "titleEn", "link", "image", "order"]


class DirectorMessageSerializer(serializers.ModelSerializer):
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = DirectorMessage
        fields = ["id", "info", "createdAt"]


# ------------------------------------------------------------
# News & events
# ------------------------------------------------------------


class NewsSerializer(serializers.ModelSerializer):
    titleEn = serializers.CharField(source="title_en")
    image = serializers.CharField(source="image_url", read_only=True)
    readTime = serializers.CharField(source="read_time")
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = News
        fields = [
            "id",
            "title",
            "titleEn",
            "slug",
            "excerpt",
            "content",
            "image",
            "category",
            "date",
            "readTime",
            "author",
            "featured",
            "tags",
            "views",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["slug", "views"]


class NewsWriteSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    titleEn = serializers.CharField(source="title_en", max_length=255)
    excerpt = serializers.CharField()
    category = serializers.CharField(max_length=100)
    date = serializers.DateField()
    readTime = serializers.CharField(source="read_time", max_length=50)
    author = serializers.CharField(required=False, allow_blank=True, max_length=150)
    featured = serializers.BooleanField(required=False)
    content = JSONStringField(required=False)
    tags = JSONStringField(required=False)

    def validate_tags(self, value):
        if value is None:
            return []
        if not isinstance(value, list):
            raise serializers.ValidationError("Tags must be a list")
        return value

    def validate_content(self, value):
        return [] if value is None else value


class EventSerializer(serializers.ModelSerializer):
    startDate = serializers.DateField(source="start_date")
    endDate = serializers.DateField(source="end_date")
    time = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    color = serializers.CharField(required=False, allow_blank=True)
    liveLinks = serializers.ListField(
        source="live_links", child=serializers.CharField(), required=False
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Event
        fields = [
            "id",
            "title",
            "startDate",
            "endDate",
            "time",
            "location",
            "duration",
            "description",
            "color",
            "liveLinks",
            "createdAt",
        ]

    def validate_time(self, value):
        return value or ""

    def validate_description(self, value):
        return value or ""

    def validate_color(self, value):
        return value or Event.DEFAULT_COLOR

    def validate(self, attrs):
        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and start > end:
            raise serializers.ValidationError("Start date cannot be after end date")
        return attrs


# ------------------------------------------------------------
# Foundations
# ------------------------------------------------------------


class FoundationStatSerializer(serializers.ModelSerializer):
    displayOrder = serializers.IntegerField(source="display_order", required=False, default=0)

    class Meta:
        model = FoundationStat
        fields = ["id", "label", "value", "displayOrder"]


class FoundationActivitySerializer(serializers.ModelSerializer):
    activityText = serializers.CharField(source="activity_text")
    displayOrder = serializers.IntegerField(source="display_order", required=False, default=0)

    class Meta:
        model = FoundationActivity
        fields = ["id", "activityText", "displayOrder"]


class FoundationObjectiveSerializer(serializers.ModelSerializer):
    objectiveType = serializers.CharField(source="objective_type", required=False, default="main")
    displayOrder = serializers.IntegerField(source="display_order", required=False, default=0)
    description = serializers.CharField(required=False, allow_blank=True, default="")

    class Meta:
        model = FoundationObjective
        fields = ["id", "title", "description", "objectiveType", "displayOrder"]


class FoundationContactSerializer(serializers.ModelSerializer):
    socialMediaLinks = serializers.JSONField(source="social_media_links", required=False, default=dict)

    class Meta:
        model = FoundationContact
        fields = ["email", "phone", "address", "website", "socialMediaLinks"]
        extra_kwargs = {
            "email": {"required": False, "allow_blank": True},
            "phone": {"required": False, "allow_blank": True},
            "address": {"required": False, "allow_blank": True},
            "website": {"required": False, "allow_blank": True},
        }


class FoundationSerializer(serializers.ModelSerializer):
    logoUrl = serializers.CharField(source="logo_url", read_only=True)
    establishedYear = serializers.IntegerField(source="established_year", read_only=True)
    isActive = serializers.BooleanField(source="is_active", read_only=True)
    stats = FoundationStatSerializer(many=True, read_only=True)
    activities = FoundationActivitySerializer(many=True, read_only=True)
    objectives = FoundationObjectiveSerializer(many=True, read_only=True)
    contact = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Foundation
        fields = [
            "id",
            "name",
            "tagline",
            "description",
            "logoUrl",
            "establishedYear",
            "isActive",
            "order",
            "stats",
            "activities",
            "objectives",
            "contact",
            "createdAt",
        ]

    def get_contact(self, obj):
        try:
            return FoundationContactSerializer(obj.contact).data
        except FoundationContact.DoesNotExist:
            return None


class FoundationWriteSerializer(serializers.Serializer):
    """
    Multipart input for create/update. ``stats``, ``activities``,
    ``objectives`` and ``contact`` are JSON strings.
    """

    name = serializers.CharField(max_length=255)
    tagline = serializers.CharField(required=False, allow_blank=True, max_length=255)
    description = serializers.CharField(required=False, allow_blank=True)
    establishedYear = serializers.IntegerField(
        source="established_year", required=False, allow_null=True, min_value=1
    )
    isActive = serializers.BooleanField(source="is_active", required=False)
    order = serializers.IntegerField(required=False, min_value=1)
    stats = JSONStringField(required=False)
    activities = JSONStringField(required=False)
    objectives = JSONStringField(required=False)
    contact = JSONStringField(required=False)

    def _validate_nested(self, value, serializer_class, many=True):
        if value is None:
            return None
        nested = serializer_class(data=value, many=many)
        nested.is_valid(raise_exception=True)
        return nested.validated_data

    def validate_stats(self, value):
        return self._validate_nested(value, FoundationStatSerializer)

    def validate_activities(self, value):
        return self._validate_nested(value, FoundationActivitySerializer)

    def validate_objectives(self, value):
        return self._validate_nested(value, FoundationObjectiveSerializer)

    def validate_contact(self, value):
        return self._validate_nested(value, FoundationContactSerializer, many=False)


class FoundationLandingSerializer(serializers.ModelSerializer):
    logoUrl = serializers.CharField(source="logo_url", read_only=True)

    class Meta:
        model = Foundation
        fields = ["id", "name", "logoUrl"]


# ------------------------------------------------------------
# Gopal Pariwar
# ------------------------------------------------------------


class GopalPariwarSerializer(serializers.ModelSerializer):
    heroImage = serializers.CharField(source="hero_image", read_only=True)
    heroTitle = serializers.CharField(source="hero_title", required=False, allow_blank=True)
    heroSubtitle = serializers.CharField(source="hero_subtitle", required=False, allow_blank=True)
    personalInfo = serializers.CharField(source="personal_info", required=False, allow_blank=True)
    spiritualEducation = JSONStringField(source="spiritual_education", required=False)
    lifeJourney = serializers.CharField(source="life_journey", required=False, allow_blank=True)
    responsibilities = serializers.CharField(required=False, allow_blank=True)
    pledges = serializers.CharField(required=False, allow_blank=True)
    socialLinks = JSONStringField(source="social_links", required=False)
    order = serializers.IntegerField(required=False, min_value=1)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = GopalPariwar
        fields = [
            "id",
            "heroImage",
            "heroTitle",
            "heroSubtitle",
            "personalInfo",
            "spiritualEducation",
            "lifeJourney",
            "responsibilities",
            "pledges",
            "socialLinks",
            "order",
            "createdAt",
        ]

    def validate_spiritualEducation(self, value):
        return [] if value is None else value

    def validate_socialLinks(self, value):
        return {} if value is None else value


# ------------------------------------------------------------
# Directories
# ------------------------------------------------------------


class GaushalaSerializer(serializers.ModelSerializer):
    establishmentDate = serializers.DateField(source="establishment_date")
    totalCows = serializers.IntegerField(source="total_cows", min_value=0)
    capacity = serializers.IntegerField(min_value=0)
    contactPerson = serializers.CharField(source="contact_person", max_length=150)
    description = serializers.CharField(required=False, allow_blank=True)
    photo = serializers.CharField(source="photo_url", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Gaushala
        fields = [
            "id",
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
            "description",
            "photo",
            "createdAt",
        ]


class SansthanSerializer(serializers.ModelSerializer):
    image = serializers.CharField(source="image_url", read_only=True)
    altPhone = serializers.CharField(source="alt_phone", required=False, allow_blank=True)
    person = serializers.CharField(required=False, allow_blank=True)
    website = serializers.CharField(required=False, allow_blank=True)
    timing = serializers.CharField(required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Sansthan
        fields = [
            "id",
            "name",
            "person",
            "image",
            "description",
            "email",
            "phone",
            "altPhone",
            "website",
            "timing",
            "createdAt",
        ]


# ------------------------------------------------------------
# Audio
# ------------------------------------------------------------


class BhajanSerializer(serializers.Serializer):
    """Read-only rendering shared by both bhajan models."""

    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(read_only=True)
    artist = serializers.CharField(read_only=True)
    album = serializers.CharField(read_only=True, allow_null=True)
    duration = serializers.CharField(read_only=True)
    audioUrl = serializers.SerializerMethodField()
    imageUrl = serializers.CharField(source="image_url", read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    def get_audioUrl(self, obj):
        path = reverse("content:audio-stream", args=[obj.audio_filename])
        request = self.context.get("request")
        return request.build_absolute_uri(path) if request else path


class GaumataBhajanSerializer(BhajanSerializer):
    categoryId = serializers.IntegerField(source="category_id", read_only=True, allow_null=True)
    category = serializers.SerializerMethodField()

    def get_category(self, obj):
        return obj.category.name if obj.category_id else None


class BhajanWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    artist = serializers.CharField(max_length=255)
    album = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    duration = serializers.CharField(required=False, allow_blank=True, max_length=20)
    category = serializers.CharField(required=False, allow_blank=True, max_length=100)

    def validate_album(self, value):
        return value or None


class BhajanCategorySerializer(serializers.ModelSerializer):
    bhajanCount = serializers.IntegerField(source="bhajan_count", read_only=True, default=0)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = BhajanCategory
        fields = ["id", "name", "bhajanCount", "createdAt"]


# ------------------------------------------------------------
# Legal pages
# ------------------------------------------------------------


class LegalSectionSerializer(serializers.ModelSerializer):
    content = serializers.CharField(required=False, allow_blank=True, default="")
    order = serializers.IntegerField(required=False, default=0)

    class Meta:
        model = LegalSection
        fields = ["id", "title", "content", "order"]


class LegalContactSerializer(serializers.ModelSerializer):
    phoneHours = serializers.CharField(source="phone_hours", required=False, allow_blank=True, default="")

    class Meta:
        model = LegalContact
        fields = ["email", "phone", "phoneHours", "address"]
        extra_kwargs = {
            "email": {"required": False, "allow_blank": True, "default": ""},
            "phone": {"required": False, "allow_blank": True, "default": ""},
            "address": {"required": False, "allow_blank": True, "default": ""},
        }


class LegalDocumentSerializer(serializers.ModelSerializer):
    lastUpdated = serializers.DateTimeField(source="last_updated", required=False)
    sections = LegalSectionSerializer(many=True, required=False)
    contact = LegalContactSerializer(required=False)
    title = serializers.CharField(required=False, allow_blank=True, default="")
    subtitle = serializers.CharField(required=False, allow_blank=True, default="")

    class Meta:
        model = LegalDocument
        fields = ["id", "title", "subtitle", "lastUpdated", "sections", "contact"]


# ------------------------------------------------------------
# Messages
# ------------------------------------------------------------

INDIAN_MOBILE_REGEX = r"^[6-9]\d{9}$"


def _normalize_mobile(value: str) -> str:
    return "".join(str(value).split())


class ContactMessageSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField(error_messages={"invalid": "Invalid email format"})
    mobile = serializers.RegexField(
        INDIAN_MOBILE_REGEX, error_messages={"invalid": "Invalid mobile number"}
    )
    message = serializers.CharField()

    def to_internal_value(self, data):
        if hasattr(data, "copy"):
            data = data.copy()
        if data.get("mobile"):
            data["mobile"] = _normalize_mobile(data["mobile"])
        return super().to_internal_value(data)


class GauKathaBookingSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    contact = serializers.RegexField(
        INDIAN_MOBILE_REGEX, error_messages={"invalid": "कृपया सही मोबाइल नंबर दर्ज करें / Please enter a valid 10-digit mobile number"}
    )
    state = serializers.CharField(max_length=100)
    city = serializers.CharField(max_length=100)
    email = serializers.EmailField(error_messages={"invalid": "Invalid email format"})

    def to_internal_value(self, data):
        if hasattr(data, "copy"):
            data = data.copy()
        if data.get("contact"):
            data["contact"] = _normalize_mobile(data["contact"])
        return super().to_internal_value(data)
