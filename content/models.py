"""
Content Models

Data models for the public website content managed from the admin
dashboard: landing page blocks, news, events, foundations, the Gopal
Pariwar profiles, gaushala and sansthan directories, bhajan audio and the
legal pages.

Media is stored in object storage. Models keep both the public URL and
the storage key so the object can be removed when a row is deleted or its
file replaced.

Author: Seva Development Team
Version: 1.0.0
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class TimestampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


# ------------------------------------------------------------
# Landing page
# ------------------------------------------------------------


class Banner(TimestampedModel):
    """Hero slider image on the landing page."""

    title = models.CharField(_("Title"), max_length=255, blank=True)
    image_url = models.URLField(_("Image URL"), max_length=500)
    image_key = models.CharField(max_length=255, blank=True)
    order = models.IntegerField(_("Order"), default=0)

    class Meta:
        verbose_name = _("Banner")
        verbose_name_plural = _("Banners")
        ordering = ["order", "id"]

    def __str__(self):
        return self.title or f"Banner {self.pk}"


class Card(TimestampedModel):
    """Link card with a bilingual title shown below the slider."""

    title = models.CharField(_("Title"), max_length=255)
    title_en = models.CharField(_("Title (English)"), max_length=255, blank=True)
    link = models.CharField(_("Link"), max_length=500)
    image = models.CharField(_("Image"), max_length=500, blank=True)
    order = models.IntegerField(_("Order"), default=0)

    class Meta:
        verbose_name = _("Card")
        verbose_name_plural = _("Cards")
        ordering = ["order", "id"]

    def __str__(self):
        return self.title


class DirectorMessage(models.Model):
    """Quote of the director; the newest one is shown."""

    info = models.TextField(_("Message"))
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Director Message")
        verbose_name_plural = _("Director Messages")
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return self.info[:50]


# ------------------------------------------------------------
# News & events
# ------------------------------------------------------------


class News(TimestampedModel):
    """
    News article.

    Attributes:
        title / title_en: Hindi and English headline
        slug: Unique, derived from the English headline
        content: List of paragraphs (or a single string) from the editor
        tags: List of tag strings
        views: Incremented on every detail read
    """

    title = models.CharField(_("Title"), max_length=255)
    title_en = models.CharField(_("Title (English)"), max_length=255)
    slug = models.SlugField(_("Slug"), max_length=280, unique=True)
    excerpt = models.TextField(_("Excerpt"))
    content = models.JSONField(_("Content"), default=list, blank=True)
    image_url = models.URLField(_("Image URL"), max_length=500, blank=True)
    image_key = models.CharField(max_length=255, blank=True)
    category = models.CharField(_("Category"), max_length=100, db_index=True)
    date = models.DateField(_("Date"))
    read_time = models.CharField(_("Read time"), max_length=50)
    author = models.CharField(_("Author"), max_length=150, blank=True)
    featured = models.BooleanField(_("Featured"), default=False)
    tags = models.JSONField(_("Tags"), default=list, blank=True)
    views = models.PositiveIntegerField(_("Views"), default=0)

    class Meta:
        verbose_name = _("News")
        verbose_name_plural = _("News")
        ordering = ["-date", "-created_at"]

    def __str__(self):
        return self.title_en or self.title


class EventQuerySet(models.QuerySet):
    def expired(self):
        return self.filter(end_date__lt=timezone.localdate())


class Event(TimestampedModel):
    """Dated event; removed automatically once its end date has passed."""

    DEFAULT_COLOR = "from-orange-500 to-red-500"

    title = models.CharField(_("Title"), max_length=255)
    start_date = models.DateField(_("Start date"))
    end_date = models.DateField(_("End date"), db_index=True)
    time = models.CharField(_("Time"), max_length=100, blank=True)
    location = models.CharField(_("Location"), max_length=255)
    duration = models.CharField(_("Duration"), max_length=100)
    description = models.TextField(_("Description"), blank=True)
    color = models.CharField(_("Color"), max_length=100, default=DEFAULT_COLOR)
    live_links = models.JSONField(_("Live links"), default=list, blank=True)

    objects = EventQuerySet.as_manager()

    class Meta:
        verbose_name = _("Event")
        verbose_name_plural = _("Events")
        ordering = ["start_date", "id"]

    def __str__(self):
        return self.title

    @property
    def is_expired(self) -> bool:
        return self.end_date < timezone.localdate()


# ------------------------------------------------------------
# Foundations
# ------------------------------------------------------------


class Foundation(TimestampedModel):
    name = models.CharField(_("Name"), max_length=255)
    tagline = models.CharField(_("Tagline"), max_length=255, blank=True)
    description = models.TextField(_("Description"), blank=True)
    logo_url = models.URLField(_("Logo URL"), max_length=500)
    logo_key = models.CharField(max_length=255, blank=True)
    established_year = models.PositiveIntegerField(_("Established year"), null=True, blank=True)
    is_active = models.BooleanField(_("Active"), default=True)
    order = models.IntegerField(_("Order"), default=0)

    class Meta:
        verbose_name = _("Foundation")
        verbose_name_plural = _("Foundations")
        ordering = ["order", "id"]

    def __str__(self):
        return self.name


class FoundationStat(models.Model):
    foundation = models.ForeignKey(Foundation, on_delete=models.CASCADE, related_name="stats")
    label = models.CharField(max_length=150)
    value = models.CharField(max_length=100)
    display_order = models.IntegerField(default=0)

    class Meta:
        ordering = ["display_order", "id"]


class FoundationActivity(models.Model):
    foundation = models.ForeignKey(Foundation, on_delete=models.CASCADE, related_name="activities")
    activity_text = models.TextField()
    display_order = models.IntegerField(default=0)

    class Meta:
        verbose_name_plural = "foundation activities"
        ordering = ["display_order", "id"]


class FoundationObjective(models.Model):
    foundation = models.ForeignKey(Foundation, on_delete=models.CASCADE, related_name="objectives")
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    objective_type = models.CharField(max_length=50, default="main")
    display_order = models.IntegerField(default=0)

    class Meta:
        ordering = ["display_order", "id"]


class FoundationContact(models.Model):
    foundation = models.OneToOneField(Foundation, on_delete=models.CASCADE, related_name="contact")
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=30, blank=True)
    address = models.TextField(blank=True)
    website = models.CharField(max_length=255, blank=True)
    social_media_links = models.JSONField(default=dict, blank=True)


# ------------------------------------------------------------
# Gopal Pariwar
# ------------------------------------------------------------


class GopalPariwar(TimestampedModel):
    """Profile page of a member of the Gopal Pariwar."""

    hero_image = models.URLField(_("Hero image"), max_length=500)
    hero_image_key = models.CharField(max_length=255, blank=True)
    hero_title = models.CharField(_("Hero title"), max_length=255, blank=True)
    hero_subtitle = models.CharField(_("Hero subtitle"), max_length=255, blank=True)
    personal_info = models.TextField(_("Personal info"), blank=True)
    spiritual_education = models.JSONField(_("Spiritual education"), default=list, blank=True)
    life_journey = models.TextField(_("Life journey"), blank=True)
    responsibilities = models.TextField(_("Responsibilities"), blank=True)
    pledges = models.TextField(_("Pledges"), blank=True)
    social_links = models.JSONField(_("Social links"), default=dict, blank=True)
    order = models.IntegerField(_("Order"), default=0)

    class Meta:
        verbose_name = _("Gopal Pariwar Profile")
        verbose_name_plural = _("Gopal Pariwar Profiles")
        ordering = ["order", "id"]

    def __str__(self):
        return self.hero_title or f"Gopal Pariwar {self.pk}"


# ------------------------------------------------------------
# Directories
# ------------------------------------------------------------


class Gaushala(TimestampedModel):
    name = models.CharField(_("Name"), max_length=255)
    address = models.TextField(_("Address"))
    city = models.CharField(_("City"), max_length=100)
    state = models.CharField(_("State"), max_length=100)
    pincode = models.CharField(_("Pincode"), max_length=10)
    establishment_date = models.DateField(_("Establishment date"))
    total_cows = models.PositiveIntegerField(_("Total cows"))
    capacity = models.PositiveIntegerField(_("Capacity"))
    contact_person = models.CharField(_("Contact person"), max_length=150)
    phone = models.CharField(_("Phone"), max_length=20)
    email = models.EmailField(_("Email"))
    description = models.TextField(_("Description"), blank=True)
    photo_url = models.URLField(_("Photo URL"), max_length=500)
    photo_key = models.CharField(max_length=255, blank=True)

    class Meta:
        verbose_name = _("Gaushala")
        verbose_name_plural = _("Gaushalas")
        ordering = ["-establishment_date", "-id"]

    def __str__(self):
        return f"{self.name} ({self.city})"


class Sansthan(TimestampedModel):
    name = models.CharField(_("Name"), max_length=255)
    person = models.CharField(_("Contact person"), max_length=150, blank=True)
    image_url = models.URLField(_("Image URL"), max_length=500, blank=True)
    image_key = models.CharField(max_length=255, blank=True)
    description = models.TextField(_("Description"), blank=True)
    email = models.EmailField(_("Email"))
    phone = models.CharField(_("Phone"), max_length=20)
    alt_phone = models.CharField(_("Alternative phone"), max_length=20, blank=True)
    website = models.CharField(_("Website"), max_length=255, blank=True)
    timing = models.CharField(_("Timing"), max_length=255, blank=True)

    class Meta:
        verbose_name = _("Sansthan")
        verbose_name_plural = _("Sansthans")
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return self.name


# ------------------------------------------------------------
# Audio
# ------------------------------------------------------------


class AbstractBhajan(TimestampedModel):
    name = models.CharField(_("Name"), max_length=255)
    artist = models.CharField(_("Artist"), max_length=255)
    album = models.CharField(_("Album"), max_length=255, blank=True, null=True)
    duration = models.CharField(_("Duration"), max_length=20, default="0:00")
    audio_key = models.CharField(_("Audio object"), max_length=255)
    image_url = models.URLField(_("Image URL"), max_length=500, blank=True, null=True)
    image_key = models.CharField(max_length=255, blank=True)

    class Meta:
        abstract = True
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.name} - {self.artist}"

    @property
    def audio_filename(self) -> str:
        return self.audio_key.rsplit("/", 1)[-1]


class Bhajan(AbstractBhajan):
    """Jeevan sutra audio track."""

    class Meta(AbstractBhajan.Meta):
        verbose_name = _("Bhajan")
        verbose_name_plural = _("Bhajans")


class BhajanCategory(TimestampedModel):
    name = models.CharField(_("Name"), max_length=100, unique=True)

    class Meta:
        verbose_name = _("Bhajan Category")
        verbose_name_plural = _("Bhajan Categories")
        ordering = ["name"]

    def __str__(self):
        return self.name


class GaumataBhajan(AbstractBhajan):
    category = models.ForeignKey(
        BhajanCategory,
        on_delete=models.PROTECT,
        related_name="bhajans",
        null=True,
        blank=True,
        verbose_name=_("Category"),
    )

    class Meta(AbstractBhajan.Meta):
        verbose_name = _("Gaumata Bhajan")
        verbose_name_plural = _("Gaumata Bhajans")


# ------------------------------------------------------------
# Legal pages
# ------------------------------------------------------------


class LegalDocument(TimestampedModel):
    """Privacy policy or terms & conditions page; one row per kind."""

    PRIVACY = "privacy"
    TERMS = "terms"
    KIND_CHOICES = [
        (PRIVACY, _("Privacy Policy")),
        (TERMS, _("Terms & Conditions")),
    ]

    kind = models.CharField(_("Kind"), max_length=10, choices=KIND_CHOICES, db_index=True)
    title = models.CharField(_("Title"), max_length=255, blank=True)
    subtitle = models.CharField(_("Subtitle"), max_length=255, blank=True)
    last_updated = models.DateTimeField(_("Last updated"), default=timezone.now)

    class Meta:
        verbose_name = _("Legal Document")
        verbose_name_plural = _("Legal Documents")

    def __str__(self):
        return f"{self.get_kind_display()}: {self.title}"


class LegalSection(models.Model):
    document = models.ForeignKey(LegalDocument, on_delete=models.CASCADE, related_name="sections")
    title = models.CharField(max_length=255)
    content = models.TextField(blank=True)
    order = models.IntegerField(default=0)

    class Meta:
        ordering = ["order", "id"]


class LegalContact(models.Model):
    document = models.OneToOneField(LegalDocument, on_delete=models.CASCADE, related_name="contact")
    email = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=50, blank=True)
    phone_hours = models.CharField(max_length=100, blank=True)
    address = models.TextField(blank=True)


# ------------------------------------------------------------
# Gau katha bookings
# ------------------------------------------------------------


class GauKathaBooking(models.Model):
    """Booking request for a gau katha; the admin is notified by email."""

    booking_id = models.CharField(_("Booking ID"), max_length=32, unique=True)
    name = models.CharField(_("Name"), max_length=150)
    contact = models.CharField(_("Contact"), max_length=20)
    email = models.EmailField(_("Email"))
    state = models.CharField(_("State"), max_length=100)
    city = models.CharField(_("City"), max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Gau Katha Booking")
        verbose_name_plural = _("Gau Katha Bookings")
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.booking_id} - {self.name}"
