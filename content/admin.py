"""
Content Django Admin Configuration

Author: Seva Development Team
Version: 1.0.0
"""

from django.contrib import admin

from .models import (
    Banner,
    Bhajan,
    BhajanCategory,
    Card,
    DirectorMessage,
    Event,
    Foundation,
    FoundationActivity,
    FoundationContact,
    FoundationObjective,
    FoundationStat,
    GauKathaBooking,
    GaumataBhajan,
    Gaushala,
    GopalPariwar,
    LegalContact,
    LegalDocument,
    LegalSection,
    News,
    Sansthan,
)


@admin.register(Banner)
class BannerAdmin(admin.ModelAdmin):
    list_display = ("title", "order", "created_at")
    list_editable = ("order",)
    ordering = ("order",)


@admin.register(Card)
class CardAdmin(admin.ModelAdmin):
    list_display = ("title", "title_en", "link", "order")
    list_editable = ("order",)
    search_fields = ("title", "title_en")


@admin.register(DirectorMessage)
class DirectorMessageAdmin(admin.ModelAdmin):
    list_display = ("__str__", "created_at")


@admin.register(News)
class NewsAdmin(admin.ModelAdmin):
    list_display = ("title_en", "category", "date", "featured", "views")
    list_filter = ("category", "featured", "date")
    search_fields = ("title", "title_en", "excerpt")
    readonly_fields = ("views", "created_at", "updated_at")
    date_hierarchy = "date"


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("title", "start_date", "end_date", "location")
    list_filter = ("start_date",)
    search_fields = ("title", "location")


class FoundationStatInline(admin.TabularInline):
    model = FoundationStat
    extra = 0


class FoundationActivityInline(admin.TabularInline):
    model = FoundationActivity
    extra = 0


class FoundationObjectiveInline(admin.TabularInline):
    model = FoundationObjective
    extra = 0


class FoundationContactInline(admin.StackedInline):
    model = FoundationContact
    can_delete = False
    extra = 0


@admin.register(Foundation)
class FoundationAdmin(admin.ModelAdmin):
    list_display = ("name", "established_year", "is_active", "order")
    list_filter = ("is_active",)
    search_fields = ("name", "description")
    inlines = (
        FoundationContactInline,
        FoundationStatInline,
        FoundationActivityInline,
        FoundationObjectiveInline,
    )


@admin.register(GopalPariwar)
class GopalPariwarAdmin(admin.ModelAdmin):
    list_display = ("hero_title", "hero_subtitle", "order")
    ordering = ("order",)


@admin.register(Gaushala)
class GaushalaAdmin(admin.ModelAdmin):
    list_display = ("name", "city", "state", "total_cows", "capacity", "establishment_date")
    list_filter = ("state",)
    search_fields = ("name", "city", "state")


@admin.register(Sansthan)
class SansthanAdmin(admin.ModelAdmin):
    list_display = ("name", "person", "email", "phone")
    search_fields = ("name", "person", "email")


@admin.register(Bhajan)
class BhajanAdmin(admin.ModelAdmin):
    list_display = ("name", "artist", "album", "duration", "created_at")
    search_fields = ("name", "artist", "album")


@admin.register(GaumataBhajan)
class GaumataBhajanAdmin(admin.ModelAdmin):
    list_display = ("name", "artist", "category", "duration", "created_at")
    list_filter = ("category",)
    search_fields = ("name", "artist", "album")
    list_select_related = ("category",)


@admin.register(BhajanCategory)
class BhajanCategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "created_at")
    search_fields = ("name",)


class LegalSectionInline(admin.StackedInline):
    model = LegalSection
    extra = 0


class LegalContactInline(admin.StackedInline):
    model = LegalContact
    can_delete = False
    extra = 0


@admin.register(LegalDocument)
class LegalDocumentAdmin(admin.ModelAdmin):
    list_display = ("kind", "title", "last_updated")
    inlines = (LegalContactInline, LegalSectionInline)


@admin.register(GauKathaBooking)
class GauKathaBookingAdmin(admin.ModelAdmin):
    list_display = ("booking_id", "name", "contact", "city", "state", "created_at")
    search_fields = ("booking_id", "name", "email", "contact")
    readonly_fields = ("booking_id", "created_at")
