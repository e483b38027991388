"""
Content URL Configuration

URL Structure (mounted under /api/):
- landing/...                 : public landing page reads
- admin/banners|messages|cards/ : landing page administration
- admin/foundation/, admin/gopalpariwar/ : foundations and profiles
- news/, events/, gaushalas/, sansthans/
- jevansutra/, gaumata-bhajans/, gaumata-categories/ : audio catalogue
- privacy-policy/, terms-conditions/, send-message/, message-submit/

Author: Seva Development Team
Version: 1.0.0
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from . import views

app_name = "content"


def _create_content_router() -> DefaultRouter:
    router = DefaultRouter()
    router.include_root_view = False
    router.register(r"admin/banners", views.BannerAdminViewSet, basename="admin-banners")
    router.register(r"admin/messages", views.DirectorMessageAdminViewSet, basename="admin-messages")
    router.register(r"admin/cards", views.CardAdminViewSet, basename="admin-cards")
    router.register(r"admin/foundation", views.FoundationViewSet, basename="foundation")
    router.register(r"admin/gopalpariwar", views.GopalPariwarViewSet, basename="gopalpariwar")
    router.register(r"news", views.NewsViewSet, basename="news")
    router.register(r"events", views.EventViewSet, basename="events")
    router.register(r"gaushalas", views.GaushalaViewSet, basename="gaushalas")
    router.register(r"sansthans", views.SansthanViewSet, basename="sansthans")
    router.register(r"jevansutra", views.BhajanViewSet, basename="jevansutra")
    router.register(r"gaumata-bhajans", views.GaumataBhajanViewSet, basename="gaumata-bhajans")
    router.register(r"gaumata-categories", views.BhajanCategoryViewSet, basename="gaumata-categories")
    return router


content_router = _create_content_router()

landing_urlpatterns = [
    path("banners/", views.LandingBannersView.as_view(), name="landing-banners"),
    path("quote/", views.LandingQuoteView.as_view(), name="landing-quote"),
    path("cards/", views.LandingCardsView.as_view(), name="landing-cards"),
    path("foundations/", views.LandingFoundationsView.as_view(), name="landing-foundations"),
    path("gopal-pariwar/", views.LandingGopalPariwarView.as_view(), name="landing-gopal-pariwar"),
]

urlpatterns = [
    path("landing/", include(landing_urlpatterns)),
    path("jevansutra/audio/stream/<str:filename>/", views.AudioStreamView.as_view(), name="audio-stream"),
    path("jevansutra/audio/download/<str:filename>/", views.AudioDownloadView.as_view(), name="audio-download"),
    path(
        "gaumata-bhajans/audio/stream/<str:filename>/",
        views.AudioStreamView.as_view(),
        name="gaumata-audio-stream",
    ),
    path(
        "gaumata-bhajans/audio/download/<str:filename>/",
        views.AudioDownloadView.as_view(),
        name="gaumata-audio-download",
    ),
    path("privacy-policy/", views.PrivacyPolicyView.as_view(), name="privacy-policy"),
    path("terms-conditions/", views.TermsConditionsView.as_view(), name="terms-conditions"),
    path("send-message/", views.SendMessageView.as_view(), name="send-message"),
    path("message-submit/", views.GauKathaBookingView.as_view(), name="gau-katha-booking"),
    path("", include(content_router.urls)),
]
