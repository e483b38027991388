from .audio_views import (
    AudioDownloadView,
    AudioStreamView,
    BhajanCategoryViewSet,
    BhajanViewSet,
    GaumataBhajanViewSet,
)
from .directory_views import GaushalaViewSet, SansthanViewSet
from .event_views import EventViewSet
from .foundation_views import FoundationViewSet, GopalPariwarViewSet
from .landing_views import (
    BannerAdminViewSet,
    CardAdminViewSet,
    DirectorMessageAdminViewSet,
    LandingBannersView,
    LandingCardsView,
    LandingFoundationsView,
    LandingGopalPariwarView,
    LandingQuoteView,
)
from .legal_views import PrivacyPolicyView, TermsConditionsView
from .message_views import GauKathaBookingView, SendMessageView
from .news_views import NewsViewSet
