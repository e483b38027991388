from .book_views import BookPdfDownloadView, BookViewSet
from .coupon_views import BookCouponViewSet
from .donation_views import (
    CreateDonationView,
    DonationCallbackView,
    DonationListView,
    DonationStatsView,
    DonationWebhookView,
)
from .membership_views import (
    CancelSubscriptionView,
    CreateMembershipOrderView,
    ExecuteRedemptionView,
    MembershipCallbackView,
    MembershipListView,
    NotifyRedemptionView,
    RecurringPaymentListView,
    RedemptionOrderStatusView,
    SubscriptionOrderStatusView,
    SubscriptionSetupView,
    SubscriptionStatusView,
    SubscriptionWebhookView,
    ValidateVpaView,
)
from .pdf_payment_views import (
    BookPaymentCallbackView,
    BookPaymentStatusView,
    BookPaymentWebhookView,
    CreateBookOrderView,
    PurchasedBooksView,
)
