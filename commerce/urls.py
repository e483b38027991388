"""
Commerce URL Configuration

URL Structure (mounted under /api/):
- books/, books/pdf/download/<filename>/ : PDF catalogue and streaming
- coupons/                                 : coupon administration and validation
- pdf-payment/...                          : book checkout
- donations/...                            : donation checkout and admin reports
- membership/...                           : memberships, UPI AutoPay subscriptions,
                                             redemptions and the subscription webhook

Author: Seva Development Team
Version: 1.0.0
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from . import views

app_name = "commerce"


def _create_commerce_router() -> DefaultRouter:
    router = DefaultRouter()
    router.include_root_view = False
    router.register(r"books", views.BookViewSet, basename="books")
    router.register(r"coupons", views.BookCouponViewSet, basename="coupons")
    return router


commerce_router = _create_commerce_router()

pdf_payment_urlpatterns = [
    path("create-order/", views.CreateBookOrderView.as_view(), name="pdf-payment-create"),
    path("callback/", views.BookPaymentCallbackView.as_view(), name="pdf-payment-callback"),
    path("webhook/", views.BookPaymentWebhookView.as_view(), name="pdf-payment-webhook"),
    path("status/<str:transaction_id>/", views.BookPaymentStatusView.as_view(), name="pdf-payment-status"),
    path(
        "books/purchased/<int:user_id>/",
        views.PurchasedBooksView.as_view(),
        name="pdf-payment-purchased",
    ),
]

donation_urlpatterns = [
    path("", views.DonationListView.as_view(), name="donation-list"),
    path("stats/", views.DonationStatsView.as_view(), name="donation-stats"),
    path("create-order/", views.CreateDonationView.as_view(), name="donation-create"),
    path("callback/", views.DonationCallbackView.as_view(), name="donation-callback"),
    path("webhook/", views.DonationWebhookView.as_view(), name="donation-webhook"),
]

subscription_urlpatterns = [
    path("setup/", views.SubscriptionSetupView.as_view(), name="subscription-setup"),
    path(
        "order-status/<str:merchant_order_id>/",
        views.SubscriptionOrderStatusView.as_view(),
        name="subscription-order-status",
    ),
    path(
        "status/<str:merchant_subscription_id>/",
        views.SubscriptionStatusView.as_view(),
        name="subscription-status",
    ),
    path(
        "<str:merchant_subscription_id>/cancel/",
        views.CancelSubscriptionView.as_view(),
        name="subscription-cancel",
    ),
]

redemption_urlpatterns = [
    path("notify/", views.NotifyRedemptionView.as_view(), name="redemption-notify"),
    path("execute/", views.ExecuteRedemptionView.as_view(), name="redemption-execute"),
    path(
        "order-status/<str:merchant_order_id>/",
        views.RedemptionOrderStatusView.as_view(),
        name="redemption-order-status",
    ),
]

membership_urlpatterns = [
    path("", views.MembershipListView.as_view(), name="membership-list"),
    path("create-order/", views.CreateMembershipOrderView.as_view(), name="membership-create"),
    path("callback/", views.MembershipCallbackView.as_view(), name="membership-callback"),
    path("validate-vpa/", views.ValidateVpaView.as_view(), name="validate-vpa"),
    path(
        "<int:membership_id>/recurring-payments/",
        views.RecurringPaymentListView.as_view(),
        name="membership-recurring-payments",
    ),
    path("subscription/", include(subscription_urlpatterns)),
    path("redemption/", include(redemption_urlpatterns)),
    path("webhook/", views.SubscriptionWebhookView.as_view(), name="subscription-webhook"),
]

urlpatterns = [
    path("books/pdf/download/<str:filename>/", views.BookPdfDownloadView.as_view(), name="book-pdf-download"),
    path("pdf-payment/", include(pdf_payment_urlpatterns)),
    path("donations/", include(donation_urlpatterns)),
    path("membership/", include(membership_urlpatterns)),
    path("", include(commerce_router.urls)),
]
