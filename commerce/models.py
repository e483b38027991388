"""
Commerce Models

PDF book sales with coupons, donations, and memberships paid once or by
UPI AutoPay subscription. All money columns hold rupees; conversion to
paise happens at the gateway boundary.

Every gateway interaction leaves a row in ``Payment`` so the admin can
reconcile our records with the PhonePe dashboard.

Author: Seva Development Team
Version: 1.0.0
"""

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

# ------------------------------------------------------------
# Books and coupons
# ------------------------------------------------------------


class Book(models.Model):
    """A PDF book. The PDF itself is a private storage object."""

    name = models.CharField(_("Name"), max_length=255)
    author = models.CharField(_("Author"), max_length=255)
    description = models.TextField(_("Description"), blank=True, null=True)
    price = models.DecimalField(_("Price"), max_digits=10, decimal_places=2)
    cover_image = models.URLField(_("Cover image"), max_length=500, blank=True)
    cover_image_key = models.CharField(max_length=255, blank=True)
    file_key = models.CharField(_("PDF object key"), max_length=255)
    file_name = models.CharField(_("File name"), max_length=255, blank=True)
    file_size = models.CharField(_("File size"), max_length=20, blank=True)

    created_at = models.DateTimeField(_("Uploaded at"), auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Book")
        verbose_name_plural = _("Books")
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.name} ({self.author})"


class CouponType(models.TextChoices):
    PERCENTAGE = "PERCENTAGE", _("Percentage")
    FIXED = "FIXED", _("Fixed amount")


class BookCoupon(models.Model):
    code = models.CharField(_("Code"), max_length=50, unique=True)
    discount = models.DecimalField(_("Discount"), max_digits=10, decimal_places=2)
    type = models.CharField(_("Type"), max_length=10, choices=CouponType.choices)
    description = models.TextField(_("Description"), blank=True, null=True)
    active = models.BooleanField(_("Active"), default=True)
    expires_at = models.DateTimeField(_("Expires at"), null=True, blank=True)
    usage_limit = models.PositiveIntegerField(_("Usage limit"), null=True, blank=True)
    times_used = models.PositiveIntegerField(_("Times used"), default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Book coupon")
        verbose_name_plural = _("Book coupons")
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return self.code

    def save(self, *args, **kwargs):
        self.code = (self.code or "").strip().upper()
        super().save(*args, **kwargs)

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and self.expires_at <= timezone.now()

    @property
    def is_exhausted(self) -> bool:
        return self.usage_limit is not None and self.times_used >= self.usage_limit


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", _("Pending")
    COMPLETED = "COMPLETED", _("Completed")
    FAILED = "FAILED", _("Failed")


class BookOrder(models.Model):
    """One checkout. ``order_id`` is the merchant order id sent to PhonePe."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="book_orders"
    )
    coupon = models.ForeignKey(
        BookCoupon, on_delete=models.PROTECT, null=True, blank=True, related_name="orders"
    )
    order_id = models.CharField(_("Merchant order id"), max_length=64, unique=True)
    payment_id = models.CharField(_("Gateway transaction id"), max_length=100, blank=True, null=True)
    total_amount = models.DecimalField(max_digits=10, decimal_places=2)
    discount_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"))
    final_amount = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(
        max_length=10, choices=OrderStatus.choices, default=OrderStatus.PENDING, db_index=True
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Book order")
        verbose_name_plural = _("Book orders")
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.order_id} ({self.status})"


class BookOrderItem(models.Model):
    order = models.ForeignKey(BookOrder, on_delete=models.CASCADE, related_name="items")
    book = models.ForeignKey(Book, on_delete=models.CASCADE, related_name="order_items")
    price = models.DecimalField(max_digits=10, decimal_places=2)

    def __str__(self):
        return f"{self.book} in {self.order.order_id}"


class BookPurchase(models.Model):
    """Access right of a user to a book, created once its order completed."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="book_purchases"
    )
    book = models.ForeignKey(Book, on_delete=models.CASCADE, related_name="purchases")
    order = models.ForeignKey(
        BookOrder, on_delete=models.SET_NULL, null=True, blank=True, related_name="purchases"
    )
    access_granted = models.BooleanField(_("Access granted"), default=True)
    purchased_at = models.DateTimeField(_("Purchased at"), auto_now_add=True)

    class Meta:
        verbose_name = _("Book purchase")
        verbose_name_plural = _("Book purchases")
        constraints = [
            models.UniqueConstraint(fields=["user", "book"], name="unique_book_purchase"),
        ]

    def __str__(self):
        return f"{self.user} - {self.book}"


# ------------------------------------------------------------
# Payment log
# ------------------------------------------------------------


class PaymentStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    SUCCESS = "success", _("Success")
    FAILED = "failed", _("Failed")


class PaymentType(models.TextChoices):
    BOOK_PURCHASE = "book_purchase", _("Book purchase")
    DONATION = "donation", _("Donation")
    ONE_TIME = "one_time", _("One-time membership")
    SUBSCRIPTION_SETUP = "subscription_setup", _("Subscription setup")
    RECURRING_PAYMENT = "recurring_payment", _("Recurring payment")


class Payment(models.Model):
    """Gateway log entry keyed by the merchant reference sent to PhonePe."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payments",
    )
    reference_id = models.CharField(_("Reference"), max_length=100, db_index=True)
    provider = models.CharField(max_length=20, default="PHONEPE")
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(
        max_length=10, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )
    type = models.CharField(max_length=20, choices=PaymentType.choices)
    metadata = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Payment log")
        verbose_name_plural = _("Payment log")
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.type} {self.reference_id} ({self.status})"


# ------------------------------------------------------------
# Donations
# ------------------------------------------------------------


class Donation(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="donations",
    )
    amount = models.DecimalField(_("Amount"), max_digits=10, decimal_places=2)
    status = models.CharField(
        max_length=10, choices=PaymentStatus.choices, default=PaymentStatus.PENDING, db_index=True
    )
    payment_method = models.CharField(max_length=20, default="phonepe")
    transaction_id = models.CharField(_("Merchant order id"), max_length=64, unique=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Donation")
        verbose_name_plural = _("Donations")
        ordering = ["-created_at"]

    def __str__(self):
        return f"₹{self.amount} ({self.status})"


# ------------------------------------------------------------
# Memberships
# ------------------------------------------------------------


class MembershipStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    SUCCESS = "success", _("Paid")
    FAILED = "failed", _("Failed")
    ACTIVE = "active", _("Active")
    CANCELLED = "cancelled", _("Cancelled")
    REVOKED = "revoked", _("Revoked")
    EXPIRED = "expired", _("Expired")
    PAUSED = "paused", _("Paused")


class Frequency(models.TextChoices):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    FORTNIGHTLY = "FORTNIGHTLY"
    MONTHLY = "MONTHLY"
    BIMONTHLY = "BIMONTHLY"
    QUARTERLY = "QUARTERLY"
    HALFYEARLY = "HALFYEARLY"
    YEARLY = "YEARLY"
    ON_DEMAND = "ON_DEMAND"


class MembershipPayment(models.Model):
    """
    A membership purchase.

    One-time life memberships only use the contact and status columns.
    AutoPay memberships additionally track the mandate
    (``merchant_subscription_id``), its gateway state and the next
    billing date used by the redemption commands.
    """

    ONE_TIME = "PHONEPE"
    AUTOPAY = "UPI_AUTOPAY"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="memberships",
    )
    name = models.CharField(_("Name"), max_length=150)
    email = models.EmailField(_("Email"))
    phone = models.CharField(_("Phone"), max_length=20)
    address = models.TextField(blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    pincode = models.CharField(max_length=10, blank=True)
    membership_type = models.CharField(_("Membership type"), max_length=50, blank=True)
    amount = models.DecimalField(_("Amount"), max_digits=10, decimal_places=2)
    status = models.CharField(
        max_length=10,
        choices=MembershipStatus.choices,
        default=MembershipStatus.PENDING,
        db_index=True,
    )
    payment_method = models.CharField(max_length=20, default=ONE_TIME)
    transaction_id = models.CharField(max_length=64, blank=True)
    merchant_order_id = models.CharField(max_length=64, unique=True)
    order_id = models.CharField(_("Gateway order id"), max_length=100, blank=True)

    # AutoPay mandate
    merchant_subscription_id = models.CharField(max_length=64, unique=True, null=True, blank=True)
    phonepe_subscription_id = models.CharField(max_length=100, blank=True)
    subscription_state = models.CharField(max_length=30, blank=True)
    subscription_frequency = models.CharField(
        max_length=15, choices=Frequency.choices, blank=True
    )
    amount_type = models.CharField(max_length=10, blank=True)
    auth_workflow_type = models.CharField(max_length=20, blank=True)
    recurring_count = models.PositiveIntegerField(null=True, blank=True)
    vpa = models.CharField(_("UPI VPA"), max_length=100, blank=True)
    subscription_start_date = models.DateTimeField(null=True, blank=True)
    next_billing_date = models.DateTimeField(null=True, blank=True, db_index=True)
    provider_reference_id = models.CharField(max_length=100, blank=True)
    pay_response_code = models.CharField(max_length=50, blank=True)
    callback_data = models.JSONField(null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Membership payment")
        verbose_name_plural = _("Membership payments")
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.name} - {self.membership_type or self.payment_method} ({self.status})"

    @property
    def is_autopay(self) -> bool:
        return self.merchant_subscription_id is not None


class RedemptionStatus(models.TextChoices):
    PENDING = "PENDING", _("Pending")
    SUCCESS = "SUCCESS", _("Success")
    FAILED = "FAILED", _("Failed")


class RecurringPayment(models.Model):
    """One AutoPay debit: pre-debit notification, execution, outcome."""

    membership = models.ForeignKey(
        MembershipPayment, on_delete=models.CASCADE, related_name="recurring_payments"
    )
    merchant_order_id = models.CharField(max_length=64, unique=True)
    order_id = models.CharField(_("Gateway order id"), max_length=100, blank=True)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(
        max_length=10,
        choices=RedemptionStatus.choices,
        default=RedemptionStatus.PENDING,
        db_index=True,
    )
    state = models.CharField(_("Gateway state"), max_length=40, blank=True)
    due_date = models.DateTimeField(null=True, blank=True)
    notified_at = models.DateTimeField(null=True, blank=True)
    executed_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    redemption_retry_strategy = models.CharField(max_length=20, default="STANDARD")
    auto_debit = models.BooleanField(default=True)
    provider_reference_id = models.CharField(max_length=100, blank=True)
    pay_response_code = models.CharField(max_length=50, blank=True)
    callback_data = models.JSONField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Recurring payment")
        verbose_name_plural = _("Recurring payments")
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.merchant_order_id} ({self.status})"
