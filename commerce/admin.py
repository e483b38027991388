"""
Commerce Django Admin Configuration

Gateway-facing records (orders, payment log, recurring payments) are
read-mostly here: their state is driven by PhonePe callbacks.

Author: Seva Development Team
Version: 1.0.0
"""

from django.contrib import admin

from .models import (
    Book,
    BookCoupon,
    BookOrder,
    BookOrderItem,
    BookPurchase,
    Donation,
    MembershipPayment,
    Payment,
    RecurringPayment,
)


@admin.register(Book)
class BookAdmin(admin.ModelAdmin):
    list_display = ("name", "author", "price", "file_size", "created_at")
    search_fields = ("name", "author", "description")
    readonly_fields = ("file_key", "cover_image_key", "created_at", "updated_at")


@admin.register(BookCoupon)
class BookCouponAdmin(admin.ModelAdmin):
    list_display = ("code", "type", "discount", "active", "expires_at", "times_used", "usage_limit")
    list_filter = ("type", "active")
    list_editable = ("active",)
    search_fields = ("code", "description")
    readonly_fields = ("times_used",)


class BookOrderItemInline(admin.TabularInline):
    model = BookOrderItem
    extra = 0
    readonly_fields = ("book", "price")
    can_delete = False


@admin.register(BookOrder)
class BookOrderAdmin(admin.ModelAdmin):
    list_display = ("order_id", "user", "final_amount", "discount_amount", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("order_id", "payment_id", "user__email")
    list_select_related = ("user", "coupon")
    readonly_fields = ("order_id", "payment_id", "created_at", "updated_at")
    inlines = (BookOrderItemInline,)


@admin.register(BookPurchase)
class BookPurchaseAdmin(admin.ModelAdmin):
    list_display = ("user", "book", "access_granted", "purchased_at")
    list_filter = ("access_granted",)
    search_fields = ("user__email", "book__name")
    list_select_related = ("user", "book")


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("reference_id", "type", "amount", "status", "provider", "created_at")
    list_filter = ("type", "status")
    search_fields = ("reference_id", "user__email")
    date_hierarchy = "created_at"


@admin.register(Donation)
class DonationAdmin(admin.ModelAdmin):
    list_display = ("transaction_id", "user", "amount", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("transaction_id", "user__email")
    date_hierarchy = "created_at"


class RecurringPaymentInline(admin.TabularInline):
    model = RecurringPayment
    extra = 0
    fields = ("merchant_order_id", "amount", "status", "state", "notified_at", "executed_at", "completed_at")
    readonly_fields = fields
    can_delete = False


@admin.register(MembershipPayment)
class MembershipPaymentAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "email",
        "phone",
        "amount",
        "payment_method",
        "status",
        "subscription_state",
        "next_billing_date",
    )
    list_filter = ("status", "payment_method", "subscription_frequency")
    search_fields = ("name", "email", "phone", "merchant_order_id", "merchant_subscription_id")
    readonly_fields = ("callback_data", "created_at", "updated_at")
    inlines = (RecurringPaymentInline,)


@admin.register(RecurringPayment)
class RecurringPaymentAdmin(admin.ModelAdmin):
    list_display = ("merchant_order_id", "membership", "amount", "status", "state", "notified_at", "executed_at")
    list_filter = ("status",)
    search_fields = ("merchant_order_id", "membership__merchant_subscription_id")
    list_select_related = ("membership",)
