"""
Commerce Serializers

camelCase output for books, coupons, orders, donations and memberships,
plus the write serializers that validate admin input.

Author: Seva Development Team
Version: 1.0.0
"""

from decimal import Decimal

from rest_framework import serializers

from .models import (
    Book,
    BookCoupon,
    BookOrder,
    BookPurchase,
    CouponType,
    Donation,
    MembershipPayment,
    RecurringPayment,
)

# ------------------------------------------------------------
# Books
# ------------------------------------------------------------


class BookSerializer(serializers.ModelSerializer):
    coverImage = serializers.CharField(source="cover_image", read_only=True)
    fileName = serializers.CharField(source="file_name", read_only=True)
    fileSize = serializers.CharField(source="file_size", read_only=True)
    uploadDate = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Book
        fields = [
            "id",
            "name",
            "author",
            "description",
            "price",
            "coverImage",
            "fileName",
            "fileSize",
            "uploadDate",
        ]


class BookDetailSerializer(BookSerializer):
    purchaseCount = serializers.IntegerField(source="purchase_count", read_only=True, default=0)

    class Meta(BookSerializer.Meta):
        fields = BookSerializer.Meta.fields + ["purchaseCount"]


class BookWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    author = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False)


class BookSummarySerializer(serializers.ModelSerializer):
    coverImage = serializers.CharField(source="cover_image", read_only=True)

    class Meta:
        model = Book
        fields = ["id", "name", "author", "coverImage"]


class BookPurchaseSerializer(serializers.ModelSerializer):
    """A purchase flattened with its book, as the dashboard lists them."""

    bookId = serializers.IntegerField(source="book_id", read_only=True)
    purchaseDate = serializers.DateTimeField(source="purchased_at", read_only=True)
    id = serializers.IntegerField(source="book.id", read_only=True)
    name = serializers.CharField(source="book.name", read_only=True)
    author = serializers.CharField(source="book.author", read_only=True)
    coverImage = serializers.CharField(source="book.cover_image", read_only=True)
    description = serializers.CharField(source="book.description", read_only=True)

    class Meta:
        model = BookPurchase
        fields = ["bookId", "purchaseDate", "id", "name", "author", "coverImage", "description"]


# ------------------------------------------------------------
# Coupons
# ------------------------------------------------------------


class BookCouponSerializer(serializers.ModelSerializer):
    expiresAt = serializers.DateTimeField(source="expires_at", read_only=True)
    usageLimit = serializers.IntegerField(source="usage_limit", read_only=True)
    timesUsed = serializers.IntegerField(source="times_used", read_only=True)
    orderCount = serializers.IntegerField(source="order_count", read_only=True, default=0)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = BookCoupon
        fields = [
            "id",
            "code",
            "discount",
            "type",
            "description",
            "active",
            "expiresAt",
            "usageLimit",
            "timesUsed",
            "orderCount",
            "createdAt",
        ]


class BookCouponWriteSerializer(serializers.Serializer):
    """
    Coupon input. ``partial=True`` validates updates, where every field is
    optional but the given ones follow the same rules.
    """

    code = serializers.CharField(max_length=50)
    discount = serializers.DecimalField(max_digits=10, decimal_places=2)
    type = serializers.CharField()
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    expiresAt = serializers.DateTimeField(source="expires_at", required=False, allow_null=True)
    usageLimit = serializers.IntegerField(source="usage_limit", required=False, allow_null=True, min_value=1)

    def validate_code(self, value):
        return value.strip().upper()

    def validate_type(self, value):
        value = value.strip().upper()
        if value not in CouponType.values:
            raise serializers.ValidationError("Type must be either PERCENTAGE or FIXED")
        return value

    def validate_discount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Discount must be greater than 0")
        return value

    def validate(self, attrs):
        coupon_type = attrs.get("type") or getattr(self.instance, "type", None)
        discount = attrs.get("discount", getattr(self.instance, "discount", None))
        if coupon_type == CouponType.PERCENTAGE and discount is not None and discount > 100:
            raise serializers.ValidationError("Percentage discount must be between 0 and 100")
        return attrs


# ------------------------------------------------------------
# Orders and payments
# ------------------------------------------------------------


class BookOrderSerializer(serializers.ModelSerializer):
    orderId = serializers.CharField(source="order_id", read_only=True)
    paymentId = serializers.CharField(source="payment_id", read_only=True)
    totalAmount = serializers.DecimalField(source="total_amount", max_digits=10, decimal_places=2, read_only=True)
    discountAmount = serializers.DecimalField(
        source="discount_amount", max_digits=10, decimal_places=2, read_only=True
    )
    finalAmount = serializers.DecimalField(source="final_amount", max_digits=10, decimal_places=2, read_only=True)
    couponCode = serializers.CharField(source="coupon.code", read_only=True, default=None)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = BookOrder
        fields = [
            "id",
            "orderId",
            "paymentId",
            "totalAmount",
            "discountAmount",
            "finalAmount",
            "couponCode",
            "status",
            "createdAt",
        ]


class DonationSerializer(serializers.ModelSerializer):
    paymentMethod = serializers.CharField(source="payment_method", read_only=True)
    transactionId = serializers.CharField(source="transaction_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Donation
        fields = ["id", "amount", "status", "paymentMethod", "transactionId", "createdAt"]


class DonationAdminSerializer(DonationSerializer):
    donor = serializers.SerializerMethodField()

    class Meta(DonationSerializer.Meta):
        fields = DonationSerializer.Meta.fields + ["donor"]

    def get_donor(self, obj):
        if obj.user is None:
            return None
        profile = getattr(obj.user, "profile", None)
        return {
            "id": obj.user.pk,
            "name": profile.name if profile else "",
            "email": obj.user.email,
            "phone": profile.phone if profile else "",
        }


class MembershipPaymentSerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source="user_id", read_only=True)
    membershipType = serializers.CharField(source="membership_type", read_only=True)
    paymentMethod = serializers.CharField(source="payment_method", read_only=True)
    transactionId = serializers.CharField(source="transaction_id", read_only=True)
    merchantOrderId = serializers.CharField(source="merchant_order_id", read_only=True)
    orderId = serializers.CharField(source="order_id", read_only=True)
    merchantSubscriptionId = serializers.CharField(source="merchant_subscription_id", read_only=True)
    phonePeSubscriptionId = serializers.CharField(source="phonepe_subscription_id", read_only=True)
    subscriptionState = serializers.CharField(source="subscription_state", read_only=True)
    subscriptionFrequency = serializers.CharField(source="subscription_frequency", read_only=True)
    recurringCount = serializers.IntegerField(source="recurring_count", read_only=True)
    subscriptionStartDate = serializers.DateTimeField(source="subscription_start_date", read_only=True)
    nextBillingDate = serializers.DateTimeField(source="next_billing_date", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = MembershipPayment
        fields = [
            "id",
            "userId",
            "name",
            "email",
            "phone",
            "address",
            "city",
            "state",
            "pincode",
            "membershipType",
            "amount",
            "status",
            "paymentMethod",
            "transactionId",
            "merchantOrderId",
            "orderId",
            "merchantSubscriptionId",
            "phonePeSubscriptionId",
            "subscriptionState",
            "subscriptionFrequency",
            "recurringCount",
            "subscriptionStartDate",
            "nextBillingDate",
            "createdAt",
        ]


class RecurringPaymentSerializer(serializers.ModelSerializer):
    membershipPaymentId = serializers.IntegerField(source="membership_id", read_only=True)
    merchantOrderId = serializers.CharField(source="merchant_order_id", read_only=True)
    orderId = serializers.CharField(source="order_id", read_only=True)
    dueDate = serializers.DateTimeField(source="due_date", read_only=True)
    notifiedAt = serializers.DateTimeField(source="notified_at", read_only=True)
    executedAt = serializers.DateTimeField(source="executed_at", read_only=True)
    completedAt = serializers.DateTimeField(source="completed_at", read_only=True)
    autoDebit = serializers.BooleanField(source="auto_debit", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = RecurringPayment
        fields = [
            "id",
            "membershipPaymentId",
            "merchantOrderId",
            "orderId",
            "amount",
            "status",
            "state",
            "dueDate",
            "notifiedAt",
            "executedAt",
            "completedAt",
            "autoDebit",
            "createdAt",
        ]


class MembershipContactSerializer(serializers.Serializer):
    """Contact block shared by the one-time and the AutoPay membership forms."""

    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=20)
    address = serializers.CharField(required=False, allow_blank=True, default="")
    city = serializers.CharField(required=False, allow_blank=True, default="")
    state = serializers.CharField(required=False, allow_blank=True, default="")
    pincode = serializers.CharField(required=False, allow_blank=True, default="")
