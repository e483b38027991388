import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Book",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                ("author", models.CharField(max_length=255, verbose_name="Author")),
                ("description", models.TextField(blank=True, null=True, verbose_name="Description")),
                ("price", models.DecimalField(decimal_places=2, max_digits=10, verbose_name="Price")),
                ("cover_image", models.URLField(blank=True, max_length=500, verbose_name="Cover image")),
                ("cover_image_key", models.CharField(blank=True, max_length=255)),
                ("file_key", models.CharField(max_length=255, verbose_name="PDF object key")),
                ("file_name", models.CharField(blank=True, max_length=255, verbose_name="File name")),
                ("file_size", models.CharField(blank=True, max_length=20, verbose_name="File size")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Uploaded at")),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Book",
                "verbose_name_plural": "Books",
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="BookCoupon",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=50, unique=True, verbose_name="Code")),
                ("discount", models.DecimalField(decimal_places=2, max_digits=10, verbose_name="Discount")),
                ("type", models.CharField(choices=[("PERCENTAGE", "Percentage"), ("FIXED", "Fixed amount")], max_length=10, verbose_name="Type")),
                ("description", models.TextField(blank=True, null=True, verbose_name="Description")),
                ("active", models.BooleanField(default=True, verbose_name="Active")),
                ("expires_at", models.DateTimeField(blank=True, null=True, verbose_name="Expires at")),
                ("usage_limit", models.PositiveIntegerField(blank=True, null=True, verbose_name="Usage limit")),
                ("times_used", models.PositiveIntegerField(default=0, verbose_name="Times used")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Book coupon",
                "verbose_name_plural": "Book coupons",
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="BookOrder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("order_id", models.CharField(max_length=64, unique=True, verbose_name="Merchant order id")),
                ("payment_id", models.CharField(blank=True, max_length=100, null=True, verbose_name="Gateway transaction id")),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=10)),
                ("discount_amount", models.DecimalField(decimal_places=2, default=Decimal("0"), max_digits=10)),
                ("final_amount", models.DecimalField(decimal_places=2, max_digits=10)),
                ("status", models.CharField(choices=[("PENDING", "Pending"), ("COMPLETED", "Completed"), ("FAILED", "Failed")], db_index=True, default="PENDING", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("coupon", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="orders", to="commerce.bookcoupon")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="book_orders", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Book order",
                "verbose_name_plural": "Book orders",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="BookOrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("book", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="order_items", to="commerce.book")),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="commerce.bookorder")),
            ],
        ),
        migrations.CreateModel(
            name="BookPurchase",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("access_granted", models.BooleanField(default=True, verbose_name="Access granted")),
                ("purchased_at", models.DateTimeField(auto_now_add=True, verbose_name="Purchased at")),
                ("book", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="purchases", to="commerce.book")),
                ("order", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="purchases", to="commerce.bookorder")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="book_purchases", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Book purchase",
                "verbose_name_plural": "Book purchases",
                "constraints": [models.UniqueConstraint(fields=("user", "book"), name="unique_book_purchase")],
            },
        ),
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("reference_id", models.CharField(db_index=True, max_length=100, verbose_name="Reference")),
                ("provider", models.CharField(default="PHONEPE", max_length=20)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=10)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("success", "Success"), ("failed", "Failed")], default="pending", max_length=10)),
                ("type", models.CharField(choices=[("book_purchase", "Book purchase"), ("donation", "Donation"), ("one_time", "One-time membership"), ("subscription_setup", "Subscription setup"), ("recurring_payment", "Recurring payment")], max_length=20)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="payments", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Payment log",
                "verbose_name_plural": "Payment log",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Donation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=10, verbose_name="Amount")),
                ("status", models.CharField(choices=[("pending", "Pending"), ("success", "Success"), ("failed", "Failed")], db_index=True, default="pending", max_length=10)),
                ("payment_method", models.CharField(default="phonepe", max_length=20)),
                ("transaction_id", models.CharField(max_length=64, unique=True, verbose_name="Merchant order id")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="donations", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Donation",
                "verbose_name_plural": "Donations",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="MembershipPayment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=150, verbose_name="Name")),
                ("email", models.EmailField(max_length=254, verbose_name="Email")),
                ("phone", models.CharField(max_length=20, verbose_name="Phone")),
                ("address", models.TextField(blank=True)),
                ("city", models.CharField(blank=True, max_length=100)),
                ("state", models.CharField(blank=True, max_length=100)),
                ("pincode", models.CharField(blank=True, max_length=10)),
                ("membership_type", models.CharField(blank=True, max_length=50, verbose_name="Membership type")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=10, verbose_name="Amount")),
                ("status", models.CharField(choices=[("pending", "Pending"), ("success", "Paid"), ("failed", "Failed"), ("active", "Active"), ("cancelled", "Cancelled"), ("revoked", "Revoked"), ("expired", "Expired"), ("paused", "Paused")], db_index=True, default="pending", max_length=10)),
                ("payment_method", models.CharField(default="PHONEPE", max_length=20)),
                ("transaction_id", models.CharField(blank=True, max_length=64)),
                ("merchant_order_id", models.CharField(max_length=64, unique=True)),
                ("order_id", models.CharField(blank=True, max_length=100, verbose_name="Gateway order id")),
                ("merchant_subscription_id", models.CharField(blank=True, max_length=64, null=True, unique=True)),
                ("phonepe_subscription_id", models.CharField(blank=True, max_length=100)),
                ("subscription_state", models.CharField(blank=True, max_length=30)),
                ("subscription_frequency", models.CharField(blank=True, choices=[("DAILY", "Daily"), ("WEEKLY", "Weekly"), ("FORTNIGHTLY", "Fortnightly"), ("MONTHLY", "Monthly"), ("BIMONTHLY", "Bimonthly"), ("QUARTERLY", "Quarterly"), ("HALFYEARLY", "Halfyearly"), ("YEARLY", "Yearly"), ("ON_DEMAND", "On Demand")], max_length=15)),
                ("amount_type", models.CharField(blank=True, max_length=10)),
                ("auth_workflow_type", models.CharField(blank=True, max_length=20)),
                ("recurring_count", models.PositiveIntegerField(blank=True, null=True)),
                ("vpa", models.CharField(blank=True, max_length=100, verbose_name="UPI VPA")),
                ("subscription_start_date", models.DateTimeField(blank=True, null=True)),
                ("next_billing_date", models.DateTimeField(blank=True, db_index=True, null=True)),
                ("provider_reference_id", models.CharField(blank=True, max_length=100)),
                ("pay_response_code", models.CharField(blank=True, max_length=50)),
                ("callback_data", models.JSONField(blank=True, null=True)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="memberships", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Membership payment",
                "verbose_name_plural": "Membership payments",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="RecurringPayment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("merchant_order_id", models.CharField(max_length=64, unique=True)),
                ("order_id", models.CharField(blank=True, max_length=100, verbose_name="Gateway order id")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=10)),
                ("status", models.CharField(choices=[("PENDING", "Pending"), ("SUCCESS", "Success"), ("FAILED", "Failed")], db_index=True, default="PENDING", max_length=10)),
                ("state", models.CharField(blank=True, max_length=40, verbose_name="Gateway state")),
                ("due_date", models.DateTimeField(blank=True, null=True)),
                ("notified_at", models.DateTimeField(blank=True, null=True)),
                ("executed_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("redemption_retry_strategy", models.CharField(default="STANDARD", max_length=20)),
                ("auto_debit", models.BooleanField(default=True)),
                ("provider_reference_id", models.CharField(blank=True, max_length=100)),
                ("pay_response_code", models.CharField(blank=True, max_length=50)),
                ("callback_data", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("membership", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="recurring_payments", to="commerce.membershippayment")),
            ],
            options={
                "verbose_name": "Recurring payment",
                "verbose_name_plural": "Recurring payments",
                "ordering": ["-created_at"],
            },
        ),
    ]
