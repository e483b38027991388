import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Banner",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(blank=True, max_length=255, verbose_name="Title")),
                ("image_url", models.URLField(max_length=500, verbose_name="Image URL")),
                ("image_key", models.CharField(blank=True, max_length=255)),
                ("order", models.IntegerField(default=0, verbose_name="Order")),
            ],
            options={
                "verbose_name": "Banner",
                "verbose_name_plural": "Banners",
                "ordering": ["order", "id"],
            },
        ),
        migrations.CreateModel(
            name="Card",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(max_length=255, verbose_name="Title")),
                ("title_en", models.CharField(blank=True, max_length=255, verbose_name="Title (English)")),
                ("link", models.CharField(max_length=500, verbose_name="Link")),
                ("image", models.CharField(blank=True, max_length=500, verbose_name="Image")),
                ("order", models.IntegerField(default=0, verbose_name="Order")),
            ],
            options={
                "verbose_name": "Card",
                "verbose_name_plural": "Cards",
                "ordering": ["order", "id"],
            },
        ),
        migrations.CreateModel(
            name="DirectorMessage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("info", models.TextField(verbose_name="Message")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Director Message",
                "verbose_name_plural": "Director Messages",
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="News",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(max_length=255, verbose_name="Title")),
                ("title_en", models.CharField(max_length=255, verbose_name="Title (English)")),
                ("slug", models.SlugField(max_length=280, unique=True, verbose_name="Slug")),
                ("excerpt", models.TextField(verbose_name="Excerpt")),
                ("content", models.JSONField(blank=True, default=list, verbose_name="Content")),
                ("image_url", models.URLField(blank=True, max_length=500, verbose_name="Image URL")),
                ("image_key", models.CharField(blank=True, max_length=255)),
                ("category", models.CharField(db_index=True, max_length=100, verbose_name="Category")),
                ("date", models.DateField(verbose_name="Date")),
                ("read_time", models.CharField(max_length=50, verbose_name="Read time")),
                ("author", models.CharField(blank=True, max_length=150, verbose_name="Author")),
                ("featured", models.BooleanField(default=False, verbose_name="Featured")),
                ("tags", models.JSONField(blank=True, default=list, verbose_name="Tags")),
                ("views", models.PositiveIntegerField(default=0, verbose_name="Views")),
            ],
            options={
                "verbose_name": "News",
                "verbose_name_plural": "News",
                "ordering": ["-date", "-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(max_length=255, verbose_name="Title")),
                ("start_date", models.DateField(verbose_name="Start date")),
                ("end_date", models.DateField(db_index=True, verbose_name="End date")),
                ("time", models.CharField(blank=True, max_length=100, verbose_name="Time")),
                ("location", models.CharField(max_length=255, verbose_name="Location")),
                ("duration", models.CharField(max_length=100, verbose_name="Duration")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                ("color", models.CharField(default="from-orange-500 to-red-500", max_length=100, verbose_name="Color")),
                ("live_links", models.JSONField(blank=True, default=list, verbose_name="Live links")),
            ],
            options={
                "verbose_name": "Event",
                "verbose_name_plural": "Events",
                "ordering": ["start_date", "id"],
            },
        ),
        migrations.CreateModel(
            name="Foundation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                ("tagline", models.CharField(blank=True, max_length=255, verbose_name="Tagline")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                ("logo_url", models.URLField(max_length=500, verbose_name="Logo URL")),
                ("logo_key", models.CharField(blank=True, max_length=255)),
                ("established_year", models.PositiveIntegerField(blank=True, null=True, verbose_name="Established year")),
                ("is_active", models.BooleanField(default=True, verbose_name="Active")),
                ("order", models.IntegerField(default=0, verbose_name="Order")),
            ],
            options={
                "verbose_name": "Foundation",
                "verbose_name_plural": "Foundations",
                "ordering": ["order", "id"],
            },
        ),
        migrations.CreateModel(
            name="FoundationStat",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("label", models.CharField(max_length=150)),
                ("value", models.CharField(max_length=100)),
                ("display_order", models.IntegerField(default=0)),
                ("foundation", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="stats", to="content.foundation")),
            ],
            options={
                "ordering": ["display_order", "id"],
            },
        ),
        migrations.CreateModel(
            name="FoundationActivity",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("activity_text", models.TextField()),
                ("display_order", models.IntegerField(default=0)),
                ("foundation", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="activities", to="content.foundation")),
            ],
            options={
                "verbose_name_plural": "foundation activities",
                "ordering": ["display_order", "id"],
            },
        ),
        migrations.CreateModel(
            name="FoundationObjective",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("objective_type", models.CharField(default="main", max_length=50)),
                ("display_order", models.IntegerField(default=0)),
                ("foundation", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="objectives", to="content.foundation")),
            ],
            options={
                "ordering": ["display_order", "id"],
            },
        ),
        migrations.CreateModel(
            name="FoundationContact",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("email", models.EmailField(blank=True, max_length=254)),
                ("phone", models.CharField(blank=True, max_length=30)),
                ("address", models.TextField(blank=True)),
                ("website", models.CharField(blank=True, max_length=255)),
                ("social_media_links", models.JSONField(blank=True, default=dict)),
                ("foundation", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="contact", to="content.foundation")),
            ],
        ),
        migrations.CreateModel(
            name="GopalPariwar",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("hero_image", models.URLField(max_length=500, verbose_name="Hero image")),
                ("hero_image_key", models.CharField(blank=True, max_length=255)),
                ("hero_title", models.CharField(blank=True, max_length=255, verbose_name="Hero title")),
                ("hero_subtitle", models.CharField(blank=True, max_length=255, verbose_name="Hero subtitle")),
                ("personal_info", models.TextField(blank=True, verbose_name="Personal info")),
                ("spiritual_education", models.JSONField(blank=True, default=list, verbose_name="Spiritual education")),
                ("life_journey", models.TextField(blank=True, verbose_name="Life journey")),
                ("responsibilities", models.TextField(blank=True, verbose_name="Responsibilities")),
                ("pledges", models.TextField(blank=True, verbose_name="Pledges")),
                ("social_links", models.JSONField(blank=True, default=dict, verbose_name="Social links")),
                ("order", models.IntegerField(default=0, verbose_name="Order")),
            ],
            options={
                "verbose_name": "Gopal Pariwar Profile",
                "verbose_name_plural": "Gopal Pariwar Profiles",
                "ordering": ["order", "id"],
            },
        ),
        migrations.CreateModel(
            name="Gaushala",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                ("address", models.TextField(verbose_name="Address")),
                ("city", models.CharField(max_length=100, verbose_name="City")),
                ("state", models.CharField(max_length=100, verbose_name="State")),
                ("pincode", models.CharField(max_length=10, verbose_name="Pincode")),
                ("establishment_date", models.DateField(verbose_name="Establishment date")),
                ("total_cows", models.PositiveIntegerField(verbose_name="Total cows")),
                ("capacity", models.PositiveIntegerField(verbose_name="Capacity")),
                ("contact_person", models.CharField(max_length=150, verbose_name="Contact person")),
                ("phone", models.CharField(max_length=20, verbose_name="Phone")),
                ("email", models.EmailField(max_length=254, verbose_name="Email")),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                ("photo_url", models.URLField(max_length=500, verbose_name="Photo URL")),
                ("photo_key", models.CharField(blank=True, max_length=255)),
            ],
            options={
                "verbose_name": "Gaushala",
                "verbose_name_plural": "Gaushalas",
                "ordering": ["-establishment_date", "-id"],
            },
        ),
        migrations.CreateModel(
            name="Sansthan",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                ("person", models.CharField(blank=True, max_length=150, verbose_name="Contact person")),
                ("image_url", models.URLField(blank=True, max_length=500, verbose_name="Image URL")),
                ("image_key", models.CharField(blank=True, max_length=255)),
                ("description", models.TextField(blank=True, verbose_name="Description")),
                ("email", models.EmailField(max_length=254, verbose_name="Email")),
                ("phone", models.CharField(max_length=20, verbose_name="Phone")),
                ("alt_phone", models.CharField(blank=True, max_length=20, verbose_name="Alternative phone")),
                ("website", models.CharField(blank=True, max_length=255, verbose_name="Website")),
                ("timing", models.CharField(blank=True, max_length=255, verbose_name="Timing")),
            ],
            options={
                "verbose_name": "Sansthan",
                "verbose_name_plural": "Sansthans",
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="Bhajan",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                ("artist", models.CharField(max_length=255, verbose_name="Artist")),
                ("album", models.CharField(blank=True, max_length=255, null=True, verbose_name="Album")),
                ("duration", models.CharField(default="0:00", max_length=20, verbose_name="Duration")),
                ("audio_key", models.CharField(max_length=255, verbose_name="Audio object")),
                ("image_url", models.URLField(blank=True, max_length=500, null=True, verbose_name="Image URL")),
                ("image_key", models.CharField(blank=True, max_length=255)),
            ],
            options={
                "verbose_name": "Bhajan",
                "verbose_name_plural": "Bhajans",
                "ordering": ["-created_at", "-id"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="BhajanCategory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=100, unique=True, verbose_name="Name")),
            ],
            options={
                "verbose_name": "Bhajan Category",
                "verbose_name_plural": "Bhajan Categories",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="GaumataBhajan",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255, verbose_name="Name")),
                ("artist", models.CharField(max_length=255, verbose_name="Artist")),
                ("album", models.CharField(blank=True, max_length=255, null=True, verbose_name="Album")),
                ("duration", models.CharField(default="0:00", max_length=20, verbose_name="Duration")),
                ("audio_key", models.CharField(max_length=255, verbose_name="Audio object")),
                ("image_url", models.URLField(blank=True, max_length=500, null=True, verbose_name="Image URL")),
                ("image_key", models.CharField(blank=True, max_length=255)),
                ("category", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="bhajans", to="content.bhajancategory", verbose_name="Category")),
            ],
            options={
                "verbose_name": "Gaumata Bhajan",
                "verbose_name_plural": "Gaumata Bhajans",
                "ordering": ["-created_at", "-id"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="LegalDocument",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("kind", models.CharField(choices=[("privacy", "Privacy Policy"), ("terms", "Terms & Conditions")], db_index=True, max_length=10, verbose_name="Kind")),
                ("title", models.CharField(blank=True, max_length=255, verbose_name="Title")),
                ("subtitle", models.CharField(blank=True, max_length=255, verbose_name="Subtitle")),
                ("last_updated", models.DateTimeField(default=django.utils.timezone.now, verbose_name="Last updated")),
            ],
            options={
                "verbose_name": "Legal Document",
                "verbose_name_plural": "Legal Documents",
            },
        ),
        migrations.CreateModel(
            name="LegalSection",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255)),
                ("content", models.TextField(blank=True)),
                ("order", models.IntegerField(default=0)),
                ("document", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="sections", to="content.legaldocument")),
            ],
            options={
                "ordering": ["order", "id"],
            },
        ),
        migrations.CreateModel(
            name="LegalContact",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("email", models.CharField(blank=True, max_length=255)),
                ("phone", models.CharField(blank=True, max_length=50)),
                ("phone_hours", models.CharField(blank=True, max_length=100)),
                ("address", models.TextField(blank=True)),
                ("document", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="contact", to="content.legaldocument")),
            ],
        ),
        migrations.CreateModel(
            name="GauKathaBooking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("booking_id", models.CharField(max_length=32, unique=True, verbose_name="Booking ID")),
                ("name", models.CharField(max_length=150, verbose_name="Name")),
                ("contact", models.CharField(max_length=20, verbose_name="Contact")),
                ("email", models.EmailField(max_length=254, verbose_name="Email")),
                ("state", models.CharField(max_length=100, verbose_name="State")),
                ("city", models.CharField(max_length=100, verbose_name="City")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Gau Katha Booking",
                "verbose_name_plural": "Gau Katha Bookings",
                "ordering": ["-created_at"],
            },
        ),
    ]
