"""
Seva Backend URL Configuration

Root routing for the project. Every functional app owns its own URL module
and is mounted under /api/.

URL Structure:
- /                : liveness message
- /health          : database and cache health check
- /admin/          : Django admin (jazzmin)
- /api/auth/, /api/admin/users/, /api/users/ : accounts
- /api/landing/, /api/news/, /api/events/, ... : content
- /api/books/, /api/coupons/, /api/pdf-payment/, /api/donations/, /api/membership/ : commerce

Author: Seva Development Team
Version: 1.0.0
"""

from django.contrib import admin
from django.urls import include, path

from core import views as core_views

handler404 = "core.views.route_not_found"
handler500 = "core.views.server_error"

urlpatterns = [
    path("", core_views.root, name="root"),
    path("health", core_views.health, name="health"),
    path("admin/", admin.site.urls),
    path("api/", include("accounts.urls")),
    path("api/", include("content.urls")),
    path("api/", include("commerce.urls")),
]
