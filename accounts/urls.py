"""
Accounts URL Configuration

URL Structure:
- /api/auth/...            : signup, OTP, login, refresh, logout, password reset
- /api/admin/users/...     : admin user management (router)
- /api/users/<id>/data/    : dashboard data of one account

Author: Seva Development Team
Version: 1.0.0
"""

from typing import List

from django.urls import URLPattern, include, path
from rest_framework.routers import DefaultRouter

from . import views

app_name = "accounts"


def _create_users_router() -> DefaultRouter:
    router = DefaultRouter()
    router.include_root_view = False
    router.register(r"admin/users", views.UserCrudViewSet, basename="admin-users")
    return router


users_router = _create_users_router()

auth_urlpatterns: List[URLPattern] = [
    path("signup/", views.SignupView.as_view(), name="signup"),
    path("verify-otp/", views.VerifyOtpView.as_view(), name="verify-otp"),
    path("resend-otp/", views.ResendOtpView.as_view(), name="resend-otp"),
    path("login/", views.LoginView.as_view(), name="login"),
    path("token/refresh/", views.CookieTokenRefreshView.as_view(), name="token-refresh"),
    path("logout/", views.LogoutView.as_view(), name="logout"),
    path("forgot-password/", views.ForgotPasswordView.as_view(), name="forgot-password"),
    path("reset-password/", views.ResetPasswordView.as_view(), name="reset-password"),
    path("check-auth/", views.CheckAuthView.as_view(), name="check-auth"),
]

urlpatterns = [
    path("auth/", include(auth_urlpatterns)),
    path("users/<int:user_id>/data/", views.UserDataView.as_view(), name="user-data"),
    path("", include(users_router.urls)),
]
