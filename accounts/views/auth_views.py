"""
Accounts Authentication Views

Signup with OTP email verification, cookie based JWT login, token refresh,
logout and password reset.

Views:
- SignupView / VerifyOtpView / ResendOtpView
- LoginView: Sets the access and refresh cookies
- CookieTokenRefreshView: Rotates the refresh cookie
- LogoutView: Blacklists the refresh token and clears the cookies
- ForgotPasswordView / ResetPasswordView
- CheckAuthView: Returns the signed in user's claims

Security Features:
- Tokens never appear in a response body, only in HttpOnly cookies
- Refresh tokens are blacklisted on rotation and on logout
- Signup, OTP and password reset endpoints are rate limited

Author: Seva Development Team
Version: 1.0.0
"""

import logging
import secrets
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import authenticate
from django.contrib.auth.models import User
from django.db import transaction
from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from backend.custom_auth import ACCESS_COOKIE, REFRESH_COOKIE
from core.notifications import get_email_service
from core.throttling import AuthRateThrottle
from ..models import Profile
from ..serializers import (
    EmailOnlySerializer,
    LoginSerializer,
    ResetPasswordSerializer,
    SevaTokenObtainPairSerializer,
    SignupSerializer,
    VerifyOtpSerializer,
    email_taken,
)

logger = logging.getLogger(__name__)


def generate_otp() -> str:
    return f"{secrets.randbelow(900000) + 100000}"


def set_auth_cookies(response: Response, refresh: str = None, access: str = None) -> Response:
    """
    Store the JWT pair in HttpOnly cookies.

    ``secure`` and ``samesite`` come from AUTH_COOKIE_SECURE and
    AUTH_COOKIE_SAMESITE so local HTTP development keeps working.
    """
    common = {
        "httponly": True,
        "secure": settings.AUTH_COOKIE_SECURE,
        "samesite": settings.AUTH_COOKIE_SAMESITE,
        "path": "/",
    }
    if refresh:
        response.set_cookie(
            REFRESH_COOKIE,
            refresh,
            max_age=int(settings.SIMPLE_JWT["REFRESH_TOKEN_LIFETIME"].total_seconds()),
            **common,
        )
    if access:
        response.set_cookie(
            ACCESS_COOKIE,
            access,
            max_age=int(settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"].total_seconds()),
            **common,
        )
    return response


def clear_auth_cookies(response: Response) -> Response:
    response.delete_cookie(REFRESH_COOKIE, path="/", samesite=settings.AUTH_COOKIE_SAMESITE)
    response.delete_cookie(ACCESS_COOKIE, path="/", samesite=settings.AUTH_COOKIE_SAMESITE)
    return response


def _issue_otp(profile: Profile) -> str:
    otp = generate_otp()
    profile.otp_code = otp
    profile.otp_expires_at = timezone.now() + timedelta(seconds=settings.OTP_TIMEOUT_SECONDS)
    profile.save(update_fields=["otp_code", "otp_expires_at", "updated_at"])
    return otp


class SignupView(APIView):
    """
    Register a new account and email it a six digit OTP.

    The account and the email are one unit: if the email cannot be sent the
    account is rolled back so the address can sign up again.
    """

    permission_classes = [AllowAny]
    throttle_classes = [AuthRateThrottle]
    throttle_scope = "auth"

    def post(self, request: Request) -> Response:
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]

        if email_taken(email):
            return Response({"message": "User already exists"}, status=status.HTTP_400_BAD_REQUEST)

        with transaction.atomic():
            user = serializer.save()
            otp = _issue_otp(user.profile)
            get_email_service().send_otp(email, otp)

        logger.info("New account registered: %s", email)
        return Response(
            {"message": "User registered. OTP sent to email."},
            status=status.HTTP_201_CREATED,
        )


class VerifyOtpView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [AuthRateThrottle]
    throttle_scope = "auth"

    def post(self, request: Request) -> Response:
        serializer = VerifyOtpSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]

        profile = Profile.objects.select_related("user").filter(user__username=email).first()
        if profile is None:
            return Response({"message": "User not found"}, status=status.HTTP_404_NOT_FOUND)
        if profile.is_verified:
            return Response({"message": "Already verified"})
        if not profile.otp_is_valid(serializer.validated_data["otp"]):
            return Response(
                {"message": "Invalid or expired OTP"}, status=status.HTTP_400_BAD_REQUEST
            )

        profile.mark_verified()
        return Response({"message": "Email verified successfully"})


class ResendOtpView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [AuthRateThrottle]
    throttle_scope = "auth"

    def post(self, request: Request) -> Response:
        serializer = EmailOnlySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]

        profile = Profile.objects.filter(user__username=email).first()
        if profile is None:
            return Response({"message": "User not found"}, status=status.HTTP_404_NOT_FOUND)
        if profile.is_verified:
            return Response({"message": "Already verified"}, status=status.HTTP_400_BAD_REQUEST)

        otp = _issue_otp(profile)
        get_email_service().send_otp(email, otp)
        return Response({"message": "OTP sent to email."})


class LoginView(APIView):
    """
    Authenticate with email and password and set the JWT cookies.

    The body only carries the role so the frontend can route to the right
    dashboard; the tokens stay in HttpOnly cookies.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request: Request) -> Response:
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]

        user = authenticate(
            request, username=email, password=serializer.validated_data["password"]
        )
        if user is None:
            return Response({"message": "Invalid credentials"}, status=status.HTTP_400_BAD_REQUEST)

        profile, _ = Profile.objects.get_or_create(user=user)
        if not profile.is_verified:
            return Response({"message": "Email not verified"}, status=status.HTTP_403_FORBIDDEN)

        refresh = SevaTokenObtainPairSerializer.get_token(user)
        if settings.SIMPLE_JWT.get("UPDATE_LAST_LOGIN"):
            User.objects.filter(pk=user.pk).update(last_login=timezone.now())

        response = Response({"role": profile.role, "message": "Login successful"})
        return set_auth_cookies(response, str(refresh), str(refresh.access_token))


class CookieTokenRefreshView(APIView):
    """
    Rotate the JWT pair using the refresh cookie.

    The old refresh token is blacklisted by simplejwt because rotation and
    blacklisting are enabled.
    """

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request: Request) -> Response:
        refresh_token = request.COOKIES.get(REFRESH_COOKIE)
        if not refresh_token:
            return Response(
                {"message": "Refresh token not provided"}, status=status.HTTP_400_BAD_REQUEST
            )

        serializer = TokenRefreshSerializer(data={"refresh": refresh_token})
        try:
            serializer.is_valid(raise_exception=True)
        except TokenError as e:
            return Response({"message": str(e)}, status=status.HTTP_401_UNAUTHORIZED)

        data = serializer.validated_data
        response = Response({"message": "Token refreshed"})
        return set_auth_cookies(response, data.get("refresh"), data.get("access"))


class LogoutView(APIView):
    """Blacklist the refresh cookie (when present and valid) and clear both cookies."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request: Request) -> Response:
        refresh_token = request.COOKIES.get(REFRESH_COOKIE)
        if refresh_token:
            try:
                RefreshToken(refresh_token).blacklist()
            except TokenError as e:
                logger.debug("Logout with an unusable refresh token: %s", e)
        response = Response({"message": "Logout successful"})
        return clear_auth_cookies(response)


class ForgotPasswordView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [AuthRateThrottle]
    throttle_scope = "auth"

    def post(self, request: Request) -> Response:
        serializer = EmailOnlySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]

        profile = Profile.objects.filter(user__username=email).first()
        if profile is None:
            return Response({"message": "User not found"}, status=status.HTTP_404_NOT_FOUND)

        token = secrets.token_hex(32)
        profile.reset_token = token
        profile.reset_token_expires_at = timezone.now() + timedelta(
            seconds=settings.PASSWORD_RESET_TIMEOUT
        )
        profile.save(update_fields=["reset_token", "reset_token_expires_at", "updated_at"])

        link = f"{settings.FRONTEND_URL}/reset-password?token={token}"
        get_email_service().send_password_reset(email, link)
        return Response({"message": "Reset link sent to email"})


class ResetPasswordView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [AuthRateThrottle]
    throttle_scope = "auth"

    def post(self, request: Request) -> Response:
        serializer = ResetPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        profile = (
            Profile.objects.select_related("user")
            .filter(reset_token=serializer.validated_data["token"])
            .first()
        )
        if (
            profile is None
            or profile.reset_token_expires_at is None
            or profile.reset_token_expires_at < timezone.now()
        ):
            return Response(
                {"message": "Invalid or expired token"}, status=status.HTTP_400_BAD_REQUEST
            )

        with transaction.atomic():
            user = profile.user
            user.set_password(serializer.validated_data["newPassword"])
            user.save(update_fields=["password"])
            profile.reset_token = None
            profile.reset_token_expires_at = None
            profile.save(update_fields=["reset_token", "reset_token_expires_at", "updated_at"])

        return Response({"message": "Password reset successful"})


class CheckAuthView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        user = request.user
        profile, _ = Profile.objects.get_or_create(user=user)
        return Response(
            {
                "success": True,
                "user": {
                    "id": user.pk,
                    "role": profile.role,
                    "email": user.email,
                    "name": profile.name,
                },
            }
        )
