from typing import Optional, TypeVar

from django.contrib.auth.models import AbstractBaseUser
from rest_framework import HTTP_HEADER_ENCODING
from rest_framework.request import Request

from rest_framework_simplejwt.models import TokenUser
from rest_framework_simplejwt.tokens import Token
from rest_framework_simplejwt.authentication import JWTAuthentication as original_auth

AuthUser = TypeVar("AuthUser", AbstractBaseUser, TokenUser)

ACCESS_COOKIE = "access_token"
REFRESH_COOKIE = "refresh_token"


class JWTAuthentication(original_auth):
    """
    JWT authentication that reads the access token from the HttpOnly cookie.
    Falls back to the Authorization header so server-to-server clients and
    the admin tooling can still send a Bearer token.
    """

    www_authenticate_realm = "api"
    media_type = "application/json"

    def authenticate(self, request: Request) -> Optional[tuple[AuthUser, Token]]:
        cookie = request.COOKIES.get(ACCESS_COOKIE) or None
        if cookie is None:
            return super().authenticate(request)

        raw_token = cookie.encode(HTTP_HEADER_ENCODING)
        validated_token = self.get_validated_token(raw_token)

        return self.get_user(validated_token), validated_token
