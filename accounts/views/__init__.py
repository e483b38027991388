from .auth_views import (
    CheckAuthView,
    CookieTokenRefreshView,
    ForgotPasswordView,
    LoginView,
    LogoutView,
    ResendOtpView,
    ResetPasswordView,
    SignupView,
    VerifyOtpView,
)
from .user_crud_view import UserCrudViewSet
from .user_self_info import UserDataView
