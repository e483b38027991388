"""
Transactional Email Service

Sends the site's transactional emails through Django's mail backend (SMTP
in production, locmem in tests). Each message is rendered from a pair of
templates under ``core/templates/emails/``: ``<name>.html`` and
``<name>.txt``.

Emails:
- OTP verification code after signup / resend
- Password reset link
- Contact form: admin notification (reply-to sender) and sender confirmation
- Gau katha booking: admin notification
- Membership thank-you after a successful payment or mandate setup

Author: Seva Development Team
Version: 1.0.0
"""

import logging
import smtplib
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils import timezone

from core.exceptions import NotificationException

logger = logging.getLogger(__name__)


class EmailService:
    """Renders and sends template based emails."""

    template_dir = "emails"

    def __init__(self):
        self.from_email = settings.DEFAULT_FROM_EMAIL
        self.admin_email = settings.ADMIN_EMAIL
        self.organization = settings.ORGANIZATION_NAME

    def _render(self, template: str, context: Dict[str, Any]):
        context = {"organization": self.organization, **context}
        html = render_to_string(f"{self.template_dir}/{template}.html", context)
        text = render_to_string(f"{self.template_dir}/{template}.txt", context)
        return html, text

    def send(
        self,
        to: List[str],
        subject: str,
        template: str,
        context: Dict[str, Any],
        reply_to: Optional[List[str]] = None,
    ) -> None:
        """
        Send one email.

        Raises:
            NotificationException: If the mail backend fails
        """
        html, text = self._render(template, context)
        message = EmailMultiAlternatives(
            subject=subject,
            body=text,
            from_email=self.from_email,
            to=to,
            reply_to=reply_to,
        )
        message.attach_alternative(html, "text/html")
        try:
            message.send()
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Sending '%s' to %s failed: %s", subject, to, e)
            raise NotificationException("Email sending failed") from e
        logger.info("Sent '%s' email to %s", template, to)

    # --- Account emails ---

    def send_otp(self, to: str, otp: str) -> None:
        minutes = settings.OTP_TIMEOUT_SECONDS // 60
        self.send([to], "Your OTP Code", "otp", {"otp": otp, "minutes": minutes})

    def send_password_reset(self, to: str, link: str) -> None:
        minutes = settings.PASSWORD_RESET_TIMEOUT // 60
        self.send([to], "Reset Password", "password_reset", {"link": link, "minutes": minutes})

    # --- Contact and booking forms ---

    def send_contact_message(self, name: str, email: str, mobile: str, message: str) -> None:
        """Notify the admin (reply goes to the sender) and confirm to the sender."""
        context = {
            "name": name,
            "email": email,
            "mobile": mobile,
            "message": message,
            "admin_email": self.admin_email,
            "submitted_at": timezone.localtime(),
        }
        self.send(
            [self.admin_email],
            f"New Contact Form: {name} - {mobile}",
            "contact_admin",
            context,
            reply_to=[email],
        )
        self.send(
            [email],
            "Thank you for contacting us!",
            "contact_confirmation",
            context,
            reply_to=[self.admin_email],
        )

    def send_gau_katha_booking(self, booking: Dict[str, Any]) -> None:
        context = {**booking, "submitted_at": timezone.localtime()}
        self.send(
            [self.admin_email],
            f"New Gau Katha Booking - {booking['name']} from {booking['city']}, {booking['state']}",
            "gau_katha_booking",
            context,
            reply_to=[booking["email"]],
        )

    # --- Payments ---

    def send_membership_thank_you(
        self,
        name: str,
        email: str,
        amount,
        transaction_id: str,
        membership_type: str,
    ) -> None:
        self.send(
            [email],
            "Thank you for your membership",
            "membership_thank_you",
            {
                "name": name,
                "amount": amount,
                "transaction_id": transaction_id,
                "membership_type": membership_type,
            },
            reply_to=[self.admin_email],
        )


def get_email_service() -> EmailService:
    return EmailService()
