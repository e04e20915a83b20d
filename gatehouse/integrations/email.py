# =============================================================================
# Email Integration
# =============================================================================
#
# Templates are rendered here; delivery is delegated to a MailTransport.
# The default transport only logs the message, which is what development and
# tests want. Production deployments plug in their own transport (SMTP, SES,
# a queue...) when building the EmailService.
#
# =============================================================================

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel

from gatehouse.config import get_settings

logger = logging.getLogger(__name__)


# =============================================================================
# Email Templates
# =============================================================================

TEMPLATES = {
    "activation": {
        "subject": "Activate your account",
        "text": """
Welcome!

Your account has been created. Activate it by visiting:
{activation_url}

Activation code: {code}
        """,
    },
}


class MailMessage(BaseModel):
    """A rendered message ready for delivery."""

    sender: str
    to: str
    subject: str
    text: str


# =============================================================================
# Transports
# =============================================================================


class MailTransport(ABC):
    """Delivers rendered messages."""

    @abstractmethod
    async def send(self, message: MailMessage) -> bool:
        """Deliver a message. Returns True if it was accepted."""
        pass


class LoggingMailTransport(MailTransport):
    """Writes messages to the log instead of sending them."""

    async def send(self, message: MailMessage) -> bool:
        logger.warning(f"Mail transport not configured - would send '{message.subject}' to {message.to}")
        logger.info(f"Email content: {message.text}")
        return True


# =============================================================================
# Email Service
# =============================================================================


class EmailService:
    """Render templates and hand them to a transport."""

    def __init__(self, transport: MailTransport | None = None):
        self.settings = get_settings()
        self.transport = transport or LoggingMailTransport()

    def render(self, to: str, template: str, data: dict[str, Any]) -> MailMessage:
        if template not in TEMPLATES:
            raise KeyError(f"Unknown email template: {template}")
        tpl = TEMPLATES[template]
        return MailMessage(
            sender=self.settings.mail_from,
            to=to,
            subject=tpl["subject"],
            text=tpl["text"].format(**data),
        )

    async def send(self, to: str, template: str, data: dict[str, Any]) -> bool:
        """
        Send an email using a template.

        Returns:
            True if the transport accepted it, False otherwise
        """
        message = self.render(to, template, data)
        sent = await self.transport.send(message)
        if not sent:
            logger.error(f"Failed to send '{template}' email to {to}")
        return sent

    async def send_activation(self, email: str, code: str) -> bool:
        """Send the account activation link."""
        activation_url = f"{self.settings.app_url.rstrip('/')}/api/authentication/activate/{code}"
        return await self.send(
            to=email,
            template="activation",
            data={"activation_url": activation_url, "code": code},
        )
