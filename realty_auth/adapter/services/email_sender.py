"""
Email senders: SMTP delivery and a log-only sender for development.
"""

import asyncio
import logging
import smtplib
from abc import abstractmethod
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from realty_auth.app.services.email_sender import EmailSender

logger = logging.getLogger(__name__)


class EmailMessage:
    def __init__(self, to_email: str, subject: str, text_content: str, link: str):
        self.to_email = to_email
        self.subject = subject
        self.text_content = text_content
        self.link = link

    @property
    def html_content(self) -> str:
        paragraphs = "".join(f"<p>{line}</p>" for line in self.text_content.split("\n") if line)
        return f'<html><body>{paragraphs}<p><a href="{self.link}">{self.link}</a></p></body></html>'


class BaseEmailSender(EmailSender):
    """Builds the auth emails; subclasses decide how a message is delivered"""

    def __init__(self, frontend_url: str):
        self.frontend_url = frontend_url.rstrip("/")

    @abstractmethod
    async def _deliver(self, message: EmailMessage) -> bool:
        pass

    async def send_verification_email(
        self, email: str, verification_token: str, first_name: Optional[str] = None
    ) -> bool:
        link = f"{self.frontend_url}/verify-email?token={verification_token}"
        return await self._deliver(
            EmailMessage(
                email,
                "Verify your email address",
                f"Hi {first_name or 'there'},\n"
                "Thanks for signing up. Confirm your email address to activate your account.\n"
                "This link expires in 24 hours.",
                link,
            )
        )

    async def send_resend_verification_email(
        self, email: str, verification_token: str, first_name: Optional[str] = None
    ) -> bool:
        link = f"{self.frontend_url}/verify-email?token={verification_token}"
        return await self._deliver(
            EmailMessage(
                email,
                "Your new verification link",
                f"Hi {first_name or 'there'},\n"
                "Here is a new link to verify your email address. Earlier links no longer work.\n"
                "This link expires in 24 hours.",
                link,
            )
        )

    async def send_password_reset_email(
        self, email: str, reset_token: str, first_name: Optional[str] = None
    ) -> bool:
        link = f"{self.frontend_url}/reset-password?token={reset_token}"
        return await self._deliver(
            EmailMessage(
                email,
                "Reset your password",
                f"Hi {first_name or 'there'},\n"
                "We received a request to reset your password. The link expires in 15 minutes.\n"
                "If you did not request this, you can ignore this email.",
                link,
            )
        )

    async def send_welcome_email(self, email: str, first_name: Optional[str] = None) -> bool:
        link = f"{self.frontend_url}/account"
        return await self._deliver(
            EmailMessage(
                email,
                "Welcome aboard",
                f"Hi {first_name or 'there'},\n"
                "Your email is verified. You can now create your first listing video.",
                link,
            )
        )


class LoggingEmailSender(BaseEmailSender):
    """Development sender: writes the message to the log instead of sending it"""

    async def _deliver(self, message: EmailMessage) -> bool:
        logger.info(f"📧 Would send email to {message.to_email}: {message.subject}")
        logger.info(f"📧 Link: {message.link}")
        return True


class SmtpEmailSender(BaseEmailSender):
    def __init__(
        self,
        frontend_url: str,
        host: str,
        port: int,
        username: Optional[str],
        password: Optional[str],
        from_address: str,
    ):
        super().__init__(frontend_url)
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_address = from_address

    def _send_sync(self, message: EmailMessage) -> None:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = message.subject
        msg["From"] = self.from_address
        msg["To"] = message.to_email
        msg.attach(MIMEText(message.text_content, "plain"))
        msg.attach(MIMEText(message.html_content, "html"))

        if self.port == 465:
            server = smtplib.SMTP_SSL(self.host, self.port, timeout=10)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=10)
            server.starttls()

        try:
            if self.username and self.password:
                server.login(self.username, self.password)
            server.sendmail(self.from_address, [message.to_email], msg.as_string())
        finally:
            server.quit()

    async def _deliver(self, message: EmailMessage) -> bool:
        try:
            await asyncio.to_thread(self._send_sync, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"❌ Failed to send email to {message.to_email}: {e}")
            return False

        logger.info(f"✅ Email sent successfully to {message.to_email}")
        return True


def build_email_sender(config) -> EmailSender:
    """
    Pick the sender from configuration.

    Without SMTP settings the development environment falls back to logging;
    any other environment refuses to start.
    """
    if config.SMTP_HOST:
        return SmtpEmailSender(
            frontend_url=config.FRONTEND_URL,
            host=config.SMTP_HOST,
            port=int(config.SMTP_PORT),
            username=config.SMTP_USER,
            password=config.SMTP_PASS,
            from_address=config.SMTP_FROM,
        )

    if config.ENVIRONMENT != "development":
        raise RuntimeError("SMTP_HOST must be configured outside the development environment")

    logger.warning("SMTP not configured, emails will only be logged")
    return LoggingEmailSender(config.FRONTEND_URL)
