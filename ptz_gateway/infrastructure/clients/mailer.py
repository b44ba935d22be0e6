"""SMTP client for confirmation emails"""

import smtplib
from email.message import EmailMessage
from ptz_gateway.domain.exceptions import NotificationError
from ptz_gateway.config import settings


class Mailer:
    """Client for sending HTML emails through the configured SMTP relay"""

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        sender: str | None = None,
        timeout: float | None = None,
        enabled: bool | None = None,
    ):
        self.enabled = settings.mail_enabled if enabled is None else enabled
        self.host = host or settings.smtp_host
        self.port = port or settings.smtp_port
        self.sender = sender or settings.mail_from
        self.timeout = timeout or settings.http_timeout_seconds
        self.user = settings.smtp_user
        self.password = settings.smtp_password
        self.use_tls = settings.smtp_use_tls

    def send(self, to: str, subject: str, html: str) -> None:
        """
        Send one HTML message.

        Raises:
            NotificationError: On connection, authentication or delivery errors
        """
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content("Votre client mail ne prend pas en charge le HTML.")
        message.add_alternative(html, subtype="html")

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.user:
                    smtp.login(self.user, self.password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"Email to {to} failed: {e}") from e
