"""
SMTP notification sender adapter - Delivers verification codes through a mail relay.

Each attempt is bounded by a socket timeout. A failed attempt is retried
once (smtp_send_attempts=2 by default); when every attempt fails the
sender raises NotificationFailed so the workflow reports a server error.
"""

import logging
import smtplib
from email.mime.text import MIMEText

from cinepass.domain.exceptions import NotificationFailed

logger = logging.getLogger(__name__)


class SmtpNotificationSender:
    """Implements NotificationSender protocol via smtplib."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        from_address: str = "",
        use_tls: bool = True,
        timeout: float = 10.0,
        attempts: int = 2,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_address = from_address or username
        self.use_tls = use_tls
        self.timeout = timeout
        self.attempts = max(1, attempts)

    def send(self, to_address: str, subject: str, body: str) -> None:
        msg = MIMEText(body, "plain", "utf-8")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to_address

        last_error: Exception | None = None
        for attempt in range(1, self.attempts + 1):
            try:
                self._deliver(msg)
                return
            except (smtplib.SMTPException, OSError) as e:
                last_error = e
                logger.warning(
                    "Email to %s failed (attempt %d/%d): %s", to_address, attempt, self.attempts, e
                )

        raise NotificationFailed(f"could not send email to {to_address}") from last_error

    def _deliver(self, msg: MIMEText) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.username:
                server.login(self.username, self.password)
            server.send_message(msg)
