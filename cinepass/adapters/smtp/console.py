"""
Console notification sender adapter - Implements NotificationSender protocol.

This module provides a console-based implementation of the domain's
notification port, logging messages instead of delivering them.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleNotificationSender:
    """
    Implements NotificationSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints verification codes to stdout.
    """

    def send(self, to_address: str, subject: str, body: str) -> None:
        """
        Log the message to console (simulates email delivery).

        Logged at INFO level so codes are visible in docker-compose logs.

        Args:
            to_address: Recipient email address (normalized by domain layer)
            subject: Message subject
            body: Message body, carrying the verification code
        """
        logger.info("[VERIFICATION] Email: %s Subject: %s Body: %s", to_address, subject, body)
