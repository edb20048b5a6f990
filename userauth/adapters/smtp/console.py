"""
Development email sender: writes activation tokens to the log.

Selected with EMAIL_BACKEND=console (the default). Nothing leaves the
process, so delivery always succeeds.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """EmailSender that logs instead of mailing."""

    def send_activation_token(self, email: str, token: str) -> bool:
        logger.info("[ACTIVATION] Email: %s Token: %s", email, token)
        return True
