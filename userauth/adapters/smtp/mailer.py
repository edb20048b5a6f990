"""
SMTP email sender adapter - Implements EmailSender protocol.

Delivers the account activation message through an SMTP relay.
Delivery errors are logged and reported as False so the signup workflow
can decide what to do with the half-created account.
"""

import logging
import smtplib
from email.message import EmailMessage

logger = logging.getLogger(__name__)

SUBJECT = "Account Activation"


class SmtpEmailSender:
    """Implements EmailSender protocol via smtplib."""

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        activation_url: str,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        """
        Args:
            host: SMTP relay host
            port: SMTP relay port
            sender: From address
            activation_url: Link template containing a "{token}" placeholder
            username: Login for the relay, if it requires one
            password: Password for the relay
            use_tls: Upgrade the connection with STARTTLS
            timeout: Socket timeout in seconds
        """
        self._host = host
        self._port = port
        self._sender = sender
        self._activation_url = activation_url
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout

    def build_message(self, email: str, token: str) -> EmailMessage:
        link = self._activation_url.format(token=token)
        message = EmailMessage()
        message["Subject"] = SUBJECT
        message["From"] = self._sender
        message["To"] = email
        message.set_content(f"Please click the link below to activate your account\n\n{link}\n")
        message.add_alternative(
            f"<div><b>Please click the link below to activate your account</b></div>"
            f'<div><a href="{link}">Activate</a></div>',
            subtype="html",
        )
        return message

    def send_activation_token(self, email: str, token: str) -> bool:
        try:
            message = self.build_message(email, token)
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
                if self._use_tls:
                    smtp.starttls()
                if self._username:
                    smtp.login(self._username, self._password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Activation email to %s failed: %s", email, e)
            return False

        logger.info("Activation email sent to %s", email)
        return True
