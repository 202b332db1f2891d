import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib

from helpdesk.core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class EmailMessage:
    to: str
    subject: str
    body_html: str
    body_text: str


class EmailService(ABC):
    @abstractmethod
    async def send_email(self, message: EmailMessage) -> bool:
        pass


class ConsoleEmailService(EmailService):
    async def send_email(self, message: EmailMessage) -> bool:
        print("\n" + "=" * 80)
        print("EMAIL (Console Output - Development Mode)")
        print("=" * 80)
        print(f"To: {message.to}")
        print(f"Subject: {message.subject}")
        print("-" * 80)
        print("Text Body:")
        print(message.body_text)
        print("=" * 80 + "\n")
        return True


class SMTPEmailService(EmailService):
    def __init__(
        self,
        smtp_host: str,
        smtp_port: int,
        username: str,
        password: str,
        from_email: str,
        from_name: str,
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.username = username
        self.password = password
        self.from_email = from_email
        self.from_name = from_name

    async def send_email(self, message: EmailMessage) -> bool:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = message.subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = message.to
        msg.attach(MIMEText(message.body_text, "plain"))
        msg.attach(MIMEText(message.body_html, "html"))

        try:
            await aiosmtplib.send(
                msg,
                hostname=self.smtp_host,
                port=self.smtp_port,
                username=self.username or None,
                password=self.password or None,
                start_tls=True,
            )
        except aiosmtplib.SMTPException:
            logger.exception("Failed to send email to %s", message.to)
            return False
        return True


def get_email_service() -> EmailService:
    if settings.EMAIL_BACKEND == "smtp":
        return SMTPEmailService(
            smtp_host=settings.SMTP_HOST,
            smtp_port=settings.SMTP_PORT,
            username=settings.SMTP_USERNAME,
            password=settings.SMTP_PASSWORD,
            from_email=settings.SMTP_FROM_EMAIL,
            from_name=settings.SMTP_FROM_NAME,
        )
    return ConsoleEmailService()
