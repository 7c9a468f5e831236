import logging
import smtplib
import ssl
from email.mime.text import MIMEText

from scheduling_backend.core import config
from scheduling_backend.core.errors import MailDeliveryError

logger = logging.getLogger(__name__)


class SmtpMailer:
    """Sends plain-text mail through one SMTP server. Failures are not retried."""

    def __init__(
        self,
        host: str = config.SMTP_HOST,
        port: int = config.SMTP_PORT,
        username: str = config.SMTP_USERNAME,
        password: str = config.SMTP_PASSWORD,
        from_address: str = config.MAIL_FROM,
        use_tls: bool = config.SMTP_USE_TLS,
        timeout: int = config.MAIL_TIMEOUT_SECONDS,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_address = from_address
        self.use_tls = use_tls
        self.timeout = timeout

    def send(self, to_address: str, subject: str, body: str) -> None:
        message = MIMEText(body, 'plain')
        message['Subject'] = subject
        message['From'] = self.from_address
        message['To'] = to_address

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls(context=ssl.create_default_context())
                if self.username:
                    server.login(self.username, self.password)
                server.sendmail(self.from_address, [to_address], message.as_string())
        except (smtplib.SMTPException, OSError) as exc:
            logger.exception('Failed to send mail to %s', to_address)
            raise MailDeliveryError('Error sending email.') from exc

        logger.info('Sent "%s" to %s', subject, to_address)
