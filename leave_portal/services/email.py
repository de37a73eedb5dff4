import logging
import smtplib
from html import escape
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from leave_portal.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """Service for handling automated email notifications"""

    def __init__(self):
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_user = settings.SMTP_USER
        self.smtp_password = settings.SMTP_PASSWORD
        self.email_from = settings.EMAIL_FROM
        self.portal_url = settings.PORTAL_URL

    async def send_email(self, to_email, subject, html_content):
        """General method to send an email (Mocked if no credentials)"""
        if not self.smtp_user or not self.smtp_password:
            logger.info("MOCK EMAIL to %s: %s (%d chars)", to_email, subject, len(html_content))
            return True

        try:
            msg = MIMEMultipart()
            msg['From'] = self.email_from
            msg['To'] = to_email
            msg['Subject'] = subject

            msg.attach(MIMEText(html_content, 'html'))

            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg)

            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            return False

    async def send_approval_request(self, approver_email, approver_name, leave):
        """Tell the approver now at the head of the chain that a request awaits them"""
        content = (
            f"<p>Hi {escape(approver_name)},</p>"
            f"<p>{escape(leave.name)} has requested {leave.leave_type.label} from "
            f"{leave.start_date.strftime('%d %b, %Y')} to {leave.end_date.strftime('%d %b, %Y')} "
            f"({leave.no_of_days} working days).</p>"
            f"<p>Reason: {escape(leave.reason or 'No reason provided')}</p>"
            f"<p><a href=\"{self.portal_url}/approvals\">Review the request</a></p>"
        )
        return await self.send_email(
            approver_email,
            f"Leave Request Awaiting Approval: {leave.name}",
            content
        )

    async def send_leave_status_notification(self, applicant_email, leave):
        """Send notification for final approval/disapproval"""
        status = leave.status.value.capitalize()
        comments = "; ".join(
            f"{s.name}: {s.comment}" for s in leave.approval_status if s.comment
        ) or "Processed via portal"
        content = (
            f"<p>Hi {escape(leave.name)},</p>"
            f"<p>Your {leave.leave_type.label} from {leave.start_date.strftime('%d %b, %Y')} "
            f"to {leave.end_date.strftime('%d %b, %Y')} has been {status.lower()}.</p>"
            f"<p>Comments: {escape(comments)}</p>"
            f"<p><a href=\"{self.portal_url}/leaves\">View your leaves</a></p>"
        )
        return await self.send_email(
            applicant_email,
            f"Leave Request {status}: {leave.start_date.strftime('%d %b')}",
            content
        )

# Global instance
email_service = EmailService()
