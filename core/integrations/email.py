"""Email integration utilities for sending emails."""

import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from datetime import datetime
from html import escape
from typing import Any, Optional, List
import logging

logger = logging.getLogger(__name__)


class EmailService:
    """Email service for sending emails via SMTP."""

    def __init__(
        self,
        smtp_host: str,
        smtp_port: int = 587,
        smtp_user: Optional[str] = None,
        smtp_password: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: str = "Hiring Team",
        timeout: float = 20.0,
    ):
        """
        Initialize email service.

        Args:
            smtp_host: SMTP server host
            smtp_port: SMTP server port
            smtp_user: SMTP username
            smtp_password: SMTP password
            from_email: Default sender email
            from_name: Default sender name
            timeout: Socket timeout in seconds
        """
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_password = smtp_password
        self.from_email = from_email or smtp_user
        self.from_name = from_name
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Any) -> "EmailService":
        return cls(
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            smtp_user=settings.smtp_user,
            smtp_password=settings.smtp_password,
            from_email=settings.from_email,
            from_name=settings.from_name,
            timeout=settings.collaborator_timeout_seconds,
        )

    def send_email(
        self,
        to_email: str | List[str],
        subject: str,
        body: str,
        html: bool = False,
        reply_to: Optional[str] = None,
    ) -> bool:
        """
        Send an email.

        Args:
            to_email: Recipient email address(es)
            subject: Email subject
            body: Email body
            html: Whether body is HTML
            reply_to: Reply-to email address

        Returns:
            True if email sent successfully
        """
        try:
            msg = MIMEMultipart()
            msg['From'] = f"{self.from_name} <{self.from_email}>"

            recipients = to_email if isinstance(to_email, list) else [to_email]
            msg['To'] = ", ".join(recipients)
            msg['Subject'] = subject

            if reply_to:
                msg['Reply-To'] = reply_to

            msg.attach(MIMEText(body, 'html' if html else 'plain'))

            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                server.starttls()
                if self.smtp_user and self.smtp_password:
                    server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg, from_addr=self.from_email, to_addrs=recipients)

            logger.info(f"Email sent: {subject}")
            return True

        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email: {e}")
            return False


# Pre-configured email templates
class EmailTemplates:
    """Pre-configured email templates."""

    @staticmethod
    def interviews_scheduled(
        candidate_name: str,
        job_title: str,
        score: float,
        interviews: List[dict],
    ) -> dict:
        """
        Interview schedule email sent after auto-scheduling.

        Each interview dict carries ``round_name``, ``interview_type``,
        ``scheduled_at`` (datetime or ISO string), ``time_limit_minutes``,
        ``difficulty``, ``question_count`` and ``access_link``.
        """
        rounds_html = "".join(
            f"""
                <div style="margin-bottom: 15px; padding: 10px; border-left: 4px solid #007bff;">
                    <h4>Round {index}: {escape(str(interview.get('round_name', '')))}</h4>
                    <ul style="margin: 5px 0;">
                        <li><strong>Date & Time:</strong> {escape(_format_when(interview.get('scheduled_at')))}</li>
                        <li><strong>Type:</strong> {escape(str(interview.get('interview_type', '')).capitalize())}</li>
                        <li><strong>Duration:</strong> {interview.get('time_limit_minutes')} minutes</li>
                        <li><strong>Difficulty:</strong> {escape(str(interview.get('difficulty') or 'medium'))}</li>
                        <li><strong>Questions:</strong> {interview.get('question_count')}</li>
                        <li><strong>Interview Link:</strong> <a href="{escape(str(interview.get('access_link', '')))}" style="color: #007bff;">Join Interview</a></li>
                    </ul>
                </div>"""
            for index, interview in enumerate(interviews, start=1)
        )

        return {
            'subject': f'Interviews Scheduled - {job_title} Position',
            'body': f"""
                <html>
                <body>
                    <h2>Congratulations! Your Interviews Have Been Scheduled</h2>
                    <p>Dear {escape(candidate_name)},</p>
                    <p>Based on your resume score of <strong>{score:g}%</strong>, you have been selected for interviews for the position of <strong>{escape(job_title)}</strong>.</p>
                    <h3>Your Interview Schedule:</h3>
                    <div style="background-color: #f8f9fa; padding: 15px; border-radius: 8px; margin: 15px 0;">
                        {rounds_html}
                    </div>
                    <h3>Important Instructions:</h3>
                    <ul>
                        <li>Please join each interview 5 minutes before the scheduled time</li>
                        <li>Ensure you have a stable internet connection</li>
                        <li>For coding interviews, make sure your browser supports the coding environment</li>
                        <li>Each interview link is unique and should not be shared</li>
                    </ul>
                    <p>If you need to reschedule any interview, please contact us as soon as possible.</p>
                    <p>Best of luck with your interviews!</p>
                    <hr style="margin: 20px 0;">
                    <p style="font-size: 12px; color: #666;">This is an automated message. Please do not reply to this email.</p>
                </body>
                </html>
            """,
            'html': True
        }


def _format_when(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return value
    return value.strftime("%A, %B %d, %Y at %H:%M %Z").strip()
