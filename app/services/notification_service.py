import smtplib
from html import escape
from typing import Optional
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from app.core.config import settings
from app.core.logger import logger
from app.models.db_models import Booking

CONFIRMATION_HTML = """
<div>
    <h3>Dear {patient},</h3>
    <p>Your appointment for {treatment} has been confirmed. We are looking forward to seeing you on {date} at {slot}</p>
    <p>Have a good day!</p>

    <h3>Our Address</h3>
    <p>{clinic_name}</p>
    <p>{clinic_address}</p>
    <p>Contact @ {clinic_contact}</p>
</div>
"""

def send_email(subject: str, body: str, to_email: str, html_body: Optional[str] = None) -> bool:
    """
    Sends an email over SMTP with a plain text part and an optional HTML part.
    Returns: True if successful, False otherwise.
    """
    if not settings.SMTP_USERNAME or not settings.SMTP_PASSWORD:
        logger.info("ℹ️ SMTP credentials missing, email not sent.")
        return False

    sender = settings.EMAIL_SENDER or settings.SMTP_USERNAME

    try:
        msg = MIMEMultipart("alternative")
        msg['From'] = sender
        msg['To'] = to_email
        msg['Subject'] = subject

        msg.attach(MIMEText(body, 'plain'))
        if html_body:
            msg.attach(MIMEText(html_body, 'html'))

        with smtplib.SMTP(settings.SMTP_SERVER, settings.SMTP_PORT, timeout=settings.EXTERNAL_CALL_TIMEOUT) as server:
            server.starttls()
            server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
            server.sendmail(sender, to_email, msg.as_string())

        logger.info(f"✅ Email sent to {to_email} with subject: '{subject}'")
        return True
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"❌ Email to {to_email} failed: {e}")
        return False

def send_appointment_confirmation(booking: Booking) -> bool:
    subject = f"Your appointment for {booking.treatment} is confirmed"
    html_body = CONFIRMATION_HTML.format(
        patient=escape(booking.patient_name or booking.patient),
        treatment=escape(booking.treatment),
        date=escape(booking.date),
        slot=escape(booking.slot),
        clinic_name=escape(settings.CLINIC_NAME),
        clinic_address=escape(settings.CLINIC_ADDRESS),
        clinic_contact=escape(settings.CLINIC_CONTACT),
    )
    return send_email(subject, subject, booking.patient, html_body)
