import logging

import yagmail

import config

logger = logging.getLogger(__name__)


def mail_enabled() -> bool:
    return bool(config.MAIL_USERNAME and config.MAIL_PASSWORD)


def _send(to: str, subject: str, html_body: str):
    if not mail_enabled():
        return
    try:
        yag = yagmail.SMTP(config.MAIL_USERNAME, config.MAIL_PASSWORD)
        yag.send(to=to, subject=subject, contents=[html_body])
    except Exception as e:
        logger.error(f"Failed to send email '{subject}' to {to}: {str(e)}")


def send_doctor_application_email(admin_email: str, doctor_email: str, doctor_name: str):
    html_body = f"""
    <h1>New Doctor Application</h1>
    <p>A new doctor application has been submitted by: {doctor_name} ({doctor_email})</p>
    <p>Please review it in the admin panel.</p>
    """
    _send(admin_email, "New Doctor Application", html_body)


def send_appointment_update_email(email: str, subject: str, appointment, doctor_name: str, patient_name: str):
    html_body = f"""
    <h1>{subject}</h1>
    <p>Appointment Details:</p>
    <p>Doctor: {doctor_name}</p>
    <p>Patient: {patient_name}</p>
    <p>Time: {appointment.date} {appointment.time}</p>
    <p>Status: {appointment.status.value}</p>
    """
    _send(email, subject, html_body)
