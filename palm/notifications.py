import logging
import smtplib
from html import escape
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from flask import current_app

from palm.models.follow import FollowRequestType

logger = logging.getLogger(__name__)


def send_email(to_email, subject, html_content, text_content=None):
    """Send through SMTP, or log the message when SMTP is not configured"""
    config = current_app.config
    if not config.get('SMTP_HOST'):
        logger.info('SMTP not configured; email to %s: %s\n%s', to_email, subject, text_content or html_content)
        return False

    message = MIMEMultipart('alternative')
    message['Subject'] = subject
    message['From'] = config['SMTP_FROM']
    message['To'] = to_email
    if text_content:
        message.attach(MIMEText(text_content, 'plain'))
    message.attach(MIMEText(html_content, 'html'))

    with smtplib.SMTP(config['SMTP_HOST'], config['SMTP_PORT'], timeout=30) as server:
        server.starttls()
        if config.get('SMTP_USER'):
            server.login(config['SMTP_USER'], config['SMTP_PASSWORD'])
        server.send_message(message)

    logger.info('Sent "%s" to %s', subject, to_email)
    return True


def follow_request_link(token):
    return f"{current_app.config['APP_URL'].rstrip('/')}/follow/{token}"


def send_follow_request_email(follow_request):
    requester = follow_request.requester
    link = follow_request_link(follow_request.token)
    days = current_app.config['FOLLOW_REQUEST_TTL_DAYS']

    if follow_request.type == FollowRequestType.INVITE:
        subject = f"{requester.display_name} invited you to follow them on Palm"
        action = 'invited you to follow their progress'
    else:
        subject = f"{requester.display_name} wants to follow you on Palm"
        action = 'would like to follow your progress'

    text = (f"{requester.display_name} ({requester.email}) {action}.\n\n"
            f"Respond here: {link}\n\nThis link expires in {days} days.")
    html = (f"<p><strong>{escape(requester.display_name)}</strong> ({escape(requester.email)}) {action}.</p>"
            f"<p><a href=\"{link}\">Respond to the request</a></p>"
            f"<p>This link expires in {days} days.</p>")
    return send_email(follow_request.target_email, subject, html, text)
