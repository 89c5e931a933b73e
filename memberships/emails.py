"""
Email notifications sent after membership registration.
"""
from django.core.mail import send_mail
from django.template.loader import render_to_string
from django.conf import settings
from django.utils.html import strip_tags
import logging

logger = logging.getLogger(__name__)


def send_welcome_email(membership):
    """
    Send the welcome email carrying the member's GNACOPS ID.

    Args:
        membership: Membership instance

    Returns:
        bool: True if the email was handed to the mail backend.
    """
    try:
        user = membership.user
        profile = getattr(user, 'profile', None)
        site_url = getattr(settings, 'SITE_URL', 'https://gnacops.org')

        context = {
            'membership': membership,
            'full_name': profile.full_name if profile else user.get_full_name(),
            'email': user.email,
            'gnacops_id': membership.gnacops_id,
            'category_name': membership.category.name,
            'support_email': getattr(settings, 'SUPPORT_EMAIL', 'info@gnacops.org'),
            'site_url': site_url,
            'login_url': f"{site_url}/login",
        }

        subject = 'Welcome to GNACOPS - Your Membership ID'
        html_message = render_to_string('memberships/emails/welcome.html', context)
        plain_message = strip_tags(html_message)

        send_mail(
            subject=subject,
            message=plain_message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[user.email],
            html_message=html_message,
            fail_silently=False,
        )

        logger.info(f"Welcome email sent to {user.email} for membership {membership.gnacops_id}")
        return True

    except Exception as e:
        logger.error(f"Failed to send welcome email for membership {membership.gnacops_id}: {str(e)}")
        # Don't raise exception - the member is registered, email failure is non-critical
        return False
