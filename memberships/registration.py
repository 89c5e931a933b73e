"""
Member registration: allocate a serial, issue the GNACOPS ID and store the
membership records.
"""
import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from .emails import send_welcome_email
from .exceptions import RegistrationError
from .models import FormSubmission, Membership, MembershipCategory, Profile
from .serials import get_allocator
from .utils import format_gnacops_id, get_category_tier

logger = logging.getLogger(__name__)

# Region used for the ID when the form carries none
DEFAULT_ID_REGION = 'Greater Accra'


def register_member(full_name, email, password, category_id, form_data=None, allocator=None):
    """
    Register a new member and issue their GNACOPS ID.

    The serial is allocated in its own transaction before anything else is
    written. If a later step fails the serial is simply skipped; no
    identifier is considered issued.

    Raises:
        RegistrationError: inactive/missing category or email already registered
        UnknownCategory: the category name is not in the category table
        AllocationFailed: the serial counter could not be incremented

    Returns:
        Membership: the new membership, with its gnacops_id
    """
    form_data = dict(form_data or {})
    email = email.strip().lower()
    allocator = allocator or get_allocator()

    logger.info(f"Starting registration for {email}, category: {category_id}")

    try:
        category = MembershipCategory.objects.get(pk=category_id, is_active=True)
    except (MembershipCategory.DoesNotExist, ValueError, TypeError):
        raise RegistrationError('Membership category not found') from None

    # Unknown names are fatal here, before a serial is spent
    get_category_tier(category.name)

    User = get_user_model()
    if User.objects.filter(email__iexact=email).exists():
        raise RegistrationError('Email already registered')

    serial = allocator.allocate(category.pk)
    region = (form_data.get('region') or '').strip()
    gnacops_id = format_gnacops_id(category.name, region or DEFAULT_ID_REGION, serial)
    logger.info(f"Generated GNACOPS ID {gnacops_id} for {email}")

    try:
        with transaction.atomic():
            user = User.objects.create_user(username=email, email=email, password=password)
            Profile.objects.create(
                user=user,
                full_name=full_name,
                phone=form_data.get('phone') or '',
                email_verified=True,
            )
            membership = Membership.objects.create(
                user=user,
                category=category,
                gnacops_id=gnacops_id,
                status='pending',
                payment_status='unpaid',
                region=region,
                amount=category.price,
            )
            FormSubmission.objects.create(
                user=user,
                category=category,
                membership=membership,
                submission_data=form_data,
            )
    except IntegrityError as e:
        # A concurrent registration took the username after the check above
        logger.warning(f"Registration for {email} lost a race, serial {serial} skipped: {str(e)}")
        raise RegistrationError('Email already registered') from e

    send_welcome_email(membership)
    logger.info(f"Registration completed for {email} ({gnacops_id})")
    return membership
