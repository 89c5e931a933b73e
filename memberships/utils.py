"""
GNACOPS ID formatting and the category/region lookup tables.
"""
import json
import logging
import re
from collections import namedtuple
from functools import lru_cache
from types import MappingProxyType

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .exceptions import UnknownCategory

logger = logging.getLogger(__name__)

PRIME = 'prime'
ASSOCIATE = 'associate'

TIER_CODES = MappingProxyType({
    PRIME: 'PM',
    ASSOCIATE: 'AM',
})

# Membership category name -> tier
DEFAULT_CATEGORY_TIERS = {
    'Institutional Membership': PRIME,
    'Proprietor': PRIME,
    'Teacher Council': ASSOCIATE,
    'Parent Council': ASSOCIATE,
    'Service Provider': ASSOCIATE,
    'Non-Teaching Staff': ASSOCIATE,
}

# Region name -> two-digit region number
DEFAULT_REGION_CODES = {
    'Greater Accra': '01',
    'Ashanti': '02',
    'Western': '03',
    'Eastern': '04',
    'Central': '05',
    'Northern': '06',
    'Upper East': '07',
    'Upper West': '08',
    'Volta': '09',
    'Brong Ahafo': '10',
    'Bono East': '11',
    'Ahafo': '12',
    'Savannah': '13',
    'North East': '14',
    'Oti': '15',
    'Western North': '16',
}

UNKNOWN_REGION_CODE = '00'

# Canonical GNACOPS ID format: GNC/{PM|AM}/{region}/{serial} (e.g. GNC/PM/01/0007)
# Serial is padded to at least 4 digits; larger serials widen the field.
GNACOPS_ID_FORMAT = "GNC/{category_code}/{region_code}/{serial:04d}"
GNACOPS_ID_RE = re.compile(r'^GNC/(PM|AM)/(\d{2})/(\d{4,})$')

IdTables = namedtuple('IdTables', ['categories', 'regions'])
GnacopsIdParts = namedtuple('GnacopsIdParts', ['category_code', 'region_code', 'serial'])


@lru_cache(maxsize=None)
def get_id_tables():
    """
    Load the category and region tables once per process.

    When GNACOPS_ID_TABLES_FILE points at a JSON file, its "categories"
    and/or "regions" objects replace the built-in tables. Call
    get_id_tables.cache_clear() to reload.
    """
    categories = dict(DEFAULT_CATEGORY_TIERS)
    regions = dict(DEFAULT_REGION_CODES)

    path = getattr(settings, 'GNACOPS_ID_TABLES_FILE', '')
    if path:
        try:
            with open(path, encoding='utf-8') as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            raise ImproperlyConfigured(f"Cannot load GNACOPS ID tables from {path}: {e}") from e

        if 'categories' in data:
            categories = dict(data['categories'])
        if 'regions' in data:
            regions = dict(data['regions'])
        logger.info(f"Loaded GNACOPS ID tables from {path}")

    for name, tier in categories.items():
        if tier not in TIER_CODES:
            raise ImproperlyConfigured(f"Category {name!r} has unknown tier {tier!r}")
    for name, code in regions.items():
        if not (isinstance(code, str) and len(code) == 2 and code.isdigit()):
            raise ImproperlyConfigured(f"Region {name!r} needs a two-digit code, got {code!r}")

    return IdTables(MappingProxyType(categories), MappingProxyType(regions))


def get_category_tier(category_name):
    """
    Return 'prime' or 'associate' for a membership category name.
    Raises UnknownCategory for names missing from the table.
    """
    try:
        return get_id_tables().categories[category_name]
    except KeyError:
        raise UnknownCategory(category_name) from None


def get_category_code(category_name):
    """Get the category code (PM or AM) for a membership category name."""
    return TIER_CODES[get_category_tier(category_name)]


def is_prime_membership(category_name):
    """Check if a membership category is prime. Unknown names are not prime."""
    return get_id_tables().categories.get(category_name) == PRIME


def get_region_code(region_name):
    """
    Return the two-digit code for a region name.

    Unknown regions resolve to '00' rather than raising, so free-text or
    misspelled regions all share that bucket. Logged because it usually
    means bad input data.
    """
    code = get_id_tables().regions.get(region_name)
    if code is None:
        logger.warning(f"Unknown region {region_name!r}, using region code {UNKNOWN_REGION_CODE}")
        return UNKNOWN_REGION_CODE
    return code


def format_gnacops_id(category_name, region_name, serial):
    """
    Build a GNACOPS ID in the format: GNC/[PM|AM]/[region_number]/[serial_number]

    Args:
        category_name: membership category name, e.g. "Proprietor"
        region_name: region name, e.g. "Greater Accra"
        serial: allocated serial number, padded to at least 4 digits

    Returns:
        str: e.g. "GNC/PM/01/0007"
    """
    if isinstance(serial, bool) or not isinstance(serial, int):
        raise ValueError(f"Serial must be an integer, got {serial!r}")
    if serial < 0:
        raise ValueError(f"Serial must not be negative, got {serial}")

    return GNACOPS_ID_FORMAT.format(
        category_code=get_category_code(category_name),
        region_code=get_region_code(region_name),
        serial=serial,
    )


def parse_gnacops_id(value):
    """
    Split a GNACOPS ID into its parts.
    Returns GnacopsIdParts or None if the string is not a well-formed ID.
    """
    if not value or not isinstance(value, str):
        return None
    match = GNACOPS_ID_RE.match(value.strip())
    if not match:
        return None
    category_code, region_code, serial = match.groups()
    return GnacopsIdParts(category_code, region_code, int(serial))
