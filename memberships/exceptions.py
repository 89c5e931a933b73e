"""
Exceptions raised while issuing GNACOPS memberships.
"""


class GnacopsError(Exception):
    """Base class for membership errors."""


class UnknownCategory(GnacopsError):
    """
    The membership category name is not in the category table.
    Fatal for the registration that triggered it; not retried.
    """

    def __init__(self, category_name):
        self.category_name = category_name
        super().__init__(f"Unknown membership category: {category_name!r}")


class AllocationFailed(GnacopsError):
    """
    The atomic serial increment did not complete. The counter is unchanged,
    so the caller may retry.
    """

    def __init__(self, category_id, message='Failed to generate serial number'):
        self.category_id = category_id
        super().__init__(f"{message} (category {category_id})")


class RegistrationError(GnacopsError):
    """A registration request was rejected before any identifier was issued."""
