"""
Database models for GNACOPS membership registration.
"""
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models


class MembershipCategory(models.Model):
    """
    Admin-configurable registration category (e.g. Proprietor, Teacher Council).
    Its primary key keys the serial counter; its name picks the PM/AM tier.
    """
    name = models.CharField(max_length=100, unique=True, help_text="Must match an entry of the category table, e.g. Proprietor")
    description = models.TextField(blank=True, null=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    position = models.IntegerField(default=0, help_text="Order in which categories appear")
    is_active = models.BooleanField(default=True, help_text="Only active categories accept registrations")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['position', 'name']
        verbose_name = 'Membership Category'
        verbose_name_plural = 'Membership Categories'

    def __str__(self):
        return self.name


class SerialCounter(models.Model):
    """
    Per-category monotonic counter behind GNACOPS serial numbers.
    Starts at 0; the first allocation returns 1. Only ever incremented.
    """
    key = models.CharField(max_length=64, unique=True)
    value = models.PositiveBigIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Serial Counter'
        verbose_name_plural = 'Serial Counters'

    def __str__(self):
        return f"{self.key}: {self.value}"


class Profile(models.Model):
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='profile')
    full_name = models.CharField(max_length=200)
    phone = models.CharField(max_length=20, blank=True, default='')
    email_verified = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.full_name


class Membership(models.Model):
    """
    A member's registration in one category. The GNACOPS ID is written once
    at registration and never regenerated.
    """
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
        ('suspended', 'Suspended'),
    ]

    PAYMENT_STATUS_CHOICES = [
        ('unpaid', 'Unpaid'),
        ('paid', 'Paid'),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='memberships')
    category = models.ForeignKey(MembershipCategory, on_delete=models.PROTECT, related_name='memberships')
    # GNACOPS ID: GNC/{PM|AM}/{region}/{serial} e.g. GNC/PM/01/0007
    gnacops_id = models.CharField(max_length=32, unique=True, editable=False)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='pending')
    payment_status = models.CharField(max_length=10, choices=PAYMENT_STATUS_CHOICES, default='unpaid')
    region = models.CharField(max_length=100, blank=True, default='')
    amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Membership'
        verbose_name_plural = 'Memberships'

    def __str__(self):
        return f"{self.gnacops_id} - {self.category.name} - {self.status}"

    def save(self, *args, **kwargs):
        """Refuse to overwrite an issued GNACOPS ID."""
        if self.pk:
            issued = type(self).objects.filter(pk=self.pk).values_list('gnacops_id', flat=True).first()
            if issued and issued != self.gnacops_id:
                raise ValidationError(f"GNACOPS ID {issued} has already been issued and cannot change")
        super().save(*args, **kwargs)


class FormSubmission(models.Model):
    """Raw registration form data as submitted by the applicant."""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='form_submissions')
    category = models.ForeignKey(MembershipCategory, on_delete=models.PROTECT, related_name='form_submissions')
    membership = models.ForeignKey(Membership, on_delete=models.CASCADE, related_name='form_submissions')
    submission_data = models.JSONField(default=dict)
    submitted_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-submitted_at']

    def __str__(self):
        return f"Submission for {self.membership.gnacops_id}"
