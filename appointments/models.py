"""
Database models for secretary appointments.
"""
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Appointment(models.Model):
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, null=True, blank=True, related_name='appointments')
    appointment_type = models.CharField(max_length=50)
    purpose = models.TextField()
    duration_minutes = models.PositiveIntegerField(default=30)
    appointment_date = models.DateTimeField(db_index=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='pending')
    meeting_link = models.URLField(blank=True, null=True)
    reminder_sent = models.BooleanField(default=False)
    secretary_notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['appointment_date']

    def __str__(self):
        return f"{self.appointment_type} - {self.appointment_date:%Y-%m-%d %H:%M} - {self.status}"


class RecurringAppointment(models.Model):
    """
    Template that the scheduled job expands into concrete appointments,
    one week ahead at a time.
    """
    PATTERN_CHOICES = [
        ('daily', 'Daily'),
        ('weekly', 'Weekly'),
        ('monthly', 'Monthly'),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, null=True, blank=True, related_name='recurring_appointments')
    appointment_type = models.CharField(max_length=50)
    purpose = models.TextField()
    duration_minutes = models.PositiveIntegerField(default=30)
    start_date = models.DateField()
    end_date = models.DateField(blank=True, null=True)
    recurrence_pattern = models.CharField(max_length=10, choices=PATTERN_CHOICES)
    recurrence_interval = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    # Weekday numbers, 0 = Sunday ... 6 = Saturday
    days_of_week = models.JSONField(blank=True, null=True, help_text="Weekly only: list of weekday numbers, 0 = Sunday")
    time_of_day = models.TimeField()
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.appointment_type} ({self.get_recurrence_pattern_display()}) from {self.start_date}"
