"""
Django admin configuration for appointments app.
"""
from django.contrib import admin
from .models import Appointment, RecurringAppointment


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ['appointment_date', 'user', 'appointment_type', 'duration_minutes', 'status', 'reminder_sent']
    list_filter = ['status', 'appointment_type', 'reminder_sent']
    search_fields = ['user__email', 'purpose']
    date_hierarchy = 'appointment_date'


@admin.register(RecurringAppointment)
class RecurringAppointmentAdmin(admin.ModelAdmin):
    list_display = ['appointment_type', 'user', 'recurrence_pattern', 'recurrence_interval', 'time_of_day', 'start_date', 'end_date', 'is_active']
    list_filter = ['recurrence_pattern', 'is_active']
    search_fields = ['user__email', 'purpose']
