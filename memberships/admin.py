"""
Django admin configuration for memberships app.
"""
from django.contrib import admin
from django.http import HttpResponse
import csv
from .models import MembershipCategory, SerialCounter, Profile, Membership, FormSubmission
from .utils import get_category_code
from .exceptions import UnknownCategory


@admin.register(MembershipCategory)
class MembershipCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'tier_code', 'price', 'position', 'is_active']
    list_filter = ['is_active']
    search_fields = ['name']
    ordering = ['position', 'name']

    @admin.display(description='Tier')
    def tier_code(self, obj):
        try:
            return get_category_code(obj.name)
        except UnknownCategory:
            return 'Unknown'


@admin.register(SerialCounter)
class SerialCounterAdmin(admin.ModelAdmin):
    """
    Read-only view of the serial counters. Counters only move through
    allocation; editing them here could reissue a serial.
    """
    list_display = ['key', 'value', 'updated_at']
    readonly_fields = ['key', 'value', 'updated_at']

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Membership)
class MembershipAdmin(admin.ModelAdmin):
    """
    Admin interface for managing memberships.
    Includes filtering, search, and CSV export functionality.
    """
    list_display = ['gnacops_id', 'user', 'category', 'region', 'status', 'payment_status', 'created_at']
    list_filter = ['status', 'payment_status', 'category', 'created_at']
    search_fields = ['gnacops_id', 'user__email', 'user__profile__full_name', 'region']
    readonly_fields = ['gnacops_id', 'created_at', 'updated_at']

    actions = ['export_as_csv']

    def export_as_csv(self, request, queryset):
        """
        Export selected memberships as CSV.
        """
        field_names = ['gnacops_id', 'category', 'region', 'status', 'payment_status', 'amount', 'created_at']

        response = HttpResponse(content_type='text/csv')
        response['Content-Disposition'] = 'attachment; filename=memberships.csv'
        writer = csv.writer(response)

        writer.writerow(['email'] + field_names)
        for obj in queryset.select_related('user', 'category'):
            writer.writerow([obj.user.email] + [getattr(obj, field) for field in field_names])

        return response

    export_as_csv.short_description = "Export selected memberships as CSV"


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'user', 'phone', 'email_verified', 'created_at']
    search_fields = ['full_name', 'user__email', 'phone']


@admin.register(FormSubmission)
class FormSubmissionAdmin(admin.ModelAdmin):
    list_display = ['membership', 'category', 'user', 'submitted_at']
    list_filter = ['category']
    search_fields = ['membership__gnacops_id', 'user__email']
    readonly_fields = ['submission_data', 'submitted_at']
