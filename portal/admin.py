"""
Django admin registrations for the portal models.

The admin site is mounted at ``/django-admin/``; ``/admin/*`` paths
belong to the dashboard.
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import AuditEvent, DeviceSubscription, Facility, Notification, Referral, User


@admin.register(Facility)
class FacilityAdmin(admin.ModelAdmin):
    list_display = ('code', 'name', 'facility_type', 'district', 'is_active')
    list_filter = ('facility_type', 'district', 'is_active')
    search_fields = ('code', 'name')


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('username', 'user_type', 'facility', 'is_active', 'is_staff')
    list_filter = ('user_type', 'facility', 'is_active')
    search_fields = ('username', 'first_name', 'last_name', 'email')
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Dashboard access', {'fields': ('user_type', 'facility')}),
    )


@admin.register(Referral)
class ReferralAdmin(admin.ModelAdmin):
    list_display = ('referral_code', 'patient_name', 'sending_facility', 'receiving_facility',
                    'priority', 'status', 'created_at')
    list_filter = ('status', 'priority', 'referral_type')
    search_fields = ('referral_code', 'patient_name')
    raw_id_fields = ('created_by', 'accepted_by')


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'type', 'title', 'created_at', 'read_at')
    list_filter = ('type',)
    search_fields = ('user__username', 'title')


@admin.register(DeviceSubscription)
class DeviceSubscriptionAdmin(admin.ModelAdmin):
    list_display = ('user', 'platform', 'created_at', 'updated_at')
    list_filter = ('platform',)
    search_fields = ('user__username',)


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action', 'object_type')
    search_fields = ('object_id', 'user__username')
