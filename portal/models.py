"""
Database models for the referral portal.

Users carry a single role (``user_type``) assigned by administrators and
an optional facility binding. Referrals move a patient from a sending to
a receiving facility; notifications and device subscriptions back the
in-app and push notification channels.
"""
from __future__ import annotations

import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models

from .permissions import UserType


class Facility(models.Model):
    """A PHU or hospital taking part in the referral network."""
    TYPE_CHOICES = [
        ('PHU', 'Peripheral Health Unit'),
        ('DISTRICT_HOSPITAL', 'District Hospital'),
        ('REGIONAL_HOSPITAL', 'Regional Hospital'),
        ('TERTIARY_HOSPITAL', 'Tertiary Hospital'),
    ]
    code = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=255)
    facility_type = models.CharField(max_length=32, choices=TYPE_CHOICES, default='PHU')
    district = models.CharField(max_length=128, blank=True, db_index=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = 'facilities'

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"


class User(AbstractUser):
    """Portal user with one role and an optional facility.

    An empty ``user_type`` means the account has no role yet; the guard
    treats it like an anonymous session.
    """
    user_type = models.CharField(max_length=32, choices=UserType.choices, blank=True, default='', db_index=True)
    facility = models.ForeignKey(
        Facility, null=True, blank=True, on_delete=models.SET_NULL, related_name='users'
    )

    def __str__(self) -> str:
        return f"{self.username} ({self.user_type or 'no role'})"


class Referral(models.Model):
    STATUS_PENDING = 'PENDING'
    STATUS_ACCEPTED = 'ACCEPTED'
    STATUS_REJECTED = 'REJECTED'
    STATUS_IN_TRANSIT = 'IN_TRANSIT'
    STATUS_ARRIVED = 'ARRIVED'
    STATUS_COMPLETED = 'COMPLETED'
    STATUS_CANCELLED = 'CANCELLED'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_ACCEPTED, 'Accepted'),
        (STATUS_REJECTED, 'Rejected'),
        (STATUS_IN_TRANSIT, 'In transit'),
        (STATUS_ARRIVED, 'Arrived'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]
    PRIORITY_CHOICES = [
        ('CRITICAL', 'Critical'),
        ('HIGH', 'High'),
        ('MEDIUM', 'Medium'),
        ('LOW', 'Low'),
    ]
    TYPE_CHOICES = [
        ('EMERGENCY', 'Emergency'),
        ('URGENT', 'Urgent'),
        ('ROUTINE', 'Routine'),
        ('SPECIALIST_CONSULTATION', 'Specialist consultation'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    referral_code = models.CharField(max_length=32, unique=True)
    patient_name = models.CharField(max_length=255)
    sending_facility = models.ForeignKey(Facility, on_delete=models.PROTECT, related_name='outgoing_referrals')
    receiving_facility = models.ForeignKey(Facility, on_delete=models.PROTECT, related_name='incoming_referrals')
    referral_type = models.CharField(max_length=32, choices=TYPE_CHOICES, default='ROUTINE')
    priority = models.CharField(max_length=16, choices=PRIORITY_CHOICES, default='MEDIUM', db_index=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    chief_complaint = models.CharField(max_length=255)
    clinical_summary = models.TextField(blank=True)
    rejection_reason = models.TextField(blank=True)
    created_by = models.ForeignKey(User, null=True, on_delete=models.SET_NULL, related_name='referrals_created')
    accepted_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='referrals_accepted'
    )
    accepted_at = models.DateTimeField(null=True, blank=True)
    arrived_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['receiving_facility', 'status', 'created_at'], name='referral_recv_status_idx'),
            models.Index(fields=['sending_facility', 'created_at'], name='referral_send_created_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.referral_code} {self.status}"


class Notification(models.Model):
    """An in-app notification addressed to one user."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='notifications')
    type = models.CharField(max_length=64)
    title = models.CharField(max_length=255)
    message = models.TextField(blank=True)
    referral = models.ForeignKey(
        Referral, null=True, blank=True, on_delete=models.SET_NULL, related_name='notifications'
    )
    priority = models.CharField(max_length=16, default='MEDIUM')
    created_at = models.DateTimeField(auto_now_add=True)
    read_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        indexes = [models.Index(fields=['user', 'read_at', 'created_at'], name='notification_user_read_idx')]

    def __str__(self) -> str:
        return f"notification {self.type} -> {self.user_id}"


class DeviceSubscription(models.Model):
    """A device token registered for push notifications."""
    PLATFORM_CHOICES = [
        ('WEB', 'Web'),
        ('ANDROID', 'Android'),
        ('IOS', 'iOS'),
    ]
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='devices')
    token = models.CharField(max_length=512, unique=True)
    platform = models.CharField(max_length=16, choices=PLATFORM_CHOICES, default='WEB')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.platform} device of {self.user_id}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.CharField(max_length=64, blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]
