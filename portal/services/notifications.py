"""
In-app notifications and push device registration.

Notifications are stored per user and fanned out to any open dashboard
WebSocket through the channel layer group ``notifications.<user id>``.
Delivery to push providers is handled outside this service; it only keeps
the registered device tokens.
"""
from __future__ import annotations

import logging
from typing import Iterable

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.utils import timezone

from portal.models import DeviceSubscription, Notification

logger = logging.getLogger(__name__)


def user_group(user_id) -> str:
    return f"notifications.{user_id}"


def serialize_notification(n: Notification) -> dict:
    return {
        'id': str(n.id),
        'userId': n.user_id,
        'type': n.type,
        'title': n.title,
        'message': n.message,
        'referralId': str(n.referral_id) if n.referral_id else None,
        'priority': n.priority,
        'status': 'READ' if n.read_at else 'UNREAD',
        'createdAt': n.created_at.isoformat() if n.created_at else None,
        'readAt': n.read_at.isoformat() if n.read_at else None,
    }


def notify_users(users: Iterable, *, type: str, title: str, message: str = '',
                 referral=None, priority: str = 'MEDIUM') -> list[Notification]:
    created = [
        Notification.objects.create(
            user=u, type=type, title=title, message=message, referral=referral, priority=priority,
        )
        for u in users
    ]
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return created
    for n in created:
        try:
            async_to_sync(channel_layer.group_send)(
                user_group(n.user_id),
                {'type': 'notification.created', 'notification': serialize_notification(n)},
            )
        except Exception:
            # The row is stored; clients catch up through the list endpoint
            logger.warning('could not broadcast notification %s', n.id, exc_info=True)
    return created


def subscribe_device(user, *, token: str, platform: str) -> tuple[DeviceSubscription, bool]:
    """Register ``token`` for ``user``; re-registering moves it to ``user``."""
    sub, created = DeviceSubscription.objects.update_or_create(
        token=token, defaults={'user': user, 'platform': platform},
    )
    logger.info('device %s %s for user %s', platform, 'registered' if created else 'refreshed', user.pk)
    return sub, created


def unsubscribe_device(user, *, token: str) -> int:
    deleted, _ = DeviceSubscription.objects.filter(user=user, token=token).delete()
    return deleted


def unread_count(user) -> int:
    return Notification.objects.filter(user=user, read_at__isnull=True).count()


def mark_read(user, notification_id) -> Notification | None:
    n = Notification.objects.filter(user=user, id=notification_id).first()
    if n is not None and n.read_at is None:
        n.read_at = timezone.now()
        n.save(update_fields=['read_at'])
    return n


def mark_all_read(user) -> int:
    return Notification.objects.filter(user=user, read_at__isnull=True).update(read_at=timezone.now())
