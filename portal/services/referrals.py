"""
Referral rules and workflow.

Who may change a referral is decided per referral, on top of the
role-level ``REFERRALS_ACCEPT_REJECT`` permission:

- SYSTEM_ADMIN may modify any referral
- AMBULANCE_DISPATCH (NEMS) may modify any referral
- users of the receiving facility may modify incoming referrals
- users of the sending facility may not modify their own referrals
"""
from __future__ import annotations

import logging
import secrets

from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied, ValidationError

from portal.models import Facility, Referral, User
from portal.permissions import UserType, user_role
from portal.services.audit import log_action
from portal.services.notifications import notify_users

logger = logging.getLogger(__name__)

_ANY_REFERRAL_ROLES = {UserType.SYSTEM_ADMIN, UserType.AMBULANCE_DISPATCH}
# roles that list referrals across all facilities
_WIDE_VIEW_ROLES = _ANY_REFERRAL_ROLES | {UserType.DISTRICT_HEALTH}

# target status -> statuses it may be entered from
TRANSITIONS = {
    Referral.STATUS_ACCEPTED: {Referral.STATUS_PENDING},
    Referral.STATUS_REJECTED: {Referral.STATUS_PENDING},
    Referral.STATUS_ARRIVED: {Referral.STATUS_ACCEPTED, Referral.STATUS_IN_TRANSIT},
}


def can_modify_referral(user, referral: Referral) -> bool:
    """Can ``user`` accept, reject or mark arrival of ``referral``?"""
    role = user_role(user)
    if not role:
        return False
    if role in _ANY_REFERRAL_ROLES:
        return True
    if getattr(user, 'facility_id', None) and referral.receiving_facility_id:
        return user.facility_id == referral.receiving_facility_id
    return False


def can_create_referral(user) -> bool:
    """Any authenticated user bound to a facility can create referrals."""
    if not (user and getattr(user, 'is_authenticated', False)):
        return False
    return bool(getattr(user, 'facility_id', None))


def visible_referrals(user, direction: str | None = None):
    """Referrals ``user`` may list.

    District, admin and dispatch users see everything; every other role
    sees its own facility's traffic, and nothing without a facility.
    """
    qs = Referral.objects.select_related('sending_facility', 'receiving_facility', 'created_by')
    facility_id = getattr(user, 'facility_id', None)
    if direction == 'incoming':
        return qs.filter(receiving_facility_id=facility_id) if facility_id else qs.none()
    if direction == 'outgoing':
        return qs.filter(sending_facility_id=facility_id) if facility_id else qs.none()
    if user_role(user) in _WIDE_VIEW_ROLES:
        return qs
    if facility_id:
        return qs.filter(Q(sending_facility_id=facility_id) | Q(receiving_facility_id=facility_id))
    return qs.none()


def _new_referral_code() -> str:
    return f"REF-{timezone.now():%Y%m%d}-{secrets.token_hex(3).upper()}"


def create_referral(user: User, *, receiving_facility_id, patient_name: str, chief_complaint: str,
                    clinical_summary: str = '', priority: str = 'MEDIUM',
                    referral_type: str = 'ROUTINE') -> Referral:
    if not can_create_referral(user):
        raise PermissionDenied('Only users bound to a facility can create referrals.')
    receiving = Facility.objects.filter(id=receiving_facility_id, is_active=True).first()
    if receiving is None:
        raise ValidationError({'receivingFacilityId': 'Unknown or inactive facility.'})
    if receiving.id == user.facility_id:
        raise ValidationError({'receivingFacilityId': 'A facility cannot refer to itself.'})

    with transaction.atomic():
        referral = Referral.objects.create(
            referral_code=_new_referral_code(),
            patient_name=patient_name,
            sending_facility_id=user.facility_id,
            receiving_facility=receiving,
            chief_complaint=chief_complaint,
            clinical_summary=clinical_summary,
            priority=priority,
            referral_type=referral_type,
            created_by=user,
        )
        log_action(user=user, action='referral_create', object_type='referral', object_id=referral.id,
                   detail={'code': referral.referral_code, 'to': receiving.id})

    recipients = User.objects.filter(facility=receiving, is_active=True).exclude(user_type='')
    notify_users(
        recipients,
        type='REFERRAL_CREATED',
        title=f'New referral {referral.referral_code}',
        message=f'{referral.patient_name}: {referral.chief_complaint}',
        referral=referral,
        priority=referral.priority,
    )
    logger.info('referral %s created by %s for facility %s', referral.referral_code, user.pk, receiving.pk)
    return referral


def change_status(user: User, referral: Referral, status: str, *, reason: str = '') -> Referral:
    """Move ``referral`` to ``status`` on behalf of ``user``.

    The transition is checked against the row as locked inside the
    transaction, not against the instance passed in.
    """
    if not can_modify_referral(user, referral):
        raise PermissionDenied('You cannot modify this referral.')
    allowed_from = TRANSITIONS.get(status)
    if allowed_from is None:
        raise ValidationError({'status': f'Unsupported status {status!r}.'})
    if status == Referral.STATUS_REJECTED and not reason:
        raise ValidationError({'rejectionReason': 'A reason is required to reject a referral.'})

    with transaction.atomic():
        locked = (
            Referral.objects.select_for_update()
            .select_related('sending_facility', 'receiving_facility')
            .get(id=referral.id)
        )
        previous = locked.status
        if previous not in allowed_from:
            raise ValidationError({'status': f'Cannot move from {previous} to {status}.'})
        now = timezone.now()
        locked.status = status
        if status == Referral.STATUS_ACCEPTED:
            locked.accepted_by = user
            locked.accepted_at = now
        elif status == Referral.STATUS_REJECTED:
            locked.rejection_reason = reason
        elif status == Referral.STATUS_ARRIVED:
            locked.arrived_at = now
        locked.save()
        log_action(user=user, action='referral_status', object_type='referral', object_id=locked.id,
                   detail={'from': previous, 'to': status})

    if locked.created_by_id:
        notify_users(
            User.objects.filter(id=locked.created_by_id),
            type=f'REFERRAL_{status}',
            title=f'Referral {locked.referral_code} {status.lower().replace("_", " ")}',
            message=reason or locked.receiving_facility.name,
            referral=locked,
            priority=locked.priority,
        )
    return locked
