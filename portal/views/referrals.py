"""
Referral endpoints.

Role-level access comes from the permission table through
``permission_required``; per-referral rules (who may accept or reject a
given referral) live in :mod:`portal.services.referrals`.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from portal.permissions import PermissionKey, permission_required
from portal.serializers.referral import (
    ReferralCreateSerializer,
    ReferralListQuerySerializer,
    ReferralStatusSerializer,
    serialize_referral,
)
from portal.services.referrals import (
    can_modify_referral,
    change_status,
    create_referral,
    visible_referrals,
)

CanViewReferrals = permission_required(PermissionKey.REFERRALS_VIEW)
CanCreateReferrals = permission_required(PermissionKey.REFERRALS_CREATE)
CanDecideReferrals = permission_required(PermissionKey.REFERRALS_ACCEPT_REJECT)


def _get_visible_referral(user, pk):
    referral = visible_referrals(user).filter(id=pk).first()
    if referral is None:
        raise NotFound('referral not found')
    return referral


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def referrals(request):
    """GET lists referrals visible to the user; POST creates one."""
    if request.method == 'POST':
        return _create(request)
    return _list(request)


def _list(request):
    if not CanViewReferrals().has_permission(request, None):
        return Response({'ok': False, 'detail': CanViewReferrals.message}, status=status.HTTP_403_FORBIDDEN)
    q = ReferralListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = visible_referrals(request.user, q.validated_data.get('direction'))
    if q.validated_data.get('status'):
        qs = qs.filter(status=q.validated_data['status'])
    total = qs.count()
    page = q.validated_data['page']
    limit = q.validated_data['limit']
    start = (page - 1) * limit
    items = [serialize_referral(r) for r in qs.order_by('-created_at')[start:start + limit]]
    return Response({
        'ok': True,
        'data': items,
        'pagination': {'total': total, 'page': page, 'pageSize': limit},
    })


def _create(request):
    if not CanCreateReferrals().has_permission(request, None):
        return Response({'ok': False, 'detail': CanCreateReferrals.message}, status=status.HTTP_403_FORBIDDEN)
    s = ReferralCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = s.validated_data
    referral = create_referral(
        request.user,
        receiving_facility_id=d['receivingFacilityId'],
        patient_name=d['patientName'],
        chief_complaint=d['chiefComplaint'],
        clinical_summary=d['clinicalSummary'],
        priority=d['priority'],
        referral_type=d['referralType'],
    )
    return Response({'ok': True, 'data': serialize_referral(referral)}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, CanViewReferrals])
def referral_detail(request, pk):
    referral = _get_visible_referral(request.user, pk)
    data = serialize_referral(referral)
    data['canModify'] = can_modify_referral(request.user, referral)
    return Response({'ok': True, 'data': data})


@api_view(['POST'])
@permission_classes([IsAuthenticated, CanDecideReferrals])
def referral_status(request, pk):
    """Accept, reject or mark arrival of a referral."""
    referral = _get_visible_referral(request.user, pk)
    s = ReferralStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    referral = change_status(
        request.user, referral, s.validated_data['status'],
        reason=s.validated_data['rejectionReason'],
    )
    return Response({'ok': True, 'data': serialize_referral(referral)})


# ScopedRateThrottle reads throttle_scope off the wrapped APIView class
referral_status.cls.throttle_scope = 'referral_write'
