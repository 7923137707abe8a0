import bleach
from rest_framework import serializers

from portal.models import Referral


def _clean(v):
    return bleach.clean((v or '').strip(), tags=[], strip=True)


class ReferralCreateSerializer(serializers.Serializer):
    receivingFacilityId = serializers.IntegerField()
    patientName = serializers.CharField(max_length=255)
    chiefComplaint = serializers.CharField(max_length=255)
    clinicalSummary = serializers.CharField(required=False, allow_blank=True, default='')
    priority = serializers.ChoiceField(choices=[c for c, _ in Referral.PRIORITY_CHOICES], default='MEDIUM')
    referralType = serializers.ChoiceField(choices=[c for c, _ in Referral.TYPE_CHOICES], default='ROUTINE')

    def validate_patientName(self, v):
        v = _clean(v)
        if len(v) < 2:
            raise serializers.ValidationError('Patient name must be at least 2 characters')
        return v

    def validate_chiefComplaint(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('Chief complaint is required')
        return v

    def validate_clinicalSummary(self, v):
        return _clean(v)


class ReferralStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[
        Referral.STATUS_ACCEPTED, Referral.STATUS_REJECTED, Referral.STATUS_ARRIVED,
    ])
    rejectionReason = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_rejectionReason(self, v):
        return _clean(v)


class ReferralListQuerySerializer(serializers.Serializer):
    direction = serializers.ChoiceField(choices=['incoming', 'outgoing'], required=False)
    status = serializers.ChoiceField(choices=[c for c, _ in Referral.STATUS_CHOICES], required=False)
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=200, default=20)


def serialize_referral(r: Referral) -> dict:
    return {
        'id': str(r.id),
        'referralCode': r.referral_code,
        'patientName': r.patient_name,
        'sendingFacility': {'id': r.sending_facility_id, 'name': r.sending_facility.name},
        'receivingFacility': {'id': r.receiving_facility_id, 'name': r.receiving_facility.name},
        'referralType': r.referral_type,
        'priority': r.priority,
        'status': r.status,
        'chiefComplaint': r.chief_complaint,
        'clinicalSummary': r.clinical_summary,
        'rejectionReason': r.rejection_reason or None,
        'createdBy': r.created_by_id,
        'acceptedBy': r.accepted_by_id,
        'acceptedAt': r.accepted_at.isoformat() if r.accepted_at else None,
        'arrivedAt': r.arrived_at.isoformat() if r.arrived_at else None,
        'createdAt': r.created_at.isoformat() if r.created_at else None,
    }
