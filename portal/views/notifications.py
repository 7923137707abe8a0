from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from portal.models import Notification
from portal.serializers.notification import (
    NotificationListQuerySerializer,
    SubscribeDeviceSerializer,
    UnsubscribeDeviceSerializer,
)
from portal.services import notifications as svc


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_notifications(request):
    q = NotificationListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    page = q.validated_data['page']
    limit = q.validated_data['limit']
    qs = Notification.objects.filter(user=request.user).order_by('-created_at')
    total = qs.count()
    start = (page - 1) * limit
    return Response({
        'ok': True,
        'data': [svc.serialize_notification(n) for n in qs[start:start + limit]],
        'pagination': {'total': total, 'page': page, 'pageSize': limit},
        'unread': svc.unread_count(request.user),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def unread_count(request):
    return Response({'ok': True, 'count': svc.unread_count(request.user)})


@api_view(['POST', 'PATCH'])
@permission_classes([IsAuthenticated])
def mark_read(request, pk):
    n = svc.mark_read(request.user, pk)
    if n is None:
        raise NotFound('notification not found')
    return Response({'ok': True, 'data': svc.serialize_notification(n)})


@api_view(['POST', 'PATCH'])
@permission_classes([IsAuthenticated])
def mark_all_read(request):
    return Response({'ok': True, 'updated': svc.mark_all_read(request.user)})


@api_view(['POST', 'DELETE'])
@permission_classes([IsAuthenticated])
def subscription(request):
    """Register (POST) or drop (DELETE) a push device token."""
    if request.method == 'DELETE':
        s = UnsubscribeDeviceSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        removed = svc.unsubscribe_device(request.user, token=s.validated_data['token'])
        if not removed:
            raise NotFound('subscription not found')
        return Response({'ok': True})

    s = SubscribeDeviceSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    sub, created = svc.subscribe_device(
        request.user, token=s.validated_data['token'], platform=s.validated_data['platform'],
    )
    return Response(
        {'ok': True, 'data': {'id': sub.id, 'platform': sub.platform, 'created': created}},
        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
    )
