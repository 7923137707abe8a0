import uuid

import pytest
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser
from django.urls import reverse

from portal.models import DeviceSubscription, Notification
from portal.permissions import UserType
from portal.realtime.consumers import NotificationsConsumer
from portal.services.notifications import notify_users, user_group

pytestmark = pytest.mark.django_db


@pytest.fixture
def desk_user(make_user, hospital):
    return make_user('desk1', UserType.HOSPITAL_DESK, hospital)


@pytest.fixture
def inbox(desk_user):
    return notify_users([desk_user, desk_user, desk_user], type='REFERRAL_CREATED', title='New referral')


def test_list_and_unread_count(client_for, desk_user, inbox):
    c = client_for(desk_user)
    r = c.get(reverse('api-notifications'), {'limit': 2})
    assert r.status_code == 200
    assert len(r.data['data']) == 2
    assert r.data['pagination'] == {'total': 3, 'page': 1, 'pageSize': 2}
    assert r.data['unread'] == 3
    assert r.data['data'][0]['status'] == 'UNREAD'
    assert c.get(reverse('api-notifications-unread')).data['count'] == 3


def test_limit_is_capped(client_for, desk_user):
    r = client_for(desk_user).get(reverse('api-notifications'), {'limit': 500})
    assert r.status_code == 400


def test_mark_read(client_for, desk_user, inbox):
    c = client_for(desk_user)
    r = c.post(reverse('api-notification-read', args=[inbox[0].id]))
    assert r.status_code == 200
    assert r.data['data']['status'] == 'READ'
    assert r.data['data']['readAt']
    assert c.get(reverse('api-notifications-unread')).data['count'] == 2


def test_mark_read_is_scoped_to_owner(client_for, make_user, inbox):
    other = make_user('phu1', UserType.PHU_STAFF)
    c = client_for(other)
    assert c.post(reverse('api-notification-read', args=[inbox[0].id])).status_code == 404
    assert c.post(reverse('api-notification-read', args=[uuid.uuid4()])).status_code == 404
    assert Notification.objects.filter(read_at__isnull=False).count() == 0


def test_mark_all_read(client_for, desk_user, inbox):
    c = client_for(desk_user)
    c.post(reverse('api-notification-read', args=[inbox[0].id]))
    r = c.post(reverse('api-notifications-read-all'))
    assert r.data['updated'] == 2
    assert c.get(reverse('api-notifications-unread')).data['count'] == 0


def test_subscribe_and_unsubscribe_device(client_for, desk_user, make_user):
    c = client_for(desk_user)
    url = reverse('api-notifications-subscribe')
    r = c.post(url, {'token': 'fcm-token-1', 'platform': 'ANDROID'}, format='json')
    assert r.status_code == 201
    assert r.data['data']['created'] is True
    r = c.post(url, {'token': 'fcm-token-1', 'platform': 'ANDROID'}, format='json')
    assert r.status_code == 200

    # the same device signing in as someone else moves the token
    other = make_user('phu1', UserType.PHU_STAFF)
    client_for(other).post(url, {'token': 'fcm-token-1', 'platform': 'ANDROID'}, format='json')
    assert DeviceSubscription.objects.get(token='fcm-token-1').user == other

    assert c.delete(url, {'token': 'fcm-token-1'}, format='json').status_code == 404
    assert client_for(other).delete(url, {'token': 'fcm-token-1'}, format='json').status_code == 200
    assert not DeviceSubscription.objects.exists()


def test_subscribe_validates_platform(client_for, desk_user):
    r = client_for(desk_user).post(reverse('api-notifications-subscribe'),
                                   {'token': 't', 'platform': 'PAGER'}, format='json')
    assert r.status_code == 400


def test_notifications_require_authentication(api_client):
    assert api_client.get(reverse('api-notifications')).status_code == 401


def test_notify_users_broadcasts_to_user_group(desk_user):
    layer = get_channel_layer()
    channel = async_to_sync(layer.new_channel)()
    async_to_sync(layer.group_add)(user_group(desk_user.id), channel)
    [n] = notify_users([desk_user], type='REFERRAL_ACCEPTED', title='Accepted', priority='HIGH')
    message = async_to_sync(layer.receive)(channel)
    assert message['type'] == 'notification.created'
    assert message['notification']['id'] == str(n.id)
    assert message['notification']['priority'] == 'HIGH'


class _User:
    is_authenticated = True

    def __init__(self, pk):
        self.id = pk


def test_consumer_forwards_notifications():
    async def scenario():
        communicator = WebsocketCommunicator(NotificationsConsumer.as_asgi(), '/ws/notifications/')
        communicator.scope['user'] = _User(7)
        connected, _ = await communicator.connect()
        assert connected
        welcome = await communicator.receive_json_from()
        await get_channel_layer().group_send(
            user_group(7), {'type': 'notification.created', 'notification': {'id': 'abc'}},
        )
        pushed = await communicator.receive_json_from()
        await communicator.disconnect()
        return welcome, pushed

    welcome, pushed = async_to_sync(scenario)()
    assert welcome['type'] == 'welcome'
    assert pushed == {'type': 'notification', 'data': {'id': 'abc'}}


def test_consumer_refuses_anonymous():
    async def scenario():
        communicator = WebsocketCommunicator(NotificationsConsumer.as_asgi(), '/ws/notifications/')
        communicator.scope['user'] = AnonymousUser()
        connected, code = await communicator.connect()
        return connected, code

    connected, code = async_to_sync(scenario)()
    assert connected is False
    assert code == 4401
