import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from portal.models import Facility, User
from portal.permissions import UserType

PASSWORD = 'P@ssw0rd-123'


@pytest.fixture(autouse=True)
def _clear_throttle_cache():
    # DRF throttles keep their history in the default cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def phu(db):
    return Facility.objects.create(code='PHU-001', name='Kissy PHU', facility_type='PHU', district='Western Urban')


@pytest.fixture
def hospital(db):
    return Facility.objects.create(code='HOS-001', name='Connaught Hospital', facility_type='TERTIARY_HOSPITAL',
                                   district='Western Urban')


@pytest.fixture
def make_user(db):
    def _make(username, user_type=UserType.PHU_STAFF, facility=None, **extra):
        return User.objects.create_user(username=username, password=PASSWORD, user_type=user_type,
                                        facility=facility, **extra)
    return _make


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for():
    def _client(user):
        c = APIClient()
        c.force_authenticate(user=user)
        return c
    return _client
