from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password

from portal.models import Facility, User
from portal.permissions import UserType

FACILITIES = [
    ("PHU-001", "Kissy PHU", "PHU"),
    ("HOS-001", "Connaught Hospital", "TERTIARY_HOSPITAL"),
]

# (username, role, facility code)
DEMO_USERS = [
    ("phu1", UserType.PHU_STAFF, "PHU-001"),
    ("desk1", UserType.HOSPITAL_DESK, "HOS-001"),
    ("coordinator1", UserType.REFERRAL_COORDINATOR, "HOS-001"),
    ("specialist1", UserType.SPECIALIST, "HOS-001"),
    ("district1", UserType.DISTRICT_HEALTH, None),
    ("national1", UserType.NATIONAL_USER, None),
    ("admin1", UserType.SYSTEM_ADMIN, None),
    ("nems1", UserType.AMBULANCE_DISPATCH, None),
]


class Command(BaseCommand):
    help = "Ensure one demo user per role exists (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument('--password', default='123456')

    def handle(self, *args, **opts):
        facilities = {}
        for code, name, kind in FACILITIES:
            facilities[code], _ = Facility.objects.get_or_create(
                code=code, defaults={"name": name, "facility_type": kind},
            )
        for username, role, code in DEMO_USERS:
            User.objects.update_or_create(
                username=username,
                defaults={
                    "user_type": role,
                    "facility": facilities.get(code),
                    "password": make_password(opts['password']),
                    "is_active": True,
                },
            )
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role.value})"))
        self.stdout.write(self.style.SUCCESS("All demo users ensured."))
