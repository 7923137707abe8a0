from django.core.management.base import BaseCommand, CommandError

from portal.checks import validate_access_config
from portal.exceptions import ConfigurationError
from portal.permissions import PERMISSIONS, PermissionKey, UserType
from portal.routes import ROUTE_PERMISSIONS


class Command(BaseCommand):
    help = "Print the role x permission matrix and the route table; --check validates them."

    def add_arguments(self, parser):
        parser.add_argument('--check', action='store_true', help='only validate the tables')

    def handle(self, *args, **opts):
        if opts['check']:
            try:
                validate_access_config()
            except ConfigurationError as e:
                raise CommandError(str(e)) from e
            self.stdout.write(self.style.SUCCESS('Access configuration is consistent.'))
            return

        roles = list(UserType)
        width = max(len(k.value) for k in PermissionKey)
        self.stdout.write(' ' * width + '  ' + ' '.join(f'{i + 1:>2}' for i in range(len(roles))))
        for key in PermissionKey:
            marks = ' '.join(' x' if r in PERMISSIONS[key] else ' .' for r in roles)
            self.stdout.write(f'{key.value:<{width}}  {marks}')
        self.stdout.write('')
        for i, r in enumerate(roles, 1):
            self.stdout.write(f'{i:>2} {r.value}')
        self.stdout.write('')
        for route, key in sorted(ROUTE_PERMISSIONS.items()):
            self.stdout.write(f'{route:<24} {key.value}')
