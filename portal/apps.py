from django.apps import AppConfig


class PortalConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "portal"

    def ready(self):
        # Fail fast on an inconsistent permission/route table
        from portal.checks import validate_access_config

        validate_access_config()
