from django.core.exceptions import ImproperlyConfigured
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response


class ConfigurationError(ImproperlyConfigured):
    """Access-control tables are inconsistent; raised at startup only."""


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    # normalize response
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = str(resp.data)
    code = getattr(exc, 'default_code', None) or 'api_error'
    return Response({'ok': False, 'error': {'code': code, 'message': detail}}, status=resp.status_code)
