from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny


@api_view(['GET', 'POST', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([AllowAny])
def api_not_found(request, path=''):
    """Unknown ``/api/`` paths answer in the API's JSON envelope."""
    raise NotFound(f'no API endpoint at {request.path}')
