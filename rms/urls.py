"""
URL configuration for the referral management portal.

The JSON API and the guarded dashboard pages come from the portal app.
The Django admin site lives under ``/django-admin/`` because ``/admin/*``
belongs to the dashboard's administration pages. OpenAPI documentation is
exposed at ``/swagger/`` and ``/redoc/``.
"""
from django.contrib import admin
from django.urls import path, include

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

# API metadata for Swagger/OpenAPI documentation
api_info = openapi.Info(
    title="Referral Management API",
    default_version='v1',
    description="Referral, notification and access-control services for the national referral dashboard.",
)

schema_view = get_schema_view(
    api_info,
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('django-admin/', admin.site.urls),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
    # Portal routes last: the dashboard shell is a catch-all
    path('', include('portal.routers')),
]
