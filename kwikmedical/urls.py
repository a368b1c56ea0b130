"""
URL configuration for the KwikMedical dispatch backend.

Routes the Django admin, the dispatch API provided by the ambulance
app and the Prometheus metrics endpoint.  OpenAPI documentation is
exposed at ``/swagger/`` and ``/redoc/``.
"""
from django.contrib import admin
from django.urls import path, include

from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

# API metadata for Swagger/OpenAPI documentation
api_info = openapi.Info(
    title="KwikMedical Dispatch API",
    default_version='v1',
    description="Patient records and ambulance dispatch lifecycle.",
)

schema_view = get_schema_view(
    api_info,
    public=True,
    permission_classes=(permissions.AllowAny,),
)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('ambulance.routers')),
    path('', include('django_prometheus.urls')),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
]
