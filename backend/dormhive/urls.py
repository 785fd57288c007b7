"""
URL configuration for the dormhive project.

Everything under /api/ is the JSON API; /metrics is served by django-prometheus.
"""
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from django.http import JsonResponse
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView


def health_view(_request):
    return JsonResponse({
        'status': 'ok',
        'app': 'dormhive-backend',
        'debug': settings.DEBUG,
    })


urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('accounts.urls')),
    path('api/', include('properties.urls')),
    path('api/', include('billing.urls')),
    path('api/tenants/', include('tenants.urls')),
    path('api/concerns/', include('concerns.urls')),
    # API schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    # Health & Metrics
    path('health/', health_view),
    path('', lambda _r: JsonResponse({'service': 'dormhive-backend', 'status': 'ok'})),
    path('', include('django_prometheus.urls')),  # exposes /metrics
]

# Serve media files during development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
