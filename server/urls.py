"""Root URL configuration."""

from django.conf import settings
from django.conf.urls.static import static
from django.urls import include, path

urlpatterns = [
    path('api/v1/', include('server.apps.attorneys.urls')),
]

if settings.DEBUG:
    # Uploaded files are served by the static file server in production
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
