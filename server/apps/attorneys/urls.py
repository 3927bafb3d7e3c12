"""URL configuration for attorneys app."""

from django.urls import path

from server.apps.attorneys import views

app_name = 'attorneys'

urlpatterns = [
    path(
        'practice-areas/',
        views.create_practice_area,
        name='practice-area-create',
    ),
    path('attorneys/', views.create_attorney, name='attorney-create'),
    path(
        'attorneys/<int:pk>/images/',
        views.update_attorney_images,
        name='attorney-images-update',
    ),
]
