"""Root URL configuration for the notification engine."""

from django.urls import include, path

urlpatterns = [
    path("api/v1/notification-engine/", include("delivery.urls")),
]
