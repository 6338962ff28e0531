"""URL routing configuration for the delivery app."""

from django.urls import path

from .views import (
    DeliveryLogListView,
    QueueNotificationView,
    SendEmailNotificationView,
    SendPushNotificationView,
    TemplateListView,
)

urlpatterns = [
    # Template endpoints
    path("templates", TemplateListView.as_view(), name="template-list"),
    # Delivery log endpoints
    path(
        "notification-logs",
        DeliveryLogListView.as_view(),
        name="notification-log-list",
    ),
    # Notification endpoints
    path(
        "notifications/email",
        SendEmailNotificationView.as_view(),
        name="notification-email",
    ),
    path(
        "notifications/push",
        SendPushNotificationView.as_view(),
        name="notification-push",
    ),
    path(
        "notifications/queue",
        QueueNotificationView.as_view(),
        name="notification-queue",
    ),
]
