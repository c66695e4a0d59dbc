from django.urls import path
from .views import (
    notification_list_create, notification_broadcast, notification_mark_read,
    notification_mark_all_read, notification_delete,
)

urlpatterns = [
    path('notifications/', notification_list_create, name='notification-list-create'),
    path('notifications/broadcast/', notification_broadcast, name='notification-broadcast'),
    path('notifications/read-all/', notification_mark_all_read, name='notification-read-all'),
    path('notifications/<int:pk>/', notification_delete, name='notification-delete'),
    path('notifications/<int:pk>/read/', notification_mark_read, name='notification-read'),
]
