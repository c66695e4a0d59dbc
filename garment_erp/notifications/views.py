import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from garment_erp.core.filters import filter_queryset
from garment_erp.core.models import Role
from garment_erp.core.permissions import role_required
from garment_erp.core.utils import api_response, paginated_response
from .filters import NotificationFilter
from .models import Notification
from .serializers import NotificationSerializer, BroadcastSerializer

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20


@api_view(['GET', 'POST'])
@permission_classes([role_required(Role.ADMIN, methods=['POST'])])
def notification_list_create(request):
    """The caller's notifications (with unread count), or send one to a user"""
    if request.method == 'GET':
        own = Notification.objects.filter(user=request.user)
        queryset = filter_queryset(NotificationFilter, request, own)
        return paginated_response(
            request, queryset, NotificationSerializer,
            default_limit=DEFAULT_LIMIT,
            unread_count=own.filter(is_read=False).count(),
        )

    serializer = NotificationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    notification = serializer.save()
    logger.info(f"Notification {notification.id} sent to {notification.user.email} by {request.user.email}")
    return api_response(NotificationSerializer(notification).data, status_code=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([role_required(Role.ADMIN)])
def notification_broadcast(request):
    """Notify every active user, optionally only those with the given roles"""
    serializer = BroadcastSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    notifications = serializer.save()
    logger.info(f"Broadcast '{serializer.validated_data['title']}' to {len(notifications)} users by {request.user.email}")
    return api_response(
        {'count': len(notifications)},
        message=f'Notification sent to {len(notifications)} users',
        status_code=status.HTTP_201_CREATED,
    )


@api_view(['POST', 'PATCH'])
@permission_classes([IsAuthenticated])
def notification_mark_read(request, pk):
    notification = get_object_or_404(Notification, pk=pk, user=request.user)
    if not notification.is_read:
        notification.is_read = True
        notification.save(update_fields=['is_read'])
    return api_response(NotificationSerializer(notification).data)


@api_view(['POST', 'PATCH'])
@permission_classes([IsAuthenticated])
def notification_mark_all_read(request):
    updated = Notification.objects.filter(user=request.user, is_read=False).update(is_read=True)
    return api_response({'updated': updated}, message='All notifications marked as read')


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def notification_delete(request, pk):
    notification = get_object_or_404(Notification, pk=pk, user=request.user)
    notification.delete()
    return api_response(message='Notification deleted successfully')
