import logging
from decimal import Decimal

from django.db.models import Count, Sum, Q, DecimalField
from django.db.models.functions import Coalesce
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated

from garment_erp.core.filters import filter_queryset
from garment_erp.core.models import Role
from garment_erp.core.permissions import role_required, MANAGEMENT_ROLES, PURCHASING_ROLES
from garment_erp.core.utils import api_response, paginated_response
from . import services
from .filters import PurchaseOrderFilter
from .models import PurchaseOrder
from .serializers import (
    PurchaseOrderSerializer, PurchaseOrderListSerializer, PurchaseOrderCreateSerializer,
    PurchaseOrderUpdateSerializer, ReceiveSerializer,
)

logger = logging.getLogger(__name__)

RECENT_ORDERS = 5
SPENT_STATUSES = (PurchaseOrder.Status.RECEIVED, PurchaseOrder.Status.PARTIALLY_RECEIVED)


def _detail_queryset():
    return PurchaseOrder.objects.select_related('supplier', 'created_by').prefetch_related('items__material')


def _detail_response(purchase_order, **kwargs):
    purchase_order = _detail_queryset().get(pk=purchase_order.pk)
    return api_response(PurchaseOrderSerializer(purchase_order).data, **kwargs)


@api_view(['GET', 'POST'])
@permission_classes([role_required(*PURCHASING_ROLES, methods=['POST'])])
def purchase_order_list_create(request):
    """List purchase orders or raise a new one"""
    if request.method == 'GET':
        queryset = (
            PurchaseOrder.objects.select_related('supplier')
            .annotate(item_count=Count('items'))
            .order_by('-created_at', '-id')
        )
        queryset = filter_queryset(PurchaseOrderFilter, request, queryset)
        return paginated_response(request, queryset, PurchaseOrderListSerializer)

    serializer = PurchaseOrderCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    purchase_order = services.create_purchase_order(serializer.validated_data, request.user)
    return _detail_response(
        purchase_order, message='Purchase order created successfully', status_code=status.HTTP_201_CREATED
    )


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([role_required(*MANAGEMENT_ROLES, methods=['PUT', 'PATCH'])])
def purchase_order_detail(request, pk):
    """Retrieve, edit or delete (drafts only) a purchase order"""
    purchase_order = get_object_or_404(_detail_queryset(), pk=pk)

    if request.method == 'GET':
        return api_response(PurchaseOrderSerializer(purchase_order).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = PurchaseOrderUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        purchase_order = services.update_purchase_order(purchase_order, serializer.validated_data, request.user)
        return _detail_response(purchase_order, message='Purchase order updated successfully')
    else:  # DELETE
        if request.user.role != Role.ADMIN:
            raise PermissionDenied()
        services.delete_purchase_order(purchase_order, request.user)
        return api_response(message='Purchase order deleted successfully')


@api_view(['POST'])
@permission_classes([role_required(*MANAGEMENT_ROLES)])
def purchase_order_approve(request, pk):
    purchase_order = get_object_or_404(PurchaseOrder, pk=pk)
    purchase_order = services.approve_purchase_order(purchase_order, request.user)
    return _detail_response(purchase_order, message='Purchase order approved')


@api_view(['POST'])
@permission_classes([role_required(*MANAGEMENT_ROLES)])
def purchase_order_receive(request, pk):
    """Receive goods: ``{items: [{id, quantity}]}``; linked materials are restocked"""
    purchase_order = get_object_or_404(PurchaseOrder, pk=pk)
    serializer = ReceiveSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    purchase_order = services.receive_items(purchase_order, serializer.validated_data['items'], request.user)
    return _detail_response(purchase_order, message='Items received successfully')


@api_view(['POST'])
@permission_classes([role_required(*MANAGEMENT_ROLES)])
def purchase_order_cancel(request, pk):
    purchase_order = get_object_or_404(PurchaseOrder, pk=pk)
    purchase_order = services.cancel_purchase_order(purchase_order, request.user)
    return _detail_response(purchase_order, message='Purchase order cancelled')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def purchase_order_summary(request):
    """Counts and amounts per status, total spent and the latest orders"""
    zero = Decimal('0')
    rows = {
        row['status']: row
        for row in PurchaseOrder.objects.order_by().values('status').annotate(
            count=Count('id'),
            amount=Coalesce(Sum('total_amount'), zero, output_field=DecimalField()),
        )
    }
    by_status = [
        {
            'status': value,
            'count': rows[value]['count'] if value in rows else 0,
            'amount': rows[value]['amount'] if value in rows else zero,
        }
        for value in PurchaseOrder.Status.values
    ]
    total_spent = PurchaseOrder.objects.aggregate(
        total=Coalesce(Sum('total_amount', filter=Q(status__in=SPENT_STATUSES)), zero, output_field=DecimalField())
    )['total']
    recent = (
        PurchaseOrder.objects.select_related('supplier')
        .annotate(item_count=Count('items'))
        .order_by('-created_at', '-id')[:RECENT_ORDERS]
    )
    return api_response({
        'by_status': by_status,
        'total_spent': Decimal(total_spent).quantize(Decimal('0.01')),
        'recent_orders': PurchaseOrderListSerializer(recent, many=True).data,
    })
