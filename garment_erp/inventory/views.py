import logging
from decimal import Decimal

from django.db.models import Count, Sum, F, DecimalField, ExpressionWrapper
from django.db.models.functions import Coalesce
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated

from garment_erp.core.filters import filter_queryset
from garment_erp.core.models import Role
from garment_erp.core.permissions import role_required, MANAGEMENT_ROLES
from garment_erp.core.utils import api_response, paginated_response
from .filters import MaterialFilter
from .models import Material
from .serializers import (
    MaterialSerializer, MaterialUpdateSerializer, MaterialTransactionSerializer, StockMovementSerializer,
)
from .services import record_stock_movement

logger = logging.getLogger(__name__)

RECENT_TRANSACTIONS = 50


@api_view(['GET', 'POST'])
@permission_classes([role_required(*MANAGEMENT_ROLES, methods=['POST'])])
def material_list_create(request):
    """List materials or create one (status derived from the opening quantity)"""
    if request.method == 'GET':
        queryset = filter_queryset(MaterialFilter, request, Material.objects.all().order_by('name', 'id'))
        return paginated_response(request, queryset, MaterialSerializer)

    serializer = MaterialSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    material = serializer.save()
    logger.info(f"Material {material.material_code} created by {request.user.email}")
    return api_response(MaterialSerializer(material).data, status_code=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([role_required(*MANAGEMENT_ROLES, methods=['PUT', 'PATCH'])])
def material_detail(request, pk):
    """Retrieve (with recent ledger entries), update or delete a material"""
    material = get_object_or_404(Material, pk=pk)

    if request.method == 'GET':
        data = MaterialSerializer(material).data
        recent = material.transactions.select_related('created_by').order_by('-created_at', '-id')[:RECENT_TRANSACTIONS]
        data['transactions'] = MaterialTransactionSerializer(recent, many=True).data
        return api_response(data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = MaterialUpdateSerializer(material, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return api_response(MaterialSerializer(material).data)
    else:  # DELETE
        if request.user.role != Role.ADMIN:
            raise PermissionDenied()
        code = material.material_code
        material.delete()
        logger.info(f"Material {code} deleted by {request.user.email}")
        return api_response(message='Material deleted successfully')


@api_view(['POST'])
@permission_classes([role_required(*MANAGEMENT_ROLES)])
def material_transaction(request, pk):
    """Record a stock movement (IN, OUT, ADJUSTMENT, RETURN)"""
    material = get_object_or_404(Material, pk=pk)
    serializer = StockMovementSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    material, entry = record_stock_movement(
        material,
        data['type'],
        data['quantity'],
        reference=data.get('reference') or None,
        notes=data.get('notes') or None,
        user=request.user,
    )
    return api_response({
        'transaction': MaterialTransactionSerializer(entry).data,
        'material': MaterialSerializer(material).data,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def material_transaction_list(request, pk):
    """Paginated ledger for one material"""
    material = get_object_or_404(Material, pk=pk)
    queryset = material.transactions.select_related('created_by').order_by('-created_at', '-id')
    return paginated_response(request, queryset, MaterialTransactionSerializer)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def material_categories(request):
    """Distinct material categories"""
    categories = Material.objects.order_by('category').values_list('category', flat=True).distinct()
    return api_response(list(categories))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inventory_summary(request):
    """Totals, per-status counts and per-category quantities"""
    value_expr = ExpressionWrapper(F('quantity') * F('unit_price'), output_field=DecimalField(max_digits=20, decimal_places=4))
    zero = Decimal('0')
    totals = Material.objects.aggregate(
        total_materials=Count('id'),
        total_quantity=Coalesce(Sum('quantity'), zero, output_field=DecimalField()),
        total_value=Coalesce(Sum(value_expr), zero, output_field=DecimalField()),
    )
    status_counts = {
        row['status']: row['count']
        for row in Material.objects.order_by().values('status').annotate(count=Count('id'))
    }
    by_category = [
        {'category': row['category'], 'count': row['count'], 'quantity': row['quantity']}
        for row in Material.objects.order_by('category').values('category').annotate(
            count=Count('id'), quantity=Sum('quantity')
        )
    ]
    return api_response({
        'total_materials': totals['total_materials'],
        'total_quantity': totals['total_quantity'],
        'total_value': Decimal(totals['total_value']).quantize(Decimal('0.01')),
        'by_status': [{'status': value, 'count': status_counts.get(value, 0)} for value in Material.Status.values],
        'by_category': by_category,
    })
