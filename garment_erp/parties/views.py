import logging

from django.db.models import Count
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated

from garment_erp.core.filters import filter_queryset
from garment_erp.core.models import Role
from garment_erp.core.permissions import role_required
from garment_erp.core.utils import api_response, paginated_response
from .filters import CustomerFilter, SupplierFilter
from .models import Customer, Supplier
from .serializers import CustomerSerializer, SupplierSerializer

logger = logging.getLogger(__name__)


# Customer views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def customer_list_create(request):
    """List customers or create a new customer"""
    if request.method == 'GET':
        queryset = filter_queryset(CustomerFilter, request, Customer.objects.all().order_by('-created_at'))
        return paginated_response(request, queryset, CustomerSerializer)

    serializer = CustomerSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    customer = serializer.save()
    logger.info(f"Customer {customer.customer_code} created by {request.user.email}")
    return api_response(CustomerSerializer(customer).data, status_code=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def customer_detail(request, pk):
    """Retrieve, update or delete a customer"""
    customer = get_object_or_404(Customer, pk=pk)

    if request.method == 'GET':
        from garment_erp.measurements.serializers import MeasurementListSerializer

        data = CustomerSerializer(customer).data
        recent = customer.measurements.select_related('taken_by__user').order_by('-created_at')[:10]
        data['measurements'] = MeasurementListSerializer(recent, many=True).data
        return api_response(data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = CustomerSerializer(customer, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return api_response(serializer.data)
    else:  # DELETE
        if request.user.role not in (Role.ADMIN, Role.MANAGER):
            raise PermissionDenied()
        code = customer.customer_code
        customer.delete()
        logger.info(f"Customer {code} deleted by {request.user.email}")
        return api_response(message='Customer deleted successfully')


# Supplier views
@api_view(['GET', 'POST'])
@permission_classes([role_required(Role.ADMIN, Role.MANAGER, methods=['POST'])])
def supplier_list_create(request):
    """List suppliers (with purchase order counts) or create a new supplier"""
    if request.method == 'GET':
        queryset = Supplier.objects.annotate(po_count=Count('purchase_orders')).order_by('-created_at')
        queryset = filter_queryset(SupplierFilter, request, queryset)
        return paginated_response(request, queryset, SupplierSerializer)

    serializer = SupplierSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    supplier = serializer.save()
    logger.info(f"Supplier {supplier.supplier_code} created by {request.user.email}")
    return api_response(SupplierSerializer(supplier).data, status_code=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([role_required(Role.ADMIN, Role.MANAGER, methods=['PUT', 'PATCH'])])
def supplier_detail(request, pk):
    """Retrieve, update or delete a supplier"""
    supplier = get_object_or_404(Supplier, pk=pk)

    if request.method == 'GET':
        from garment_erp.purchasing.serializers import PurchaseOrderListSerializer

        data = SupplierSerializer(supplier).data
        recent = supplier.purchase_orders.select_related('supplier', 'created_by').order_by('-created_at')[:10]
        data['purchase_orders'] = PurchaseOrderListSerializer(recent, many=True).data
        return api_response(data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SupplierSerializer(supplier, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return api_response(serializer.data)
    else:  # DELETE
        if request.user.role != Role.ADMIN:
            raise PermissionDenied()
        code = supplier.supplier_code
        supplier.delete()
        logger.info(f"Supplier {code} deleted by {request.user.email}")
        return api_response(message='Supplier deleted successfully')
