import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated

from garment_erp.core.filters import filter_queryset
from garment_erp.core.permissions import MANAGEMENT_ROLES
from garment_erp.core.utils import api_response, paginated_response
from garment_erp.parties.models import Customer
from .filters import MeasurementFilter
from .models import Measurement, COMMON_GARMENT_TYPES
from .serializers import MeasurementSerializer

logger = logging.getLogger(__name__)


def _measurements():
    return Measurement.objects.select_related('customer', 'taken_by__user')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def measurement_list_create(request):
    """List measurements or record a new set"""
    if request.method == 'GET':
        queryset = filter_queryset(MeasurementFilter, request, _measurements().order_by('-created_at'))
        return paginated_response(request, queryset, MeasurementSerializer)

    serializer = MeasurementSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    measurement = serializer.save()
    logger.info(f"Measurement {measurement.measurement_code} recorded for {measurement.customer.customer_code}")
    return api_response(MeasurementSerializer(measurement).data, status_code=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def measurement_detail(request, pk):
    """Retrieve, update or delete a measurement"""
    measurement = get_object_or_404(_measurements(), pk=pk)

    if request.method == 'GET':
        return api_response(MeasurementSerializer(measurement).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = MeasurementSerializer(measurement, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return api_response(serializer.data)
    else:  # DELETE
        if request.user.role not in MANAGEMENT_ROLES:
            raise PermissionDenied()
        code = measurement.measurement_code
        measurement.delete()
        logger.info(f"Measurement {code} deleted by {request.user.email}")
        return api_response(message='Measurement deleted successfully')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def garment_types(request):
    """Garment types already used, followed by the common ones not yet used"""
    used = list(Measurement.objects.order_by('garment_type').values_list('garment_type', flat=True).distinct())
    seen = set(used)
    return api_response(used + [t for t in COMMON_GARMENT_TYPES if t not in seen])


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def customer_measurements(request, customer_id):
    """All measurements for one customer, newest first"""
    customer = get_object_or_404(Customer, pk=customer_id)
    queryset = _measurements().filter(customer=customer).order_by('-created_at')
    return api_response(MeasurementSerializer(queryset, many=True).data)
