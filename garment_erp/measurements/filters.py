import django_filters
from garment_erp.core.filters import SearchFilterMixin
from .models import Measurement


class MeasurementFilter(SearchFilterMixin, django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    customer = django_filters.NumberFilter(field_name='customer_id')
    garment_type = django_filters.CharFilter(lookup_expr='iexact')

    search_fields = ('measurement_code', 'customer__name')

    class Meta:
        model = Measurement
        fields = ['customer', 'garment_type']
