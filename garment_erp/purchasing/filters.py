import django_filters
from garment_erp.core.filters import SearchFilterMixin
from .models import PurchaseOrder


class PurchaseOrderFilter(SearchFilterMixin, django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    status = django_filters.ChoiceFilter(choices=PurchaseOrder.Status.choices)
    supplier = django_filters.NumberFilter(field_name='supplier_id')
    start_date = django_filters.DateFilter(field_name='order_date', lookup_expr='gte')
    end_date = django_filters.DateFilter(field_name='order_date', lookup_expr='lte')

    search_fields = ('po_number', 'supplier__name')

    class Meta:
        model = PurchaseOrder
        fields = ['status', 'supplier']
