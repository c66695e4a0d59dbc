import django_filters
from garment_erp.core.filters import SearchFilterMixin
from .models import Customer, Supplier


class CustomerFilter(SearchFilterMixin, django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    is_active = django_filters.BooleanFilter()
    city = django_filters.CharFilter(lookup_expr='iexact')

    search_fields = ('customer_code', 'name', 'email', 'phone')

    class Meta:
        model = Customer
        fields = ['is_active', 'city']


class SupplierFilter(SearchFilterMixin, django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    is_active = django_filters.BooleanFilter()

    search_fields = ('supplier_code', 'name', 'contact_person')

    class Meta:
        model = Supplier
        fields = ['is_active']
