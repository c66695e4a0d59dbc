import django_filters
from garment_erp.core.filters import SearchFilterMixin
from .models import Machine


class MachineFilter(SearchFilterMixin, django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    status = django_filters.ChoiceFilter(choices=Machine.Status.choices)
    type = django_filters.CharFilter(lookup_expr='iexact')

    search_fields = ('machine_code', 'name')

    class Meta:
        model = Machine
        fields = ['status', 'type']
