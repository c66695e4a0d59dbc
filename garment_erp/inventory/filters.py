import django_filters
from garment_erp.core.filters import SearchFilterMixin
from .models import Material


class MaterialFilter(SearchFilterMixin, django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    category = django_filters.CharFilter()
    status = django_filters.ChoiceFilter(choices=Material.Status.choices)

    search_fields = ('material_code', 'name')

    class Meta:
        model = Material
        fields = ['category', 'status']
