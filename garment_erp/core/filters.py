import django_filters
from django.db.models import Q
from rest_framework.exceptions import ValidationError

from .models import User, Role


def filter_queryset(filterset_class, request, queryset):
    """Apply a FilterSet to ``queryset``; malformed filter values are a 400"""
    filterset = filterset_class(request.query_params, queryset=queryset, request=request)
    if not filterset.is_valid():
        raise ValidationError(filterset.errors)
    return filterset.qs


class SearchFilterMixin:
    """Case-insensitive substring search over ``search_fields``"""
    search_fields = ()

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        query = Q()
        for field in self.search_fields:
            query |= Q(**{f'{field}__icontains': value})
        return queryset.filter(query)


class UserFilter(SearchFilterMixin, django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    role = django_filters.ChoiceFilter(choices=Role.choices)
    is_active = django_filters.BooleanFilter()

    search_fields = ('first_name', 'last_name', 'email')

    class Meta:
        model = User
        fields = ['role', 'is_active']
