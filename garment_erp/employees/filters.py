import calendar
from datetime import date

import django_filters
from garment_erp.core.filters import SearchFilterMixin
from .models import Employee, Attendance


class EmployeeFilter(SearchFilterMixin, django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    department = django_filters.CharFilter()
    is_active = django_filters.BooleanFilter()

    search_fields = ('employee_id', 'user__first_name', 'user__last_name')

    class Meta:
        model = Employee
        fields = ['department', 'is_active']


class AttendanceFilter(django_filters.FilterSet):
    """
    Attendance filters. ``year`` and ``month`` together select one calendar
    month and take precedence over ``date`` and the start/end range.
    """
    employee = django_filters.NumberFilter(field_name='employee_id')
    status = django_filters.ChoiceFilter(choices=Attendance.Status.choices)
    date = django_filters.DateFilter()
    start_date = django_filters.DateFilter(field_name='date', lookup_expr='gte')
    end_date = django_filters.DateFilter(field_name='date', lookup_expr='lte')
    year = django_filters.NumberFilter(method='filter_calendar')
    month = django_filters.NumberFilter(method='filter_calendar')

    class Meta:
        model = Attendance
        fields = ['employee', 'status', 'date']

    def filter_calendar(self, queryset, name, value):
        # applied once both values are known, in filter_queryset
        return queryset

    def filter_queryset(self, queryset):
        year = self.form.cleaned_data.get('year')
        month = self.form.cleaned_data.get('month')
        if year and month:
            year, month = int(year), int(month)
            if not 1 <= month <= 12:
                return queryset.none()
            last_day = calendar.monthrange(year, month)[1]
            cleaned = self.form.cleaned_data
            cleaned['date'] = cleaned['start_date'] = cleaned['end_date'] = None
            queryset = queryset.filter(date__gte=date(year, month, 1), date__lte=date(year, month, last_day))
        return super().filter_queryset(queryset)
