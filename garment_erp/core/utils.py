"""Response envelope and list pagination helpers shared by every app"""
import math

from django.conf import settings
from django.core.paginator import Paginator, EmptyPage
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response


def api_response(data=None, message=None, status_code=status.HTTP_200_OK, **extra):
    """Wrap ``data`` in the ``{success, data, message?}`` envelope"""
    body = {'success': True}
    if data is not None:
        body['data'] = data
    if message:
        body['message'] = message
    body.update(extra)
    return Response(body, status=status_code)


def parse_positive_int(value, name, default=None):
    if value in (None, ''):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError({name: [f'{name} must be a positive integer.']})
    if number < 1:
        raise ValidationError({name: [f'{name} must be a positive integer.']})
    return number


def parse_bool(value):
    """Query string boolean; ``None`` when the parameter is absent"""
    if value in (None, ''):
        return None
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def get_page_params(request, default_limit=None):
    page = parse_positive_int(request.query_params.get('page'), 'page', 1)
    limit = parse_positive_int(
        request.query_params.get('limit'), 'limit', default_limit or settings.API_DEFAULT_PAGE_SIZE
    )
    if limit > settings.API_MAX_PAGE_SIZE:
        raise ValidationError({'limit': [f'limit cannot exceed {settings.API_MAX_PAGE_SIZE}.']})
    return page, limit


def wants_pagination(request):
    params = request.query_params
    return 'page' in params or 'limit' in params


def paginated_response(request, queryset, serializer_class, default_limit=None, context=None, **extra):
    """
    Return one page of ``queryset`` serialized with ``serializer_class``.

    ``pagination.pages`` is ``ceil(total / limit)``; a page past the end
    yields an empty list rather than an error.
    """
    page, limit = get_page_params(request, default_limit)
    paginator = Paginator(queryset, limit)
    try:
        object_list = paginator.page(page).object_list
    except EmptyPage:
        object_list = []

    total = paginator.count
    serializer = serializer_class(object_list, many=True, context=context or {'request': request})
    return api_response(
        serializer.data,
        pagination={
            'page': page,
            'limit': limit,
            'total': total,
            'pages': math.ceil(total / limit) if total else 0,
        },
        **extra,
    )


def list_response(request, queryset, serializer_class, allow_unpaginated=False, context=None, **extra):
    """Paginate unless the caller asked for the full result set"""
    if allow_unpaginated and not wants_pagination(request):
        serializer = serializer_class(queryset, many=True, context=context or {'request': request})
        return api_response(serializer.data, **extra)
    return paginated_response(request, queryset, serializer_class, context=context, **extra)
