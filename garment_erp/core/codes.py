"""
Sequential human-readable codes (CUST0001, SUP0001, PO2024010001, ...).

The pure helpers compute the next code from the highest existing one. The
``allocate_*`` helpers are what models call on save: they lock a
``CodeSequence`` row for the namespace so two concurrent writers can never
be handed the same number.
"""
import logging

from django.db import transaction
from django.utils import timezone

from .models import CodeSequence

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 4
MONTHLY_WIDTH = 4


def format_code(prefix: str, number: int, width: int = DEFAULT_WIDTH) -> str:
    return f'{prefix}{number:0{width}d}'


def parse_code_number(code, prefix: str) -> int:
    """
    Return the numeric suffix of ``code`` after ``prefix``.

    Codes that do not carry the prefix or whose suffix is not numeric count
    as 0 so they never push the sequence forward.
    """
    if not code or not code.startswith(prefix):
        return 0
    try:
        return int(code[len(prefix):])
    except ValueError:
        logger.warning(f"Ignoring malformed code {code!r} for prefix {prefix!r}")
        return 0


def next_code(prefix: str, last_code=None, width: int = DEFAULT_WIDTH) -> str:
    """
    Next code after ``last_code`` in the ``prefix`` namespace.

    >>> next_code('CUST', 'CUST0042')
    'CUST0043'
    >>> next_code('CUST', None)
    'CUST0001'
    """
    return format_code(prefix, parse_code_number(last_code, prefix) + 1, width)


def monthly_prefix(prefix: str, when=None) -> str:
    """Sub-prefix for a calendar month: ``PO`` + ``YYYY`` + ``MM``"""
    when = when or timezone.localdate()
    return f'{prefix}{when.year:04d}{when.month:02d}'


def next_monthly_code(prefix: str, last_code=None, when=None, width: int = MONTHLY_WIDTH) -> str:
    """
    Next month-scoped code. Only codes from the same month continue the
    sequence; anything else restarts it at 1.

    >>> from datetime import date
    >>> next_monthly_code('PO', 'PO2024010007', date(2024, 1, 15))
    'PO2024010008'
    >>> next_monthly_code('PO', 'PO2024010007', date(2024, 2, 1))
    'PO2024020001'
    """
    scoped = monthly_prefix(prefix, when)
    number = 0
    if last_code and last_code.startswith(scoped):
        try:
            number = int(last_code[-width:])
        except ValueError:
            logger.warning(f"Ignoring malformed code {last_code!r} for prefix {scoped!r}")
    return format_code(scoped, number + 1, width)


def last_code_for(model, field: str, prefix: str):
    """Highest existing code starting with ``prefix`` (descending string sort)"""
    return (
        model.objects
        .filter(**{f'{field}__startswith': prefix})
        .order_by(f'-{field}')
        .values_list(field, flat=True)
        .first()
    )


def allocate_code(model, field: str, prefix: str, width: int = DEFAULT_WIDTH) -> str:
    """
    Reserve the next code for ``model.field`` in the ``prefix`` namespace.

    The counter row is locked for the rest of the surrounding transaction.
    The issued number is one past the larger of the counter and the highest
    code already stored, so rows written without the allocator (fixtures,
    imports) are never duplicated.
    """
    with transaction.atomic():
        sequence, _ = CodeSequence.objects.select_for_update().get_or_create(namespace=prefix)
        existing = parse_code_number(last_code_for(model, field, prefix), prefix)
        number = max(sequence.last_value, existing) + 1
        sequence.last_value = number
        sequence.save(update_fields=['last_value', 'updated_at'])
    code = format_code(prefix, number, width)
    logger.debug(f"Allocated code {code} for {model.__name__}.{field}")
    return code


def allocate_monthly_code(model, field: str, prefix: str, when=None, width: int = MONTHLY_WIDTH) -> str:
    """Month-scoped variant of :func:`allocate_code` (purchase order numbers)"""
    return allocate_code(model, field, monthly_prefix(prefix, when), width)
