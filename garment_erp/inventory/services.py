"""Stock movements: every quantity change writes exactly one ledger entry"""
import logging
from decimal import Decimal

from django.db import transaction
from rest_framework.exceptions import ValidationError

from .models import Material, MaterialTransaction

logger = logging.getLogger(__name__)


def record_stock_movement(material, movement_type, quantity, reference=None, notes=None, user=None):
    """
    Apply a stock movement to ``material`` and append its ledger entry.

    IN and RETURN add ``quantity``, OUT subtracts it (insufficient stock is a
    validation error) and ADJUSTMENT sets the absolute quantity. The material
    row is locked for the duration and its status recomputed afterwards.

    Returns ``(material, ledger_entry)``.
    """
    quantity = Decimal(str(quantity))
    if movement_type == MaterialTransaction.Type.ADJUSTMENT:
        if quantity < 0:
            raise ValidationError({'quantity': ['Adjusted quantity cannot be negative.']})
    elif quantity <= 0:
        raise ValidationError({'quantity': ['Quantity must be greater than zero.']})

    with transaction.atomic():
        material = Material.objects.select_for_update().get(pk=material.pk)
        old_quantity = material.quantity

        if movement_type in (MaterialTransaction.Type.IN, MaterialTransaction.Type.RETURN):
            new_quantity = old_quantity + quantity
        elif movement_type == MaterialTransaction.Type.OUT:
            new_quantity = old_quantity - quantity
            if new_quantity < 0:
                raise ValidationError({'quantity': [f'Insufficient stock: {old_quantity} {material.unit} available.']})
        elif movement_type == MaterialTransaction.Type.ADJUSTMENT:
            new_quantity = quantity
        else:
            raise ValidationError({'type': [f'Unknown transaction type {movement_type!r}.']})

        material.quantity = new_quantity
        material.refresh_status()
        material.save(update_fields=['quantity', 'status', 'updated_at'])

        entry = MaterialTransaction.objects.create(
            material=material,
            type=movement_type,
            quantity=quantity,
            balance_after=new_quantity,
            reference=reference,
            notes=notes,
            created_by=user if user and user.is_authenticated else None,
        )

    logger.info(
        f"Stock {movement_type} {quantity} on {material.material_code}: {old_quantity} -> {new_quantity}"
        f"{f' (ref {reference})' if reference else ''}"
    )
    return material, entry
