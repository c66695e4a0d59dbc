"""
Purchase order lifecycle.

Every operation locks the order row and runs in one transaction. Lifecycle
violations raise ``InvalidStateTransition`` and bad input raises DRF
``ValidationError``; both render as 400.
"""
import logging
from collections import OrderedDict
from decimal import Decimal

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from garment_erp.core.exceptions import InvalidStateTransition
from garment_erp.inventory.models import MaterialTransaction
from garment_erp.inventory.services import record_stock_movement
from .models import PurchaseOrder, POItem

logger = logging.getLogger(__name__)

Status = PurchaseOrder.Status

TERMINAL_STATUSES = (Status.RECEIVED, Status.CANCELLED)
INITIAL_STATUSES = (Status.DRAFT, Status.PENDING_APPROVAL, Status.APPROVED, Status.ORDERED)

# Status moves allowed through a plain edit
EDIT_TRANSITIONS = {
    Status.DRAFT: (Status.PENDING_APPROVAL,),
    Status.PENDING_APPROVAL: (Status.DRAFT,),
    Status.APPROVED: (Status.ORDERED,),
}


def _lock(purchase_order):
    return PurchaseOrder.objects.select_for_update().get(pk=purchase_order.pk)


def _ensure_open(purchase_order, action):
    if purchase_order.status in TERMINAL_STATUSES:
        raise InvalidStateTransition(
            f'Cannot {action} a purchase order that is {purchase_order.get_status_display().lower()}.'
        )


def _build_items(purchase_order, items):
    return [
        POItem(
            purchase_order=purchase_order,
            material=item.get('material'),
            description=item['description'],
            quantity=item['quantity'],
            unit_price=item['unit_price'],
        )
        for item in items
    ]


def _save_items(items):
    # bulk_create skips save(), so line amounts are filled in here
    for item in items:
        item.amount = item.get_line_total()
    POItem.objects.bulk_create(items)


def create_purchase_order(data, user):
    """
    Create an order with its items. ``data`` is validated serializer output:
    ``supplier``, ``items`` and optional ``status``, ``expected_date``,
    ``tax_rate``, ``shipping_cost``, ``notes``, ``terms``.
    """
    data = dict(data)
    items = data.pop('items')
    initial_status = data.pop('status', None) or Status.DRAFT
    if initial_status not in INITIAL_STATUSES:
        raise ValidationError({'status': [f'A purchase order cannot be created as {initial_status}.']})

    with transaction.atomic():
        purchase_order = PurchaseOrder(created_by=user, status=initial_status, **data)
        po_items = _build_items(purchase_order, items)
        purchase_order.recalculate_totals(po_items)
        purchase_order.save()
        _save_items(po_items)

    logger.info(
        f"Purchase order {purchase_order.po_number} created by {user.email} "
        f"({len(po_items)} items, total {purchase_order.total_amount})"
    )
    return purchase_order


def update_purchase_order(purchase_order, data, user):
    """
    Edit an open order.

    A supplied item list replaces the existing one and all totals are
    recomputed. Without items, a change of tax rate or shipping recomputes
    tax and total on top of the stored subtotal.
    """
    data = dict(data)
    items = data.pop('items', None)
    new_status = data.pop('status', None)

    with transaction.atomic():
        purchase_order = _lock(purchase_order)
        _ensure_open(purchase_order, 'edit')

        if new_status and new_status != purchase_order.status:
            if new_status not in EDIT_TRANSITIONS.get(purchase_order.status, ()):
                raise InvalidStateTransition(
                    f'Cannot change status from {purchase_order.status} to {new_status}.'
                )
            purchase_order.status = new_status

        for field, value in data.items():
            setattr(purchase_order, field, value)

        if items is not None:
            if purchase_order.items.filter(received_qty__gt=0).exists():
                raise InvalidStateTransition('Items cannot be replaced after goods have been received.')
            purchase_order.items.all().delete()
            po_items = _build_items(purchase_order, items)
            _save_items(po_items)
            purchase_order.recalculate_totals(po_items)
        elif 'tax_rate' in data or 'shipping_cost' in data:
            purchase_order.apply_tax_and_shipping()

        purchase_order.save()

    logger.info(f"Purchase order {purchase_order.po_number} updated by {user.email}")
    return purchase_order


def approve_purchase_order(purchase_order, user):
    with transaction.atomic():
        purchase_order = _lock(purchase_order)
        if purchase_order.status != Status.PENDING_APPROVAL:
            raise InvalidStateTransition('Only purchase orders pending approval can be approved.')
        purchase_order.status = Status.APPROVED
        purchase_order.save(update_fields=['status', 'updated_at'])

    logger.info(f"Purchase order {purchase_order.po_number} approved by {user.email}")
    return purchase_order


def receive_items(purchase_order, received, user):
    """
    Receive goods against an open order.

    ``received`` is a list of ``{'id': item_id, 'quantity': qty}``. Repeated
    ids accumulate. Linked materials get one IN ledger entry per line
    referencing the PO number. Any bad line rolls the whole receipt back.
    """
    with transaction.atomic():
        purchase_order = _lock(purchase_order)
        _ensure_open(purchase_order, 'receive goods for')

        items = {item.id: item for item in purchase_order.items.select_for_update()}
        totals = OrderedDict()
        for line in received:
            item = items.get(line['id'])
            if item is None:
                raise ValidationError({'items': [f"Item {line['id']} does not belong to this purchase order."]})
            quantity = Decimal(str(line['quantity']))
            if quantity <= 0:
                raise ValidationError({'items': [f"Received quantity for item {item.id} must be greater than zero."]})
            totals[item.id] = totals.get(item.id, Decimal('0')) + quantity

        for item_id, quantity in totals.items():
            item = items[item_id]
            if item.received_qty + quantity > item.quantity:
                raise ValidationError({
                    'items': [
                        f'Cannot receive {quantity} of "{item.description}": '
                        f'only {item.pending_qty} outstanding.'
                    ]
                })
            item.received_qty += quantity
            item.save(update_fields=['received_qty'])

            if item.material_id:
                record_stock_movement(
                    item.material,
                    MaterialTransaction.Type.IN,
                    quantity,
                    reference=purchase_order.po_number,
                    notes=f'Received from PO {purchase_order.po_number}',
                    user=user,
                )

        if all(item.is_fully_received for item in items.values()):
            purchase_order.status = Status.RECEIVED
            purchase_order.received_date = timezone.now()
        else:
            purchase_order.status = Status.PARTIALLY_RECEIVED
        purchase_order.save(update_fields=['status', 'received_date', 'updated_at'])

    logger.info(
        f"Purchase order {purchase_order.po_number}: received {len(totals)} line(s), "
        f"status {purchase_order.status} (by {user.email})"
    )
    return purchase_order


def cancel_purchase_order(purchase_order, user):
    with transaction.atomic():
        purchase_order = _lock(purchase_order)
        _ensure_open(purchase_order, 'cancel')
        purchase_order.status = Status.CANCELLED
        purchase_order.save(update_fields=['status', 'updated_at'])

    logger.info(f"Purchase order {purchase_order.po_number} cancelled by {user.email}")
    return purchase_order


def delete_purchase_order(purchase_order, user):
    with transaction.atomic():
        purchase_order = _lock(purchase_order)
        if purchase_order.status != Status.DRAFT:
            raise InvalidStateTransition('Only draft purchase orders can be deleted.')
        po_number = purchase_order.po_number
        purchase_order.delete()

    logger.info(f"Purchase order {po_number} deleted by {user.email}")
