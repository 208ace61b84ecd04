"""
Order placement and status changes.

Placing an order debits the buyer. Accepting it credits the field owner and
cancelling it returns the coins to the buyer, taking them back from the
farmer first when the order had already been accepted. Coin movements,
notifications and the order row always commit or roll back together.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from apps.coins.models import RefType
from apps.coins.services import (
    calculate_coin_cost,
    credit_coins,
    deduct_coins,
    refund_coins,
    CurrencyNotFoundError,
    InsufficientCoinsError,
)
from apps.farms.models import Field
from apps.notifications.models import NotificationType
from apps.notifications.services import notify
from apps.orders.models import Order, OrderStatus

from .exceptions import (
    OrderNotFoundError,
    FieldNotFoundError,
    OwnFieldPurchaseError,
    InvalidOrderStatusError,
    OrderPermissionError,
    OrderPaymentError,
)

logger = logging.getLogger(__name__)

CANCELLATION_FAILED = 'Cancellation failed: Insufficient coins in farmer wallet to process refund.'


@transaction.atomic
def place_order(
    *,
    buyer: User,
    field_id: UUID,
    quantity: Decimal,
    total_price: Decimal,
    selected_harvest_date: Optional[date] = None,
    selected_harvest_label: str = '',
    mode_of_shipping: str = ''
) -> Order:
    """
    Place an order and pay for it with the buyer's coins.

    The coin cost is ``total_price`` converted with the buyer's preferred
    currency rate, rounded up.

    Args:
        buyer: User placing the order
        field_id: Field being bought from
        quantity: Ordered quantity (m² or units)
        total_price: Fiat price of the order
        selected_harvest_date: Optional harvest date chosen by the buyer
        selected_harvest_label: Optional label of that harvest
        mode_of_shipping: Delivery option

    Returns:
        The new pending Order

    Raises:
        FieldNotFoundError: If the field does not exist
        OwnFieldPurchaseError: If the buyer owns the field
        OrderPaymentError: If the price cannot be converted or the buyer
            cannot afford it
    """
    field = Field.objects.filter(id=field_id).first()
    if field is None:
        raise FieldNotFoundError("Field not found")

    if field.owner_id == buyer.id:
        raise OwnFieldPurchaseError("You cannot purchase from your own farm")

    try:
        coin_cost = calculate_coin_cost(total_price, buyer.preferred_currency or 'USD')
    except CurrencyNotFoundError as e:
        raise OrderPaymentError(str(e))

    order = Order.objects.create(
        buyer=buyer,
        field=field,
        quantity=quantity,
        total_price=total_price,
        coins_paid=coin_cost,
        status=OrderStatus.PENDING,
        selected_harvest_date=selected_harvest_date,
        selected_harvest_label=selected_harvest_label,
        mode_of_shipping=mode_of_shipping,
    )

    try:
        deduct_coins(
            user_id=buyer.id,
            amount=coin_cost,
            reason=f"Order: {quantity}m² of {field.name}",
            ref_type=RefType.ORDER,
            ref_id=order.id,
        )
    except InsufficientCoinsError as e:
        raise OrderPaymentError(str(e))

    notify(
        user=buyer,
        message=f"Order placed successfully for {field.name}. {coin_cost} coins deducted.",
        type=NotificationType.SUCCESS,
    )
    notify(
        user=field.owner,
        message=f"New order received for {field.name}. Accept it to receive your share!",
        type=NotificationType.INFO,
    )

    logger.info("Order %s placed by %s on field %s for %s coins", order.id, buyer.id, field.id, coin_cost)
    return order


def _accept(order: Order) -> None:
    field = order.field
    credit_coins(
        user_id=field.owner_id,
        amount=order.coins_paid,
        reason=f"Order Accepted: {order.quantity}m² of {field.name}",
        ref_type=RefType.ORDER,
        ref_id=order.id,
    )
    notify(
        user=order.buyer,
        message=f"Your order for {field.name} has been accepted by the farmer!",
        type=NotificationType.SUCCESS,
    )


def _reject(order: Order) -> None:
    field = order.field
    refund_coins(
        user_id=order.buyer_id,
        amount=order.coins_paid,
        ref_id=order.id,
        reason=f"Order Rejected/Cancelled: {field.name}",
    )
    notify(
        user=order.buyer,
        message=f"Your order for {field.name} was cancelled/rejected. Coins have been refunded.",
        type=NotificationType.INFO,
    )


def _reverse(order: Order) -> None:
    field = order.field
    try:
        deduct_coins(
            user_id=field.owner_id,
            amount=order.coins_paid,
            reason=f"Order Cancelled (Reversal): {field.name}",
            ref_type=RefType.ORDER,
            ref_id=order.id,
        )
    except InsufficientCoinsError as e:
        raise OrderPaymentError(CANCELLATION_FAILED, details=str(e))

    refund_coins(
        user_id=order.buyer_id,
        amount=order.coins_paid,
        ref_id=order.id,
        reason=f"Order Cancelled after acceptance: {field.name}",
    )
    notify(
        user=field.owner,
        message=f"Order for {field.name} was cancelled. Coins were deducted and returned to buyer.",
        type=NotificationType.WARNING,
    )
    notify(
        user=order.buyer,
        message=f"Your order for {field.name} was cancelled. Coins have been refunded to your wallet.",
        type=NotificationType.INFO,
    )


@transaction.atomic
def change_order_status(*, order_id: UUID, status: str, user: User) -> Order:
    """
    Move an order to a new status and settle the coins it implies.

    pending -> active credits the farmer, pending -> cancelled refunds the
    buyer and active/completed -> cancelled takes the coins back from the
    farmer before refunding the buyer. Once coins have moved an order can
    no longer go back to pending or leave cancelled. Any other change only
    updates the status.

    Args:
        order_id: Order to update
        status: One of pending, active, completed, cancelled
        user: Field owner or platform admin making the change

    Returns:
        The updated Order

    Raises:
        InvalidOrderStatusError: If the status is not allowed or the
            order would be settled a second time
        OrderNotFoundError: If the order does not exist
        OrderPermissionError: If the user is neither field owner nor admin
        OrderPaymentError: If the farmer cannot cover a reversal
    """
    if status not in OrderStatus.values:
        raise InvalidOrderStatusError(
            f"Invalid status. Allowed: {', '.join(OrderStatus.values)}"
        )

    order = (
        Order.objects
        .select_for_update(of=('self',))
        .select_related('field', 'buyer')
        .filter(id=order_id)
        .first()
    )
    if order is None:
        raise OrderNotFoundError("Order not found")

    if not user.is_platform_admin and order.field.owner_id != user.id:
        raise OrderPermissionError("Only the field owner or admin can update order status")

    old_status = order.status
    if order.coins_paid and old_status != status:
        if status == OrderStatus.PENDING:
            raise InvalidOrderStatusError("Order cannot return to pending once coins have been settled")
        if old_status == OrderStatus.CANCELLED:
            raise InvalidOrderStatusError("Cancelled orders cannot be reopened")

    if order.coins_paid:
        if old_status == OrderStatus.PENDING and status == OrderStatus.ACTIVE:
            _accept(order)
        elif old_status == OrderStatus.PENDING and status == OrderStatus.CANCELLED:
            _reject(order)
        elif old_status in (OrderStatus.ACTIVE, OrderStatus.COMPLETED) and status == OrderStatus.CANCELLED:
            _reverse(order)

    order.status = status
    order.save(update_fields=['status', 'updated_at'])

    logger.info("Order %s status %s -> %s by %s", order.id, old_status, status, user.id)
    return order
