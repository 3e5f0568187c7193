"""Order pipeline: the application service behind checkout.

``OrderPipeline`` turns a purchase request into a committed Pending order
and payment, then hands a ticket to the order worker. Stock writes for a
product are serialized by ``StockGuard`` for the whole placement unit of
work, so two buyers racing for the last unit cannot both win.
"""

import json
import threading
from contextlib import contextmanager

import structlog
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain
from sqlalchemy.exc import SQLAlchemyError

from storefront.cart.management import ClearCart, cart_items
from storefront.errors import EmptyCartError, PersistenceError
from storefront.identity.auth import AuthContext, require_owner, require_role
from storefront.identity.user import Role
from storefront.ordering.checkout.placement import PlaceOrder, merge_items
from storefront.ordering.checkout.worker import OrderQueue, OrderTicket
from storefront.ordering.order.queries import load_order
from storefront.ordering.order.status import UpdateOrderStatus
from storefront.ordering.payment.completion import CompletePayment

logger = structlog.get_logger(__name__)

# ExpectedVersionError: a product changed under the unit of work.
_STORE_ERRORS = (SQLAlchemyError, ExpectedVersionError, ConnectionError, TimeoutError)


class StockGuard:
    """Per-product locks, always taken in sorted product-id order."""

    def __init__(self) -> None:
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, product_id: str) -> threading.Lock:
        with self._registry_lock:
            return self._locks.setdefault(product_id, threading.Lock())

    @contextmanager
    def hold(self, product_ids):
        locks = [self._lock_for(pid) for pid in sorted({str(pid) for pid in product_ids})]
        acquired = []
        try:
            for lock in locks:
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()


def _process(command, action: str):
    try:
        return current_domain.process(command, asynchronous=False)
    except _STORE_ERRORS as exc:
        logger.error("Store write failed", action=action, error=str(exc))
        raise PersistenceError({action: ["The store rejected the write, nothing was saved. Please retry."]}) from exc


class OrderPipeline:
    def __init__(self, order_queue: OrderQueue, stock_guard: StockGuard | None = None) -> None:
        self.queue = order_queue
        self.stock_guard = stock_guard or StockGuard()

    def place_order(self, auth: AuthContext, items) -> str:
        """Place an order for ``items`` on behalf of ``auth.user_id``.

        Args:
            auth: The caller.
            items: ``(product_id, quantity)`` pairs or dicts with those keys.
                Repeated products are merged.

        Returns:
            The new order's id.

        Raises:
            EmptyCartError: ``items`` is empty.
            ProductNotFoundError: A product does not exist.
            InsufficientStockError: A product has fewer units than requested.
            PersistenceError: The store failed; nothing was committed.
        """
        auth = require_role(auth)
        requested = merge_items(items)
        product_ids = [product_id for product_id, _ in requested]

        command = PlaceOrder(
            customer_id=auth.user_id,
            items=json.dumps([{"product_id": pid, "quantity": qty} for pid, qty in requested]),
        )
        with self.stock_guard.hold(product_ids):
            order_id = _process(command, "order")
            self._clear_cart(auth.user_id, product_ids)

        order = load_order(order_id)
        self.queue.put(OrderTicket.from_order(order))
        logger.info(
            "Order placed",
            order_id=order_id,
            customer_id=str(auth.user_id),
            total_price=order.total_price,
            queued=len(self.queue),
        )
        return order_id

    def place_order_from_cart(self, auth: AuthContext) -> str:
        auth = require_role(auth)
        items = [(item.product_id, item.quantity) for item in cart_items(auth.user_id)]
        if not items:
            raise EmptyCartError({"cart": ["Your cart is empty"]})
        return self.place_order(auth, items)

    def complete_payment(self, auth: AuthContext, order_id, method: str) -> str:
        order = load_order(order_id)
        require_owner(auth, order.customer_id)
        return _process(CompletePayment(order_id=order_id, method=method), "payment")

    def update_order_status(self, auth: AuthContext, order_id, status: str) -> str:
        require_role(auth, Role.ADMIN)
        order = load_order(order_id)
        # Cancelling restocks, so hold the same locks as placement
        with self.stock_guard.hold(item.product_id for item in order.items):
            return _process(UpdateOrderStatus(order_id=order_id, status=status), "order")

    def _clear_cart(self, user_id, product_ids) -> None:
        try:
            removed = current_domain.process(
                ClearCart(user_id=user_id, product_ids=json.dumps(product_ids)),
                asynchronous=False,
            )
        except Exception:
            logger.exception("Cart clear failed after order commit", user_id=str(user_id))
        else:
            logger.debug("Cart cleared", user_id=str(user_id), removed=removed)
