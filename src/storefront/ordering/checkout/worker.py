"""Post-commit order processing on a single background consumer.

Placed orders are handed over as immutable ``OrderTicket`` snapshots through
a bounded FIFO ``OrderQueue``. One ``OrderWorker`` thread drains the queue in
arrival order. Stock has already been withdrawn when a ticket is enqueued,
so the worker only records what moved; a failing ticket is logged and
counted, and never touches the committed order.
"""

import queue
import threading
from dataclasses import dataclass
from datetime import datetime

import structlog

from storefront.settings import order_queue_capacity

logger = structlog.get_logger(__name__)

_STOP = object()


@dataclass(frozen=True)
class TicketLine:
    product_id: str
    quantity: int
    unit_price: float


@dataclass(frozen=True)
class OrderTicket:
    """Plain-data snapshot of a committed order."""

    order_id: str
    customer_id: str
    lines: tuple[TicketLine, ...]
    total_price: float
    placed_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "OrderTicket":
        return cls(
            order_id=str(order.id),
            customer_id=str(order.customer_id),
            lines=tuple(
                TicketLine(product_id=str(item.product_id), quantity=item.quantity, unit_price=item.unit_price)
                for item in order.items
            ),
            total_price=order.total_price,
            placed_at=order.created_at,
        )


class OrderQueue:
    """Bounded FIFO of order tickets. ``put`` blocks while the queue is full."""

    def __init__(self, capacity: int | None = None) -> None:
        self.capacity = capacity if capacity is not None else order_queue_capacity()
        if self.capacity < 1:
            raise ValueError("Order queue capacity must be at least 1")
        self._queue = queue.Queue(maxsize=self.capacity)

    def put(self, ticket: OrderTicket) -> None:
        self._queue.put(ticket)

    def get(self):
        return self._queue.get()

    def task_done(self) -> None:
        self._queue.task_done()

    def join(self) -> None:
        """Block until every enqueued ticket has been handled."""
        self._queue.join()

    def close(self) -> None:
        self._queue.put(_STOP)

    def __len__(self) -> int:
        return self._queue.qsize()


def log_stock_movements(ticket: OrderTicket) -> None:
    """Default ticket handler: one stock movement entry per order line."""
    logger.info("Processing order", order_id=ticket.order_id, customer_id=ticket.customer_id)
    for line in ticket.lines:
        logger.info(
            "Stock movement",
            order_id=ticket.order_id,
            product_id=line.product_id,
            delta=-line.quantity,
        )


class OrderWorker:
    """Single consumer thread over an ``OrderQueue``."""

    def __init__(self, order_queue: OrderQueue, handler=None, name: str = "order-worker") -> None:
        self.queue = order_queue
        self.handler = handler or log_stock_movements
        self.name = name
        self.processed = 0
        self.failed = 0
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        logger.info("Order worker started", worker=self.name, capacity=self.queue.capacity)

    def stop(self, timeout: float | None = None) -> None:
        """Drain tickets already queued, then stop the thread."""
        if not self.is_running:
            return
        self.queue.close()
        self._thread.join(timeout)
        logger.info("Order worker stopped", worker=self.name, processed=self.processed, failed=self.failed)

    def _run(self) -> None:
        while True:
            ticket = self.queue.get()
            try:
                if ticket is _STOP:
                    return
                self._handle(ticket)
            finally:
                self.queue.task_done()

    def _handle(self, ticket: OrderTicket) -> None:
        try:
            self.handler(ticket)
        except Exception:
            self.failed += 1
            logger.exception("Order ticket failed", order_id=ticket.order_id)
        else:
            self.processed += 1
