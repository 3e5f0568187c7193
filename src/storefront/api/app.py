"""Storefront FastAPI application factory.

The order queue, its worker and the order pipeline are created in the
lifespan and shared through ``app.state``; every request runs inside the
storefront domain context.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api import ROUTERS, register_error_handlers
from storefront.domain import storefront
from storefront.ordering.checkout.pipeline import OrderPipeline
from storefront.ordering.checkout.worker import OrderQueue, OrderWorker

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    order_queue = OrderQueue()
    worker = OrderWorker(order_queue)
    app.state.order_queue = order_queue
    app.state.order_worker = worker
    app.state.pipeline = OrderPipeline(order_queue)

    worker.start()
    try:
        yield
    finally:
        worker.stop(timeout=10)


def create_app(init_domain: bool = True) -> FastAPI:
    """Build the API. Pass ``init_domain=False`` when the domain is already initialized."""
    if init_domain:
        storefront.init()

    app = FastAPI(
        title="Storefront API",
        description="Catalogue, cart, checkout, payments and reviews",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the storefront domain context for each request."""
        with storefront.domain_context():
            response = await call_next(request)
        return response

    for router in ROUTERS:
        app.include_router(router)
    register_error_handlers(app)

    @app.get("/health")
    async def health():
        return JSONResponse(
            content={
                "status": "ok",
                "domain": storefront.name,
                "order_queue": {
                    "capacity": app.state.order_queue.capacity,
                    "pending": len(app.state.order_queue),
                    "worker_running": app.state.order_worker.is_running,
                },
            }
        )

    logger.info("Storefront API created", routes=len(app.routes))
    return app
