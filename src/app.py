"""Storefront FastAPI application.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload

PROTEAN_ENV selects the domain.toml overlay ("production" switches to
PostgreSQL via DATABASE_URL).
"""

from storefront.api.app import create_app
from storefront.utils.logging import configure_logging

configure_logging()

app = create_app()
