"""FastAPI dependency providers.

The store lives on ``app.state`` for the lifetime of the application and is
handed to services per request; nothing here is a module-level singleton.
"""
from fastapi import Depends, Request

from .config import Settings
from .services.ingestion_service import IngestionService
from .services.query_service import QueryService
from .stores.base import ExpenseStore
from .stores.sqlite_store import SQLiteExpenseStore


def build_store(settings: Settings) -> ExpenseStore:
    """Create the configured expense store, ready for use."""
    if settings.store_backend == "supabase":
        from .stores.supabase_store import SupabaseExpenseStore
        from .supabase_client import create_supabase

        return SupabaseExpenseStore(create_supabase(settings))

    store = SQLiteExpenseStore(settings.db_path)
    store.init_schema()
    return store


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> ExpenseStore:
    return request.app.state.store


def get_ingestion_service(store: ExpenseStore = Depends(get_store)) -> IngestionService:
    return IngestionService(store)


def get_query_service(
    store: ExpenseStore = Depends(get_store),
    settings: Settings = Depends(get_settings_dep),
) -> QueryService:
    return QueryService(store, default_limit=settings.default_limit)
