from fastapi import Request

from core.config import Settings
from core.metrics import HttpMetrics
from db.store import EntryStore


# Process-scoped objects are built in the app lifespan and parked on app.state.
def get_store(request: Request) -> EntryStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_metrics(request: Request) -> HttpMetrics:
    return request.app.state.metrics
