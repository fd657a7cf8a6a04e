# src/feefo_schema/api/dependencies.py
from fastapi import Depends

from feefo_schema.core.container import Container
from feefo_schema.services.payload_renderer import PayloadRenderer
from feefo_schema.services.refresh_scheduler import RefreshScheduler
from feefo_schema.services.refresh_service import RefreshService

# Singleton container (set in the application lifespan)
_container: Container | None = None


def set_container(container: Container | None) -> None:
    global _container
    _container = container


def get_container() -> Container:
    if _container is None:
        raise RuntimeError("Application container is not initialized")
    return _container


def get_renderer(container: Container = Depends(get_container)) -> PayloadRenderer:
    return container.renderer


def get_scheduler(container: Container = Depends(get_container)) -> RefreshScheduler:
    return container.scheduler


def get_refresh_service(container: Container = Depends(get_container)) -> RefreshService:
    return container.refresh_service
