"""FastAPI dependency providers.

Routes depend on these rather than on module globals so tests can swap
the repository or pin "today" through ``app.dependency_overrides``.
"""
from datetime import date
from functools import lru_cache

from fastapi import Depends

from lending.core.config import settings
from lending.core.logging import get_logger
from lending.domain.repository import EquipmentRepository
from lending.infrastructure.memory import InMemoryEquipmentRepository
from lending.services.equipment import EquipmentAppService

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_repository() -> EquipmentRepository:
    """Build the configured repository once per process.

    Falls back to the in-memory repository when Redis is configured but
    unreachable, except in production where that would silently drop data.
    """
    if settings.repository_backend == "redis":
        from lending.infrastructure.redis import RedisEquipmentRepository, get_redis_client

        client = get_redis_client()
        if client is not None:
            return RedisEquipmentRepository(client)

        if settings.environment == "production":
            raise RuntimeError("Redis repository configured but Redis is unreachable")
        logger.warning("Redis unavailable, falling back to in-memory repository")

    return InMemoryEquipmentRepository()


def get_today() -> date:
    return date.today()


def get_equipment_service(
    repository: EquipmentRepository = Depends(get_repository),
    today: date = Depends(get_today),
) -> EquipmentAppService:
    return EquipmentAppService(repository, clock=lambda: today)
