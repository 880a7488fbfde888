"""Redis-backed equipment repository.

Each equipment snapshot is stored as one JSON document, replaced as a
whole on every save. Identifiers come from INCR counters so several
service instances can share one Redis without colliding.

Key layout (with the default ``lending:`` prefix):
- ``lending:equipment:<equipment id>``  snapshot document
- ``lending:seq:equipment``             equipment id counter
- ``lending:seq:borrowing``             borrowing id counter
"""
import json
import redis
from datetime import date
from typing import Any, Dict, Optional

from lending.core.logging import get_logger
from lending.core.config import settings
from lending.core.result import UnwrapError
from lending.domain.borrowing import Borrowing
from lending.domain.equipment import Equipment, EquipmentStatus
from lending.domain.identifiers import (
    BorrowingId,
    EmployeeId,
    EquipmentId,
    EquipmentName,
)
from lending.domain.period import Period
from lending.domain.repository import EquipmentRepository, RepositoryError

logger = get_logger(__name__)

# Redis connection pool (lazy initialization)
_redis_pool: Optional[redis.ConnectionPool] = None
_redis_client: Optional[redis.Redis] = None


def get_redis_client(
    host: Optional[str] = None,
    port: Optional[int] = None,
    db: Optional[int] = None,
    password: Optional[str] = None,
) -> Optional[redis.Redis]:
    """Get or create the shared Redis client.

    Uses settings from environment variables if not explicitly provided.
    Returns None if Redis is not available so the caller can fall back
    to the in-memory repository.
    """
    global _redis_pool, _redis_client

    host = host or settings.redis_host
    port = port or settings.redis_port
    db = db if db is not None else settings.redis_db
    password = password or settings.redis_password

    if _redis_client is None:
        logger.info(f"Initializing Redis connection pool: {host}:{port}/{db}")

        try:
            _redis_pool = redis.ConnectionPool(
                host=host,
                port=port,
                db=db,
                password=password,
                decode_responses=True,
                max_connections=50,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            client = redis.Redis(connection_pool=_redis_pool)
            client.ping()
            _redis_client = client
            logger.info("Redis connection established successfully")

        except redis.RedisError as e:
            logger.error(f"Failed to connect to Redis: {e}", exc_info=True)
            _redis_pool = None
            _redis_client = None

    return _redis_client


def equipment_to_document(equipment: Equipment) -> Dict[str, Any]:
    """Flatten a snapshot into JSON-friendly primitives."""
    return {
        "id": equipment.id.value,
        "name": equipment.name.value,
        "status": equipment.status.value,
        "borrowings": [
            {
                "id": b.id.value,
                "employee_id": b.employee_id.value,
                "equipment_id": b.equipment_id.value,
                "from": b.period.from_.isoformat(),
                "to": b.period.to.isoformat(),
                "is_returned": b.is_returned,
            }
            for b in equipment.borrowings
        ],
    }


def equipment_from_document(document: Dict[str, Any]) -> Equipment:
    """Rebuild a snapshot from a stored document.

    Raises:
        RepositoryError: If any field is missing or fails validation
    """
    try:
        equipment_id = EquipmentId.parse(document["id"]).unwrap()
        borrowings = [
            Borrowing(
                id=BorrowingId.parse(raw["id"]).unwrap(),
                employee_id=EmployeeId.parse(raw["employee_id"]).unwrap(),
                equipment_id=EquipmentId.parse(raw["equipment_id"]).unwrap(),
                # Stored periods may be in the past, so skip Period.create
                period=Period(
                    from_=date.fromisoformat(raw["from"]),
                    to=date.fromisoformat(raw["to"]),
                ),
                is_returned=bool(raw.get("is_returned", False)),
            )
            for raw in document.get("borrowings", [])
        ]
        return Equipment.reconstitute(
            id=equipment_id,
            name=EquipmentName.parse(document["name"]).unwrap(),
            status=EquipmentStatus(document["status"]),
            borrowings=borrowings,
        )
    except (AttributeError, KeyError, TypeError, ValueError, UnwrapError) as e:
        raise RepositoryError(f"Unreadable equipment document: {e}") from e


class RedisEquipmentRepository(EquipmentRepository):
    """Equipment repository storing JSON snapshots in Redis.

    Example:
        >>> repo = RedisEquipmentRepository(get_redis_client())
        >>> equipment_id = repo.next_id()
        >>> repo.save(Equipment.create(equipment_id, name))
        >>> repo.find_by_id(equipment_id).status
        <EquipmentStatus.AVAILABLE: 'AVAILABLE'>
    """

    def __init__(self, redis_client: redis.Redis, key_prefix: Optional[str] = None):
        self.redis = redis_client
        self.key_prefix = key_prefix if key_prefix is not None else settings.redis_key_prefix

        logger.info(f"RedisEquipmentRepository initialized with prefix '{self.key_prefix}'")

    def _equipment_key(self, equipment_id: EquipmentId) -> str:
        return f"{self.key_prefix}equipment:{equipment_id.value}"

    def _sequence_key(self, name: str) -> str:
        return f"{self.key_prefix}seq:{name}"

    def _next_sequence(self, name: str) -> int:
        try:
            return int(self.redis.incr(self._sequence_key(name)))
        except redis.RedisError as e:
            logger.error(f"Error allocating {name} id: {e}", exc_info=True)
            raise RepositoryError(f"Could not allocate {name} id") from e

    def next_id(self) -> EquipmentId:
        seq = self._next_sequence("equipment")
        return EquipmentId(value=f"{EquipmentId.PREFIX}{seq:03d}")

    def next_borrowing_id(self) -> BorrowingId:
        seq = self._next_sequence("borrowing")
        return BorrowingId(value=f"{BorrowingId.PREFIX}{seq:03d}")

    def save(self, equipment: Equipment) -> None:
        key = self._equipment_key(equipment.id)
        serialized = json.dumps(equipment_to_document(equipment))

        try:
            self.redis.set(key, serialized)
        except redis.RedisError as e:
            logger.error(
                f"Error saving equipment {equipment.id}: {e}",
                extra={"equipment_id": equipment.id.value},
                exc_info=True
            )
            raise RepositoryError(f"Could not save equipment {equipment.id}") from e

        logger.debug(f"Equipment saved: {equipment.id}", extra={"equipment_id": equipment.id.value})

    def find_by_id(self, equipment_id: EquipmentId) -> Optional[Equipment]:
        try:
            data = self.redis.get(self._equipment_key(equipment_id))
        except redis.RedisError as e:
            logger.error(
                f"Error loading equipment {equipment_id}: {e}",
                extra={"equipment_id": equipment_id.value},
                exc_info=True
            )
            raise RepositoryError(f"Could not load equipment {equipment_id}") from e

        if data is None:
            logger.debug(f"Equipment not found: {equipment_id}")
            return None

        try:
            document = json.loads(data)
        except json.JSONDecodeError as e:
            raise RepositoryError(f"Equipment {equipment_id} is not valid JSON") from e

        return equipment_from_document(document)
