import logging
import math
from typing import Any, Dict, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from truck_tracker.errors import InvalidInputError, NotFoundError, StorageError
from truck_tracker.models import Truck, TruckModel

logger = logging.getLogger(__name__)


class TruckRegistry:
    """Storage interface for truck records.

    ``update_by_id`` must apply every field of ``data`` atomically.
    """

    async def find_by_identifier(self, identifier: str) -> Optional[Truck]:
        raise NotImplementedError("Registry must implement find_by_identifier")

    async def find_by_document_id(self, document_id: str) -> Optional[Truck]:
        raise NotImplementedError("Registry must implement find_by_document_id")

    async def find_all(self) -> List[Truck]:
        raise NotImplementedError("Registry must implement find_all")

    async def update_by_id(self, document_id: str, data: Dict[str, Any]) -> Truck:
        raise NotImplementedError("Registry must implement update_by_id")

    async def create(
        self,
        identifier: str,
        model: str,
        key: str,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> Truck:
        raise NotImplementedError("Registry must implement create")


class SqlTruckRegistry(TruckRegistry):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _first(self, stmt) -> Optional[Truck]:
        try:
            result = await self.db.execute(stmt.execution_options(populate_existing=True))
            return result.scalars().first()
        except SQLAlchemyError as e:
            logger.exception("Truck lookup failed")
            raise StorageError("Storage unavailable") from e

    async def find_by_identifier(self, identifier: str) -> Optional[Truck]:
        return await self._first(select(Truck).where(Truck.identifier == identifier))

    async def find_by_document_id(self, document_id: str) -> Optional[Truck]:
        return await self._first(select(Truck).where(Truck.document_id == document_id))

    async def find_all(self) -> List[Truck]:
        try:
            result = await self.db.execute(select(Truck).order_by(Truck.id))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.exception("Listing trucks failed")
            raise StorageError("Storage unavailable") from e

    async def update_by_id(self, document_id: str, data: Dict[str, Any]) -> Truck:
        # One statement, one commit: every column in data lands together or not at all
        stmt = (
            update(Truck)
            .where(Truck.document_id == document_id)
            .values(**data)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.db.execute(stmt)
            if result.rowcount == 0:
                await self.db.rollback()
                raise NotFoundError("Truck not found")
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Updating truck %s failed", document_id)
            raise StorageError("Storage unavailable") from e

        truck = await self.find_by_document_id(document_id)
        if truck is None:
            raise NotFoundError("Truck not found")
        return truck

    async def create(
        self,
        identifier: str,
        model: str,
        key: str,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> Truck:
        try:
            model = TruckModel(model).value
        except ValueError:
            allowed = [m.value for m in TruckModel]
            raise InvalidInputError(f"Unknown truck model: {model}", details={"allowed": allowed})

        if not identifier:
            raise InvalidInputError("Identifier is required")
        if not key:
            raise InvalidInputError("Key is required")
        if (latitude is None) != (longitude is None):
            raise InvalidInputError("Latitude and longitude must be given together")
        if latitude is not None and not (math.isfinite(latitude) and math.isfinite(longitude)):
            raise InvalidInputError("Latitude and longitude must be finite numbers")
        if await self.find_by_identifier(identifier):
            raise InvalidInputError(f"Identifier {identifier} is already registered")

        truck = Truck(
            identifier=identifier,
            model=model,
            key=key,
            latitude=latitude,
            longitude=longitude,
        )
        self.db.add(truck)
        try:
            await self.db.commit()
            await self.db.refresh(truck)
        except IntegrityError as e:
            await self.db.rollback()
            raise InvalidInputError(f"Identifier {identifier} is already registered") from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Creating truck %s failed", identifier)
            raise StorageError("Storage unavailable") from e

        logger.info("Registered truck %s (%s)", truck.identifier, truck.model)
        return truck
