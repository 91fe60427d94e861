"""Relational store backed by SQLAlchemy.

One table keyed by tray id. All items of an upsert call are written in a
single transaction: either every row change commits or none does.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Engine, Float, Integer, String, create_engine, func, select
from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column

from plantsensor._constants import PLANT_TYPE_MAX_LENGTH, TABLE_NAME
from plantsensor._redact import redact_url
from plantsensor._timing import Stopwatch
from plantsensor.models.combined import CombinedPlantData
from plantsensor.storage.base import StorageFailure, StorageKind, StoreResult

_logger = logging.getLogger(__name__)


_MUTABLE_FIELDS = (
    "plant_type",
    "current_temperature",
    "current_humidity",
    "current_light",
    "target_temperature",
    "target_humidity",
    "target_light",
    "timestamp",
)


class Base(DeclarativeBase):
    pass


class CombinedPlantRow(Base):
    __tablename__ = TABLE_NAME

    tray_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    plant_type: Mapped[str] = mapped_column(String(PLANT_TYPE_MAX_LENGTH), nullable=False)
    current_temperature: Mapped[float] = mapped_column(Float, nullable=False)
    current_humidity: Mapped[float] = mapped_column(Float, nullable=False)
    current_light: Mapped[float] = mapped_column(Float, nullable=False)
    target_temperature: Mapped[float] = mapped_column(Float, nullable=False)
    target_humidity: Mapped[float] = mapped_column(Float, nullable=False)
    target_light: Mapped[float] = mapped_column(Float, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    @classmethod
    def from_model(cls, item: CombinedPlantData) -> CombinedPlantRow:
        row = cls(tray_id=item.tray_id)
        row.apply(item)
        return row

    def apply(self, item: CombinedPlantData) -> None:
        """Overwrite every mutable column with the values of *item*."""
        for name in _MUTABLE_FIELDS:
            setattr(self, name, getattr(item, name))

    def to_model(self) -> CombinedPlantData:
        values: dict[str, Any] = {name: getattr(self, name) for name in _MUTABLE_FIELDS}
        return CombinedPlantData(tray_id=self.tray_id, **values)


class RelationalStore:
    """Upsert combined records into the ``combined_plant_data`` table.

    The table is created on first use if it does not exist. Blocking
    database work runs in the default executor.
    """

    label = StorageKind.POSTGRESQL.value

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._schema_ready = False

    @classmethod
    def from_url(cls, url: str, **engine_kwargs: Any) -> RelationalStore:
        engine_kwargs.setdefault("pool_pre_ping", True)
        _logger.debug("Creating database engine for %s", redact_url(url))
        return cls(create_engine(url, **engine_kwargs))

    @property
    def engine(self) -> Engine:
        return self._engine

    def ensure_schema(self) -> None:
        """Create the table if it does not exist yet."""
        if self._schema_ready:
            return
        Base.metadata.create_all(self._engine)
        self._schema_ready = True

    def _upsert_sync(self, items: Sequence[CombinedPlantData]) -> tuple[int, int]:
        self.ensure_schema()
        inserted = 0
        updated = 0
        # rows touched by this call, so repeated tray ids in one batch update the pending row
        rows: dict[int, CombinedPlantRow] = {}
        with Session(self._engine) as session, session.begin():
            for item in items:
                existing = rows.get(item.tray_id) or session.get(CombinedPlantRow, item.tray_id)
                if existing is not None:
                    _logger.debug("Updating existing record for tray %s", item.tray_id)
                    existing.apply(item)
                    rows[item.tray_id] = existing
                    updated += 1
                else:
                    _logger.debug("Inserting new record for tray %s", item.tray_id)
                    row = CombinedPlantRow.from_model(item)
                    session.add(row)
                    rows[item.tray_id] = row
                    inserted += 1
        return inserted, updated

    def _read_all_sync(self) -> list[CombinedPlantData]:
        self.ensure_schema()
        with Session(self._engine) as session:
            rows = session.scalars(select(CombinedPlantRow).order_by(CombinedPlantRow.tray_id))
            return [row.to_model() for row in rows]

    async def upsert(self, items: Sequence[CombinedPlantData]) -> StoreResult:
        watch = Stopwatch()
        _logger.info("Starting database upsert operation for %d records", len(items))
        if not items:
            return StoreResult.succeeded(self.label, inserted=0, updated=0, elapsed_ms=watch.elapsed_ms)

        loop = asyncio.get_running_loop()
        try:
            inserted, updated = await loop.run_in_executor(None, self._upsert_sync, list(items))
        except (OperationalError, InterfaceError, DisconnectionError) as exc:
            _logger.error(
                "Database connection error while saving plant data after %dms",
                watch.elapsed_ms,
                exc_info=True,
            )
            return StoreResult.failed(self.label, StorageFailure.CONNECTION, str(exc), elapsed_ms=watch.elapsed_ms)
        except SQLAlchemyError as exc:
            _logger.error(
                "Database update error while saving plant data after %dms",
                watch.elapsed_ms,
                exc_info=True,
            )
            return StoreResult.failed(self.label, StorageFailure.COMMIT, str(exc), elapsed_ms=watch.elapsed_ms)
        except Exception as exc:
            _logger.error(
                "Unexpected error saving data to database after %dms",
                watch.elapsed_ms,
                exc_info=True,
            )
            return StoreResult.failed(self.label, StorageFailure.UNEXPECTED, str(exc), elapsed_ms=watch.elapsed_ms)

        _logger.info(
            "Database upsert completed successfully in %dms. Updated: %d, Inserted: %d",
            watch.elapsed_ms,
            updated,
            inserted,
        )
        return StoreResult.succeeded(self.label, inserted=inserted, updated=updated, elapsed_ms=watch.elapsed_ms)

    async def read_all(self) -> list[CombinedPlantData]:
        """Stored records ordered by tray id."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._read_all_sync)

    def dispose(self) -> None:
        self._engine.dispose()
