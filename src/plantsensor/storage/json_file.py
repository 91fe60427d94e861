"""JSON file store.

The file holds a pretty-printed JSON array of combined records with
lowerCamelCase keys, one entry per tray id. Each upsert reads the file,
merges the new items by tray id and rewrites the whole file.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from plantsensor._timing import Stopwatch
from plantsensor.models.combined import CombinedPlantData, CombinedPlantDataList
from plantsensor.storage.base import StorageFailure, StorageKind, StoreResult

_logger = logging.getLogger(__name__)


class JsonFileStore:
    """Upsert combined records into a JSON file."""

    label = StorageKind.JSON.value

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        # Upserts from concurrent requests in this process are serialised so a
        # read-merge-write cycle never loses another request's items.
        self._lock = asyncio.Lock()

    def _load(self) -> list[CombinedPlantData]:
        if not self._path.exists():
            return []
        text = self._path.read_text(encoding="utf-8")
        if not text.strip():
            return []
        return CombinedPlantDataList.validate_json(text)

    def _write(self, records: list[CombinedPlantData]) -> None:
        payload = [record.to_json_dict() for record in records]
        tmp_path = self._path.with_name(f"{self._path.name}.tmp")
        try:
            tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise

    def _merge_and_write(self, items: Sequence[CombinedPlantData]) -> tuple[int, int]:
        merged = {record.tray_id: record for record in self._load()}
        inserted = 0
        updated = 0
        for item in items:
            if item.tray_id in merged:
                _logger.debug("Updating existing JSON record for tray %s", item.tray_id)
                updated += 1
            else:
                _logger.debug("Inserting new JSON record for tray %s", item.tray_id)
                inserted += 1
            merged[item.tray_id] = item
        self._write(list(merged.values()))
        return inserted, updated

    async def upsert(self, items: Sequence[CombinedPlantData]) -> StoreResult:
        watch = Stopwatch()
        _logger.info("Starting JSON file storage operation for %d records", len(items))
        if not items:
            return StoreResult.succeeded(self.label, inserted=0, updated=0, elapsed_ms=watch.elapsed_ms)

        loop = asyncio.get_running_loop()
        try:
            async with self._lock:
                inserted, updated = await loop.run_in_executor(None, self._merge_and_write, list(items))
        except (ValidationError, UnicodeDecodeError) as exc:
            _logger.error(
                "Existing JSON file %s could not be parsed after %dms",
                self._path,
                watch.elapsed_ms,
                exc_info=True,
            )
            return StoreResult.failed(self.label, StorageFailure.SERIALIZATION, str(exc), elapsed_ms=watch.elapsed_ms)
        except OSError as exc:
            _logger.error(
                "I/O error saving data to JSON file %s after %dms",
                self._path,
                watch.elapsed_ms,
                exc_info=True,
            )
            return StoreResult.failed(self.label, StorageFailure.IO, str(exc), elapsed_ms=watch.elapsed_ms)
        except Exception as exc:
            _logger.error(
                "Unexpected error saving data to JSON file after %dms",
                watch.elapsed_ms,
                exc_info=True,
            )
            return StoreResult.failed(self.label, StorageFailure.UNEXPECTED, str(exc), elapsed_ms=watch.elapsed_ms)

        _logger.info(
            "JSON file storage completed successfully in %dms. Updated: %d, Inserted: %d",
            watch.elapsed_ms,
            updated,
            inserted,
        )
        return StoreResult.succeeded(self.label, inserted=inserted, updated=updated, elapsed_ms=watch.elapsed_ms)

    async def read_all(self) -> list[CombinedPlantData]:
        """Records currently in the file. Raises if the file does not parse."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._load)
