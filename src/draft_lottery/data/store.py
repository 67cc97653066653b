"""JSON-file store for the league configuration and lottery history.

The whole database is one JSON document ``{"config": ..., "lotteries": [...]}``.
It is created with the default league the first time it is touched.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List

from draft_lottery.data.schema import DraftConfig, DraftLottery, default_config

logger = logging.getLogger("draft_lottery.data.store")


class StoreError(Exception):
    """The database file could not be read or written."""


def default_database() -> Dict[str, Any]:
    return {"config": default_config().to_dict(), "lotteries": []}


class LotteryStore:
    """Read/write access to a ``database.json`` file.

    Writes go through a lock so API handlers running in a thread pool do not
    interleave read-modify-write cycles.
    """

    def __init__(self, path: Path | str, indent: int = 2):
        self.path = Path(path)
        self.indent = indent
        self._lock = threading.RLock()

    def _ensure_exists(self) -> None:
        if self.path.exists():
            return
        logger.info(f"Creating database with default configuration at {self.path}")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._write(default_database())

    def _read(self) -> Dict[str, Any]:
        self._ensure_exists()
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise StoreError(f"Failed to parse {self.path}: {exc}") from exc
        except OSError as exc:
            raise StoreError(f"Failed to read {self.path}: {exc}") from exc

        if not isinstance(data, dict) or "config" not in data:
            raise StoreError(f"{self.path} is not a lottery database")
        data.setdefault("lotteries", [])
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        try:
            with self.path.open("w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=self.indent)
        except OSError as exc:
            raise StoreError(f"Failed to write {self.path}: {exc}") from exc

    def initialize(self) -> None:
        """Create the database file if it does not exist yet."""
        with self._lock:
            self._ensure_exists()

    def reset(self) -> None:
        """Replace the database with the default configuration and no history."""
        with self._lock:
            if self.path.exists():
                try:
                    self.path.unlink()
                except OSError as exc:
                    raise StoreError(f"Failed to delete {self.path}: {exc}") from exc
                logger.info(f"Deleted existing database at {self.path}")
            self._ensure_exists()

    # Config

    def get_config(self) -> DraftConfig:
        with self._lock:
            return DraftConfig.from_dict(self._read()["config"])

    def update_config(self, config: DraftConfig) -> None:
        with self._lock:
            data = self._read()
            data["config"] = config.to_dict()
            self._write(data)
        logger.info("Configuration updated")

    # Lotteries

    def get_all_lotteries(self) -> List[DraftLottery]:
        """All stored lotteries, most recent year first."""
        with self._lock:
            lotteries = [DraftLottery.from_dict(item) for item in self._read()["lotteries"]]
        return sorted(lotteries, key=lambda lottery: lottery.year, reverse=True)

    def get_lottery_by_year(self, year: int) -> DraftLottery | None:
        with self._lock:
            for item in self._read()["lotteries"]:
                if int(item["year"]) == year:
                    return DraftLottery.from_dict(item)
        return None

    def save_lottery(self, lottery: DraftLottery) -> None:
        """Store a lottery, replacing any existing one for the same year."""
        with self._lock:
            data = self._read()
            data["lotteries"] = [
                item for item in data["lotteries"] if int(item["year"]) != lottery.year
            ]
            data["lotteries"].append(lottery.to_dict())
            self._write(data)
        logger.info(f"Saved lottery for {lottery.year} ({len(lottery.picks)} picks)")

    def delete_lottery(self, year: int) -> bool:
        """Remove the lottery for ``year``. Returns False if there was none."""
        with self._lock:
            data = self._read()
            remaining = [item for item in data["lotteries"] if int(item["year"]) != year]
            removed = len(remaining) != len(data["lotteries"])
            data["lotteries"] = remaining
            self._write(data)
        if removed:
            logger.info(f"Deleted lottery for {year}")
        return removed
