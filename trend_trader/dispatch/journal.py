"""Append-only JSONL record of executed trades."""

import fcntl
import json
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import structlog

logger = structlog.get_logger(__name__)


class TradeJournal:
    """
    Writes one JSON object per executed trade action.

    Writes are serialized in-process with a lock and across processes with an
    exclusive file lock. Journal failures are logged and never undo a trade.
    """

    def __init__(
        self,
        path: Path,
        max_file_size_mb: Optional[float] = None,
        rotation_enabled: bool = False,
        create_dirs: bool = True
    ):
        self.output_path = Path(path)
        self.max_file_size_mb = max_file_size_mb
        self.rotation_enabled = rotation_enabled
        self.logger = logger.bind(journal_path=str(self.output_path))
        self._lock = threading.Lock()
        self._record_count = 0
        self._error_count = 0

        if create_dirs:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)

    def record(self, entry: dict[str, Any]) -> bool:
        """
        Append an entry to the journal.

        Returns:
            True if the entry was written
        """
        with self._lock:
            try:
                if self.max_file_size_mb and self._check_file_size_limit():
                    if self.rotation_enabled:
                        self._rotate_file()
                    else:
                        self._error_count += 1
                        self.logger.error(
                            "Trade journal size limit exceeded",
                            max_file_size_mb=self.max_file_size_mb
                        )
                        return False

                with open(self.output_path, 'a') as f:
                    fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                    json.dump(entry, f, default=str)
                    f.write('\n')

            except (OSError, TypeError, ValueError) as e:
                self._error_count += 1
                self.logger.warning(
                    "Trade journal write failed",
                    market_id=entry.get("market_id"),
                    error=str(e),
                    error_type=type(e).__name__
                )
                return False

            self._record_count += 1
            return True

    def read_entries(self) -> list[dict[str, Any]]:
        """Read back every entry in the current journal file."""
        if not self.output_path.exists():
            return []

        with open(self.output_path) as f:
            return [json.loads(line) for line in f if line.strip()]

    def _check_file_size_limit(self) -> bool:
        """Check if file size exceeds the configured limit."""
        if not self.output_path.exists():
            return False

        file_size_mb = self.output_path.stat().st_size / (1024 * 1024)
        return file_size_mb > self.max_file_size_mb

    def _rotate_file(self) -> None:
        """Move the current file aside under a timestamped name."""
        if not self.output_path.exists():
            return

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        rotated_name = f"{self.output_path.stem}_{timestamp}{self.output_path.suffix}"
        rotated_path = self.output_path.parent / rotated_name

        self.output_path.rename(rotated_path)

        self.logger.info("Trade journal rotated", rotated_path=str(rotated_path))

    def get_stats(self) -> dict[str, Any]:
        return {
            "path": str(self.output_path),
            "record_count": self._record_count,
            "error_count": self._error_count,
        }
