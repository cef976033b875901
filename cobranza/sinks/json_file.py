"""Write report rows and summaries as JSON files."""

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from cobranza.exceptions import SinkError
from cobranza.sinks.serialization import to_dict

logger = logging.getLogger(__name__)


class JsonFileSink:
    """One ``<name>.json`` file per record set in ``output_dir``.

    Parameters
    ----------
    output_dir : str | Path
        Created if missing.
    pretty : bool
        Indent output (default: compact).
    """

    def __init__(self, output_dir: str | Path, pretty: bool = False) -> None:
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.pretty = pretty
        self._counts: dict[str, int] = {}

    def _dump(self, name: str, payload: Any) -> Path:
        path = self.output_dir / f"{name}.json"
        try:
            with path.open("w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2 if self.pretty else None, ensure_ascii=False, default=str)
        except OSError as e:
            raise SinkError(f"Cannot write {path}: {e}") from e
        return path

    def write_batch(self, name: str, records: Iterable[Any]) -> Path:
        """Write records as a JSON array and return the file path."""
        rows = [to_dict(record) for record in records]
        path = self._dump(name, rows)
        self._counts[name] = len(rows)
        logger.debug("Wrote %d records to %s", len(rows), path)
        return path

    def write_document(self, name: str, document: dict[str, Any]) -> Path:
        """Write a single JSON object, such as a report summary."""
        path = self._dump(name, to_dict(document))
        self._counts[name] = 1
        return path

    def close(self) -> None:
        """Log what was written."""
        logger.info("JSON files written to: %s", self.output_dir)
        for name, count in self._counts.items():
            logger.info("  %s: %d records", name, count)
