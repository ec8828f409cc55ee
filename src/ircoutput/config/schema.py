"""Standalone host config accessor."""

from __future__ import annotations

from typing import Any

from loguru import logger

from ircoutput.errors import ConfigurationError


def _is_int(val: Any) -> bool:
    try:
        int(val)
    except (TypeError, ValueError):
        return False
    return True


def _is_positive_number(val: Any) -> bool:
    try:
        return float(val) > 0
    except (TypeError, ValueError):
        return False


class Config:
    """Config accessor with attribute-style access for nested keys."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data = data or {}

    def reload(self, data: dict[str, Any], *, validate: bool = True) -> None:
        """Replace config data (e.g. on SIGHUP reload)."""
        self._data = data or {}
        if validate:
            self._validate()
        logger.debug("Config reloaded: {} streams", len(self.streams))

    def _validate(self) -> None:
        """Validate config structure; raise ConfigurationError on failure."""
        output = self._data.get("output")
        if output is not None and not isinstance(output, dict):
            raise ConfigurationError(
                "output must be a mapping",
                code="invalid_output",
                details={"type": type(output).__name__},
            )
        streams = self._data.get("streams")
        if streams is not None and not isinstance(streams, dict):
            raise ConfigurationError(
                "streams must be a mapping",
                code="invalid_streams",
                details={"type": type(streams).__name__},
            )
        for stream_id, records in (streams or {}).items():
            if not isinstance(records, list):
                raise ConfigurationError(
                    f"streams[{stream_id}] must be a list",
                    code="invalid_stream_records",
                    details={"stream": stream_id},
                )
            for i, record in enumerate(records):
                if not isinstance(record, dict) or not record.get("channel"):
                    raise ConfigurationError(
                        f"streams[{stream_id}][{i}] missing channel",
                        code="missing_channel",
                        details={"stream": stream_id, "index": i},
                    )
        batch_size = self._data.get("batch_size", 50)
        if isinstance(batch_size, bool) or not isinstance(batch_size, (int, str)) or not _is_int(batch_size):
            raise ConfigurationError(
                "batch_size must be an integer",
                code="invalid_batch_size",
                details={"value": batch_size},
            )
        timeout = self._data.get("timeout_seconds", 30)
        if isinstance(timeout, bool) or not _is_positive_number(timeout):
            raise ConfigurationError(
                "timeout_seconds must be a positive number",
                code="invalid_timeout",
                details={"value": timeout},
            )

    @property
    def output(self) -> dict[str, str]:
        """Adapter map as the host passes it to initialize (values stringified)."""
        val = self._data.get("output")
        if not isinstance(val, dict):
            return {}
        return {str(k): "" if v is None else str(v) for k, v in val.items()}

    @property
    def streams(self) -> dict[str, list[dict[str, str]]]:
        """Stream id -> list of per-stream records."""
        val = self._data.get("streams")
        if not isinstance(val, dict):
            return {}
        return {
            str(stream_id): [
                {str(k): str(v) for k, v in record.items()} for record in records if isinstance(record, dict)
            ]
            for stream_id, records in val.items()
            if isinstance(records, list)
        }

    @property
    def batch_size(self) -> int:
        return max(1, int(self._data.get("batch_size", 50)))

    @property
    def timeout_seconds(self) -> float:
        return float(self._data.get("timeout_seconds", 30))


cfg: Config = Config({})
