"""
JSON values stored in plain text columns.

The timetable tables keep variable-length collections (grade lists, teacher
subject lists, assignment restrictions) as JSON strings. Every read goes
through a best-effort parse: malformed or mistyped content degrades to the
column's empty value instead of failing the request.
"""

import json
import logging
from typing import Any, Callable, Optional

from sqlalchemy import Text
from sqlalchemy.types import TypeDecorator

logger = logging.getLogger(__name__)


def load_json(raw: Any, default: Any) -> Any:
    """Parse a JSON string, returning ``default`` when it is empty or malformed."""
    if raw is None or raw == "":
        return default
    if not isinstance(raw, (str, bytes)):
        return raw
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Discarding malformed JSON column value: %.80r", raw)
        return default


def dump_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


class JSONText(TypeDecorator):
    """Text column holding JSON. Reads fall back to an empty value of the expected kind."""

    impl = Text
    cache_ok = True

    def __init__(self, empty: Callable[[], Any] = list, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.empty = empty

    def process_bind_param(self, value: Any, dialect) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, str):
            # Already serialized (legacy clients post JSON strings)
            return value
        return dump_json(value)

    def process_result_value(self, value: Optional[str], dialect) -> Any:
        empty = self.empty()
        parsed = load_json(value, empty)
        if not isinstance(parsed, type(empty)):
            logger.warning("JSON column held %s, expected %s", type(parsed).__name__, type(empty).__name__)
            return empty
        return parsed
