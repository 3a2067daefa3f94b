import random
import string
import time
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

_ID_ALPHABET = string.digits + string.ascii_lowercase


class CamelModel(BaseModel):
    """Base for everything that crosses the wire or lands in a JSON document.

    Python attributes are snake_case, serialized names are camelCase.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def now_iso() -> str:
    """UTC timestamp with milliseconds, e.g. 2024-05-01T12:00:00.000Z."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def new_id(prefix: str) -> str:
    """Time-ordered unique token: <prefix>-<epoch ms>-<9 base36 chars>."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"


def id_timestamp(record_id: str) -> int:
    """Epoch ms embedded in an id produced by new_id(), 0 if absent."""
    parts = record_id.split("-")
    for part in parts[1:]:
        if part.isdigit():
            return int(part)
    return 0
