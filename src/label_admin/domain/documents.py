"""Domain models for stored documents."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class DocumentRecord:
    """A document as held by the store: id, field bag and server timestamps."""

    id: str
    data: dict[str, object]
    created_at: datetime | None = None
    updated_at: datetime | None = None
