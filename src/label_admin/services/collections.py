"""Generic CRUD service driven by a collection schema."""

import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from label_admin.domain.collections import CollectionSchema, FieldKind, FieldSpec
from label_admin.domain.documents import DocumentRecord
from label_admin.errors import BackendError, ValidationError

logger = logging.getLogger(__name__)


class DocumentRepository(Protocol):
    """Persistence interface for schema-less document collections."""

    def list_documents(self, collection: str) -> list[DocumentRecord]:
        """Return every document in a collection."""

    def create_document(
        self, collection: str, data: dict[str, object], created_at: datetime
    ) -> str:
        """Insert a document stamped with created/updated times and return its id."""

    def update_document(
        self,
        collection: str,
        document_id: str,
        changes: dict[str, object],
        updated_at: datetime,
    ) -> None:
        """Merge changes into an existing document and restamp its update time."""

    def delete_document(self, collection: str, document_id: str) -> None:
        """Delete a document; deleting a missing id is not an error."""


@dataclass
class CollectionService:
    """Validates payloads for one collection and performs a single store call."""

    schema: CollectionSchema
    repository: DocumentRepository

    def list_all(self) -> list[dict[str, object]]:
        """Return all documents with defaults applied to absent fields."""
        try:
            records = self.repository.list_documents(self.schema.name)
        except Exception as exc:
            logger.exception("Error fetching %s", self.schema.name)
            raise BackendError(
                f"Failed to fetch {self.schema.name}. Please try again later."
            ) from exc
        return [self.serialize(record) for record in records]

    def create(self, payload: object) -> str:
        """Validate and insert a new document, returning its id."""
        body = _require_mapping(payload)
        document = self._build_document(body)
        try:
            return self.repository.create_document(
                self.schema.name, document, datetime.now(tz=UTC)
            )
        except Exception as exc:
            logger.exception("Error creating %s", self.schema.label)
            raise BackendError(
                f"Failed to create {self.schema.label}. Please try again later."
            ) from exc

    def update(self, payload: object) -> None:
        """Validate and overwrite the declared fields of an existing document."""
        body = _require_mapping(payload)
        document_id = self._require_id(body.get("id"))
        document = self._build_document(body)
        self._write(document_id, document, f"update {self.schema.label}")

    def update_status(self, payload: object) -> None:
        """Change only the status field; values outside the fixed set are rejected."""
        body = _require_mapping(payload)
        document_id = self._require_id(body.get("id"))
        status = body.get(self.schema.status_field)
        if not status or status not in self.schema.status_values:
            raise ValidationError("Valid status is required")
        self._write(
            document_id,
            {self.schema.status_field: status},
            f"update {self.schema.label} status",
        )

    def delete(self, document_id: str | None) -> None:
        """Delete a document by id."""
        resolved_id = self._require_id(document_id)
        try:
            self.repository.delete_document(self.schema.name, resolved_id)
        except Exception as exc:
            logger.exception("Error deleting %s", self.schema.label)
            raise BackendError(
                f"Failed to delete {self.schema.label}. Please try again later."
            ) from exc

    def serialize(self, record: DocumentRecord) -> dict[str, object]:
        """Flatten a stored record into the API representation."""
        item: dict[str, object] = {"id": record.id}
        for spec in self.schema.fields:
            item[spec.name] = _read_value(spec, record.data.get(spec.name))
        item["createdAt"] = _isoformat(record.created_at)
        item["updatedAt"] = _isoformat(record.updated_at)
        return item

    def _build_document(self, body: dict[str, object]) -> dict[str, object]:
        for rule in self.schema.required:
            for name in rule.fields:
                value = body.get(name)
                missing = value is None if rule.allow_zero else not value
                if missing:
                    raise ValidationError(rule.message)
        return {
            spec.name: _write_value(spec, body.get(spec.name))
            for spec in self.schema.fields
        }

    def _require_id(self, value: object) -> str:
        if not value:
            raise ValidationError(f"{self.schema.label.capitalize()} ID is required")
        return str(value)

    def _write(
        self, document_id: str, changes: dict[str, object], action: str
    ) -> None:
        try:
            self.repository.update_document(
                self.schema.name, document_id, changes, datetime.now(tz=UTC)
            )
        except Exception as exc:
            logger.exception("Error trying to %s", action, extra={"id": document_id})
            raise BackendError(f"Failed to {action}. Please try again later.") from exc


def _require_mapping(payload: object) -> dict[str, object]:
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def _read_value(spec: FieldSpec, value: object) -> object:
    if spec.kind is FieldKind.RAW:
        return value
    if spec.kind is FieldKind.NUMBER:
        if value is None:
            return spec.default()
        try:
            return _to_number(value)
        except ValueError:
            return spec.default()
    return value or spec.default()


def _write_value(spec: FieldSpec, value: object) -> object:  # noqa: PLR0911
    if spec.kind is FieldKind.RAW:
        return value
    if spec.kind is FieldKind.NUMBER:
        if value is None:
            return spec.default()
        try:
            return _to_number(value)
        except ValueError as exc:
            raise ValidationError(f"{spec.name} must be a number") from exc
    if spec.kind is FieldKind.BOOL:
        if value is None:
            return spec.default()
        if not isinstance(value, bool):
            raise ValidationError(f"{spec.name} must be a boolean")
        return value
    if not value:
        return spec.default()
    if spec.kind is FieldKind.TEXT:
        if not isinstance(value, str):
            raise ValidationError(f"{spec.name} must be a string")
        return value.strip() if spec.trim else value
    if spec.kind is FieldKind.LIST and not isinstance(value, list):
        raise ValidationError(f"{spec.name} must be a list")
    if spec.kind is FieldKind.OBJECT and not isinstance(value, dict):
        raise ValidationError(f"{spec.name} must be an object")
    return value


def _to_number(value: object) -> int | float:
    """Coerce JSON input to a number the way a form field would."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError("non-finite number")
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            return int(text)
        except ValueError:
            number = float(text)
            if not math.isfinite(number):
                raise ValueError("non-finite number") from None
            return number
    raise ValueError(f"cannot convert {type(value).__name__} to a number")


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
