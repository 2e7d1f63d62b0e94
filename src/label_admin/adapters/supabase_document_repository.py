"""Supabase-backed document collections.

Each collection is a table with an ``id`` primary key, a JSON ``data`` column
holding the document fields, and ``created_at`` / ``updated_at`` timestamps.
"""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from label_admin.domain.documents import DocumentRecord
from label_admin.errors import DocumentNotFoundError
from label_admin.services.collections import DocumentRepository


@dataclass
class SupabaseDocumentRepository(DocumentRepository):
    """Supabase implementation for document persistence."""

    client: Client

    def list_documents(self, collection: str) -> list[DocumentRecord]:
        """Return every document in a collection."""
        response = (
            self.client.table(collection)
            .select("id, data, created_at, updated_at")
            .execute()
        )
        return [_to_record(row) for row in response.data or []]

    def create_document(
        self, collection: str, data: dict[str, object], created_at: datetime
    ) -> str:
        """Insert a document row and return its id."""
        stamp = created_at.isoformat()
        response = (
            self.client.table(collection)
            .insert({"data": data, "created_at": stamp, "updated_at": stamp})
            .execute()
        )
        if not response.data:
            raise RuntimeError(f"Failed to create document in {collection}")
        return str(response.data[0]["id"])

    def update_document(
        self,
        collection: str,
        document_id: str,
        changes: dict[str, object],
        updated_at: datetime,
    ) -> None:
        """Merge changes into the stored fields and restamp ``updated_at``."""
        response = (
            self.client.table(collection)
            .select("data")
            .eq("id", document_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            raise DocumentNotFoundError(f"{collection}/{document_id}")
        current = response.data[0].get("data")
        merged = {**(current if isinstance(current, dict) else {}), **changes}
        self.client.table(collection).update(
            {"data": merged, "updated_at": updated_at.isoformat()}
        ).eq("id", document_id).execute()

    def delete_document(self, collection: str, document_id: str) -> None:
        """Delete a document row."""
        self.client.table(collection).delete().eq("id", document_id).execute()


def _to_record(row: dict[str, object]) -> DocumentRecord:
    data = row.get("data")
    return DocumentRecord(
        id=str(row["id"]),
        data=data if isinstance(data, dict) else {},
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )


def _parse_timestamp(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None
