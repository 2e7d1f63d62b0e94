"""CRUD endpoints generated from collection schemas."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Query, Request, status

from label_admin.errors import ValidationError

if TYPE_CHECKING:
    from label_admin.containers import AppContainer
    from label_admin.domain.collections import CollectionSchema
    from label_admin.services.collections import CollectionService


def build_collection_router(schema: CollectionSchema) -> APIRouter:
    """Create the `/api/<route>` endpoints a schema supports."""
    router = APIRouter(prefix=f"/api/{schema.route}", tags=[schema.name])
    title = schema.label.capitalize()

    @router.get("", name=f"list_{schema.name}")
    async def list_documents(request: Request) -> dict[str, object]:
        """Return every document in the collection."""
        service = _service(request, schema)
        return {"success": True, schema.name: service.list_all()}

    if schema.writable:

        @router.post(
            "", name=f"create_{schema.label}", status_code=status.HTTP_201_CREATED
        )
        async def create_document(request: Request) -> dict[str, object]:
            """Validate and create a document."""
            service = _service(request, schema)
            document_id = service.create(await _read_json(request))
            return {
                "success": True,
                "message": f"{title} created successfully",
                "id": document_id,
            }

        @router.put("", name=f"update_{schema.label}")
        async def update_document(request: Request) -> dict[str, object]:
            """Validate and update a document."""
            service = _service(request, schema)
            service.update(await _read_json(request))
            return {"success": True, "message": f"{title} updated successfully"}

        @router.delete("", name=f"delete_{schema.label}")
        async def delete_document(
            request: Request, document_id: str | None = Query(default=None, alias="id")
        ) -> dict[str, object]:
            """Delete a document by its id query parameter."""
            service = _service(request, schema)
            service.delete(document_id)
            return {"success": True, "message": f"{title} deleted successfully"}

    elif schema.supports_status_update:

        @router.put("", name=f"update_{schema.label}_status")
        async def update_status(request: Request) -> dict[str, object]:
            """Change a document's status."""
            service = _service(request, schema)
            service.update_status(await _read_json(request))
            return {"success": True, "message": f"{title} status updated successfully"}

    return router


def _service(request: Request, schema: CollectionSchema) -> CollectionService:
    container: AppContainer = request.app.state.container
    return container.collection(schema.name)


async def _read_json(request: Request) -> object:
    try:
        return await request.json()
    except ValueError as exc:
        raise ValidationError("Request body must be valid JSON") from exc
