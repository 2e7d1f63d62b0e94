"""Presentation pages: collection tables, edit forms and the gated shell."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Literal

from label_admin.adapters.admin_api_client import AdminApiClient
from label_admin.domain.collections import COLLECTIONS, CollectionSchema, FieldKind
from label_admin.domain.images import ImageBatchResult
from label_admin.errors import ApiRequestError, NetworkError
from label_admin.services.images import ImageNormalizer
from label_admin.services.session_gate import (
    HOME_ROUTE,
    LoginResult,
    SessionContext,
    SessionGate,
    SessionStore,
)

logger = logging.getLogger(__name__)

NETWORK_ERROR = "Network error. Please try again."


@dataclass(frozen=True)
class PageMessage:
    """Banner shown above a page after an action."""

    kind: Literal["success", "error"]
    text: str


@dataclass
class CollectionPage:
    """Table of one collection plus its create/edit form."""

    schema: CollectionSchema
    client: AdminApiClient
    normalizer: ImageNormalizer
    records: list[dict[str, object]] = field(default_factory=list)
    form: dict[str, object] = field(default_factory=dict)
    editing_id: str | None = None
    message: PageMessage | None = None
    error: str | None = None
    is_loading: bool = False

    def __post_init__(self) -> None:
        if not self.form:
            self.form = self._empty_form()

    @property
    def title(self) -> str:
        """Human label for the collection."""
        return self.schema.label.capitalize()

    @property
    def columns(self) -> list[str]:
        """Table headers."""
        return [spec.name for spec in self.schema.fields] + ["createdAt"]

    async def load(self) -> None:
        """Fetch the collection into ``records``."""
        self.is_loading = True
        self.error = None
        try:
            self.records = await self.client.list_documents(
                self.schema.route, self.schema.name
            )
        except ApiRequestError as exc:
            self.error = exc.message or f"Failed to load {self.schema.name}"
        except NetworkError:
            logger.warning("Failed to load %s", self.schema.name, exc_info=True)
            self.error = NETWORK_ERROR
        finally:
            self.is_loading = False

    def table_rows(self) -> list[list[str]]:
        """Render the loaded records as display strings."""
        return [
            [_format_cell(record.get(column)) for column in self.columns]
            for record in self.records
        ]

    def start_edit(self, record: dict[str, object]) -> None:
        """Fill the form from an existing record."""
        self._require_writable()
        self.editing_id = str(record["id"])
        self.form = {
            spec.name: record.get(spec.name, spec.default())
            for spec in self.schema.fields
        }

    def reset_form(self) -> None:
        """Cancel editing and clear the form."""
        self.editing_id = None
        self.form = self._empty_form()
        self.message = None

    def attach_images(
        self, field_name: str, files: Iterable[tuple[str, bytes]]
    ) -> ImageBatchResult:
        """Normalize selected files into an image field.

        A list field gains every successful image; a single-image field takes
        the first success. Failures are reported per file and do not stop the
        remaining files.
        """
        self._require_writable()
        spec = self.schema.get_field(field_name)
        if spec is None:
            raise KeyError(field_name)
        result = self.normalizer.normalize_many(files)
        if spec.kind is FieldKind.LIST:
            current = self.form.get(field_name) or []
            self.form[field_name] = [*current, *result.data_urls]
        elif result.images:
            self.form[field_name] = result.images[0].data_url
        if result.failures:
            self.message = PageMessage(
                "error", "; ".join(failure.message for failure in result.failures)
            )
        return result

    def remove_image(self, field_name: str, index: int) -> None:
        """Drop one image from a list field."""
        images = list(self.form.get(field_name) or [])
        del images[index]
        self.form[field_name] = images

    async def submit(self) -> bool:
        """Create or update from the form; reload on success."""
        self._require_writable()
        self.message = None
        body = dict(self.form)
        try:
            if self.editing_id:
                body["id"] = self.editing_id
                response = await self.client.update_document(self.schema.route, body)
            else:
                response = await self.client.create_document(self.schema.route, body)
        except ApiRequestError as exc:
            self.message = PageMessage("error", exc.message)
            return False
        except NetworkError:
            logger.warning("Failed to save %s", self.schema.label, exc_info=True)
            self.message = PageMessage("error", NETWORK_ERROR)
            return False
        self.editing_id = None
        self.form = self._empty_form()
        self.message = PageMessage(
            "success",
            str(response.get("message") or f"{self.title} saved successfully!"),
        )
        await self.load()
        return True

    async def delete(self, document_id: str) -> bool:
        """Delete a record and reload on success."""
        self._require_writable()
        try:
            response = await self.client.delete_document(self.schema.route, document_id)
        except ApiRequestError as exc:
            self.message = PageMessage(
                "error", exc.message or f"Failed to delete {self.schema.label}."
            )
            return False
        except NetworkError:
            self.message = PageMessage("error", NETWORK_ERROR)
            return False
        self.message = PageMessage(
            "success",
            str(response.get("message") or f"{self.title} deleted successfully!"),
        )
        await self.load()
        return True

    def _empty_form(self) -> dict[str, object]:
        return {spec.name: spec.default() for spec in self.schema.fields}

    def _require_writable(self) -> None:
        if not self.schema.writable:
            raise RuntimeError(f"{self.schema.name} is read-only")


@dataclass
class OrdersPage(CollectionPage):
    """Orders table with an inline status selector."""

    updating_id: str | None = None

    async def set_status(self, order_id: str, status: str) -> bool:
        """Change an order's status and reload on success."""
        self.updating_id = order_id
        self.message = None
        try:
            response = await self.client.update_document(
                self.schema.route, {"id": order_id, "status": status}
            )
        except ApiRequestError as exc:
            self.message = PageMessage(
                "error", exc.message or "Failed to update status."
            )
            return False
        except NetworkError:
            self.message = PageMessage("error", NETWORK_ERROR)
            return False
        finally:
            self.updating_id = None
        self.message = PageMessage(
            "success", str(response.get("message") or "Status updated successfully!")
        )
        await self.load()
        return True


@dataclass
class Dashboard:
    """Root of the UI: every page is opened through the session gate."""

    session: SessionContext
    pages: dict[str, CollectionPage]
    client: AdminApiClient
    current_route: str = HOME_ROUTE
    pending_redirect: str | None = field(default=None, init=False)
    gate: SessionGate = field(init=False)

    def __post_init__(self) -> None:
        self.gate = SessionGate(self.session.store, on_redirect=self._on_redirect)

    async def open(self, route: str) -> CollectionPage | None:
        """Navigate to a route, following gate redirects, and load its page."""
        self.pending_redirect = None
        decision = self.gate.navigate(route)
        while self.pending_redirect is not None:
            target, self.pending_redirect = self.pending_redirect, None
            decision = self.gate.navigate(target)
        self.current_route = decision.route
        page = self.pages.get(decision.route.strip("/"))
        if page is not None:
            await page.load()
        return page

    async def login(self, username: str, password: str) -> LoginResult:
        """Log in and leave the login route on success."""
        result = await self.session.login(username, password)
        if result.success:
            await self.open(self.current_route)
        return result

    async def logout(self) -> None:
        """Clear the session and return to the login route."""
        self.session.logout()
        await self.open(self.current_route)

    async def close(self) -> None:
        """Detach the gate from the store and close the API client."""
        self.gate.close()
        await self.client.close()

    def _on_redirect(self, target: str) -> None:
        self.pending_redirect = target


def build_pages(
    client: AdminApiClient, normalizer: ImageNormalizer
) -> dict[str, CollectionPage]:
    """Create one page per collection, keyed by route."""
    pages: dict[str, CollectionPage] = {}
    for schema in COLLECTIONS:
        page_class = OrdersPage if schema.supports_status_update else CollectionPage
        pages[schema.route] = page_class(
            schema=schema, client=client, normalizer=normalizer
        )
    return pages


def build_dashboard(
    client: AdminApiClient, store: SessionStore, normalizer: ImageNormalizer
) -> Dashboard:
    """Wire the session context and pages into a dashboard."""
    return Dashboard(
        session=SessionContext(store=store, client=client),
        pages=build_pages(client, normalizer),
        client=client,
    )


def _format_cell(value: object) -> str:  # noqa: PLR0911
    if value is None or value == "" or value == []:
        return "-"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, str):
        return "[image]" if value.startswith("data:image/") else value
    if isinstance(value, list):
        if all(
            isinstance(item, str) and item.startswith("data:image/") for item in value
        ):
            return f"{len(value)} image(s)"
        if all(isinstance(item, str) for item in value):
            return "; ".join(value)
        if all(isinstance(item, dict) and item.get("label") for item in value):
            return ", ".join(str(item["label"]) for item in value)
        return f"{len(value)} item(s)"
    if isinstance(value, dict):
        return ", ".join(str(item) for item in value.values() if item) or "-"
    return str(value)
