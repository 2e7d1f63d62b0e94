"""Tests for the dashboard pages driven against the real application."""

import asyncio

import httpx
import pytest

from label_admin.adapters.admin_api_client import HttpxAdminApiClient
from label_admin.api.app import create_app
from label_admin.containers import AppContainer
from label_admin.dashboard.pages import (
    NETWORK_ERROR,
    CollectionPage,
    Dashboard,
    OrdersPage,
    PageMessage,
    _format_cell,
    build_dashboard,
)
from label_admin.domain.collections import ARTISTS, CONTACTS
from label_admin.services.images import ImageNormalizer
from label_admin.services.session_gate import AUTH_KEY, InMemorySessionStore
from tests.conftest import InMemoryDocumentRepository, make_image_bytes


def _api_client(container: AppContainer) -> HttpxAdminApiClient:
    transport = httpx.ASGITransport(app=create_app(container))
    return HttpxAdminApiClient(
        http_client=httpx.AsyncClient(transport=transport, base_url="http://testserver")
    )


def _offline_client() -> HttpxAdminApiClient:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    return HttpxAdminApiClient(
        http_client=httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="http://testserver"
        )
    )


@pytest.fixture
def dashboard(container: AppContainer) -> Dashboard:
    return build_dashboard(
        _api_client(container), InMemorySessionStore(), ImageNormalizer()
    )


def test_anonymous_user_is_sent_to_login(dashboard: Dashboard) -> None:
    page = asyncio.run(dashboard.open("/artists"))

    assert page is None
    assert dashboard.current_route == "/login"


def test_login_then_open_page(
    dashboard: Dashboard, document_repository: InMemoryDocumentRepository
) -> None:
    document_repository.seed("contacts", {"name": "Ada", "comment": "Hi"})

    async def scenario() -> CollectionPage | None:
        await dashboard.open("/login")
        result = await dashboard.login("admin", "P@ssw0rd")
        assert result.success is True
        assert dashboard.current_route == "/"
        return await dashboard.open("/contact-us")

    page = asyncio.run(scenario())

    assert page is not None
    assert page.schema is CONTACTS
    assert page.error is None
    assert page.is_loading is False
    assert page.table_rows() == [["Ada", "-", "-", "Hi", "-"]]


def test_failed_login_stays_on_login(dashboard: Dashboard) -> None:
    async def scenario() -> str | None:
        await dashboard.open("/login")
        result = await dashboard.login("admin", "nope")
        return result.error

    error = asyncio.run(scenario())

    assert error == "Invalid username or password"
    assert dashboard.current_route == "/login"
    assert dashboard.session.store.get(AUTH_KEY) is None


def test_logout_returns_to_login(dashboard: Dashboard) -> None:
    dashboard.session.store.set(AUTH_KEY, "true")

    async def scenario() -> None:
        await dashboard.open("/tour")
        assert dashboard.current_route == "/tour"
        await dashboard.logout()

    asyncio.run(scenario())

    assert dashboard.current_route == "/login"


def test_close_detaches_gate_and_closes_client(dashboard: Dashboard) -> None:
    dashboard.session.store.set(AUTH_KEY, "true")
    asyncio.run(dashboard.open("/store"))

    asyncio.run(dashboard.close())
    dashboard.session.store.clear(AUTH_KEY)

    assert dashboard.pending_redirect is None
    assert dashboard.current_route == "/store"
    client = dashboard.client
    assert isinstance(client, HttpxAdminApiClient)
    assert client.http_client.is_closed


def test_artist_form_create_edit_and_delete(dashboard: Dashboard) -> None:
    page = dashboard.pages["artists"]

    async def scenario() -> None:
        page.form.update({"name": "Nova", "slug": "nova", "bio": ["Line one"]})
        assert await page.submit() is True
        assert page.message == PageMessage("success", "Artist created successfully")
        assert page.form["name"] == ""
        [record] = page.records

        page.start_edit(record)
        assert page.editing_id == record["id"]
        page.form["title"] = "Producer"
        assert await page.submit() is True
        assert page.message == PageMessage("success", "Artist updated successfully")
        assert page.records[0]["title"] == "Producer"

        assert await page.delete(str(record["id"])) is True
        assert page.records == []

    asyncio.run(scenario())


def test_submit_surfaces_validation_error(dashboard: Dashboard) -> None:
    page = dashboard.pages["tour"]
    page.form.update({"city": "Lagos"})

    saved = asyncio.run(page.submit())

    assert saved is False
    assert page.message == PageMessage("error", "City, date, and venue are required")
    assert page.form["city"] == "Lagos"


def test_network_failure_messages() -> None:
    page = CollectionPage(
        schema=ARTISTS, client=_offline_client(), normalizer=ImageNormalizer()
    )
    page.form.update({"name": "Nova", "slug": "nova"})

    async def scenario() -> bool:
        await page.load()
        return await page.submit()

    saved = asyncio.run(scenario())

    assert saved is False
    assert page.error == NETWORK_ERROR
    assert page.message == PageMessage("error", NETWORK_ERROR)


def test_attach_images_to_product_list(dashboard: Dashboard) -> None:
    page = dashboard.pages["store"]
    page.form["images"] = ["data:image/jpeg;base64,existing"]

    result = page.attach_images(
        "images",
        [
            ("front.png", make_image_bytes(1200, 900)),
            ("broken.png", b"nope"),
            ("back.png", make_image_bytes(100, 100)),
        ],
    )

    assert len(result.images) == 2
    assert result.images[0].width == 800
    images = page.form["images"]
    assert isinstance(images, list)
    assert len(images) == 3
    assert all(str(image).startswith("data:image/jpeg;base64,") for image in images)
    assert page.message == PageMessage("error", "Failed to process image broken.png")

    page.remove_image("images", 0)

    assert page.form["images"] == images[1:]


def test_attach_image_to_single_field(dashboard: Dashboard) -> None:
    page = dashboard.pages["artists"]

    page.attach_images(
        "imageUrl",
        [("a.png", make_image_bytes(20, 20)), ("b.png", make_image_bytes(30, 30))],
    )

    assert str(page.form["imageUrl"]).startswith("data:image/jpeg;base64,")
    assert page.message is None


def test_read_only_pages_refuse_edits(dashboard: Dashboard) -> None:
    page = dashboard.pages["join-us"]

    with pytest.raises(RuntimeError):
        asyncio.run(page.submit())
    with pytest.raises(RuntimeError):
        page.attach_images("email", [])


def test_orders_page_updates_status(
    dashboard: Dashboard, document_repository: InMemoryDocumentRepository
) -> None:
    order_id = document_repository.seed("orders", {"status": "pending", "total": 45})
    page = dashboard.pages["orders"]
    assert isinstance(page, OrdersPage)

    async def scenario() -> tuple[bool, bool]:
        await page.load()
        invalid = await page.set_status(order_id, "lost")
        invalid_message = page.message
        valid = await page.set_status(order_id, "shipped")
        assert invalid_message == PageMessage("error", "Valid status is required")
        return invalid, valid

    invalid, valid = asyncio.run(scenario())

    assert invalid is False
    assert valid is True
    assert page.updating_id is None
    assert page.records[0]["status"] == "shipped"
    assert page.message == PageMessage("success", "Order status updated successfully")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, "-"),
        ("", "-"),
        ([], "-"),
        (True, "Yes"),
        (False, "No"),
        ("data:image/jpeg;base64,AAAA", "[image]"),
        (["data:image/jpeg;base64,A", "data:image/jpeg;base64,B"], "2 image(s)"),
        (["One", "Two"], "One; Two"),
        ([{"label": "Instagram", "url": "x"}], "Instagram"),
        ([{"productId": "p1"}], "1 item(s)"),
        ({"name": "Ada", "email": "", "city": "Lagos"}, "Ada, Lagos"),
        (45, "45"),
    ],
)
def test_format_cell(value: object, expected: str) -> None:
    assert _format_cell(value) == expected
