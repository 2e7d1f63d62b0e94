"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from label_admin.adapters.admin_api_client import HttpxAdminApiClient
from label_admin.adapters.supabase_document_repository import (
    SupabaseDocumentRepository,
)
from label_admin.config import Settings
from label_admin.dashboard.pages import Dashboard, build_dashboard
from label_admin.domain.collections import COLLECTIONS, CollectionSchema
from label_admin.services.auth import AuthService, FixedCredentialVerifier
from label_admin.services.collections import CollectionService, DocumentRepository
from label_admin.services.images import ImageNormalizer
from label_admin.services.session_gate import SessionStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    collection_services: dict[str, CollectionService]
    auth_service: AuthService
    close_resources: Callable[[], Awaitable[None]]

    def collection(self, name: str) -> CollectionService:
        """Return the service for a collection storage name."""
        return self.collection_services[name]


def build_collection_services(
    repository: DocumentRepository,
    schemas: tuple[CollectionSchema, ...] = COLLECTIONS,
) -> dict[str, CollectionService]:
    """Create one service per collection schema over a shared repository."""
    return {
        schema.name: CollectionService(schema=schema, repository=repository)
        for schema in schemas
    }


def build_image_normalizer(settings: Settings) -> ImageNormalizer:
    """Create an image normalizer from the configured limits."""
    return ImageNormalizer(
        max_file_bytes=settings.image_max_file_bytes,
        max_dimension=settings.image_max_dimension,
        max_payload_chars=settings.image_max_payload_chars,
        quality=settings.image_quality,
        fallback_quality=settings.image_fallback_quality,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    repository = SupabaseDocumentRepository(supabase_client)
    auth_service = AuthService(
        FixedCredentialVerifier(
            username=resolved_settings.admin_username,
            password=resolved_settings.admin_password,
        )
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=resolved_settings,
        collection_services=build_collection_services(repository),
        auth_service=auth_service,
        close_resources=close_resources,
    )


def build_admin_dashboard(settings: Settings, store: SessionStore) -> Dashboard:
    """Create a dashboard talking to the configured admin API."""
    client = HttpxAdminApiClient.create(settings.api_base_url)
    return build_dashboard(client, store, build_image_normalizer(settings))
