"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from family_photos.adapters.supabase_family_repository import (
    SupabaseFamilyRepository,
)
from family_photos.adapters.supabase_photo_repository import SupabasePhotoRepository
from family_photos.adapters.supabase_storage_client import HttpxSupabaseStorage
from family_photos.adapters.supabase_user_repository import SupabaseUserRepository
from family_photos.config import Settings
from family_photos.services.families import FamilyService
from family_photos.services.favorites import FavoritesService
from family_photos.services.photos import PhotoLibraryService
from family_photos.services.storage import BlobStore
from family_photos.services.uploads import UploadPipeline
from family_photos.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    blob_store: BlobStore
    user_service: UserService
    photo_library_service: PhotoLibraryService
    upload_pipeline: UploadPipeline
    favorites_service: FavoritesService
    family_service: FamilyService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_repository = SupabaseUserRepository(supabase_client)
    photo_repository = SupabasePhotoRepository(supabase_client)
    family_repository = SupabaseFamilyRepository(supabase_client)
    blob_store = HttpxSupabaseStorage.create(
        base_url=resolved_settings.supabase_url,
        service_key=resolved_settings.supabase_service_key,
        bucket=resolved_settings.storage_bucket,
        signed_url_ttl_seconds=resolved_settings.signed_url_ttl_seconds,
    )
    user_service = UserService(user_repository)
    photo_library_service = PhotoLibraryService(
        photo_repository=photo_repository,
        user_service=user_service,
        blob_store=blob_store,
    )
    upload_pipeline = UploadPipeline(
        photo_repository=photo_repository,
        user_service=user_service,
        blob_store=blob_store,
        max_concurrency=resolved_settings.max_concurrent_uploads,
    )
    favorites_service = FavoritesService(user_repository)
    family_service = FamilyService(
        family_repository=family_repository,
        user_repository=user_repository,
    )

    async def close_resources() -> None:
        await blob_store.close()

    return AppContainer(
        settings=resolved_settings,
        blob_store=blob_store,
        user_service=user_service,
        photo_library_service=photo_library_service,
        upload_pipeline=upload_pipeline,
        favorites_service=favorites_service,
        family_service=family_service,
        close_resources=close_resources,
    )
