"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from family_photos.config import Settings
from family_photos.containers import AppContainer
from family_photos.domain.models import Family, UserProfile
from family_photos.domain.photos import NewPhoto, Photo
from family_photos.services.families import FamilyRepository, FamilyService
from family_photos.services.favorites import FavoritesService
from family_photos.services.photos import PhotoLibraryService, PhotoRepository
from family_photos.services.storage import BlobStore, ProgressCallback
from family_photos.services.uploads import UploadPipeline
from family_photos.services.users import UserRepository, UserService


def make_photo(  # noqa: PLR0913
    upload_date: datetime,
    *,
    tags: tuple[str, ...] = (),
    album: str | None = None,
    description: str | None = None,
    family_id: UUID | None = None,
    uploaded_by: UUID | None = None,
    photo_id: UUID | None = None,
) -> Photo:
    """Build a photo record with sensible defaults."""
    resolved_id = photo_id or uuid4()
    resolved_family = family_id or uuid4()
    return Photo(
        id=resolved_id,
        image_path=f"families/{resolved_family}/{resolved_id}.jpg",
        download_url=f"https://cdn.test/{resolved_id}.jpg",
        upload_date=upload_date,
        uploaded_by=uploaded_by or uuid4(),
        uploaded_by_name="Test User",
        family_id=resolved_family,
        file_name=f"{resolved_id}.jpg",
        file_size=1024,
        file_type="image/jpeg",
        description=description,
        tags=tags,
        album=album,
    )


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    profiles: dict[UUID, UserProfile] = field(default_factory=dict)
    fail_favorites: bool = False
    fail_reads: bool = False

    def add_profile(
        self, family_id: UUID | None, display_name: str = "Test User"
    ) -> UserProfile:
        profile = UserProfile(
            id=uuid4(),
            email="test@example.com",
            display_name=display_name,
            family_id=family_id,
        )
        self.profiles[profile.id] = profile
        return profile

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        if self.fail_reads:
            raise RuntimeError("database unavailable")
        return self.profiles.get(user_id)

    def add_favorite(self, user_id: UUID, photo_id: UUID) -> None:
        if self.fail_favorites:
            raise RuntimeError("database unavailable")
        profile = self.profiles[user_id]
        self.profiles[user_id] = _replace_favorites(
            profile, profile.favorites | {photo_id}
        )

    def remove_favorite(self, user_id: UUID, photo_id: UUID) -> None:
        if self.fail_favorites:
            raise RuntimeError("database unavailable")
        profile = self.profiles[user_id]
        self.profiles[user_id] = _replace_favorites(
            profile, profile.favorites - {photo_id}
        )

    def set_family(self, user_id: UUID, family_id: UUID, family_name: str) -> None:
        profile = self.profiles[user_id]
        self.profiles[user_id] = UserProfile(
            id=profile.id,
            email=profile.email,
            display_name=profile.display_name,
            family_id=family_id,
            favorites=profile.favorites,
        )


def _replace_favorites(profile: UserProfile, favorites: frozenset[UUID]) -> UserProfile:
    return UserProfile(
        id=profile.id,
        email=profile.email,
        display_name=profile.display_name,
        family_id=profile.family_id,
        favorites=favorites,
    )


@dataclass
class InMemoryPhotoRepository(PhotoRepository):
    """In-memory photo repository for tests."""

    photos: dict[UUID, Photo] = field(default_factory=dict)
    fail_for: set[str] = field(default_factory=set)
    fail_reads: bool = False
    fail_deletes: bool = False

    def add(self, photo: Photo) -> Photo:
        self.photos[photo.id] = photo
        return photo

    def list_family_photos(self, family_id: UUID) -> list[Photo]:
        if self.fail_reads:
            raise RuntimeError("database unavailable")
        return [photo for photo in self.photos.values() if photo.family_id == family_id]

    def create_photo(self, photo: NewPhoto) -> Photo:
        if any(name in photo.image_path for name in self.fail_for):
            raise RuntimeError("insert failed")
        created = Photo(
            id=uuid4(),
            image_path=photo.image_path,
            download_url=photo.download_url,
            upload_date=photo.upload_date,
            uploaded_by=photo.uploaded_by,
            uploaded_by_name=photo.uploaded_by_name,
            family_id=photo.family_id,
            file_name=photo.file_name,
            file_size=photo.file_size,
            file_type=photo.file_type,
            description=photo.description,
            tags=photo.tags,
            album=photo.album,
        )
        self.photos[created.id] = created
        return created

    def get_photo(self, photo_id: UUID) -> Photo | None:
        if self.fail_reads:
            raise RuntimeError("database unavailable")
        return self.photos.get(photo_id)

    def delete_photo(self, photo_id: UUID) -> None:
        if self.fail_deletes:
            raise RuntimeError("database unavailable")
        self.photos.pop(photo_id, None)


@dataclass
class FakeBlobStore(BlobStore):
    """In-memory blob store that reports progress in small chunks."""

    blobs: dict[str, bytes] = field(default_factory=dict)
    fail_put_for: set[str] = field(default_factory=set)
    fail_resolve_for: set[str] = field(default_factory=set)
    fail_delete: bool = False
    deleted: list[str] = field(default_factory=list)
    progress_log: dict[str, list[int]] = field(default_factory=dict)
    chunk_size: int = 4

    async def put(
        self,
        path: str,
        data: bytes,
        content_type: str,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        if any(name in path for name in self.fail_put_for):
            raise RuntimeError("storage unavailable")
        total = len(data)
        for sent in range(self.chunk_size, total + self.chunk_size, self.chunk_size):
            await asyncio.sleep(0)
            if on_progress is not None:
                on_progress(min(sent, total), total)
            self.progress_log.setdefault(path, []).append(min(sent, total))
        self.blobs[path] = data

    async def resolve_url(self, path: str) -> str:
        if any(name in path for name in self.fail_resolve_for):
            raise RuntimeError("object not found")
        return f"https://cdn.test/{path}?token=signed"

    async def delete(self, path: str) -> None:
        if self.fail_delete:
            raise RuntimeError("storage unavailable")
        self.deleted.append(path)
        self.blobs.pop(path, None)


@dataclass
class InMemoryFamilyRepository(FamilyRepository):
    """In-memory family repository for tests."""

    families: dict[UUID, Family] = field(default_factory=dict)

    def find_by_name_lower(self, name_lower: str) -> Family | None:
        for family in self.families.values():
            if family.name_lower == name_lower:
                return family
        return None

    def create_family(self, name: str, name_lower: str, created_by: UUID) -> Family:
        family = Family(
            id=uuid4(),
            name=name,
            name_lower=name_lower,
            created_by=created_by,
            created_at=datetime.now(tz=UTC),
            members=frozenset({created_by}),
        )
        self.families[family.id] = family
        return family

    def add_member(self, family_id: UUID, user_id: UUID) -> None:
        family = self.families[family_id]
        self.families[family_id] = Family(
            id=family.id,
            name=family.name,
            name_lower=family.name_lower,
            created_by=family.created_by,
            created_at=family.created_at,
            members=family.members | {user_id},
        )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
    )


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def photo_repository() -> InMemoryPhotoRepository:
    return InMemoryPhotoRepository()


@pytest.fixture
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


@pytest.fixture
def family_repository() -> InMemoryFamilyRepository:
    return InMemoryFamilyRepository()


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    user_repository: InMemoryUserRepository,
    photo_repository: InMemoryPhotoRepository,
    blob_store: FakeBlobStore,
    family_repository: InMemoryFamilyRepository,
) -> AppContainer:
    user_service = UserService(user_repository)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        blob_store=blob_store,
        user_service=user_service,
        photo_library_service=PhotoLibraryService(
            photo_repository=photo_repository,
            user_service=user_service,
            blob_store=blob_store,
        ),
        upload_pipeline=UploadPipeline(
            photo_repository=photo_repository,
            user_service=user_service,
            blob_store=blob_store,
            max_concurrency=settings.max_concurrent_uploads,
        ),
        favorites_service=FavoritesService(user_repository),
        family_service=FamilyService(
            family_repository=family_repository,
            user_repository=user_repository,
        ),
        close_resources=close_resources,
    )
