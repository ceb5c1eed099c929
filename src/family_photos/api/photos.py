"""Gallery, upload, favorites and family endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    Header,
    HTTPException,
    Request,
    UploadFile,
    status,
)
from fastapi.responses import JSONResponse

from family_photos.api.models import (
    FamilyIn,
    FamilyOut,
    FavoriteOut,
    GalleryOut,
    UploadItemOut,
    UploadOut,
)
from family_photos.config import parse_tag_list
from family_photos.domain.errors import BatchUploadError
from family_photos.domain.gallery import GalleryCriteria
from family_photos.domain.models import ViewerContext
from family_photos.domain.photos import LocalFile
from family_photos.services.gallery import (
    build_gallery_view,
    photo_details,
    viewer_now,
)
from family_photos.services.uploads import UploadForm

if TYPE_CHECKING:
    from family_photos.containers import AppContainer

router = APIRouter(tags=["photos"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


async def get_viewer(
    request: Request,
    x_user_id: str | None = Header(default=None),
    x_user_name: str | None = Header(default=None),
    x_timezone: str | None = Header(default=None),
) -> ViewerContext:
    """Build the viewer context from gateway-provided identity headers."""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    try:
        user_id = UUID(x_user_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED) from exc
    timezone = x_timezone or _container(request).settings.default_timezone
    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown timezone"
        ) from exc
    return ViewerContext(user_id=user_id, display_name=x_user_name, timezone=timezone)


@router.get("/gallery")
async def gallery(
    request: Request,
    viewer: ViewerContext = Depends(get_viewer),
    search: str = "",
    tag: str = "",
    album: str = "",
    group_by: Literal["date", "album"] = "date",
) -> GalleryOut:
    """Return the viewer's family photos, filtered and grouped."""
    container = _container(request)
    snapshot = await container.photo_library_service.load_family_photos(viewer)
    criteria = GalleryCriteria(search=search, tag=tag, album=album, group_by=group_by)
    view = build_gallery_view(
        snapshot.photos, snapshot.favorites, criteria, viewer_now(viewer.timezone)
    )
    return GalleryOut.from_view(view, snapshot.favorites)


@router.get("/albums")
async def albums(
    request: Request, viewer: ViewerContext = Depends(get_viewer)
) -> dict[str, list[str]]:
    """Return album names used in the viewer's family."""
    container = _container(request)
    return {"albums": container.photo_library_service.list_album_names(viewer)}


@router.post("/photos", status_code=status.HTTP_201_CREATED, response_model=None)
async def upload_photos(  # noqa: PLR0913
    request: Request,
    viewer: ViewerContext = Depends(get_viewer),
    files: list[UploadFile] | None = File(default=None),
    description: str = Form(default=""),
    tags: str = Form(default=""),
    album: str = Form(default=""),
    new_album: str = Form(default=""),
) -> UploadOut | JSONResponse:
    """Upload a batch of photos sharing album, tags and description."""
    container = _container(request)
    selected = [
        LocalFile(
            name=upload.filename or "photo",
            content=await upload.read(),
            content_type=upload.content_type or "application/octet-stream",
        )
        for upload in files or []
    ]
    form = UploadForm(
        files=selected,
        description=description,
        tags=parse_tag_list(tags),
        album=album,
        new_album=new_album,
    )
    try:
        result = await container.upload_pipeline.submit(form, viewer)
    except BatchUploadError as exc:
        payload = UploadOut(
            status="partial",
            message=str(exc),
            items=[UploadItemOut.from_item(item) for item in exc.items],
        )
        return JSONResponse(
            status_code=status.HTTP_207_MULTI_STATUS,
            content=payload.model_dump(mode="json"),
        )
    return UploadOut(
        status="ok",
        items=[UploadItemOut.from_item(item) for item in result.items],
    )


@router.get("/photos/{photo_id}")
async def photo_detail(
    photo_id: UUID, request: Request, viewer: ViewerContext = Depends(get_viewer)
) -> dict[str, object]:
    """Return the details shown for a single photo."""
    container = _container(request)
    photo = container.photo_library_service.get_photo(viewer, photo_id)
    return photo_details(photo, viewer.timezone)


@router.delete("/photos/{photo_id}")
async def delete_photo(
    photo_id: UUID, request: Request, viewer: ViewerContext = Depends(get_viewer)
) -> dict[str, str]:
    """Delete a photo uploaded by the viewer."""
    container = _container(request)
    await container.photo_library_service.delete_photo(viewer, photo_id)
    return {"status": "deleted", "id": str(photo_id)}


@router.post("/favorites/{photo_id}/toggle")
async def toggle_favorite(
    photo_id: UUID, request: Request, viewer: ViewerContext = Depends(get_viewer)
) -> FavoriteOut:
    """Add or remove a photo from the viewer's favorites."""
    container = _container(request)
    container.photo_library_service.get_photo(viewer, photo_id)
    profile = container.user_service.get_profile(viewer.user_id)
    favorites = set(profile.favorites)
    result = await container.favorites_service.toggle(
        viewer.user_id, favorites, photo_id
    )
    return FavoriteOut(
        photo_id=result.photo_id, is_favorite=result.is_favorite, state=result.state
    )


@router.post("/family")
async def join_family(
    body: FamilyIn, request: Request, viewer: ViewerContext = Depends(get_viewer)
) -> FamilyOut:
    """Join a family by name, creating it when it does not exist."""
    container = _container(request)
    family = container.family_service.join_or_create(viewer.user_id, body.name)
    return FamilyOut(
        id=family.id,
        name=family.name,
        member_count=len(family.members | {viewer.user_id}),
    )
