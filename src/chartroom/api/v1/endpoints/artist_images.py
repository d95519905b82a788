"""Artist image endpoints for the Chartroom API."""

from __future__ import annotations

from fastapi import APIRouter, File, HTTPException, Response, UploadFile, status

from chartroom.api.v1.dependencies import (
    ArtistImageServiceDep,
    CurrentUserDep,
    OptionalUserDep,
)
from chartroom.core.settings import settings
from chartroom.schemas.artist_image import (
    GalleryResponse,
    ReportCreate,
    ReportResponse,
    SelectedImageResponse,
    UploadResponse,
    VoteCreate,
    VoteResult,
)
from chartroom.services.errors import (
    ArtistImageError,
    DuplicateReportError,
    ImageNotFoundError,
    ImagePermissionError,
    StorageError,
    ValidationFailure,
)

router = APIRouter(prefix="/artists", tags=["artist-images"])

_NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def _to_http_error(err: ArtistImageError) -> HTTPException:
    if isinstance(err, ValidationFailure):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(err, ImageNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(err, ImagePermissionError):
        code = status.HTTP_403_FORBIDDEN
    elif isinstance(err, DuplicateReportError):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=str(err))


@router.get("/{slug}/images", response_model=GalleryResponse)
async def list_artist_images(
    slug: str,
    service: ArtistImageServiceDep,
    current_user: OptionalUserDep,
) -> GalleryResponse:
    """List every image of an artist, best ranked first."""
    artist_name = service.resolve_artist_slug(slug)
    viewer_id = current_user.id if current_user is not None else None
    return GalleryResponse(images=service.get_gallery(artist_name, viewer_id=viewer_id))


@router.get("/{slug}/images/selected", response_model=SelectedImageResponse)
async def get_selected_artist_image(
    slug: str,
    service: ArtistImageServiceDep,
) -> SelectedImageResponse:
    """Return the image currently displayed for an artist."""
    artist_name = service.resolve_artist_slug(slug)
    return SelectedImageResponse(image_url=service.get_selected_image_url(artist_name))


@router.post("/{slug}/images", response_model=UploadResponse)
async def upload_artist_image(
    slug: str,
    current_user: CurrentUserDep,
    service: ArtistImageServiceDep,
    response: Response,
    file: UploadFile = File(...),
) -> UploadResponse:
    """Upload a new image for an artist."""
    artist_name = service.resolve_artist_slug(slug)
    # One byte past the limit is enough for the size check to reject it.
    content = await file.read(settings.max_image_upload_bytes + 1)
    try:
        image = service.upload_image(
            artist_name,
            current_user,
            filename=file.filename or "",
            content_type=file.content_type,
            content=content,
        )
    except ArtistImageError as err:
        raise _to_http_error(err) from err
    except StorageError as err:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload image",
        ) from err

    response.headers.update(_NO_STORE_HEADERS)
    return UploadResponse(id=image.id, image_url=image.image_url)


@router.post("/{slug}/images/{image_id}/vote", response_model=VoteResult)
async def vote_on_artist_image(
    slug: str,
    image_id: str,
    vote_data: VoteCreate,
    current_user: CurrentUserDep,
    service: ArtistImageServiceDep,
) -> VoteResult:
    """Cast or change the current user's vote on an image."""
    try:
        return service.cast_vote(image_id, current_user.id, vote_data.vote_type)
    except ArtistImageError as err:
        raise _to_http_error(err) from err


@router.post("/{slug}/images/{image_id}/report", response_model=ReportResponse)
async def report_artist_image(
    slug: str,
    image_id: str,
    report_data: ReportCreate,
    current_user: CurrentUserDep,
    service: ArtistImageServiceDep,
) -> ReportResponse:
    """Report an image for review."""
    try:
        report = service.report_image(image_id, current_user.id, report_data.reason)
    except ArtistImageError as err:
        raise _to_http_error(err) from err
    return ReportResponse(id=report.id)


@router.delete("/{slug}/images/{image_id}")
async def delete_artist_image(
    slug: str,
    image_id: str,
    current_user: CurrentUserDep,
    service: ArtistImageServiceDep,
) -> dict[str, str]:
    """Delete an image; allowed for its uploader and for superusers."""
    try:
        service.delete_image(image_id, current_user)
    except ArtistImageError as err:
        raise _to_http_error(err) from err
    return {"message": "Image deleted successfully"}
