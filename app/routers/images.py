import base64
import binascii
import logging
from urllib.parse import unquote_to_bytes

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import RedirectResponse

from app.dependencies import get_record_store
from app.schemas import CreateImageRequest, CreateImageResponse, GeneratedImageInfo
from app.services.errors import ImageGenerationError
from app.services.image_adapter import image_adapter, GenerationRequest
from app.services.records import ImageRecordStore, RecordNotFound

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/images", tags=["images"])

# Map MIME types to download file extensions
EXTENSION_MAP = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/bmp": "bmp",
    "image/svg+xml": "svg",
    "application/octet-stream": "bin",
}


def _decode_data_uri(data_uri: str) -> tuple[str, bytes]:
    """Split a ``data:<mime>[;base64],<data>`` URI into its MIME type and bytes."""
    header, _, data = data_uri.partition(",")
    params = header[len("data:"):].split(";")
    mime_type = params[0].strip().lower() or "image/png"
    if "base64" in params[1:]:
        return mime_type, base64.b64decode(data, validate=True)
    return mime_type, unquote_to_bytes(data)


async def _get_owned(store: ImageRecordStore, image_id: str):
    try:
        return await store.get(image_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("", response_model=CreateImageResponse, status_code=status.HTTP_201_CREATED)
async def create_image(
    request: CreateImageRequest,
    store: ImageRecordStore = Depends(get_record_store),
):
    """
    Generate an image and store it in your gallery.

    To edit one of your images, pass its ID as ``edit_image_id``. The edit is
    stored as a new image; the original is left untouched.

    Example prompts:
    - "a lighthouse on a cliff at sunset"
    - "make the background blue" (with ``edit_image_id``)
    """
    edit_image = None
    if request.edit_image_id:
        source = await _get_owned(store, request.edit_image_id)
        edit_image = source.image_url

    try:
        result = await image_adapter.generate(
            GenerationRequest(prompt=request.prompt, edit_image=edit_image)
        )
    except ImageGenerationError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    record = await store.create(prompt=request.prompt, image_url=result.image_reference)

    return CreateImageResponse(
        id=record.id,
        prompt=record.prompt,
        image_url=record.image_url,
        created_at=record.created_at,
        text_content=result.text_content,
    )


@router.get("", response_model=list[GeneratedImageInfo])
async def list_images(
    limit: int = 100,
    offset: int = 0,
    store: ImageRecordStore = Depends(get_record_store),
):
    """List your generated images, newest first."""
    images = await store.list(limit=limit, offset=offset)
    return [GeneratedImageInfo.model_validate(img) for img in images]


@router.get("/{image_id}", response_model=GeneratedImageInfo)
async def get_image(
    image_id: str,
    store: ImageRecordStore = Depends(get_record_store),
):
    """Get one of your generated images."""
    return GeneratedImageInfo.model_validate(await _get_owned(store, image_id))


@router.get("/{image_id}/download")
async def download_image(
    image_id: str,
    store: ImageRecordStore = Depends(get_record_store),
):
    """
    Download an image.

    Inline data URIs are returned as a file attachment. Remote images are
    served by redirecting to their URL.
    """
    record = await _get_owned(store, image_id)

    if not record.image_url.startswith("data:"):
        return RedirectResponse(record.image_url)

    try:
        mime_type, content = _decode_data_uri(record.image_url)
    except (binascii.Error, ValueError):
        logger.error("Stored image %s has a malformed data URI", record.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Stored image data is malformed",
        )

    # Only image types are served as-is
    if not mime_type.startswith("image/"):
        mime_type = "application/octet-stream"
    extension = EXTENSION_MAP.get(mime_type, "png")
    return Response(
        content=content,
        media_type=mime_type,
        headers={
            "Content-Disposition": f'attachment; filename="ai-image-{record.id}.{extension}"',
            "X-Content-Type-Options": "nosniff",
        },
    )


@router.delete("/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_image(
    image_id: str,
    store: ImageRecordStore = Depends(get_record_store),
):
    """Delete one of your images. Images owned by other users are not visible."""
    try:
        await store.delete(image_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
