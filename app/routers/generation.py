import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.config import CORS_HEADERS, get_settings
from app.schemas import GenerateImageResponse, ErrorResponse
from app.services.errors import ImageGenerationError, ValidationError
from app.services.image_adapter import image_adapter

settings = get_settings()
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/generate-image", tags=["generation"])


def _error_status(exc: ImageGenerationError) -> int:
    if settings.legacy_error_status:
        return exc.legacy_status_code
    return exc.status_code


@router.post(
    "",
    response_model=GenerateImageResponse,
    responses={429: {"model": ErrorResponse}, 402: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate_image(request: Request):
    """
    Generate an image from a prompt, or edit an existing one.

    Body: ``{"prompt": "...", "editImageBase64": "data:image/png;base64,..."}``.
    ``editImageBase64`` is optional and may also be a remote image URL.

    Failures are returned as ``{"error": "...", "success": false}``.
    """
    try:
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ValidationError("Request body must be valid JSON") from e

        result = await image_adapter.generate_from_body(body)

    except ImageGenerationError as e:
        logger.error("Error in generate-image function: %s", e.message)
        return JSONResponse(
            status_code=_error_status(e),
            content=ErrorResponse(error=e.message).model_dump(),
            headers=CORS_HEADERS,
        )

    response = GenerateImageResponse(
        image_url=result.image_reference,
        text_content=result.text_content,
    )
    return JSONResponse(content=response.model_dump(by_alias=True), headers=CORS_HEADERS)
