from pydantic import BaseModel, Field, field_validator
from datetime import datetime


class GenerateImageResponse(BaseModel):
    """Success envelope of the /generate-image function."""
    image_url: str = Field(..., serialization_alias="imageUrl")
    text_content: str = Field(default="", serialization_alias="textContent")
    success: bool = True


class ErrorResponse(BaseModel):
    """Failure envelope of the /generate-image function."""
    error: str
    success: bool = False


class CreateImageRequest(BaseModel):
    """Request to generate and store a new image for the current user."""
    prompt: str = Field(
        ...,
        min_length=1,
        max_length=4000,
        description="Description of the image to create, or of the change to apply when editing",
    )
    edit_image_id: str | None = Field(
        default=None,
        description="ID of one of your images to use as the source for an edit",
    )

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Prompt must not be blank")
        return value


class GeneratedImageInfo(BaseModel):
    """Info about a single generated image."""
    id: str
    prompt: str
    image_url: str
    created_at: datetime

    class Config:
        from_attributes = True


class CreateImageResponse(GeneratedImageInfo):
    """A freshly stored image, with any text the model returned alongside it."""
    text_content: str = ""
