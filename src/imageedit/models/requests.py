"""Request models for imageedit."""

from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_SIZE = "1024x1024"


def image_field_name(image_count: int) -> str:
    """Multipart field name for image parts: scalar for one image, array for several."""
    return "image[]" if image_count > 1 else "image"


class ImageEditRequest(BaseModel):
    """Request model for an image edit call."""

    image_paths: list[Path] = Field(
        ...,
        min_length=1,
        max_length=2,
        description="Source images in send order. With two images the first is the background, the second the subject.",
    )
    prompt: str = Field(..., min_length=1, description="Edit/generation prompt")
    size: str = Field(DEFAULT_SIZE, pattern=r"^\d+x\d+$", description="Output size as <width>x<height>")
    n: int = Field(1, ge=1, le=1, description="Number of images to generate (always 1)")

    @property
    def field_name(self) -> str:
        """Multipart field name used for this request's image parts."""
        return image_field_name(len(self.image_paths))
