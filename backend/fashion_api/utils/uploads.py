"""
Multipart image upload handling.
"""
from fastapi import UploadFile

from fashion_api.core.exceptions import ValidationError
from fashion_api.services.ai_client import ImageUpload


async def read_image(upload: UploadFile, max_size: int) -> ImageUpload:
    """Read an uploaded image into memory, enforcing type and size limits."""
    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise ValidationError("Only image files are allowed")

    content = await upload.read()
    if len(content) > max_size:
        raise ValidationError(f"File too large. Maximum size is {max_size // (1024 * 1024)}MB")
    if not content:
        raise ValidationError("Uploaded file is empty")

    return ImageUpload(
        filename=upload.filename or "upload",
        content=content,
        content_type=content_type,
    )
