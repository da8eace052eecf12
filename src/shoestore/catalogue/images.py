"""Storage for admin-uploaded product images."""

from pathlib import Path
from uuid import uuid4

from protean.exceptions import ValidationError

from shoestore import settings
from shoestore.utils.logging import get_logger

logger = get_logger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}
MAX_IMAGE_BYTES = 5 * 1024 * 1024
PUBLIC_PREFIX = "/uploads"


def store_image(filename: str, content: bytes, directory: Path | None = None) -> str:
    """Write the image under the upload directory and return its public URL."""
    extension = Path(filename or "").suffix.lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise ValidationError({"file": [f"Unsupported image type '{extension or filename}'"]})
    if not content:
        raise ValidationError({"file": ["Uploaded file is empty"]})
    if len(content) > MAX_IMAGE_BYTES:
        raise ValidationError({"file": ["Image is larger than 5 MB"]})

    directory = directory or settings.upload_dir()
    directory.mkdir(parents=True, exist_ok=True)

    stored_name = f"{uuid4().hex}{extension}"
    (directory / stored_name).write_bytes(content)
    logger.info("image_stored", filename=filename, stored_as=stored_name, size=len(content))
    return f"{PUBLIC_PREFIX}/{stored_name}"
