"""
Image upload validation and storage for multipart form fields
"""
import logging
from typing import List, Optional

from fastapi import HTTPException, UploadFile, status

from ..services.storage_provider import get_storage_provider

logger = logging.getLogger(__name__)

MB = 1024 * 1024

# Size limits per upload kind
MAX_UPLOAD_BYTES = {
    "users": 5 * MB,
    "communities": 5 * MB,
    "products": 5 * MB,
    "blogs": 8 * MB,
}
MAX_PRODUCT_IMAGES = 5


def has_file(upload: Optional[UploadFile]) -> bool:
    """Multipart clients send empty parts for untouched file inputs"""
    return upload is not None and bool(upload.filename)


async def read_image(upload: UploadFile, kind: str) -> bytes:
    """
    Read an uploaded image, enforcing type and size

    Raises:
        HTTPException 400: not an image, or larger than the kind's limit
    """
    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only image files are allowed")

    limit = MAX_UPLOAD_BYTES[kind]
    data = await upload.read(limit + 1)
    if len(data) > limit:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File too large. Maximum size is {limit // MB}MB"
        )
    return data


async def save_image(upload: UploadFile, kind: str) -> str:
    """Validate and store one image, returning its public URL"""
    data = await read_image(upload, kind)
    provider = get_storage_provider()
    key = provider.put(provider.generate_key(kind, upload.filename), data, upload.content_type)
    logger.info(f"Stored {kind} upload {key}")
    return provider.get_url(key)


async def save_images(uploads: Optional[List[UploadFile]], kind: str, max_files: int) -> List[str]:
    """Validate every image before storing any of them"""
    files = [upload for upload in (uploads or []) if has_file(upload)]
    if len(files) > max_files:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"You can upload at most {max_files} images"
        )

    payloads = [(upload, await read_image(upload, kind)) for upload in files]

    provider = get_storage_provider()
    urls = []
    for upload, data in payloads:
        key = provider.put(provider.generate_key(kind, upload.filename), data, upload.content_type)
        urls.append(provider.get_url(key))
    return urls
