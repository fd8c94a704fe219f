"""
Inline image ingestion for products.

Images arrive as data URIs (``data:image/png;base64,...``). They are decoded,
split into chunks of IMAGE_UPLOAD_CHUNK_SIZE and sent to the media host one
chunk at a time, with the uploads of a chunk running concurrently. A chunk
that already went up is not rolled back if a later one fails.
"""

import asyncio
import base64
import binascii
import logging
import re
from typing import Iterable, Iterator, Sequence, TypeVar, Union

from ..constants import IMAGE_UPLOAD_CHUNK_SIZE
from ..utils.media_storage import MediaStorageError, StoredImage

logger = logging.getLogger(__name__)

DATA_URI_PATTERN = re.compile(r"^data:(image/\w+);base64,(.+)$", re.DOTALL)

T = TypeVar("T")


class InvalidImageError(ValueError):
    """Raised when an image payload is not a base64 image data URI"""


def normalize_image_payloads(images: Union[str, Sequence[str], None]) -> list[str]:
    """A single image may be sent as a bare string instead of a list"""
    if not images:
        return []
    if isinstance(images, str):
        return [images]
    return list(images)


def parse_data_uri(payload: str) -> tuple[str, bytes]:
    """Return (mime_type, raw bytes) for an image data URI"""
    if not isinstance(payload, str):
        raise InvalidImageError("Invalid image file")

    match = DATA_URI_PATTERN.match(payload)
    if not match:
        raise InvalidImageError("Invalid image file")

    mime_type, data = match.groups()
    try:
        content = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageError("Invalid image file") from e

    return mime_type, content


def validate_image_payloads(payloads: Sequence[str]) -> None:
    """Decode every payload once so a bad one is rejected before any remote call"""
    for payload in payloads:
        parse_data_uri(payload)


def chunked(items: Sequence[T], size: int = IMAGE_UPLOAD_CHUNK_SIZE) -> Iterator[list[T]]:
    if size < 1:
        raise ValueError("Chunk size must be positive")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


async def upload_images(payloads: Sequence[str], folder: str, storage) -> list[StoredImage]:
    """
    Upload data-URI images and return their remote references in input order.

    Args:
        payloads: Data URIs, one per image
        folder: Folder tag on the media host
        storage: Object with a blocking ``upload(content, content_type, folder)``

    Raises:
        InvalidImageError: A payload in the current chunk is malformed
        MediaStorageError: Any upload in the current chunk failed
    """
    uploaded: list[StoredImage] = []

    for index, chunk in enumerate(chunked(payloads)):
        decoded = [parse_data_uri(payload) for payload in chunk]

        results = await asyncio.gather(
            *(
                asyncio.to_thread(storage.upload, content, mime_type, folder)
                for mime_type, content in decoded
            ),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            logger.error(
                f"❌ Image chunk {index + 1} failed ({len(failures)}/{len(chunk)} uploads), "
                f"{len(uploaded)} images already uploaded"
            )
            first = failures[0]
            if isinstance(first, MediaStorageError):
                raise first
            raise MediaStorageError(f"Upload failed: {first}") from first

        uploaded.extend(results)
        logger.info(f"📤 Uploaded image chunk {index + 1} ({len(chunk)} images) to {folder}")

    return uploaded


async def delete_images(refs: Iterable[dict], storage) -> None:
    """Delete stored images one at a time; the first failure stops the rest"""
    for ref in refs:
        remote_id = ref.get("remote_id") if isinstance(ref, dict) else ref.remote_id
        if not remote_id:
            continue
        try:
            await asyncio.to_thread(storage.delete, remote_id)
        except MediaStorageError:
            raise
        except Exception as e:
            raise MediaStorageError(f"Delete failed: {e}") from e
