from __future__ import annotations

import asyncio
import base64
import logging
import mimetypes
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from labvisit.application.exceptions import DecodeFailure, SizeExceeded
from labvisit.application.ports.attachment_compressor import AttachmentCompressorPort
from labvisit.core.config import settings
from labvisit.domain.entities.booking_draft import Attachment
from labvisit.domain.entities.submission import CompressionResult

JPEG_MEDIA_TYPE = "image/jpeg"


def resolve_media_type(attachment: Attachment) -> str:
    if attachment.media_type:
        return attachment.media_type.lower()
    guessed, _ = mimetypes.guess_type(attachment.filename)
    return guessed or "application/octet-stream"


def to_data_uri(media_type: str, raw: bytes) -> str:
    return f"data:{media_type};base64,{base64.b64encode(raw).decode('ascii')}"


def estimate_transport_size(data_uri: str) -> int:
    """Approximate decoded byte size of a base64 data URI (3 bytes per 4 characters)."""
    return round(len(data_uri) * 3 / 4)


def target_dimensions(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """Scale so the longer side is at most `max_dimension`, keeping aspect ratio. Never upscales."""
    if width > height:
        if width > max_dimension:
            height = height * max_dimension / width
            width = max_dimension
    elif height > max_dimension:
        width = width * max_dimension / height
        height = max_dimension
    return max(1, int(width)), max(1, int(height))


class PillowAttachmentCompressor(AttachmentCompressorPort):
    def __init__(
        self,
        max_bytes: int | None = None,
        max_dimension: int | None = None,
        primary_quality: int | None = None,
        fallback_quality: int | None = None,
    ) -> None:
        self._max_bytes = max_bytes or settings.ATTACHMENT_MAX_BYTES
        self._max_dimension = max_dimension or settings.ATTACHMENT_MAX_DIMENSION
        self._primary_quality = primary_quality or settings.ATTACHMENT_PRIMARY_QUALITY
        self._fallback_quality = fallback_quality or settings.ATTACHMENT_FALLBACK_QUALITY
        self._logger = logging.getLogger(__name__)

    async def compress(self, attachment: Attachment) -> CompressionResult:
        return await asyncio.to_thread(self.compress_sync, attachment)

    def compress_sync(self, attachment: Attachment) -> CompressionResult:
        media_type = resolve_media_type(attachment)
        if not media_type.startswith("image/"):
            return self._pass_through(attachment, media_type)

        try:
            with Image.open(BytesIO(attachment.content)) as image:
                image.load()
                surface = self._draw(image)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            self._logger.warning(
                "Attachment decode failed",
                extra={"attachment": attachment.filename, "reason": str(e)},
            )
            raise DecodeFailure(f"Failed to load image for compression: {attachment.filename}") from e

        data_uri = self._encode(surface, self._primary_quality)
        size = estimate_transport_size(data_uri)
        quality = self._primary_quality
        if size > self._max_bytes:
            # Single harsher pass; the result is returned even if still over budget.
            data_uri = self._encode(surface, self._fallback_quality)
            size = estimate_transport_size(data_uri)
            quality = self._fallback_quality

        self._logger.info(
            "Attachment compressed",
            extra={
                "attachment": attachment.filename,
                "original_bytes": attachment.size_bytes,
                "estimated_bytes": size,
                "quality": quality,
            },
        )
        return CompressionResult(
            encoded_payload=data_uri,
            estimated_size_bytes=size,
            media_type=JPEG_MEDIA_TYPE,
            width=surface.width,
            height=surface.height,
            quality=quality,
        )

    def _pass_through(self, attachment: Attachment, media_type: str) -> CompressionResult:
        if attachment.size_bytes > self._max_bytes:
            self._logger.warning(
                "Attachment over size limit",
                extra={"attachment": attachment.filename, "original_bytes": attachment.size_bytes},
            )
            limit_mb = self._max_bytes / (1024 * 1024)
            raise SizeExceeded(f"File size exceeds {limit_mb:g}MB limit")
        data_uri = to_data_uri(media_type, attachment.content)
        return CompressionResult(
            encoded_payload=data_uri,
            estimated_size_bytes=estimate_transport_size(data_uri),
            media_type=media_type,
        )

    def _draw(self, image: Image.Image) -> Image.Image:
        width, height = target_dimensions(image.width, image.height, self._max_dimension)
        rgba = image.convert("RGBA")
        if rgba.size != (width, height):
            rgba = rgba.resize((width, height), Image.Resampling.LANCZOS)
        surface = Image.new("RGB", (width, height), (255, 255, 255))
        surface.paste(rgba, mask=rgba.getchannel("A"))
        return surface

    def _encode(self, surface: Image.Image, quality: int) -> str:
        buffer = BytesIO()
        surface.save(buffer, format="JPEG", quality=quality)
        return to_data_uri(JPEG_MEDIA_TYPE, buffer.getvalue())
