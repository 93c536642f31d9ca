import io
from PIL import Image, UnidentifiedImageError
from proxy_engine.models.proxy_model import CompressionOutcome

MIN_COMPRESS_LENGTH = 1024
MIN_TRANSPARENT_COMPRESS_LENGTH = MIN_COMPRESS_LENGTH * 100


class CompressionError(Exception):
    """Raised when an image cannot be decoded or re-encoded."""


def should_compress(
    content_type: str,
    size: int,
    use_webp: bool,
    min_length: int = MIN_COMPRESS_LENGTH,
    min_transparent_length: int = MIN_TRANSPARENT_COMPRESS_LENGTH,
) -> bool:
    """
    Decides whether recompressing is worth it.
    Tiny images are not, and a small png/gif usually grows when turned into jpeg.
    """
    if not content_type.startswith("image"):
        return False
    if size == 0:
        return False
    if use_webp and size < min_length:
        return False
    if (
        not use_webp
        and (content_type.endswith("png") or content_type.endswith("gif"))
        and size < min_transparent_length
    ):
        return False
    return True


def _prepare(image: Image.Image, use_webp: bool, grayscale: bool) -> Image.Image:
    has_alpha = image.mode in ("RGBA", "LA", "PA") or (
        image.mode == "P" and "transparency" in image.info
    )
    if grayscale:
        # jpeg has no alpha channel
        return image.convert("LA" if use_webp and has_alpha else "L")
    if use_webp:
        return image.convert("RGBA" if has_alpha else "RGB")
    return image.convert("RGB")


def compress(data: bytes, use_webp: bool, grayscale: bool, quality: int, original_size: int) -> CompressionOutcome:
    """
    Re-encodes an image as webp or progressive jpeg.
    Only the first frame of animated images is kept.
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.seek(0)
            prepared = _prepare(image, use_webp, grayscale)
            buffer = io.BytesIO()
            if use_webp:
                prepared.save(buffer, format="WEBP", quality=quality)
            else:
                prepared.save(buffer, format="JPEG", quality=quality, optimize=True, progressive=True)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise CompressionError(f"Unable to compress image: {e}") from e

    output = buffer.getvalue()
    headers = {
        "content-type": "image/webp" if use_webp else "image/jpeg",
        "content-length": str(len(output)),
        "x-original-size": str(original_size),
        "x-bytes-saved": str(original_size - len(output)),
    }
    return CompressionOutcome(output=output, headers=headers)
