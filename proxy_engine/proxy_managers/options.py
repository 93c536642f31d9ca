import re
from typing import Mapping, Optional
from proxy_engine.models.proxy_model import CompressionOptions, OptionStrategy
from proxy_engine.utils import first_value

BW_HEADER = "x-image-lite-bw"
LEVEL_HEADER = "x-image-lite-level"
JPEG_HEADER = "x-image-lite-jpeg"

DEFAULT_QUALITY = 40

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_quality(raw: Optional[str], default: int = DEFAULT_QUALITY) -> int:
    """
    Reads a quality level the lenient way browsers' parseInt does:
    leading digits count, garbage and zero fall back to the default.
    """
    if raw is None:
        return default
    match = _LEADING_INT.match(str(raw))
    if not match:
        return default
    quality = int(match.group(1))
    if quality == 0:
        return default
    return max(1, min(100, quality))


def options_from_headers(headers: Mapping[str, str], default_quality: int = DEFAULT_QUALITY) -> CompressionOptions:
    bw = headers.get(BW_HEADER)
    level = headers.get(LEVEL_HEADER)
    jpeg = headers.get(JPEG_HEADER)

    # All three must be present, otherwise the client gets the defaults
    if not (bw and level and jpeg):
        return CompressionOptions(quality=default_quality)

    return CompressionOptions(
        use_webp=jpeg == "0",
        grayscale=bw != "0",
        quality=parse_quality(level, default_quality),
    )


def options_from_query(query_params: Mapping, default_quality: int = DEFAULT_QUALITY) -> CompressionOptions:
    jpeg = first_value(query_params.get("jpeg"))
    bw = first_value(query_params.get("bw"))
    level = first_value(query_params.get("l"))

    return CompressionOptions(
        use_webp=jpeg is None or jpeg == "0",
        grayscale=bw != "0",
        quality=parse_quality(level, default_quality),
    )


def resolve_options(
    strategy: OptionStrategy,
    headers: Mapping[str, str],
    query_params: Mapping,
    default_quality: int = DEFAULT_QUALITY,
) -> CompressionOptions:
    if strategy == OptionStrategy.QUERY:
        return options_from_query(query_params, default_quality)
    return options_from_headers(headers, default_quality)
