import io
import httpx
from PIL import Image
from proxy_engine.models.proxy_model import CompressionOutcome


def make_image_bytes(fmt="PNG", size=(64, 64), mode="RGB", color=(200, 30, 30)):
    image = Image.new(mode, size, color)
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


def make_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class RecordingCompressor:
    """Stands in for Pillow and remembers how it was called."""

    def __init__(self, output=b"w" * 500, headers=None, error=None):
        self.output = output
        self.headers = headers if headers is not None else {"content-type": "image/webp"}
        self.error = error
        self.calls = []

    def __call__(self, data, use_webp, grayscale, quality, original_size):
        self.calls.append((data, use_webp, grayscale, quality, original_size))
        if self.error:
            raise self.error
        return CompressionOutcome(output=self.output, headers=self.headers)
