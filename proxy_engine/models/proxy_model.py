# proxy_engine/models/proxy_model.py
from enum import Enum
from typing import Dict, List, Optional, Union
from pydantic import BaseModel, Field


HeaderValue = Union[str, List[str]]


class OptionStrategy(str, Enum):
    """Where the compression options are read from."""
    HEADER = "header"
    QUERY = "query"


class CompressionOptions(BaseModel):
    use_webp: bool = False
    grayscale: bool = True
    quality: int = Field(40, ge=1, le=100, description="Encoder quality, 1-100.")


class RequestContext(BaseModel):
    """Everything the pipeline needs to know about one inbound request."""
    url: str
    forwarded_headers: Dict[str, str] = Field(default_factory=dict)
    options: CompressionOptions = Field(default_factory=CompressionOptions)
    host: Optional[str] = Field(None, description="The proxy's own host, used to patch CSP headers.")


class FetchedResource(BaseModel):
    status_code: int
    data: bytes = b""
    content_type: str = ""
    headers: Dict[str, HeaderValue] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def size(self) -> int:
        return len(self.data)


class CompressionOutcome(BaseModel):
    output: bytes
    headers: Dict[str, str] = Field(default_factory=dict)


class FinalResponse(BaseModel):
    """
    What an adapter serializes for its host.
    `binary` marks an image body; text bodies (the identifying body and error
    messages) are sent as-is.
    """
    status_code: int
    body: bytes = b""
    headers: Dict[str, str] = Field(default_factory=dict)
    binary: bool = False

    @classmethod
    def text(cls, status_code: int, body: str) -> "FinalResponse":
        return cls(status_code=status_code, body=body.encode("utf-8"))

    @classmethod
    def failure(cls, error: BaseException) -> "FinalResponse":
        return cls.text(500, str(error) or "")
