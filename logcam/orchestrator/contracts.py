from dataclasses import dataclass, field
from typing import Optional, Literal

import numpy as np

CaptureMode = Literal["png", "log", "raw"]

TARGET_WIDTH = 3840
TARGET_HEIGHT = 2160
RAW_FORMAT = "RGBA8"


@dataclass(frozen=True)
class VideoRequest:
    ideal_width: int = TARGET_WIDTH
    ideal_height: int = TARGET_HEIGHT
    ideal_frame_rate: int = 30
    facing_mode: str = "environment"


@dataclass
class PixelBuffer:
    """RGBA8 raster, shape (height, width, 4), row-major, top-left origin."""
    pixels: np.ndarray

    def __post_init__(self):
        if self.pixels.dtype != np.uint8 or self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError(f"PixelBuffer needs (H, W, 4) uint8, got {self.pixels.shape} {self.pixels.dtype}")

    @classmethod
    def blank(cls, width: int = TARGET_WIDTH, height: int = TARGET_HEIGHT) -> "PixelBuffer":
        return cls(np.zeros((height, width, 4), dtype=np.uint8))

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def nbytes(self) -> int:
        return self.pixels.nbytes

    def tobytes(self) -> bytes:
        return self.pixels.tobytes()


@dataclass(frozen=True)
class RawMeta:
    width: int
    height: int
    timestamp: int             # ms since epoch
    format: str = RAW_FORMAT


@dataclass
class EncodedImage:
    data: bytes
    filename: str              # capture_<ts>.png | capture_log_<ts>.png


@dataclass
class RawPayload:
    meta: RawMeta
    data: bytes
    filename: str              # capture_<ts>.rgba


@dataclass
class UploadResult:
    ok: bool
    status_code: int
    message: str
    body: dict = field(default_factory=dict)


@dataclass
class CaptureResult:
    ok: bool
    mode: CaptureMode
    duration_ms: int
    error_code: Optional[str] = None
    message: Optional[str] = None
    filename: Optional[str] = None
    http_status: Optional[int] = None


@dataclass
class StartResult:
    ok: bool
    duration_ms: int
    width: Optional[int] = None        # negotiated, may differ from the request
    height: Optional[int] = None
    error_code: Optional[str] = None
    message: Optional[str] = None
