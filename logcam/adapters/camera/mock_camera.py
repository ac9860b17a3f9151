"""Mock camera: serves a synthetic BGR test pattern at a fixed native size."""
import numpy as np
from logcam.adapters.camera.base import CameraAdapter
from logcam.orchestrator.contracts import VideoRequest
from logcam.orchestrator.errors import DeviceUnavailable


def synthetic_frame(width: int, height: int) -> np.ndarray:
    """Horizontal blue ramp, vertical green ramp, constant red."""
    xs = np.linspace(0, 255, width, dtype=np.float32)
    ys = np.linspace(0, 255, height, dtype=np.float32)
    frame = np.empty((height, width, 3), dtype=np.uint8)
    frame[..., 0] = xs[None, :].astype(np.uint8)
    frame[..., 1] = ys[:, None].astype(np.uint8)
    frame[..., 2] = 128
    return frame


class MockCamera(CameraAdapter):
    def __init__(self, status_store, width: int = 1920, height: int = 1080,
                 frame: np.ndarray | None = None, available: bool = True):
        self.status = status_store
        self.available = available
        self._frame = frame if frame is not None else synthetic_frame(width, height)
        self._active = False

    @property
    def is_active(self) -> bool:
        return self._active

    def open(self, request: VideoRequest) -> tuple[int, int]:
        if not self.available:
            self.status.log("mock_camera: device unavailable")
            raise DeviceUnavailable("mock camera disabled")
        self._active = True
        h, w = self._frame.shape[:2]
        self.status.log(f"mock_camera: open, requested {request.ideal_width}x{request.ideal_height} got {w}x{h}")
        return w, h

    def read_frame(self):
        if not self._active:
            return None
        return self._frame.copy()

    def release(self):
        if self._active:
            self.status.log("mock_camera: released")
        self._active = False
