"""
OpenCV webcam capture adapter.
CAMERA_INDEX env var (default 0) selects the webcam device.

The ideal width/height/fps of the VideoRequest are applied as capture
properties; the driver picks the closest mode it supports, so the negotiated
size is read back after opening. OpenCV has no notion of facing mode.
"""
import os
import sys
import cv2
from logcam.adapters.camera.base import CameraAdapter
from logcam.orchestrator.contracts import VideoRequest
from logcam.orchestrator.errors import DeviceUnavailable, PermissionDenied


class CV2Camera(CameraAdapter):
    def __init__(self, status_store, index: int | None = None):
        self.status = status_store
        self._index = index if index is not None else int(os.getenv("CAMERA_INDEX", "0"))
        self._cap = None

    @property
    def is_active(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    def _device_node(self) -> str | None:
        if not sys.platform.startswith("linux"):
            return None
        node = f"/dev/video{self._index}"
        return node if os.path.exists(node) else None

    def _check_permission(self):
        # V4L2 nodes exist but refuse to open without video group membership
        node = self._device_node()
        if node and not os.access(node, os.R_OK | os.W_OK):
            raise PermissionDenied(f"no access to {node}")

    def open(self, request: VideoRequest) -> tuple[int, int]:
        if self.is_active:
            self.release()
        self._check_permission()
        cap = cv2.VideoCapture(self._index)
        if not cap.isOpened():
            cap.release()
            self.status.log(f"cv2_camera: failed to open device {self._index}")
            raise DeviceUnavailable(f"cannot open camera {self._index}")

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, request.ideal_width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, request.ideal_height)
        cap.set(cv2.CAP_PROP_FPS, request.ideal_frame_rate)
        if request.facing_mode:
            self.status.log(f"cv2_camera: facing_mode={request.facing_mode} ignored")

        self._cap = cap
        w = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        h = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        self.status.log(
            f"cv2_camera: device {self._index} open, requested "
            f"{request.ideal_width}x{request.ideal_height}@{request.ideal_frame_rate} got {w}x{h}"
        )
        return w, h

    def read_frame(self):
        if not self.is_active:
            return None
        ret, frame = self._cap.read()
        if not ret or frame is None:
            self.status.log("cv2_camera: frame capture failed")
            return None
        return frame

    def release(self):
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            self.status.log(f"cv2_camera: device {self._index} released")
