from abc import ABC, abstractmethod

import numpy as np
from logcam.orchestrator.contracts import VideoRequest


class CameraAdapter(ABC):
    @abstractmethod
    def open(self, request: VideoRequest) -> tuple[int, int]:
        """Acquire the device. Returns the negotiated (width, height).

        Raises PermissionDenied or DeviceUnavailable.
        """
        ...

    @abstractmethod
    def read_frame(self) -> np.ndarray | None:
        """Current frame (gray, BGR or BGRA), or None if there is none."""
        ...

    @abstractmethod
    def release(self):
        ...

    @property
    @abstractmethod
    def is_active(self) -> bool:
        ...
