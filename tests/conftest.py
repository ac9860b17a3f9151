"""Shared fixtures for logcam tests.

The API module builds its adapters from the environment at import time, so
mock adapters are forced here before any test imports it.
"""

import os

os.environ["CAMERA_ADAPTER"] = "mock"
os.environ["UPLOAD_ADAPTER"] = "mock"

import numpy as np
import pytest

from logcam.adapters.camera.mock_camera import MockCamera
from logcam.adapters.storage.local_dir import LocalDirSink
from logcam.adapters.upload.mock_upload import MockUpload
from logcam.orchestrator.contracts import PixelBuffer
from logcam.orchestrator.session import CaptureSession
from logcam.services.status_store import StatusStore

FIXED_TS = 1700000000000


@pytest.fixture
def status() -> StatusStore:
    return StatusStore()


@pytest.fixture
def camera(status: StatusStore) -> MockCamera:
    return MockCamera(status, width=640, height=360)


@pytest.fixture
def uploader(status: StatusStore) -> MockUpload:
    return MockUpload(status)


@pytest.fixture
def sink(status: StatusStore, tmp_path) -> LocalDirSink:
    return LocalDirSink(status, out_dir=tmp_path / "captures")


@pytest.fixture
def session(camera, uploader, sink, status) -> CaptureSession:
    return CaptureSession(camera, uploader, sink, status, clock=lambda: FIXED_TS)


@pytest.fixture
def random_buffer() -> PixelBuffer:
    """Small RGBA buffer with every channel, alpha included, randomized."""
    rng = np.random.default_rng(7)
    return PixelBuffer(rng.integers(0, 256, size=(48, 64, 4), dtype=np.uint8))
