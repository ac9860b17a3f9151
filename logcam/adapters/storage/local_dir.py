"""
Artifact sink: writes produced bytes under OUTPUT_DIR (default ./captures).

Filenames follow the capture patterns:
  capture_<ts>.png  capture_log_<ts>.png  capture_<ts>.rgba
"""
import os
from pathlib import Path


class LocalDirSink:
    def __init__(self, status_store, out_dir: str | os.PathLike | None = None):
        self.status = status_store
        self.out_dir = Path(out_dir or os.getenv("OUTPUT_DIR", "captures"))

    def save(self, filename: str, data: bytes) -> Path:
        self.out_dir.mkdir(parents=True, exist_ok=True)
        path = self.out_dir / filename
        tmp = path.with_suffix(path.suffix + ".part")
        tmp.write_bytes(data)
        tmp.replace(path)
        self.status.log(f"sink: wrote {path} ({len(data)} bytes)")
        return path

    def writable(self) -> bool:
        try:
            self.out_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            return False
        return os.access(self.out_dir, os.W_OK)
