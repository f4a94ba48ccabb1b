"""Read frames and metadata from a video container."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Iterator, Tuple

import cv2  # type: ignore
import numpy as np

from .errors import OpenError

logger = logging.getLogger(__name__)

CaptureFactory = Callable[[str], Any]


class VideoSource:
    """A single pass over the frames of a video file.

    Geometry and frame rate are read once when the source is opened. Frames
    come out of :meth:`frames` lazily and in decode order; the sequence ends
    when the stream is exhausted and cannot be restarted.
    """

    def __init__(self, capture: Any, path: str):
        self._capture = capture
        self.path = path
        self.fps = float(capture.get(cv2.CAP_PROP_FPS) or 0.0)
        self.frame_count = max(0, int(capture.get(cv2.CAP_PROP_FRAME_COUNT) or 0))
        self.width = int(capture.get(cv2.CAP_PROP_FRAME_WIDTH) or 0)
        self.height = int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT) or 0)
        self._consumed = False
        self._released = False

    @classmethod
    def open(
        cls,
        path: str | Path,
        capture_factory: CaptureFactory = cv2.VideoCapture,
    ) -> VideoSource:
        path = str(path)
        if not Path(path).exists():
            raise OpenError(f"Video path '{path}' does not exist.")

        capture = capture_factory(path)
        if not capture.isOpened():
            capture.release()
            raise OpenError(f"Unable to open video file '{path}'.")

        source = cls(capture, path)
        if source.width <= 0 or source.height <= 0:
            source.release()
            raise OpenError(f"Video file '{path}' reports no frame geometry.")

        logger.debug("Opened %s (%dx%d, %.2f fps, %d frames)",
                     path, source.width, source.height, source.fps, source.frame_count)
        return source

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def frames(self) -> Iterator[np.ndarray]:
        if self._consumed:
            raise RuntimeError("Frames were already read; open a new source to read again.")
        self._consumed = True
        return self._read_frames()

    def _read_frames(self) -> Iterator[np.ndarray]:
        while not self._released:
            success, frame = self._capture.read()
            if not success or frame is None:
                break
            yield frame

    def release(self) -> None:
        if not self._released:
            self._released = True
            self._capture.release()

    def __enter__(self) -> VideoSource:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()
