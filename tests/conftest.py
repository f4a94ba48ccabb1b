from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

import cv2  # type: ignore
import numpy as np
import pytest

from ascii_video.sink import VideoSink
from ascii_video.source import VideoSource


class FakeCapture:
    def __init__(self, frames: Sequence[np.ndarray], fps: float = 25.0, opened: bool = True,
                 frame_count: int | None = None):
        self._frames = list(frames)
        height, width = self._frames[0].shape[:2] if self._frames else (0, 0)
        self.props = {
            cv2.CAP_PROP_FPS: fps,
            cv2.CAP_PROP_FRAME_COUNT: len(self._frames) if frame_count is None else frame_count,
            cv2.CAP_PROP_FRAME_WIDTH: width,
            cv2.CAP_PROP_FRAME_HEIGHT: height,
        }
        self.opened = opened
        self.released = False
        self.reads = 0

    def isOpened(self) -> bool:
        return self.opened

    def get(self, prop: int) -> float:
        return self.props.get(prop, 0)

    def read(self):
        if self.reads >= len(self._frames):
            return False, None
        frame = self._frames[self.reads]
        self.reads += 1
        return True, frame

    def release(self) -> None:
        self.released = True


class FakeWriter:
    def __init__(self, path: str, fourcc: int, fps: float, size, accept: Sequence[str]):
        self.path = path
        self.fourcc = fourcc
        self.fps = fps
        self.size = size
        self.frames: List[np.ndarray] = []
        self.released = False
        self.opened = any(fourcc == cv2.VideoWriter_fourcc(*codec) for codec in accept)
        # Real writers leave a file behind even when the codec is rejected.
        Path(path).touch()

    def isOpened(self) -> bool:
        return self.opened

    def write(self, frame: np.ndarray) -> None:
        self.frames.append(frame)

    def release(self) -> None:
        self.released = True


class WriterFactory:
    def __init__(self, accept: Sequence[str]):
        self.accept = accept
        self.writers: List[FakeWriter] = []

    def __call__(self, path, fourcc, fps, size):
        writer = FakeWriter(path, fourcc, fps, size, self.accept)
        self.writers.append(writer)
        return writer

    @property
    def opened(self) -> FakeWriter:
        return next(writer for writer in self.writers if writer.opened)


def solid_frame(width: int, height: int, bgr=(0, 0, 0)) -> np.ndarray:
    frame = np.zeros((height, width, 3), dtype=np.uint8)
    frame[:] = bgr
    return frame


def gradient_frame(width: int, height: int) -> np.ndarray:
    ramp = np.linspace(0, 255, width, dtype=np.uint8)
    frame = np.repeat(ramp[np.newaxis, :, np.newaxis], height, axis=0)
    return np.repeat(frame, 3, axis=2)


@pytest.fixture
def input_file(tmp_path: Path) -> Path:
    path = tmp_path / "input.mp4"
    path.write_bytes(b"")
    return path


@pytest.fixture
def make_source():
    def factory(frames: Sequence[np.ndarray], **kwargs):
        captures: List[FakeCapture] = []

        def open_source(path: str) -> VideoSource:
            capture = FakeCapture(frames, **kwargs)
            captures.append(capture)
            return VideoSource(capture, path)

        open_source.captures = captures  # type: ignore[attr-defined]
        return open_source

    return factory


@pytest.fixture
def make_sink():
    def factory(accept: Sequence[str] = ("mp4v",)):
        writers = WriterFactory(accept)

        def open_sink(path, codecs, fps, frame_size) -> VideoSink:
            return VideoSink.open(path, codecs, fps, frame_size, writer_factory=writers)

        open_sink.writers = writers  # type: ignore[attr-defined]
        return open_sink

    return factory
