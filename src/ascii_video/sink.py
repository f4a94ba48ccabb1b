"""Encode rendered frames into an output video, negotiating the codec."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Generic, Iterable, Optional, Tuple, TypeVar, Union

import cv2  # type: ignore
import numpy as np

from .errors import EncodeError

logger = logging.getLogger(__name__)

C = TypeVar("C")
T = TypeVar("T")

WriterFactory = Callable[[str, int, float, Tuple[int, int]], Any]


@dataclass(frozen=True)
class Opened(Generic[C, T]):
    candidate: C
    value: T


@dataclass(frozen=True)
class Exhausted(Generic[C]):
    tried: Tuple[C, ...]


def first_success(
    candidates: Iterable[C],
    attempt: Callable[[C], Optional[T]],
) -> Union[Opened[C, T], Exhausted[C]]:
    """Return the first candidate for which ``attempt`` yields a value."""
    tried = []
    for candidate in candidates:
        tried.append(candidate)
        value = attempt(candidate)
        if value is not None:
            return Opened(candidate, value)
    return Exhausted(tuple(tried))


def fourcc(codec: str) -> int:
    return cv2.VideoWriter_fourcc(*codec)


class VideoSink:
    """Append-only writer for frames of one fixed size."""

    def __init__(self, writer: Any, path: str, codec: str, fps: float, frame_size: Tuple[int, int]):
        self._writer = writer
        self.path = path
        self.codec = codec
        self.fps = fps
        self.frame_size = frame_size
        self.frames_written = 0
        self._released = False

    @classmethod
    def open(
        cls,
        path: str | Path,
        codecs: Iterable[str],
        fps: float,
        frame_size: Tuple[int, int],
        writer_factory: WriterFactory = cv2.VideoWriter,
    ) -> VideoSink:
        path = str(path)
        codecs = tuple(codecs)
        try:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.warning("Cannot create output directory for %s: %s", path, exc)
            raise EncodeError(path, codecs) from exc

        def try_codec(codec: str) -> Any:
            writer = writer_factory(path, fourcc(codec), fps, frame_size)
            if writer.isOpened():
                return writer
            writer.release()
            logger.warning("Codec %s unavailable for %s, trying next candidate", codec, path)
            return None

        result = first_success(codecs, try_codec)
        if isinstance(result, Exhausted):
            _remove(path)
            raise EncodeError(path, tuple(result.tried))

        logger.info("Writing %s with codec %s", path, result.candidate)
        return cls(result.value, path, result.candidate, fps, frame_size)

    def write(self, frame: np.ndarray) -> None:
        if self._released:
            raise RuntimeError(f"Sink for '{self.path}' is already released.")
        height, width = frame.shape[:2]
        if (width, height) != self.frame_size:
            raise ValueError(
                f"Frame size {width}x{height} does not match output size "
                f"{self.frame_size[0]}x{self.frame_size[1]}."
            )
        self._writer.write(frame)
        self.frames_written += 1

    def release(self) -> None:
        if not self._released:
            self._released = True
            self._writer.release()

    def discard(self) -> None:
        """Release the writer and delete whatever was written so far."""
        self.release()
        _remove(self.path)

    def __enter__(self) -> VideoSink:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


def _remove(path: str) -> None:
    target = Path(path)
    if target.is_file():
        target.unlink()
        logger.debug("Removed incomplete output %s", path)
