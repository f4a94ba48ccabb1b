"""Drive a video through downsample, glyph mapping, rasterization and encode."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Tuple

import numpy as np

from .config import DEFAULT_COLUMNS, DEFAULT_CONFIG, RenderConfig
from .downsample import GridSize, downsample, grid_size
from .glyphs import AsciiGrid, describe_ramp, map_frame
from .raster import make_rasterizer
from .sink import VideoSink
from .source import VideoSource

logger = logging.getLogger(__name__)

FALLBACK_FPS = 30.0
SAMPLE_COLUMNS = 3
SAMPLE_ROWS = 2

SourceOpener = Callable[[str], VideoSource]
SinkOpener = Callable[[str, Tuple[str, ...], float, Tuple[int, int]], VideoSink]
SampleHook = Callable[[AsciiGrid], None]
ProgressHook = Callable[[int, int, float], None]


class PipelineState(enum.Enum):
    IDLE = "idle"
    SOURCE_OPENED = "source_opened"
    GRID_COMPUTED = "grid_computed"
    SINK_OPENED = "sink_opened"
    STREAMING = "streaming"
    FINISHED = "finished"
    FAILED = "failed"


@dataclass
class PipelineStats:
    frames_processed: int = 0
    total_frames: int = 0
    grid: Optional[GridSize] = None
    output_size: Optional[Tuple[int, int]] = None
    codec: Optional[str] = None
    fps: float = 0.0


def progress_percent(frames_processed: int, total_frames: int) -> float:
    if total_frames <= 0:
        return 0.0
    return frames_processed * 100.0 / total_frames


def log_sample_cells(grid: AsciiGrid) -> None:
    """Log brightness and glyph of the top-left cells of the first frame."""
    for y in range(min(SAMPLE_ROWS, grid.height)):
        for x in range(min(SAMPLE_COLUMNS, grid.width)):
            logger.info("Cell (%d,%d): brightness=%.3f, glyph=%r",
                        x, y, float(grid.brightness[y, x]), grid.glyph_at(x, y))


def log_ramp(config: RenderConfig) -> None:
    ramp = config.ramp
    logger.info("Ramp '%s': %d glyphs", ramp.name, len(ramp))
    logger.debug("Glyph brightness map: %s",
                 " | ".join(f"{glyph!r} -> {level:.2f}" for glyph, level in describe_ramp(ramp)))


class PipelineDriver:
    """Runs one conversion at a time and owns the source and sink while it does."""

    def __init__(
        self,
        config: RenderConfig = DEFAULT_CONFIG,
        *,
        open_source: SourceOpener = VideoSource.open,
        open_sink: SinkOpener = VideoSink.open,
        on_first_frame: Optional[SampleHook] = log_sample_cells,
        on_progress: Optional[ProgressHook] = None,
    ):
        self.config = config
        self.open_source = open_source
        self.open_sink = open_sink
        self.on_first_frame = on_first_frame
        self.on_progress = on_progress
        self.state = PipelineState.IDLE

    def run(self, input_path: str | Path, output_path: str | Path,
            columns: int = DEFAULT_COLUMNS) -> PipelineStats:
        self.state = PipelineState.IDLE
        stats = PipelineStats()
        source: Optional[VideoSource] = None
        sink: Optional[VideoSink] = None
        try:
            source = self.open_source(str(input_path))
            self.state = PipelineState.SOURCE_OPENED
            stats.total_frames = source.frame_count
            logger.info("Video info: %dx%d, %.2f fps, %d frames",
                        source.width, source.height, source.fps, source.frame_count)

            grid = grid_size(source.width, source.height, columns)
            stats.grid = grid
            stats.output_size = self.config.output_size(grid.columns, grid.rows)
            self.state = PipelineState.GRID_COMPUTED
            logger.info("Output size: %dx%d", *stats.output_size)
            logger.info("ASCII grid: %dx%d characters", grid.columns, grid.rows)
            log_ramp(self.config)

            stats.fps = source.fps
            if stats.fps <= 0:
                logger.warning("Input reports no frame rate, writing at %.1f fps", FALLBACK_FPS)
                stats.fps = FALLBACK_FPS

            sink = self.open_sink(str(output_path), self.config.codecs, stats.fps, stats.output_size)
            stats.codec = sink.codec
            self.state = PipelineState.SINK_OPENED

            self.state = PipelineState.STREAMING
            self._stream(source, sink, grid, stats)

            source.release()
            sink.release()
            self.state = PipelineState.FINISHED
        except BaseException:
            self.state = PipelineState.FAILED
            if source is not None:
                source.release()
            if sink is not None:
                sink.discard()
            raise

        logger.info("Conversion finished: %d frames written to %s", stats.frames_processed, output_path)
        return stats

    def _stream(self, source: VideoSource, sink: VideoSink, grid: GridSize, stats: PipelineStats) -> None:
        draw = make_rasterizer(self.config)
        interval = self.config.progress_interval

        for frame in source.frames():
            ascii_grid = self.render_grid(frame, grid)
            sink.write(draw(ascii_grid))
            stats.frames_processed += 1

            if stats.frames_processed == 1 and self.on_first_frame is not None:
                self.on_first_frame(ascii_grid)

            if stats.frames_processed % interval == 0:
                percent = progress_percent(stats.frames_processed, stats.total_frames)
                logger.info("Progress: %d/%d frames (%.1f%%)",
                            stats.frames_processed, stats.total_frames, percent)
                if self.on_progress is not None:
                    self.on_progress(stats.frames_processed, stats.total_frames, percent)

    def render_grid(self, frame: np.ndarray, grid: GridSize) -> AsciiGrid:
        resized = downsample(frame, grid.columns, grid.rows)
        return map_frame(resized, self.config.ramp, self.config.luma_weights)


def convert(
    input_path: str | Path,
    output_path: str | Path,
    columns: int = DEFAULT_COLUMNS,
    config: RenderConfig = DEFAULT_CONFIG,
) -> PipelineStats:
    return PipelineDriver(config).run(input_path, output_path, columns)
