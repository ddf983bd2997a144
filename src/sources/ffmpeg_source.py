"""
FFmpegFrameSource — raw RGB24 frames from ffmpeg over a pipe.

Pipeline:
  1. ffprobe reports width,height of the first video stream
  2. ffmpeg decodes, resamples to the target fps and writes rawvideo rgb24
     to stdout
  3. stdout is cut into width*height*3 byte chunks, one RasterImage each

A trailing chunk shorter than one frame (truncated stream) is dropped.
"""

from __future__ import annotations
import subprocess
import time
from typing import IO, Iterator, List, Optional, Tuple

from models.errors import DecodeError
from models.frame import RasterImage
from sources.source_interface import IFrameSource
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SOURCE)


def read_chunks(stream: IO[bytes], chunk_size: int) -> Iterator[bytes]:
    """Yield exact chunk_size blocks until the stream ends; a partial tail is discarded."""
    while True:
        buffer = bytearray()
        while len(buffer) < chunk_size:
            data = stream.read(chunk_size - len(buffer))
            if not data:
                break
            buffer.extend(data)

        if len(buffer) < chunk_size:
            if buffer:
                log.debug(f"Dropped partial trailing chunk ({len(buffer)}/{chunk_size} bytes)")
            return
        yield bytes(buffer)


class FFmpegFrameSource(IFrameSource):

    def __init__(self, ffmpeg: str = "ffmpeg", ffprobe: str = "ffprobe"):
        self.ffmpeg = ffmpeg
        self.ffprobe = ffprobe

    def probe_dimensions(self, source_path: str) -> Tuple[int, int]:
        """
        Width and height of the first video stream.

        Raises:
            DecodeError: ffprobe missing/failed or output not "W,H"
        """
        cmd = [
            self.ffprobe,
            "-v", "error",
            "-select_streams", "v:0",
            "-count_packets",
            "-show_entries", "stream=width,height",
            "-of", "csv=p=0",
            source_path,
        ]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=True)
        except FileNotFoundError as e:
            raise DecodeError(f"{self.ffprobe} not found", source=source_path) from e
        except subprocess.CalledProcessError as e:
            raise DecodeError(
                "ffprobe failed",
                source=source_path,
                stderr=(e.stderr or "").strip(),
            ) from e

        output = result.stdout.strip()
        try:
            width_s, height_s = output.split(",")[:2]
            width, height = int(width_s), int(height_s)
        except ValueError as e:
            raise DecodeError(
                "Could not determine video dimensions",
                source=source_path,
                output=output,
            ) from e

        if width <= 0 or height <= 0:
            raise DecodeError("Invalid video dimensions", source=source_path, output=output)

        log.info("Video dimensions", source=source_path, width=width, height=height)
        return width, height

    def _decode_command(self, source_path: str, duration_seconds: Optional[float], target_fps: int) -> List[str]:
        cmd = [self.ffmpeg, "-loglevel", "error", "-i", source_path]
        if duration_seconds is not None:
            cmd += ["-t", f"{duration_seconds:g}"]
        cmd += [
            "-r", str(target_fps),
            "-f", "image2pipe",
            "-pix_fmt", "rgb24",
            "-vcodec", "rawvideo",
            "-",
        ]
        return cmd

    def iter_frames(
        self,
        source_path: str,
        duration_seconds: Optional[float],
        target_fps: int,
    ) -> Iterator[RasterImage]:
        width, height = self.probe_dimensions(source_path)
        frame_size = width * height * 3
        cmd = self._decode_command(source_path, duration_seconds, target_fps)

        try:
            process = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        except FileNotFoundError as e:
            raise DecodeError(f"{self.ffmpeg} not found", source=source_path) from e

        drained = False
        try:
            for chunk in read_chunks(process.stdout, frame_size):
                yield RasterImage(width=width, height=height, data=chunk)
            drained = True
        finally:
            if not drained and process.poll() is None:
                # Consumer stopped early
                process.terminate()
            process.stdout.close()
            stderr = process.stderr.read().decode(errors="replace").strip() if process.stderr else ""
            returncode = process.wait()
            if drained and returncode != 0:
                log.warn("ffmpeg exited with an error", returncode=returncode, stderr=stderr[:200])

    def extract(
        self,
        source_path: str,
        duration_seconds: Optional[float],
        target_fps: int,
    ) -> List[RasterImage]:
        """
        Decode the source into a list of RGB24 images.

        Raises:
            DecodeError: dimensions unknown or ffmpeg/ffprobe unavailable
        """
        if target_fps <= 0:
            raise ValueError(f"target_fps must be positive, got {target_fps}")

        start = time.perf_counter()
        frames = list(self.iter_frames(source_path, duration_seconds, target_fps))
        elapsed = time.perf_counter() - start

        log.info(
            f"Extracted {len(frames)} frames in {elapsed:.2f}s",
            source=source_path,
            fps=target_fps,
            duration=duration_seconds,
        )
        return frames
