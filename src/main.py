#!/usr/bin/env python3
"""
main.py — Application entry point for the terminal video player
----------------------------------------------------------------

Responsible for:
- loading configuration (YAML + command line overrides)
- decoding the video and converting every frame up front (streamed, raw
  pixels are never all held at once)
- wiring the playback engine to the terminal
- running the playback loop with graceful shutdown on Ctrl+C / SIGTERM
"""

import sys

# ---------------------------------------------------------------------------
# UTF-8 ENCODING FIX
# ---------------------------------------------------------------------------

if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')  # type: ignore
if hasattr(sys.stderr, 'reconfigure') and sys.stderr.encoding != 'UTF-8':
    sys.stderr.reconfigure(encoding='utf-8')  # type: ignore

import argparse
import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional

from conversion.ascii_converter import AsciiConverter
from engine.frame_store import FrameStore
from engine.geometry import GeometryCalculator
from engine.playback_engine import PlaybackEngine
from hardware.terminal.terminal_factory import create_terminal
from lifecycle import ShutdownCoordinator, TerminalSession
from lifecycle.handlers import PlaybackShutdownHandler
from managers import ConfigManager
from models.config import AppConfig
from models.enums import LogCategory, TerminalKind
from models.errors import PlayerError
from runtime.runtime_info import RuntimeInfo
from sources.ffmpeg_source import FFmpegFrameSource
from utils.logger import get_logger, configure_logger

# ---------------------------------------------------------------------------
# LOGGER SETUP
# ---------------------------------------------------------------------------

log = get_logger().for_category(LogCategory.SYSTEM)


# ---------------------------------------------------------------------------
# COMMAND LINE
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="terminal-player",
        description="Play a video as text art in the terminal.",
    )
    parser.add_argument("input", nargs="?", help="Video file (overrides source.path)")
    parser.add_argument("-c", "--config", help="Path to config.yaml (default: bundled config)")
    parser.add_argument("-f", "--fps", type=int, help="Sampling and playback frame rate")
    parser.add_argument("-d", "--duration", type=float, help="Seconds to decode and play")
    parser.add_argument("-w", "--columns", type=int, help="Text-art width in characters")
    parser.add_argument("--adaptive", action="store_true", help="Derive width from terminal size")
    parser.add_argument("--policy", choices=["elapsed", "sequential"], help="Pacing policy")
    parser.add_argument("--no-loop", action="store_true", help="Stop after one pass")
    parser.add_argument("--no-color", action="store_true", help="Plain characters, no color escapes")
    parser.add_argument("--dry-run", action="store_true", help="Play on an in-memory terminal, write nothing")
    parser.add_argument("--log-level", choices=["debug", "info", "warn", "error"])
    parser.add_argument("--log-file", help="Write logs to this file instead of stderr")
    return parser


def overrides_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Translate CLI flags into a config dict merged over the YAML."""
    overrides: Dict[str, Dict[str, Any]] = {
        "source": {}, "render": {}, "playback": {}, "logging": {},
    }

    if args.input:
        overrides["source"]["path"] = args.input
    if args.fps is not None:
        overrides["source"]["fps"] = args.fps
    if args.duration is not None:
        overrides["source"]["duration"] = args.duration
        overrides["playback"]["duration"] = args.duration
    if args.adaptive:
        overrides["render"]["target_columns"] = None
    elif args.columns is not None:
        overrides["render"]["target_columns"] = args.columns
    if args.no_color:
        overrides["render"]["color"] = False
    if args.policy:
        overrides["playback"]["policy"] = args.policy
    if args.no_loop:
        overrides["playback"]["loop"] = False
    if args.log_level:
        overrides["logging"]["level"] = args.log_level
    if args.log_file:
        overrides["logging"]["file"] = args.log_file

    return {section: values for section, values in overrides.items() if values}


# ---------------------------------------------------------------------------
# PLAYBACK
# ---------------------------------------------------------------------------

async def play(config: AppConfig, hold_logs: bool = True, dry_run: bool = False) -> None:
    """Decode, convert and play according to config."""

    if not config.source.path:
        raise PlayerError("NO_INPUT", "No input video (pass a path or set source.path)")
    if not RuntimeInfo.has_ffmpeg():
        log.warn("ffmpeg/ffprobe not found on PATH, decoding will fail")

    # ========================================================================
    # 1. TERMINAL & GEOMETRY
    # ========================================================================

    terminal = create_terminal(kind=TerminalKind.VIRTUAL if dry_run else None)

    target_columns = config.render.target_columns
    if target_columns is None:
        target_columns = GeometryCalculator(terminal, config.render.width_divisor).target_columns()

    # ========================================================================
    # 2. FRAMES (decode + convert before the loop)
    # ========================================================================

    log.info("Extracting frames...", source=config.source.path)
    images = FFmpegFrameSource().iter_frames(
        config.source.path,
        config.source.duration,
        config.source.fps,
    )

    converter = AsciiConverter(
        characters=config.render.characters,
        color=config.render.color,
        cell_aspect=config.render.cell_aspect,
    )
    # Each raw image is dropped as soon as it is converted
    store = FrameStore.load(converter.convert_all(images, target_columns))

    # ========================================================================
    # 3. PLAYBACK ENGINE
    # ========================================================================

    engine = PlaybackEngine(
        terminal,
        fps=config.source.fps,
        policy=config.playback.policy,
        loop=config.playback.loop,
        duration=config.playback.duration,
        width_divisor=config.render.width_divisor,
    )

    coordinator = ShutdownCoordinator()
    loop = asyncio.get_running_loop()

    with TerminalSession(terminal, hold_logs=hold_logs):
        play_task = asyncio.create_task(engine.run(store))
        coordinator.register(PlaybackShutdownHandler(engine, play_task))
        coordinator.setup_signal_handlers(loop)
        try:
            await coordinator.wait_for_shutdown(play_task)
            await coordinator.shutdown_all()
        finally:
            coordinator.remove_signal_handlers(loop)

        # Re-raises a loop failure (e.g. TerminalIOError) inside the session scope
        play_task.result()

    log.info("Playback ended", reason=coordinator.reason, engine=repr(engine))


async def main(argv: Optional[List[str]] = None) -> int:
    """Main async entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    manager = ConfigManager(Path(args.config).resolve()) if args.config else ConfigManager()
    try:
        config = manager.load(overrides_from_args(args))
    except ValueError as e:
        log.error(f"Invalid configuration: {e}")
        return 2

    log_stream = None
    if config.logging.file:
        log_stream = open(config.logging.file, "a", encoding="utf-8")
    configure_logger(
        config.logging.level,
        use_colors=config.logging.use_colors and log_stream is None,
        stream=log_stream,
    )

    try:
        await play(config, hold_logs=log_stream is None, dry_run=args.dry_run)
        return 0
    except PlayerError as e:
        log.error(f"Playback failed: {e.message}", code=e.code, **e.details)
        return 1
    finally:
        if log_stream is not None:
            configure_logger(config.logging.level, config.logging.use_colors)
            log_stream.close()


# ---------------------------------------------------------------------------
# ENTRY POINT
# ---------------------------------------------------------------------------

def run() -> None:
    try:
        code = asyncio.run(main())
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received")
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    run()
