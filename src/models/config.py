"""
Configuration models

Typed views over config.yaml sections. Parsing (enum names, range checks)
happens in the from_dict() constructors so ConfigManager stays a loader.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from models.enums import PacingPolicy, LogLevel


def parse_enum(enum_type, value):
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        try:
            return enum_type[value.upper()]
        except KeyError:
            raise ValueError(f"Unknown {enum_type.__name__}: {value}")
    raise TypeError(f"Invalid type for {enum_type.__name__}: {type(value)}")


def _optional_positive(value, name: str, cast=float):
    if value is None:
        return None
    value = cast(value)
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass
class SourceConfig:
    """Video input: file path, how many seconds to decode, sampling rate"""
    path: Optional[str] = None
    duration: float = 90.0
    fps: int = 24

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SourceConfig":
        fps = int(data.get("fps", 24))
        if fps <= 0:
            raise ValueError(f"source.fps must be positive, got {fps}")
        return cls(
            path=data.get("path"),
            duration=_optional_positive(data.get("duration", 90.0), "source.duration"),
            fps=fps,
        )


@dataclass
class RenderConfig:
    """
    Conversion and layout settings.

    target_columns: None selects adaptive sizing from the terminal dimensions
    width_divisor: calibration constant applied to measured line width before centering
    """
    target_columns: Optional[int] = 160
    width_divisor: int = 3
    characters: str = " .:-=+*#%@"
    color: bool = True
    cell_aspect: float = 0.5

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RenderConfig":
        divisor = int(data.get("width_divisor", 3))
        if divisor <= 0:
            raise ValueError(f"render.width_divisor must be positive, got {divisor}")
        characters = str(data.get("characters", cls.characters))
        if not characters:
            raise ValueError("render.characters must not be empty")
        return cls(
            target_columns=_optional_positive(data.get("target_columns", 160), "render.target_columns", int),
            width_divisor=divisor,
            characters=characters,
            color=bool(data.get("color", True)),
            cell_aspect=float(data.get("cell_aspect", 0.5)),
        )


@dataclass
class PlaybackConfig:
    """
    Pacing and termination.

    duration: stop after this many seconds (None = no time limit)
    loop: False stops once every frame was shown
    """
    policy: PacingPolicy = PacingPolicy.ELAPSED
    loop: bool = True
    duration: Optional[float] = 90.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlaybackConfig":
        return cls(
            policy=parse_enum(PacingPolicy, data.get("policy", "ELAPSED")),
            loop=bool(data.get("loop", True)),
            duration=_optional_positive(data.get("duration", 90.0), "playback.duration"),
        )


@dataclass
class LoggingConfig:
    level: LogLevel = LogLevel.INFO
    use_colors: bool = True
    file: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggingConfig":
        return cls(
            level=parse_enum(LogLevel, data.get("level", "INFO")),
            use_colors=bool(data.get("use_colors", True)),
            file=data.get("file"),
        )


@dataclass
class AppConfig:
    source: SourceConfig = field(default_factory=SourceConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    playback: PlaybackConfig = field(default_factory=PlaybackConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "AppConfig":
        data = data or {}
        return cls(
            source=SourceConfig.from_dict(data.get("source") or {}),
            render=RenderConfig.from_dict(data.get("render") or {}),
            playback=PlaybackConfig.from_dict(data.get("playback") or {}),
            logging=LoggingConfig.from_dict(data.get("logging") or {}),
        )
