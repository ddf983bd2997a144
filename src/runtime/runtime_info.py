import sys
import shutil
import importlib.util


class RuntimeInfo:

    @classmethod
    def is_windows(cls) -> bool:
        return sys.platform.startswith("win")

    @classmethod
    def has_termios(cls) -> bool:
        return not cls.is_windows() and cls.has_module("termios")

    @classmethod
    def stdout_is_tty(cls) -> bool:
        try:
            return sys.stdout.isatty()
        except (AttributeError, ValueError):
            return False

    @classmethod
    def has_executable(cls, name: str) -> bool:
        return shutil.which(name) is not None

    @classmethod
    def has_ffmpeg(cls) -> bool:
        return cls.has_executable("ffmpeg") and cls.has_executable("ffprobe")

    @classmethod
    def has_module(cls, module_name: str) -> bool:
        try:
            return importlib.util.find_spec(module_name) is not None
        except (ImportError, ValueError):
            return False
