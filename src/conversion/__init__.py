from .ascii_converter import AsciiConverter

__all__ = ["AsciiConverter"]
