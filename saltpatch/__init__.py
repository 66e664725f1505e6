"""Build, read and verify SALTPTCH firmware patch files, with byte and search helpers."""

__version__ = "0.5.0"
__all__ = ["utils", "bm", "patchfile"]