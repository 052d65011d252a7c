from .screen import ScreenCapture

__all__ = ["ScreenCapture"]
