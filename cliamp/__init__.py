"""Terminal music player with equalizer, spectrum visualizer and playlist."""

__version__ = "0.1.0"

__all__ = ["__version__"]