"""Read and write Mocha window manager settings and serve them over a JSON message bridge."""

__version__ = "0.1.0"
__all__ = ["bridge", "config", "settings"]