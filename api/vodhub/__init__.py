"""VOD Hub API: cross-provider title matching for video-on-demand sources."""

__version__ = "0.1.0"
