"""TikTok Business API gateway for the Model Context Protocol."""

__version__ = "1.0.0"
