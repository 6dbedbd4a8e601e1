"""wptscore - focus-area scoring for web-platform-tests runs."""

__version__ = "1.0.0"
