"""rci - translate an HTTP response into a process exit code and message."""

__version__ = "1.0.0"
