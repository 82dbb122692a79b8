"""Console logging with levels, throttling, styled, boxed and JSON reporters, and prompts."""

__version__ = "0.1.0"

__all__ = [
    "clock",
    "error_chain",
    "format",
    "levels",
    "logger",
    "prompt",
    "record",
    "reporters",
    "throttling",
    "utils",
]