"""Statement and expression evaluation for the yarxbi executor."""

__all__ = [
    "common",
    "expr",
    "loops",
    "ops",
    "statements",
]
