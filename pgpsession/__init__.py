"""OpenPGP session keys, password encryption, data packets, armor and helpers."""

__version__ = "0.1.0"

__all__ = [
    "clock",
    "errors",
    "mobile_stream",
    "models",
    "packets",
    "password",
    "sessionkey",
    "streaming",
    "subtle",
    "text",
]