"""Common type definitions."""

from typing import Any, Callable, Dict

# Decoded JSON object
JsonDict = Dict[str, Any]

# time.sleep-compatible callable
Sleeper = Callable[[float], None]

# time.monotonic-compatible callable
Clock = Callable[[], float]
