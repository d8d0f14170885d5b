"""Dispatch OSSign signing workflows from CI and wait for their artifacts."""

__version__ = "1.0.0"
