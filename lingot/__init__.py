"""Tuner building blocks: configuration files, scales, a message queue and pitch estimation."""

__version__ = "1.0.0"
__all__ = ["messages", "scale", "params", "configfile", "signal"]