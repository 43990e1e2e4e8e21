"""Event import pipeline: turn an event listing URL or pasted text into a draft."""

__version__ = "0.1.0"
