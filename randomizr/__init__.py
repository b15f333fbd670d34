"""Synthetic log line generator for exercising log pipelines."""

__version__ = "0.1.0"
