"""Jokenpô (rock-paper-scissors) session controller."""

__version__ = "0.1.0"
