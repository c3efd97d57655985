"""Errors raised by the calculators."""

from __future__ import annotations


class InvalidInput(ValueError):
    """A required positive quantity was zero or negative."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
