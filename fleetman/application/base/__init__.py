"""Shared use case infrastructure."""

from .use_case import UseCase

__all__ = ["UseCase"]
