"""User and skill directory adapter."""

from .client import HttpDirectory, StaticDirectory

__all__ = ["HttpDirectory", "StaticDirectory"]
