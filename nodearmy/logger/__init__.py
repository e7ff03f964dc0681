"""Loggers used by the registry engine and CLI."""

from __future__ import annotations

from .registryLogger import RegistryLogger

__all__ = ["RegistryLogger"]
