"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ProductCategory(StrEnum):
    FRAMES = "Frames"
    LENSES = "Lenses"
    CONTACTS = "Contacts"
    ACCESSORIES = "Accessories"


class SyncRunStatus(StrEnum):
    """Lifecycle of a stored sync run: Pending, then Success or Failed."""

    PENDING = "Pending"
    SUCCESS = "Success"
    FAILED = "Failed"


class DiffStatus(StrEnum):
    NEW = "new"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


class RunDisplayStatus(StrEnum):
    """Status vocabulary used by reporting layers."""

    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"
