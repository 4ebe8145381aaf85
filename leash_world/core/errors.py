"""Exception types raised by the leash core."""

from __future__ import annotations


class LeashError(Exception):
    """Base class for leash failures that the host should never see raw."""


class InvalidLeashError(LeashError):
    """A leash request named a bad handler, target or distance."""


class AttributeStoreError(LeashError):
    """The per-entity attribute store refused a read or write."""


__all__ = ["LeashError", "InvalidLeashError", "AttributeStoreError"]
