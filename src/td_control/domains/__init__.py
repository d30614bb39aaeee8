"""Domain protocol consumed by agents and experiment drivers."""

from td_control.domains.base import Domain

__all__ = ["Domain"]
