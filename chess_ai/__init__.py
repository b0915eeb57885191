"""Fixed-depth alpha-beta chess player with incremental piece-square evaluation."""

from .session import SearchSession

__all__ = ["SearchSession"]
