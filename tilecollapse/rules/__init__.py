"""Rule authoring for tilecollapse."""

from .store import RuleStore, RuleStoreError, UnknownTileError, make_bidirectional_rule

__all__ = [
    "RuleStore",
    "RuleStoreError",
    "UnknownTileError",
    "make_bidirectional_rule",
]
