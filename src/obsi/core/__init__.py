"""obsi core: configuration, shared types and external tool wrappers."""

from obsi.core.types import (
    CommandResult,
    OperationResult,
    SearchResult,
    VaultEntry,
    VaultInfo,
    VaultStats,
)

__all__ = [
    "CommandResult",
    "OperationResult",
    "SearchResult",
    "VaultEntry",
    "VaultInfo",
    "VaultStats",
]
