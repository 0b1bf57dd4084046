"""Workspace package."""

from little_ledger.workspace.workspace import InvalidAccountName, Workspace

__all__ = ["InvalidAccountName", "Workspace"]
