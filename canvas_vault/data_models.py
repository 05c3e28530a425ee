"""Data models for vault metadata, configuration and operation results."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from canvas_vault.errors import VaultNotFoundError


@dataclass(frozen=True)
class VaultMetadata:
    """Normalized metadata describing a vault."""

    name: str
    path: Path
    description: str = ""
    exists: bool = True

    def as_payload(self) -> dict[str, Any]:
        """Return a serializable payload representation."""
        return {
            "name": self.name,
            "path": str(self.path),
            "description": self.description,
            "exists": self.path.is_dir(),
        }


class VaultConfiguration:
    """Read-only registry mapping vault names to vault metadata.

    Built once at process start. The ``vaults`` mapping is exposed as a
    read-only proxy so nothing can add or swap vaults afterwards.
    """

    def __init__(self, default_vault: str, vaults: Mapping[str, VaultMetadata]) -> None:
        if not vaults:
            raise ValueError("At least one vault must be configured")
        if default_vault not in vaults:
            raise ValueError(f"Default vault '{default_vault}' is not configured")
        self._default_vault = default_vault
        self._vaults = MappingProxyType(dict(vaults))

    @property
    def default_vault(self) -> str:
        return self._default_vault

    @property
    def vaults(self) -> Mapping[str, VaultMetadata]:
        return self._vaults

    def names(self) -> list[str]:
        """Return configured vault names in configuration order."""
        return list(self._vaults)

    def get(self, name: str) -> VaultMetadata:
        """Get vault metadata by name.

        Args:
            name: The name of the vault to retrieve.

        Returns:
            VaultMetadata for the requested vault.

        Raises:
            VaultNotFoundError: If the vault name is not found in configuration.
        """
        try:
            return self._vaults[name]
        except KeyError as exc:
            raise VaultNotFoundError(name, self.names()) from exc

    def as_payload(self) -> dict[str, Any]:
        """Return serializable configuration payload."""
        return {
            "default": self._default_vault,
            "vaults": [vault.as_payload() for vault in self._vaults.values()],
        }


@dataclass(frozen=True)
class FileOperationResult:
    """Outcome of a single mutating tool call."""

    success: bool
    message: str
    path: Path
    operation: str
    vault: Optional[str] = None

    def as_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "success": self.success,
            "message": self.message,
            "path": str(self.path),
            "operation": self.operation,
        }
        if self.vault is not None:
            payload["vault"] = self.vault
        return payload
