"""Process-wide vault registry access."""

from __future__ import annotations

import logging
from typing import Optional

from canvas_vault.config import load_configuration_from_environment
from canvas_vault.data_models import VaultConfiguration, VaultMetadata

logger = logging.getLogger(__name__)

# Published once at startup by run_server(); loaded lazily otherwise
_CONFIGURATION: Optional[VaultConfiguration] = None


def set_vault_configuration(configuration: VaultConfiguration) -> None:
    """Publish the vault registry for the lifetime of the process.

    Args:
        configuration: The registry built from startup configuration.
    """
    global _CONFIGURATION
    _CONFIGURATION = configuration
    logger.info("Configured vaults: %s", ", ".join(configuration.names()))


def get_vault_configuration() -> VaultConfiguration:
    """Return the published registry, loading it from the environment on first use."""
    global _CONFIGURATION
    if _CONFIGURATION is None:
        _CONFIGURATION = load_configuration_from_environment()
    return _CONFIGURATION


def resolve_vault(vault: Optional[str]) -> VaultMetadata:
    """Resolve which vault metadata should be used for an operation.

    Args:
        vault: Optional vault name provided by the caller. ``None`` selects
            the configured default vault.

    Returns:
        The resolved :class:`VaultMetadata`.

    Raises:
        VaultNotFoundError: If the supplied ``vault`` name is not recognized.
    """
    configuration = get_vault_configuration()
    if vault:
        return configuration.get(vault)
    return configuration.get(configuration.default_vault)
