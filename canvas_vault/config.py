"""Configuration loading and vault registry construction."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Mapping, Optional, Sequence

import yaml

from canvas_vault.constants import CONFIG_PATH, CONFIG_PATH_ENV, VAULT_PATHS_ENV
from canvas_vault.data_models import VaultMetadata, VaultConfiguration

logger = logging.getLogger(__name__)


def _normalize_root(raw_path: str | Path) -> Path:
    resolved_path = Path(raw_path).expanduser()
    try:
        return resolved_path.resolve(strict=False)
    except RuntimeError:
        # resolve can raise on symlink loops; fall back to the expanded path
        return resolved_path


def derive_vault_names(paths: Iterable[str | Path]) -> dict[str, Path]:
    """Derive display names for an ordered list of vault roots.

    Each vault is named after its directory. When two roots share a
    directory name the later ones get a numeric suffix (``notes``,
    ``notes-2``, ``notes-3``...).

    Args:
        paths: Vault root directories in configuration order.

    Returns:
        An insertion-ordered mapping of vault name to normalized root path.
    """
    named: dict[str, Path] = {}
    for raw in paths:
        root = _normalize_root(raw)
        base = root.name or "vault"
        name = base
        counter = 2
        while name in named:
            name = f"{base}-{counter}"
            counter += 1
        named[name] = root
    return named


def configuration_from_paths(paths: Sequence[str | Path]) -> VaultConfiguration:
    """Build a :class:`VaultConfiguration` from an ordered list of roots.

    The first root becomes the default vault.

    Raises:
        ValueError: If ``paths`` is empty.
    """
    if not paths:
        raise ValueError("At least one vault path must be provided")

    vaults = {
        name: VaultMetadata(name=name, path=root, description="", exists=root.is_dir())
        for name, root in derive_vault_names(paths).items()
    }
    for metadata in vaults.values():
        if not metadata.exists:
            logger.warning("Vault '%s' is not accessible at %s", metadata.name, metadata.path)

    return VaultConfiguration(default_vault=next(iter(vaults)), vaults=vaults)


def _vault_from_entry(name: str, entry: object) -> VaultMetadata:
    if not isinstance(entry, Mapping):
        raise ValueError(f"Vault '{name}' must map to a dictionary of settings")

    raw_path = entry.get("path")
    if not isinstance(raw_path, str) or not raw_path.strip():
        raise ValueError(f"Vault '{name}' is missing a valid 'path' string")

    resolved_path = _normalize_root(raw_path)
    description = str(entry.get("description") or "").strip()
    return VaultMetadata(
        name=name,
        path=resolved_path,
        description=description,
        exists=resolved_path.is_dir(),
    )


def load_vault_configuration(config_path: Path = CONFIG_PATH) -> VaultConfiguration:
    """Load and validate the vault configuration file.

    The ``vaults`` key may be either a list of root paths (names derived
    from directory names) or a mapping of ``name: {path, description}``.
    An optional ``default`` key selects the default vault; otherwise the
    first vault is used.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        A fully populated :class:`VaultConfiguration`.

    Raises:
        FileNotFoundError: If the configuration file is missing.
        ValueError: If the file exists but does not provide the expected structure.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Vault configuration file not found at {config_path}")

    raw_config = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw_config, Mapping):
        raise ValueError("Vault configuration must be a YAML mapping")

    vaults_section = raw_config.get("vaults")
    if isinstance(vaults_section, list) and vaults_section:
        if not all(isinstance(item, str) and item.strip() for item in vaults_section):
            raise ValueError("Vault list entries must be non-empty path strings")
        configuration = configuration_from_paths(vaults_section)
        processed = dict(configuration.vaults)
    elif isinstance(vaults_section, Mapping) and vaults_section:
        processed = {
            str(name): _vault_from_entry(str(name), entry)
            for name, entry in vaults_section.items()
        }
    else:
        raise ValueError("Vault configuration must include a non-empty 'vaults' list or mapping")

    default_vault = raw_config.get("default", next(iter(processed)))
    if not isinstance(default_vault, str) or default_vault not in processed:
        raise ValueError("Vault configuration 'default' must name a configured vault")

    return VaultConfiguration(default_vault=default_vault, vaults=processed)


def load_configuration_from_environment(
    argv_paths: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> VaultConfiguration:
    """Resolve the vault configuration from the process environment.

    Precedence: explicit ``argv_paths``, then the ``CANVAS_VAULT_PATHS``
    variable (``os.pathsep`` separated), then the YAML file named by
    ``CANVAS_VAULT_CONFIG`` (default ``vaults.yaml`` beside the package).
    """
    env = os.environ if environ is None else environ

    if argv_paths:
        return configuration_from_paths(list(argv_paths))

    env_paths = [item for item in env.get(VAULT_PATHS_ENV, "").split(os.pathsep) if item.strip()]
    if env_paths:
        return configuration_from_paths(env_paths)

    config_path = Path(env[CONFIG_PATH_ENV]) if env.get(CONFIG_PATH_ENV) else CONFIG_PATH
    return load_vault_configuration(config_path)
