"""
YAML registry document loader with per-path caching.

A registry document is a snapshot of registry records (components,
contracts, environments) in one YAML file.  It is what the command line
checks against, and a convenient fixture format for tests.

Example document::

    schema_version: "1.0"
    components:
      - name: data-table
        version: 2.1.0
        type: data-component
        lifecycle: stable
        contract: {name: table-contract, version: 1.0.0}
        requires:
          - {name: theme-provider, versionRange: ^1.0.0}
    contracts:
      - name: table-contract
        version: 1.2.0
        schemaVersion: 1.0.0
        runtime: {framework: react, frameworkVersion: ^18.0.0}
        compatibility: {minSchemaVersion: 1.0.0}
    environments:
      - id: prod
        name: Production
        capabilities: [...]

Usage::

    from rubylith.loader import RegistryLoader

    registry = RegistryLoader().load(Path("registry.yaml"))
    component = registry.component("data-table")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import ClassVar, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from rubylith.compatibility.schema import Component, Contract, Environment
from rubylith.versioning.semver import Version

logger = logging.getLogger(__name__)


class RegistryDocument(BaseModel):
    """A snapshot of registry records loaded from one YAML file."""

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field("1.0", description="Document format version")
    components: list[Component] = Field(default_factory=list)
    contracts: list[Contract] = Field(default_factory=list)
    environments: list[Environment] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_environment_ids(self) -> "RegistryDocument":
        seen: set[str] = set()
        for env in self.environments:
            if env.id in seen:
                raise ValueError(f"Duplicate environment id: {env.id}")
            seen.add(env.id)
        return self

    def component(self, name: str, version: Optional[str] = None) -> Optional[Component]:
        """Look up a component by name.

        Without *version*, the greatest version of that name is returned.
        """
        return _pick(self.components, name, version)

    def contract(self, name: str, version: Optional[str] = None) -> Optional[Contract]:
        """Look up a contract by name; greatest version unless *version* is given."""
        return _pick(self.contracts, name, version)

    def contract_versions(self, name: str) -> list[Contract]:
        return [c for c in self.contracts if c.name == name]

    def environment(self, env_id: str) -> Optional[Environment]:
        for env in self.environments:
            if env.id == env_id:
                return env
        return None


def _pick(records: list, name: str, version: Optional[str]):
    named = [r for r in records if r.name == name]
    if not named:
        return None
    if version is not None:
        wanted = Version.parse(version)
        for record in named:
            if Version.parse(record.version) == wanted:
                return record
        return None
    return max(named, key=lambda r: Version.parse(r.version))


class RegistryLoader:
    """Loads and caches registry documents from YAML files."""

    _cache: ClassVar[dict[str, RegistryDocument]] = {}

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the document cache (useful in tests)."""
        cls._cache.clear()

    def load(self, path: Path) -> RegistryDocument:
        """Load a registry document from a YAML file.

        Args:
            path: Path to the YAML document.

        Returns:
            Validated ``RegistryDocument`` instance.

        Raises:
            FileNotFoundError: If the file does not exist.
            TypeError: If the YAML root is not a mapping.
            yaml.YAMLError: If the file contains invalid YAML.
            pydantic.ValidationError: If the YAML does not match the schema.
        """
        key = str(path.resolve())
        if key in self._cache:
            logger.debug("Registry cache hit: %s", key)
            return self._cache[key]

        if not path.exists():
            raise FileNotFoundError(f"Registry file not found: {path}")

        with open(path) as fh:
            raw = yaml.safe_load(fh)

        document = self._validate(raw, str(path))
        self._cache[key] = document

        logger.debug(
            "Loaded registry: components=%d, contracts=%d, environments=%d",
            len(document.components),
            len(document.contracts),
            len(document.environments),
        )
        return document

    def load_from_string(self, yaml_str: str) -> RegistryDocument:
        """Load a registry document from a YAML string (convenience for testing).

        Raises:
            TypeError: If the YAML root is not a mapping.
            pydantic.ValidationError: If the YAML does not match the schema.
        """
        return self._validate(yaml.safe_load(yaml_str), "<string>")

    @staticmethod
    def _validate(raw: object, source: str) -> RegistryDocument:
        if not isinstance(raw, dict):
            raise TypeError(
                f"Expected YAML mapping at root of {source}, got {type(raw).__name__}"
            )
        return RegistryDocument.model_validate(raw)
