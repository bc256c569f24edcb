"""
Pytest configuration and fixtures for Rubylith tests.
"""

from __future__ import annotations

from typing import Any, Dict, Generator

import pytest

from rubylith.compatibility.schema import Capability, Component, Contract, Environment
from rubylith.config import reset_config
from rubylith.loader import RegistryLoader


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_config(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Isolate each test from RUBYLITH_* variables and cached state."""
    import os

    for key in list(os.environ):
        if key.startswith("RUBYLITH_"):
            monkeypatch.delenv(key)
    reset_config()
    RegistryLoader.clear_cache()

    yield

    reset_config()
    RegistryLoader.clear_cache()


# ============================================================================
# Record Fixtures
# ============================================================================


@pytest.fixture
def component_data() -> Dict[str, Any]:
    """A UI component as the registry API returns it (camelCase keys)."""
    return {
        "id": "comp-1",
        "name": "test-component",
        "version": "1.2.0",
        "type": "ui-component",
        "lifecycle": "stable",
        "description": "A test component",
        "author": "test-author",
        "license": "MIT",
        "keywords": ["test"],
        "dependencies": [
            {"name": "dep1", "versionRange": "^1.0.0", "optional": False},
            {"name": "dep2", "versionRange": ">=2.0.0", "optional": True},
        ],
        "provides": [],
        "requires": [
            {"name": "theme-provider", "versionRange": "^1.0.0", "optional": False},
        ],
        "contract": {"name": "test-contract", "version": "1.0.0"},
        "metadata": {},
    }


@pytest.fixture
def contract_data() -> Dict[str, Any]:
    return {
        "id": "contract-1",
        "name": "test-contract",
        "version": "1.0.0",
        "schemaVersion": "1.0.0",
        "description": "A test contract",
        "schema": {"type": "object", "properties": {}},
        "runtime": {"framework": "react", "frameworkVersion": "^18.0.0"},
        "compatibility": {"minSchemaVersion": "1.0.0", "breakingChanges": []},
        "metadata": {},
    }


@pytest.fixture
def capability_data() -> Dict[str, Any]:
    return {
        "id": "cap-1",
        "name": "theme-provider",
        "type": "theme-provider",
        "version": "1.0.0",
        "provider": "test-provider",
        "description": "Theme provider capability",
        "config": {},
    }


@pytest.fixture
def environment_data(capability_data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": "test-env",
        "name": "Test Environment",
        "type": "development",
        "status": "active",
        "capabilities": [capability_data],
        "compatibility": {
            "supportedTypes": ["ui-component", "layout-component"],
            "blacklist": [],
            "constraints": {},
        },
        "metadata": {},
    }


@pytest.fixture
def component(component_data: Dict[str, Any]) -> Component:
    return Component.model_validate(component_data)


@pytest.fixture
def contract(contract_data: Dict[str, Any]) -> Contract:
    return Contract.model_validate(contract_data)


@pytest.fixture
def capability(capability_data: Dict[str, Any]) -> Capability:
    return Capability.model_validate(capability_data)


@pytest.fixture
def environment(environment_data: Dict[str, Any]) -> Environment:
    return Environment.model_validate(environment_data)


# ============================================================================
# Registry Document Fixtures
# ============================================================================


REGISTRY_YAML = """\
schema_version: "1.0"
components:
  - name: data-table
    version: 2.1.0
    type: data-component
    lifecycle: stable
    contract: {name: table-contract, version: 1.0.0}
    dependencies:
      - {name: grid-core, versionRange: ^3.0.0}
      - {name: exporter, versionRange: "~1.2.0", optional: true}
    requires:
      - {name: theme-provider, versionRange: ^1.0.0}
  - name: data-table
    version: 1.4.0
    type: data-component
    lifecycle: deprecated
    contract: {name: table-contract, version: 0.9.0}
  - name: grid-core
    version: 3.2.1
    type: utility-component
    lifecycle: stable
    contract: {name: grid-contract, version: 1.0.0}
  - name: legacy-widget
    version: 0.3.0
    type: ui-component
    lifecycle: beta
    contract: {name: widget-contract, version: 1.0.0}
contracts:
  - name: table-contract
    version: 1.0.0
    schemaVersion: 1.0.0
    runtime: {framework: react, frameworkVersion: ^18.0.0}
    compatibility: {minSchemaVersion: 1.0.0}
  - name: table-contract
    version: 1.2.0
    schemaVersion: 1.1.0
    runtime: {framework: react, frameworkVersion: ^18.0.0}
    compatibility: {minSchemaVersion: 1.0.0}
  - name: table-contract
    version: 2.0.0
    schemaVersion: 2.0.0
    runtime: {framework: vue}
    compatibility:
      minSchemaVersion: 2.0.0
      breakingChanges: [props renamed, slots removed]
      migrationGuide: https://example.com/table-v2
environments:
  - id: prod
    name: Production
    type: production
    capabilities:
      - {id: cap-theme, name: theme-provider, type: theme-provider, version: 1.3.0, provider: design-system}
    compatibility:
      supportedTypes: [ui-component, data-component]
      blacklist:
        - {name: legacy-widget, version: 0.3.0}
      constraints:
        data-table: ">=2.0.0"
  - id: staging
    name: Staging
    type: staging
    capabilities: []
    compatibility:
      supportedTypes: [data-component]
"""


@pytest.fixture
def registry_yaml() -> str:
    return REGISTRY_YAML


@pytest.fixture
def registry_file(tmp_path, registry_yaml: str):
    """Write the sample registry document to a temporary file."""
    path = tmp_path / "registry.yaml"
    path.write_text(registry_yaml)
    return path
