"""Tests for batch checks and ranked selection."""

from __future__ import annotations

from typing import Any

import pytest

from rubylith.compatibility.schema import Component, Contract, Environment
from rubylith.compatibility.selection import (
    check_batch_compatibility,
    find_best_contract_version,
    find_compatible_environments,
)
from rubylith.compatibility.types import IssueCode


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_component(base: dict[str, Any], **overrides: Any) -> Component:
    data = dict(base)
    data.update(overrides)
    return Component.model_validate(data)


def _make_contract(base: dict[str, Any], **overrides: Any) -> Contract:
    data = dict(base)
    data.update(overrides)
    return Contract.model_validate(data)


def _make_environment(base: dict[str, Any], env_id: str, **compat: Any) -> Environment:
    data = dict(base, id=env_id, name=env_id)
    rules = dict(data["compatibility"])
    rules.update(compat)
    data["compatibility"] = rules
    return Environment.model_validate(data)


# ---------------------------------------------------------------------------
# Batch
# ---------------------------------------------------------------------------


class TestBatch:
    def test_results_keyed_by_name_in_input_order(self, component_data, environment):
        components = [
            _make_component(component_data, name="zeta"),
            _make_component(component_data, name="alpha", type="plugin"),
            _make_component(component_data, name="mid"),
        ]
        results = check_batch_compatibility(components, environment)
        assert list(results) == ["zeta", "alpha", "mid"]
        assert results["zeta"].compatible is True
        assert results["alpha"].has_issue(IssueCode.COMPONENT_TYPE_UNSUPPORTED)

    def test_empty(self, environment):
        assert check_batch_compatibility([], environment) == {}

    def test_later_duplicate_name_wins(self, component_data, environment):
        components = [
            _make_component(component_data, version="1.0.0"),
            _make_component(component_data, version="1.1.0", type="plugin"),
        ]
        results = check_batch_compatibility(components, environment)
        assert len(results) == 1
        assert results["test-component"].compatible is False

    @pytest.mark.parametrize("workers", [None, 1, 4])
    def test_parallel_matches_sequential(self, component_data, environment, workers):
        components = [
            _make_component(component_data, name=f"c{i}", type=t)
            for i, t in enumerate(["ui-component", "plugin", "layout-component", "template"] * 3)
        ]
        sequential = check_batch_compatibility(components, environment)
        parallel = check_batch_compatibility(components, environment, max_workers=workers)
        assert list(parallel) == list(sequential)
        assert parallel == sequential


# ---------------------------------------------------------------------------
# Environment ranking
# ---------------------------------------------------------------------------


class TestFindCompatibleEnvironments:
    def test_min_score_filter(self, component_data, environment_data):
        component = _make_component(
            component_data,
            requires=[
                {"name": "theme-provider", "versionRange": "^1.0.0", "optional": True},
                {"name": "extra", "versionRange": "*", "optional": True},
            ],
        )
        env_a = _make_environment(environment_data, "env-a")
        env_b = _make_environment(
            environment_data, "env-b", constraints={"test-component": "^9.0.0"}
        )
        matches = find_compatible_environments(component, [env_a, env_b], min_score=80)
        assert [m.environment.id for m in matches] == ["env-a"]

    def test_scenario_high_and_low_scores(self, component_data, environment_data):
        component = _make_component(component_data)
        env_a = _make_environment(environment_data, "envA")
        env_b = _make_environment(environment_data, "envB", supportedTypes=["layout-component"])
        matches = find_compatible_environments(component, [env_b, env_a], min_score=80)
        assert [m.environment.id for m in matches] == ["envA"]
        assert matches[0].result.score >= 80

    def test_sorted_by_score_descending_stable(self, component_data, environment_data):
        component = _make_component(component_data, type="ui-component")
        full = _make_environment(environment_data, "full")
        other_full = _make_environment(environment_data, "other-full")
        matches = find_compatible_environments(
            component, [full, other_full], min_score=0
        )
        assert [m.environment.id for m in matches] == ["full", "other-full"]

    def test_incompatible_never_returned(self, component_data, environment_data):
        component = _make_component(component_data)
        blocked = _make_environment(
            environment_data, "blocked", blacklist=[{"name": "test-component", "version": "1.2.0"}]
        )
        assert find_compatible_environments(component, [blocked], min_score=0) == []

    def test_ordering_independent_of_workers(self, component_data, environment_data):
        component = _make_component(component_data)
        envs = [_make_environment(environment_data, f"env-{i}") for i in range(8)]
        sequential = find_compatible_environments(component, envs)
        parallel = find_compatible_environments(component, envs, max_workers=4)
        assert [m.environment.id for m in parallel] == [m.environment.id for m in sequential]

    def test_default_min_score(self, component_data, environment_data):
        component = _make_component(
            component_data,
            requires=[
                {"name": "theme-provider", "versionRange": "^1.0.0"},
                {"name": "routing", "versionRange": "*", "optional": True},
            ],
        )
        env = _make_environment(environment_data, "e")
        [match] = find_compatible_environments(component, [env])
        assert match.result.score == 100


# ---------------------------------------------------------------------------
# Best contract
# ---------------------------------------------------------------------------


class TestFindBestContractVersion:
    def test_highest_version_on_tie(self, component, contract_data):
        contracts = [
            _make_contract(contract_data, version=v) for v in ["1.0.0", "1.1.0", "1.2.0"]
        ]
        best = find_best_contract_version(component, contracts)
        assert best is not None
        assert best.version == "1.2.0"

    def test_never_returns_other_name(self, component, contract_data):
        contracts = [
            _make_contract(contract_data, name="other", version="1.5.0"),
            _make_contract(contract_data, version="1.0.0"),
        ]
        best = find_best_contract_version(component, contracts)
        assert best.name == "test-contract"

    def test_none_when_nothing_compatible(self, component, contract_data):
        contracts = [
            _make_contract(contract_data, version="2.0.0"),
            _make_contract(contract_data, name="other"),
        ]
        assert find_best_contract_version(component, contracts) is None

    def test_none_when_empty(self, component):
        assert find_best_contract_version(component, []) is None

    def test_invalid_runtime_revision_excluded(self, component, contract_data):
        broken_newer = _make_contract(
            contract_data,
            version="1.1.0",
            runtime={"framework": "react", "frameworkVersion": "eighteen"},
        )
        good_older = _make_contract(contract_data, version="1.0.0")
        best = find_best_contract_version(component, [broken_newer, good_older])
        assert best.version == "1.0.0"

    def test_plugin_prefers_newer_for_bonus(self, component_data, contract_data):
        plugin = _make_component(component_data, type="plugin")
        contracts = [
            _make_contract(contract_data, version="1.0.0"),
            _make_contract(contract_data, version="1.0.1"),
        ]
        assert find_best_contract_version(plugin, contracts).version == "1.0.1"

    def test_incompatible_major_skipped(self, component, contract_data):
        contracts = [
            _make_contract(contract_data, version="2.5.0"),
            _make_contract(contract_data, version="1.3.0"),
        ]
        assert find_best_contract_version(component, contracts).version == "1.3.0"
