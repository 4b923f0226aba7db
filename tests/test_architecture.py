"""Architectural boundary tests using pytest-archon.

These tests verify that the codebase keeps its layers apart:
- Domain layer has no dependencies on adapters or application
- Application services depend on domain ports, never on adapters
- Adapters implement domain ports and do not import application services
"""

from pytest_archon import archrule


def test_domain_models_have_no_dependencies() -> None:
    """Domain models may only import other models, domain errors and time utilities."""
    (
        archrule("domain models", comment="Domain models should be independent")
        .match("commute_optimizer.domain.models*")
        .should_not_import("commute_optimizer.adapters*")
        .should_not_import("commute_optimizer.application*")
        .should_not_import("commute_optimizer.domain.contracts*")
        .should_not_import("commute_optimizer.domain.ports*")
        .may_import("commute_optimizer.domain.models*")
        .may_import("commute_optimizer.domain.errors")
        .may_import("commute_optimizer.domain.time_utils")
        .check("commute_optimizer")
    )


def test_time_utils_are_self_contained() -> None:
    """Time utilities should not depend on anything else in the package."""
    (
        archrule("time utilities", comment="Time utilities should be standalone")
        .match("commute_optimizer.domain.time_utils")
        .should_not_import("commute_optimizer.*")
        .check("commute_optimizer")
    )


def test_domain_contracts_have_no_dependencies() -> None:
    """Domain contracts (protocols/interfaces) should not import adapters or application."""
    (
        archrule("domain contracts", comment="Domain contracts should be independent")
        .match("commute_optimizer.domain.contracts*")
        .should_not_import("commute_optimizer.adapters*")
        .should_not_import("commute_optimizer.application*")
        .may_import("commute_optimizer.domain*")
        .check("commute_optimizer")
    )


def test_domain_ports_have_no_dependencies() -> None:
    """Domain ports (interfaces) should not import adapters or application."""
    (
        archrule("domain ports", comment="Domain ports should be independent")
        .match("commute_optimizer.domain.ports*")
        .should_not_import("commute_optimizer.adapters*")
        .should_not_import("commute_optimizer.application*")
        .may_import("commute_optimizer.domain*")
        .check("commute_optimizer")
    )


def test_application_services_dont_import_adapters() -> None:
    """The optimizer should reach providers only through domain ports."""
    (
        archrule(
            "application services", comment="Application services should not depend on adapters"
        )
        .match("commute_optimizer.application*")
        .should_not_import("commute_optimizer.adapters*")
        .should_not_import("aiohttp")
        .may_import("commute_optimizer.domain*")
        .may_import("commute_optimizer.application*")
        .check("commute_optimizer")
    )


def test_adapters_dont_import_application() -> None:
    """Adapters should not import application services (to avoid cycles)."""
    (
        archrule(
            "adapters independence", comment="Adapters should not depend on application services"
        )
        .match("commute_optimizer.adapters*")
        .should_not_import("commute_optimizer.application*")
        .should_not_import("commute_optimizer.cli")
        .may_import("commute_optimizer.domain*")
        .may_import("commute_optimizer.adapters*")
        .check("commute_optimizer", only_direct_imports=True)
    )


def test_no_outward_dependencies_in_domain() -> None:
    """Domain layer should only depend on itself."""
    (
        archrule("domain no cycles", comment="Domain layer should not depend on outer layers")
        .match("commute_optimizer.domain*")
        .should_not_import("commute_optimizer.adapters*")
        .should_not_import("commute_optimizer.application*")
        .should_not_import("commute_optimizer.cli")
        .may_import("commute_optimizer.domain*")
        .check("commute_optimizer", only_direct_imports=True)
    )
