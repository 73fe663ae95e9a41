"""CLI for entity checker."""

from pathlib import Path
from typing import Annotated, Literal

import structlog
from cyclopts import App, Parameter

from entity_checker.checker import Checker
from entity_checker.config import get_config
from entity_checker.config_commands import config_app
from entity_checker.errors import CheckResult
from entity_checker.loader import load_document, load_entity, load_id_result, load_structure
from entity_checker.registries import YamlRegistry
from entity_checker.registry import SchemaRegistry

logger = structlog.get_logger()

app = App(
    help="Entity Checker - Check entities and schemas against a knowledge base schema",
)

app.command(config_app)


def configure_logging(log_level: str) -> None:
    """Configure structlog with the specified log level."""
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(min_level=log_level.lower()))


def get_registry() -> SchemaRegistry:
    """Get the registry for the configured schema file."""
    config = get_config()
    schema_path = config.schema_path()
    if schema_path is None:
        raise ValueError("Schema file not configured. Set it using:\n  entity-checker config set schema.path <file>")
    return YamlRegistry(schema_path, default_locales=config.default_locales())


def get_checker(registry: SchemaRegistry | None = None) -> Checker:
    """Get a checker for the configured registry."""
    config = get_config()
    return Checker.of(registry or get_registry(), max_depth=config.max_depth())


def report(result: CheckResult, what: str) -> None:
    """Print the outcome of a check, exiting with status 1 on failure."""
    if result.ok:
        print(f"OK: {what}")
        return
    print(f"FAILED: {what}")
    print(result.failure.describe())
    raise SystemExit(1)


@app.command
def entity(file: Path, synthetic: bool = False) -> None:
    """Check the entity described in a YAML or JSON file.

    Args:
        file: Entity document
        synthetic: Don't require the entity URL and local ids of attributes and values
    """
    checked = load_entity(load_document(file))
    report(get_checker().check_entity(checked, synthetic=synthetic), f"entity {checked.url or '<synthetic>'}")


@app.command
def structure(file: Path, synthetic: bool = False) -> None:
    """Check the structure described in a YAML or JSON file.

    Args:
        file: Structure document
        synthetic: Don't require local ids of attributes and values
    """
    checked = load_structure(load_document(file))
    report(get_checker().check_structure(checked, synthetic=synthetic), f"structure of etype {checked.etype_url}")


@app.command
def idresult(file: Path) -> None:
    """Check the reconciliation result described in a YAML or JSON file."""
    checked = load_id_result(load_document(file))
    outcome = checked.assignment_result.name if checked.assignment_result else "?"
    report(get_checker().check_id_result(checked), f"id result {outcome} {checked.url or ''}".rstrip())


@app.command
def etype(url: str) -> None:
    """Check an entity type of the schema."""
    registry = get_registry()
    report(get_checker(registry).check_entity_type(registry.resolve_entity_type(url)), f"etype {url}")


@app.command
def etypes() -> None:
    """Check all entity types of the schema, stopping at the first invalid one."""
    registry = get_registry()
    checker = get_checker(registry)
    all_etypes = registry.entity_types()
    for checked in all_etypes:
        report(checker.check_entity_type(checked), f"etype {checked.url}")
    print(f"Checked {len(all_etypes)} etype(s)")


@app.command
def concept(url: str) -> None:
    """Check a concept of the schema."""
    registry = get_registry()
    report(get_checker(registry).check_concept(registry.resolve_concept(url)), f"concept {url}")


@app.command
def ekb() -> None:
    """Quick check of the configured knowledge base."""
    registry = get_registry()
    report(get_checker(registry).check_ekb_quick(registry), "ekb")


@app.meta.default
def main(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    log_level: Literal["debug", "info", "warning", "error", "critical"] = "critical",
) -> None:
    """Main entry point with global options."""
    configure_logging(log_level)
    app(tokens)


if __name__ == "__main__":
    app.meta()
