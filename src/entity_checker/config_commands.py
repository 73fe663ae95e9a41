"""Configuration commands for entity checker CLI."""

from cyclopts import App

from entity_checker.config import CHECKER_MAX_DEPTH, SCHEMA_LOCALES, SCHEMA_PATH, get_config

config_app = App(name="config", help="Manage checker configuration")

KNOWN_KEYS = {
    SCHEMA_PATH: "YAML schema file the registry is loaded from",
    SCHEMA_LOCALES: "Comma separated locales overriding the schema file ones",
    CHECKER_MAX_DEPTH: "Maximum nesting of structures",
}


@config_app.command
def set(key: str, value: str, global_: bool = False) -> None:
    """Set a configuration setting.

    Args:
        key: Configuration key, one of schema.path, schema.locales, checker.max_depth
        value: Configuration value
        global_: If True, set in global config. If False, set in local config.
    """
    if key not in KNOWN_KEYS:
        raise ValueError(f"Unknown configuration key {key}. Known keys: {', '.join(KNOWN_KEYS)}")
    if key == CHECKER_MAX_DEPTH and not (value.isdigit() and int(value) > 0):
        raise ValueError(f"{CHECKER_MAX_DEPTH} must be a positive integer, got {value!r}")

    config = get_config(use_global=global_)
    config.set(key, value)
    scope = "global" if global_ else "local"
    print(f"Set {key} = {value} ({scope})")


@config_app.command
def unset(key: str, global_: bool = False) -> None:
    """Unset a configuration setting.

    Args:
        key: Configuration key
        global_: If True, unset from global config. If False, unset from local config.
    """
    config = get_config(use_global=global_)
    config.unset(key)
    scope = "global" if global_ else "local"
    print(f"Unset {key} ({scope})")


@config_app.command(name="show")
def show(global_: bool = False) -> None:
    """Show the effective checker settings, defaults included.

    Args:
        global_: If True, show global config only. If False, show merged config.
    """
    config = get_config(use_global=global_)
    schema_path = config.schema_path()
    locales = config.default_locales()

    if schema_path is None:
        print(f"{SCHEMA_PATH} is not set")
    else:
        state = "" if schema_path.exists() else " (missing)"
        print(f"{SCHEMA_PATH} = {schema_path}{state}")
    print(f"{SCHEMA_LOCALES} = {', '.join(locales) if locales else '(from schema file)'}")
    print(f"{CHECKER_MAX_DEPTH} = {config.max_depth()}")

    unknown = {k: v for k, v in config.list().items() if k not in KNOWN_KEYS}
    for key, value in unknown.items():
        print(f"{key} = {value} (unused)")
