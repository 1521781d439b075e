"""Config commands -- view and modify global configuration.

Provides the ``oasbuilder config`` sub-command group for reading and
updating the user's global configuration file
(:class:`~oasbuilder.models.GlobalConfig`). Settings are persisted in the
oasbuilder config directory and control defaults such as the openapi
version of new documents, the workspace document location and the output
format.
"""

from __future__ import annotations

import typer

from oasbuilder.output import error, info, print_record, success


config_app = typer.Typer(no_args_is_help=True)


def _flatten(data: dict, prefix: str = "") -> dict:
    flat: dict = {}
    for key, value in data.items():
        if isinstance(value, dict):
            flat.update(_flatten(value, f"{prefix}{key}."))
        else:
            flat[f"{prefix}{key}"] = value
    return flat


@config_app.command("show")
def config_show() -> None:
    """Show current configuration.

    Loads the global config from disk and prints the config directory
    path followed by every setting in dot notation.

    Example::

        oasbuilder config show
        oasbuilder --json config show
    """
    from oasbuilder.config import get_config_dir, load_global_config

    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    print_record(_flatten(config.model_dump(mode="json")), title="Configuration")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'output.format')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    Uses dot notation for nested keys. The updated config is validated
    against :class:`~oasbuilder.models.GlobalConfig` before saving.

    Args:
        key: Dot-separated config key path (e.g. ``output.format``).
        value: String value to set.

    Raises:
        typer.Exit: With code 2 if the key path is invalid or Pydantic
            validation fails.

    Example::

        oasbuilder config set default_openapi_version 3.0.3
        oasbuilder config set output.format json
        oasbuilder config set document_path ./api.json
    """
    from pydantic import ValidationError

    from oasbuilder.config import load_global_config, save_global_config
    from oasbuilder.models import GlobalConfig

    config = load_global_config()
    data = config.model_dump(mode="json")

    # Navigate the dot-separated key path.
    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    target[final_key] = value

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {value}")
