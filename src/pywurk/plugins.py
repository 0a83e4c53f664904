"""Command plugin registry.

A plugin is a Python module exporting either ``command`` (a
:class:`CommandPlugin`) or a ``create_command(config)`` factory returning one.
Plugins come from root manifest dependencies that follow the naming
convention, plus the ``wurk.commands`` configuration list.
"""

from __future__ import annotations

import importlib
import re
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

import click

from pywurk.commands.base import CommandContext
from pywurk.errors import PluginLoadError
from pywurk.jsondoc import JsonNode
from pywurk.log import Log
from pywurk.workspace.link import LinkType

PLUGIN_PATTERN = re.compile(r"^(?:(?:.*/)?w[eu]rk-command-|@(?:werk|wurk)/command-)")
COMMAND_NAME = re.compile(r"^[a-z][a-z0-9-]*$")

PluginAction = Callable[[CommandContext], Awaitable[None]]


@dataclass(frozen=True)
class CommandPlugin:
    """Structural contract of a command plugin.

    Attributes:
        name: CLI command name.
        action: Coroutine function receiving the command context. Parsed
            option values are available as ``context.options``.
        config: Optional callable returning extra click parameters.
        help: Command help text.
    """

    name: str
    action: PluginAction
    config: Callable[[], Sequence[click.Parameter]] | None = None
    help: str | None = None


def module_name(plugin_id: str) -> str:
    """Map a package identifier to an importable module name.

    The last path segment is used with dashes replaced by underscores, so
    ``@wurk/command-foo`` imports ``command_foo``.
    """
    return plugin_id.rsplit("/", 1)[-1].replace("-", "_")


def discover_plugin_ids(root_config: JsonNode, explicit: Sequence[str] = ()) -> list[str]:
    """List plugin identifiers, sorted and without duplicates."""
    ids: set[str] = set(explicit)

    for link_type in LinkType:
        ids.update(key for key in root_config.at(link_type.field).keys() if PLUGIN_PATTERN.match(key))

    return sorted(ids)


def validate_plugin(plugin_id: str, value: Any) -> CommandPlugin:
    """Check a plugin export against the structural contract.

    Raises:
        PluginLoadError: If the value does not satisfy the contract.
    """
    if not isinstance(value, CommandPlugin):
        raise PluginLoadError(plugin_id, "does not export a valid command")
    if not COMMAND_NAME.match(value.name):
        raise PluginLoadError(plugin_id, f'has an invalid command name "{value.name}"')
    if not callable(value.action):
        raise PluginLoadError(plugin_id, "command action is not callable")
    if value.config is not None and not callable(value.config):
        raise PluginLoadError(plugin_id, "command config is not callable")
    return value


def load_plugin(plugin_id: str, root_config: JsonNode) -> CommandPlugin:
    """Import and validate one plugin.

    Raises:
        PluginLoadError: If the module cannot be imported or has the wrong shape.
    """
    name = module_name(plugin_id)

    try:
        module = importlib.import_module(name)
    except ImportError as e:
        raise PluginLoadError(plugin_id, f"could not be imported ({e})") from e
    except Exception as e:
        raise PluginLoadError(plugin_id, f"import raised {type(e).__name__}: {e}") from e

    value = getattr(module, "command", None)
    factory = getattr(module, "create_command", None)

    if value is None and callable(factory):
        try:
            value = factory(root_config)
        except Exception as e:
            raise PluginLoadError(plugin_id, f"factory raised {type(e).__name__}: {e}") from e

    return validate_plugin(plugin_id, value)


def load_plugins(
    root_config: JsonNode,
    explicit: Sequence[str],
    log: Log,
    *,
    reserved: Sequence[str] = (),
) -> list[CommandPlugin]:
    """Load every discovered plugin, logging and skipping failures."""
    plugins: list[CommandPlugin] = []
    names = set(reserved)

    for plugin_id in discover_plugin_ids(root_config, explicit):
        try:
            plugin = load_plugin(plugin_id, root_config)
        except PluginLoadError as e:
            log.error(e.message)
            continue

        if plugin.name in names:
            log.error(PluginLoadError(plugin_id, f'command "{plugin.name}" is already defined').message)
            continue

        log.debug(f'loaded command plugin "{plugin_id}"')
        names.add(plugin.name)
        plugins.append(plugin)

    return plugins
