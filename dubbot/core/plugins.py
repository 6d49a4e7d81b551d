"""Loading of command and event listener modules.

Modules come from a directory scan (every ``*.py`` below the directory, like
the bundled ``components`` package) and from dotted import paths listed in
the settings.

Command modules export ``triggers`` and ``handler(chat_event, context)``;
optionally ``minimum_role``, ``insufficient_permissions_handler`` and
``init(context)``.

Event listener modules export ``listeners``, a mapping from ``Event`` (or its
string value) to either a handler ``handler(event, context)`` or a
``{"handler": ..., "context": ...}`` mapping; optionally ``init(context)``.
A listener entry whose ``handler`` is not callable stops startup.
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
import sys
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from types import ModuleType
from typing import Any

from dubbot.models import Event

from .commands import Command
from .context import BotContext
from .exceptions import PluginError

LOGGER = logging.getLogger("Plugins")

_PLUGIN_PACKAGE = "dubbot_plugins"


def discover_module_files(directory: Path) -> list[Path]:
    """Every Python file under ``directory`` except package markers and private files."""
    if not directory.is_dir():
        LOGGER.warning(f"Plugin directory {directory} does not exist")
        return []

    return sorted(
        path
        for path in directory.rglob("*.py")
        if path.stem != "__init__" and not path.name.startswith("_")
    )


def _import_file(path: Path, directory: Path) -> ModuleType:
    relative = path.relative_to(directory).with_suffix("")
    module_name = ".".join((_PLUGIN_PACKAGE, directory.name, *relative.parts))

    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load module from {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module


def _iter_modules(
    directory: Path | None, module_names: Iterable[str], kind: str
) -> Iterable[tuple[str, ModuleType]]:
    sources: list[tuple[str, Callable[[], ModuleType]]] = []

    if directory is not None:
        files = discover_module_files(directory)
        LOGGER.info(f"Found the following potential {kind} files: {[str(f) for f in files]}")
        for path in files:
            sources.append((str(path), lambda p=path: _import_file(p, directory)))

    for name in module_names:
        sources.append((name, lambda n=name: importlib.import_module(n)))

    for source, load in sources:
        try:
            module = load()
        except Exception as e:
            LOGGER.exception(f"Failed to load {kind} module {source}: {e}")
            continue
        yield source, module


def _call_init(init: Any, context: BotContext, source: str) -> None:
    if callable(init):
        LOGGER.info(f"Calling init for module at {source}")
        init(context)


# ----------------------------------------------------------------------
# Commands
# ----------------------------------------------------------------------


def load_commands(
    context: BotContext,
    *,
    directory: Path | None,
    module_names: Iterable[str] = (),
    case_sensitive: bool = False,
) -> list[Command]:
    commands: list[Command] = []

    for source, module in _iter_modules(directory, module_names, "command"):
        try:
            command = Command.from_module(module, case_sensitive=case_sensitive)
        except PluginError as e:
            LOGGER.warning(
                f"Found a module at {source} but it doesn't appear to be a command handler ({e}). "
                "Ignoring."
            )
            continue

        _call_init(command.init, context, source)
        commands.append(command)
        LOGGER.info(f"Registered command {sorted(command.triggers)} from {source}")

    return commands


# ----------------------------------------------------------------------
# Event listeners
# ----------------------------------------------------------------------


def listener_entries(module: ModuleType) -> list[tuple[Event, Callable[..., Any], Any]]:
    """Validate a module's ``listeners`` mapping into (event, handler, context) triples.

    Raises ``PluginError`` for an object-form entry whose handler is not callable.
    """
    mapping = getattr(module, "listeners", None)
    if not isinstance(mapping, Mapping):
        return []

    entries: list[tuple[Event, Callable[..., Any], Any]] = []
    for key, value in mapping.items():
        try:
            event = Event(key)
        except ValueError:
            LOGGER.warning(f"Module {module.__name__} listens to unknown event '{key}'. Ignoring.")
            continue

        if callable(value):
            entries.append((event, value, None))
        elif isinstance(value, Mapping):
            handler = value.get("handler")
            if not callable(handler):
                LOGGER.error(
                    f"Event listener for event '{event.value}' in {module.__name__} has an "
                    "object type, but the 'handler' property does not refer to a function"
                )
                raise PluginError(
                    f"handler for '{event.value}' is not callable", module=module.__name__
                )
            entries.append((event, handler, value.get("context")))
        else:
            LOGGER.warning(
                "Found what looks like an event listener, but it's not a mapping or a function. "
                f"Event: {event.value}, from module: {module.__name__}"
            )

    return entries


def load_event_listeners(
    context: BotContext,
    *,
    directory: Path | None,
    module_names: Iterable[str] = (),
) -> list[ModuleType]:
    modules: list[ModuleType] = []

    for source, module in _iter_modules(directory, module_names, "event listener"):
        entries = listener_entries(module)
        if not entries:
            LOGGER.warning(
                f"Found a module at {source} but it doesn't appear to be an event listener. Ignoring."
            )
            continue

        for event, handler, handler_context in entries:
            context.bot.on(event, handler, handler_context)

        _call_init(getattr(module, "init", None), context, source)
        modules.append(module)
        LOGGER.info(f"Registered event listener from {source}")

    return modules
