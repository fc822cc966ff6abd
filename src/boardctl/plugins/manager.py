"""Registry of boardctl plugins.

Plugins arrive three ways: the built-in board cache registered by the
workspace, packages advertising the ``boardctl.plugins`` entry point, and
``*.py`` files in ``[plugins] local_dir``. A plugin that fails to import or
construct is logged and skipped; board mutations never depend on it.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from types import ModuleType

import pluggy

from boardctl.plugins.hookspecs import BoardctlHookSpec

PROJECT_NAME = "boardctl"
ENTRY_POINT_GROUP = "boardctl.plugins"
LOCAL_MODULE_PREFIX = "boardctl_local_plugin_"

logger = logging.getLogger(__name__)


class PluginManager:
    """Thin wrapper over :class:`pluggy.PluginManager` with boardctl's hookspecs."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(BoardctlHookSpec)
        self._loaded = False

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        name = name or type(plugin).__name__
        self._pm.register(plugin, name=name)
        logger.debug("Registered plugin: %s", name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def get_plugin(self, name: str) -> object | None:
        return self._pm.get_plugin(name)

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or type(p).__name__ for p in self._pm.get_plugins()]

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry-point plugins, then any in *local_dir*; return all names."""
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._instantiate_registered_classes()
        if local_dir is not None and local_dir.is_dir():
            for py_file in sorted(local_dir.glob("*.py")):
                if not py_file.name.startswith("_"):
                    self._load_local_file(py_file)
        self._loaded = True
        return self.list_plugin_names()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load_local_file(self, py_file: Path) -> None:
        module = _import_file(f"{LOCAL_MODULE_PREFIX}{py_file.stem}", py_file)
        if module is None:
            return
        plugin_classes = [
            cls
            for _, cls in inspect.getmembers(module, inspect.isclass)
            if cls.__module__ == module.__name__ and self._has_hook_impls(cls)
        ]
        for cls in plugin_classes:
            try:
                plugin = cls()
            except Exception:
                logger.warning("Cannot construct %s from %s", cls.__name__, py_file, exc_info=True)
                continue
            self.register_plugin(plugin, name=f"{module.__name__}.{cls.__name__}")

    def _instantiate_registered_classes(self) -> None:
        # An entry point may name a class; its hooks need a bound instance.
        for registered in list(self._pm.get_plugins()):
            if not (inspect.isclass(registered) and self._has_hook_impls(registered)):
                continue
            name = self._pm.get_name(registered) or registered.__name__
            self._pm.unregister(registered)
            try:
                plugin = registered()
            except Exception:
                logger.warning("Cannot construct entry-point plugin %s", name, exc_info=True)
                continue
            self._pm.register(plugin, name=name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """True if any public attribute of *cls* carries a ``boardctl_impl`` marker."""
        return any(
            getattr(getattr(cls, attr, None), f"{PROJECT_NAME}_impl", None)
            for attr in dir(cls)
            if not attr.startswith("_")
        )


def _import_file(module_name: str, py_file: Path) -> ModuleType | None:
    spec = importlib.util.spec_from_file_location(module_name, py_file)
    if spec is None or spec.loader is None:
        logger.warning("Not a loadable module: %s", py_file)
        return None
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
        return None
    return module
