from .constants import KNOWN_PLUGINS
from .custom_exceptions import PluginError
from .custom_types import ToolchainConfig
from .logger import logger


class PluginRegistry:
    """Extension modules handed to the external toolchain, registered once per process."""

    def __init__(self):
        self._plugins = {}

    def register(self, name: str) -> bool:
        if name not in KNOWN_PLUGINS:
            raise PluginError(
                f'unknown plugin "{name}", expected one of {sorted(KNOWN_PLUGINS)}'
            )
        if name in self._plugins:
            return False
        self._plugins[name] = KNOWN_PLUGINS[name]
        logger.okay("Plugin registered", self._plugins[name])
        return True

    def registered(self) -> tuple[str, ...]:
        return tuple(sorted(self._plugins))

    def packages(self) -> tuple[str, ...]:
        return tuple(self._plugins[name] for name in self.registered())

    def __contains__(self, name) -> bool:
        return name in self._plugins

    def __eq__(self, other) -> bool:
        if not isinstance(other, PluginRegistry):
            return NotImplemented
        return self.registered() == other.registered()

    def clear(self) -> None:
        self._plugins.clear()


def register_plugins(
    config: ToolchainConfig, registry: PluginRegistry | None = None
) -> PluginRegistry:
    registry = plugin_registry if registry is None else registry
    for name in config.plugins:
        registry.register(name)
    return registry


plugin_registry = PluginRegistry()
