"""Device registry and factory.

Provides discovery and instantiation of simulated devices that are
registered globally during package initialization.

Device packages call register_device() from their __init__.py, so
importing the package is enough to make its devices available.
"""

from __future__ import annotations

from typing import Any, Callable


DeviceFactory = Callable[..., Any]


class DeviceRegistry:
    """Registry of available device implementations.

    THREAD SAFETY: Not thread-safe. All device registration should happen
    during module initialization before any threads are spawned.
    """

    def __init__(self):
        self._devices: dict[str, DeviceFactory] = {}

    def register(self, name: str, factory: DeviceFactory) -> None:
        """Register a device implementation."""
        if name in self._devices:
            raise ValueError(f"Device '{name}' already registered")
        self._devices[name] = factory

    def get(self, name: str) -> DeviceFactory:
        """Get a device factory by name."""
        if name not in self._devices:
            raise ValueError(
                f"Unknown device '{name}'. Available: {list(self._devices.keys())}"
            )
        return self._devices[name]

    def list_devices(self) -> list[str]:
        """List all registered device names."""
        return list(self._devices.keys())

    def create(self, name: str, **kwargs) -> Any:
        """Instantiate a device by name."""
        factory = self.get(name)
        return factory(**kwargs)


# Global registry
_REGISTRY = DeviceRegistry()


def register_device(name: str, factory: DeviceFactory) -> None:
    """Register a device globally."""
    _REGISTRY.register(name, factory)


def get_device(name: str) -> DeviceFactory:
    """Get a device factory by name."""
    return _REGISTRY.get(name)


def create_device(name: str, **kwargs) -> Any:
    """Create a device instance by name."""
    return _REGISTRY.create(name, **kwargs)


def list_available_devices() -> list[str]:
    """List all registered devices."""
    return _REGISTRY.list_devices()


def verify_devices_registered() -> None:
    """Verify that at least one device is registered.

    Raises:
        RuntimeError: If no devices are registered
    """
    devices = list_available_devices()
    if not devices:
        raise RuntimeError(
            "No devices registered! Ensure device packages are imported. "
            "Example: import dspsim.adau146x"
        )
