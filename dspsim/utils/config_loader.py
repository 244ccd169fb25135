"""Helpers for loading and validating simulated device configuration."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
import threading

import yaml  # type: ignore[import-untyped]

from dspsim.core.exceptions import ConfigurationError
from dspsim.core.register import AccessMode, RegisterDescriptor, SideEffect
from dspsim.utils.consts import ConstUtils

CONFIG_DIR = Path(__file__).parent.parent / "configs"


@dataclass(frozen=True)
class MemoryRegionConfig:
    name: str
    base: int
    size: int

    @property
    def end(self) -> int:
        return self.base + self.size


@dataclass(frozen=True)
class MemoryConfig:
    regions: tuple[MemoryRegionConfig, ...]


@dataclass(frozen=True)
class ProtocolConfig:
    chip_address: int
    control_base: int
    idle_byte: int = 0x00


@dataclass(frozen=True)
class PageSelectConfig:
    register: int
    bit: int = 0


@dataclass(frozen=True)
class SafeloadConfig:
    data_base: int
    data_words: int
    address_pointer: int
    trigger_lower: int
    trigger_upper: int


@dataclass(frozen=True)
class GpioConfig:
    chip_select: int
    reset: int


@dataclass(frozen=True)
class DeviceConfig:
    name: str
    registers_path: str
    memory: MemoryConfig
    protocol: ProtocolConfig
    page_select: PageSelectConfig
    safeload: SafeloadConfig
    gpio: GpioConfig


# Configuration cache with thread safety
_LOADER_CACHE: dict[str, DeviceConfig] = {}
_CACHE_LOCK = threading.RLock()


def _get_config_path(device_name: str, path: Optional[str] = None) -> str:
    if path is None:
        # Bundled configs live in dspsim/configs/{device_name}.yaml
        path = str(CONFIG_DIR / f"{device_name}.yaml")

    return path


def _load_yaml_file(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Failed to parse config: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config root in {path} must be a mapping")
    return raw


def _build_memory_cfg(mem_raw: dict[str, Any]) -> MemoryConfig:
    regions = tuple(
        MemoryRegionConfig(name=str(r["name"]), base=int(r["base"]), size=int(r["size"]))
        for r in mem_raw["regions"]
    )
    return MemoryConfig(regions=regions)


def _parse_device_cfg_from_dict(raw: dict[str, Any], base_dir: Path) -> DeviceConfig:
    try:
        device = raw["device"]
        proto = raw["protocol"]
        page = raw["page_select"]
        sl = raw["safeload"]
        gpio = raw["gpio"]

        cfg = DeviceConfig(
            name=str(device["name"]),
            registers_path=str(base_dir / device["registers"]),
            memory=_build_memory_cfg(raw["memory"]),
            protocol=ProtocolConfig(
                chip_address=int(proto["chip_address"]),
                control_base=int(proto["control_base"]),
                idle_byte=int(proto.get("idle_byte", 0x00)),
            ),
            page_select=PageSelectConfig(
                register=int(page["register"]),
                bit=int(page.get("bit", 0)),
            ),
            safeload=SafeloadConfig(
                data_base=int(sl["data_base"]),
                data_words=int(sl["data_words"]),
                address_pointer=int(sl["address_pointer"]),
                trigger_lower=int(sl["trigger_lower"]),
                trigger_upper=int(sl["trigger_upper"]),
            ),
            gpio=GpioConfig(chip_select=int(gpio["chip_select"]), reset=int(gpio["reset"])),
        )
    except KeyError as exc:
        raise ConfigurationError(f"Missing required config key: {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid config schema: {exc}") from exc

    _validate_memory_config(cfg.memory, cfg.protocol)
    _validate_protocol_config(cfg.protocol, cfg.page_select)
    _validate_safeload_config(cfg.safeload, cfg.memory)
    return cfg


def _validate_memory_config(mem: MemoryConfig, proto: ProtocolConfig) -> None:
    """Basic sanity checks for memory layout to fail fast on bad configs."""
    if not mem.regions:
        raise ConfigurationError("memory.regions", "at least one region is required")

    names = [r.name for r in mem.regions]
    if len(set(names)) != len(names):
        raise ConfigurationError("memory.regions", "region names must be unique")

    def overlaps(a: MemoryRegionConfig, b: MemoryRegionConfig) -> bool:
        return not (a.end <= b.base or b.end <= a.base)

    for region in mem.regions:
        if region.size <= 0:
            raise ConfigurationError("memory.regions", f"{region.name} size must be positive")
        if region.base < 0 or region.end > ConstUtils.ADDRESS_SPACE_SIZE:
            raise ConfigurationError(
                "memory.regions", f"{region.name} lies outside the 16-bit address space"
            )
        if region.end > proto.control_base:
            raise ConfigurationError(
                "memory.regions", f"{region.name} overlaps the control register window"
            )

    ordered = sorted(mem.regions, key=lambda r: r.base)
    for prev, nxt in zip(ordered, ordered[1:]):
        if overlaps(prev, nxt):
            raise ConfigurationError("memory.regions", f"{prev.name} overlaps {nxt.name}")


def _validate_protocol_config(proto: ProtocolConfig, page: PageSelectConfig) -> None:
    if not 0 <= proto.chip_address <= 0x7F:
        raise ConfigurationError("protocol.chip_address", "must fit in 7 bits")
    if not 0 < proto.control_base < ConstUtils.ADDRESS_SPACE_SIZE:
        raise ConfigurationError("protocol.control_base", "must be inside the 16-bit space")
    if not 0 <= proto.idle_byte <= ConstUtils.MASK_8_BITS:
        raise ConfigurationError("protocol.idle_byte", "must be a byte value")
    if not proto.control_base <= page.register < ConstUtils.ADDRESS_SPACE_SIZE:
        raise ConfigurationError("page_select.register", "must be a control register address")
    if not 0 <= page.bit < 16:
        raise ConfigurationError("page_select.bit", "must be in range 0..15")


def _validate_safeload_config(sl: SafeloadConfig, mem: MemoryConfig) -> None:
    if sl.data_words <= 0:
        raise ConfigurationError("safeload.data_words", "must be positive")

    def in_memory(address: int) -> bool:
        return any(r.base <= address < r.end for r in mem.regions)

    addresses = {
        "data_base": sl.data_base,
        "data_end": sl.data_base + sl.data_words - 1,
        "address_pointer": sl.address_pointer,
        "trigger_lower": sl.trigger_lower,
        "trigger_upper": sl.trigger_upper,
    }
    for key, address in addresses.items():
        if not in_memory(address):
            raise ConfigurationError(
                f"safeload.{key}", f"0x{address:04X} is not inside a memory region"
            )
    if sl.trigger_lower == sl.trigger_upper:
        raise ConfigurationError("safeload", "trigger addresses must differ")


def _parse_register_entry(entry: dict[str, Any]) -> RegisterDescriptor:
    try:
        side_effect = entry.get("side_effect")
        mask = entry.get("mask")
        return RegisterDescriptor(
            address=int(entry["address"]),
            name=str(entry["name"]),
            reset_value=int(entry.get("reset", 0)),
            access=AccessMode(entry.get("access", "rw")),
            mask=None if mask is None else int(mask),
            ready_mask=int(entry.get("ready_bits", 0)),
            side_effect=None if side_effect is None else SideEffect(side_effect),
            description=str(entry.get("description", "")),
        )
    except KeyError as exc:
        raise ConfigurationError(f"Register entry missing key: {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid register entry {entry!r}: {exc}") from exc


def load_register_table(
    path: str, control_base: Optional[int] = None
) -> tuple[RegisterDescriptor, ...]:
    """Load a declarative control register table.

    Args:
        path: YAML file with a top-level ``registers`` list
        control_base: If given, every register address must be at or above it

    Raises:
        ConfigurationError: on parse errors, unknown tags or duplicate addresses
    """
    raw = _load_yaml_file(Path(path))
    entries = raw.get("registers")
    if not isinstance(entries, list):
        raise ConfigurationError("registers", f"{path} must contain a 'registers' list")

    table = tuple(_parse_register_entry(e) for e in entries)

    seen: set[int] = set()
    for desc in table:
        if desc.address in seen:
            raise ConfigurationError(
                "registers", f"duplicate register address 0x{desc.address:04X} ({desc.name})"
            )
        seen.add(desc.address)
        if control_base is not None and not (
            control_base <= desc.address < ConstUtils.ADDRESS_SPACE_SIZE
        ):
            raise ConfigurationError(
                "registers",
                f"{desc.name} at 0x{desc.address:04X} is outside the control register window",
            )

    return table


def load_config(device_name: str, path: Optional[str] = None) -> DeviceConfig:
    """Load and validate configuration from a YAML file.

    Args:
        device_name: Device identifier (e.g. 'adau1467') for config lookup.
        path: Optional path to YAML config. If None, load the bundled
            dspsim/configs/{device_name}.yaml.

    Returns:
        DeviceConfig instance

    Raises:
        ConfigurationError: on parse or validation errors
    """

    p = Path(_get_config_path(device_name=device_name, path=path))
    raw = _load_yaml_file(p)

    return _parse_device_cfg_from_dict(raw=raw, base_dir=p.parent)


def get_config(device_name: str) -> DeviceConfig:
    """Return the loaded config for device_name, loading and caching if necessary.

    THREAD SAFETY: This function is thread-safe. Multiple threads can
    safely call this concurrently.
    """
    with _CACHE_LOCK:
        if device_name not in _LOADER_CACHE:
            _LOADER_CACHE[device_name] = load_config(device_name=device_name)
        return _LOADER_CACHE[device_name]


def clear_config_cache() -> None:
    """Clear all cached configurations.

    All subsequent calls to get_config() will reload from disk.
    """
    with _CACHE_LOCK:
        _LOADER_CACHE.clear()
