"""Command line front end.

    dspsim list
    dspsim info --device adau1467
    dspsim replay --device adau1467 script.yaml --dump-registers regs.json

A replay script is a YAML list of steps, each a single-key mapping (or the
bare string ``reset``):

    - write_memory: {address: 0x0010, words: [0x2A]}
    - read_memory: {address: 0x0010, count: 1}
    - write_control: {address: 0xF899, values: [1]}
    - read_control: {address: 0xF899}
    - safeload: {address: 0x0020, words: [1, 2, 3], upper: false}
    - raw: "00 00 10 00 00 00 2A"
    - reset
"""

from __future__ import annotations

import argparse
import binascii
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import yaml  # type: ignore[import-untyped]

from dspsim.adau146x import ADAU146x, host
from dspsim.core.device import create_device, list_available_devices, verify_devices_registered
from dspsim.core.exceptions import SimulatorError
from dspsim.core.spi_bus import SPIBus

logger = logging.getLogger(__name__)


def _hex_to_bytes(data_hex: str) -> bytes:
    return binascii.unhexlify("".join(data_hex.split()).encode("ascii"))


def _bytes_to_hex(data: bytes) -> str:
    return binascii.hexlify(data, " ").decode("ascii")


def _words(raw: Any) -> list[int]:
    if isinstance(raw, int):
        return [raw]
    return [int(v) for v in raw]


class ReplaySession:
    """Runs replay steps against one device over an SPI bus."""

    def __init__(self, device: ADAU146x):
        self.device = device
        self.bus = SPIBus(device)

    def run(self, steps: list[Any]) -> list[str]:
        """Run every step and return the printed lines."""
        output = []
        for number, step in enumerate(steps, start=1):
            line = self.handle_step(step, number)
            if line is not None:
                output.append(line)
        return output

    def handle_step(self, step: Any, number: int = 0) -> Optional[str]:
        if isinstance(step, str):
            cmd, args = step, {}
        elif isinstance(step, dict) and len(step) == 1:
            cmd, args = next(iter(step.items()))
        else:
            raise ValueError(f"Step {number}: expected a command name or single-key mapping")

        handlers: dict[str, Callable[[Any], Optional[str]]] = {
            "write_memory": self._cmd_write_memory,
            "read_memory": self._cmd_read_memory,
            "write_control": self._cmd_write_control,
            "read_control": self._cmd_read_control,
            "safeload": self._cmd_safeload,
            "raw": self._cmd_raw,
            "reset": self._cmd_reset,
        }
        handler = handlers.get(cmd)
        if handler is None:
            raise ValueError(f"Step {number}: unknown command '{cmd}'")
        try:
            return handler(args or {})
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Step {number} ({cmd}): bad arguments: {exc}") from exc

    def _cmd_write_memory(self, args: dict[str, Any]) -> None:
        host.write_memory(self.bus, int(args["address"]), _words(args["words"]))

    def _cmd_read_memory(self, args: dict[str, Any]) -> str:
        address = int(args["address"])
        values = host.read_memory(self.bus, address, int(args.get("count", 1)))
        return f"mem 0x{address:04X}: " + " ".join(f"0x{v:08X}" for v in values)

    def _cmd_write_control(self, args: dict[str, Any]) -> None:
        host.write_control(self.bus, int(args["address"]), _words(args["values"]))

    def _cmd_read_control(self, args: dict[str, Any]) -> str:
        address = int(args["address"])
        values = host.read_control(self.bus, address, int(args.get("count", 1)))
        return f"ctl 0x{address:04X}: " + " ".join(f"0x{v:04X}" for v in values)

    def _cmd_safeload(self, args: dict[str, Any]) -> None:
        host.safeload(
            self.bus,
            int(args["address"]),
            _words(args["words"]),
            upper=bool(args.get("upper", False)),
            layout=self.device.config.safeload,
        )

    def _cmd_raw(self, args: Any) -> str:
        data = _hex_to_bytes(args if isinstance(args, str) else args["data"])
        return f"raw: {_bytes_to_hex(self.bus.transaction(data))}"

    def _cmd_reset(self, _args: Any) -> None:
        self.device.reset()


def _parse_int(text: str) -> int:
    return int(text, 0)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dspsim", description="SigmaDSP device simulator")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List registered devices")

    info = sub.add_parser("info", help="Show a device memory map")
    info.add_argument("--device", required=True, help="Device name")

    replay = sub.add_parser("replay", help="Replay a YAML bus script")
    replay.add_argument("--device", required=True, help="Device name")
    replay.add_argument("script", help="YAML script to replay")
    replay.add_argument("--dump-registers", metavar="PATH", help="Write registers as JSON")
    replay.add_argument("--dump-memory", metavar="PATH", help="Write a raw memory block")
    replay.add_argument("--address", type=_parse_int, default=0, help="Memory dump start")
    replay.add_argument("--words", type=_parse_int, default=0, help="Memory dump length")
    replay.add_argument("--upper", action="store_true", help="Dump page B instead of page A")
    return parser


def _create_dsp(name: str) -> ADAU146x:
    device = create_device(name)
    if not isinstance(device, ADAU146x):
        raise ValueError(f"Device '{name}' is not an SPI DSP")
    return device


def _load_script(path: str) -> list[Any]:
    with Path(path).open("r", encoding="utf-8") as fh:
        steps = yaml.safe_load(fh)
    if not isinstance(steps, list):
        raise ValueError(f"{path}: script must be a YAML list of steps")
    return steps


def _run(args: argparse.Namespace) -> int:
    if args.command == "list":
        for name in list_available_devices():
            print(name)
        return 0

    dsp = _create_dsp(args.device)

    if args.command == "info":
        print(yaml.safe_dump({"device": dsp.name, **dsp.get_memory_map()}, sort_keys=False), end="")
        return 0

    session = ReplaySession(dsp)
    for line in session.run(_load_script(args.script)):
        print(line)

    if args.dump_registers:
        dsp.save_registers(args.dump_registers)
    if args.dump_memory:
        dsp.save_memory(args.dump_memory, args.address, args.words, upper=args.upper)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    verify_devices_registered()

    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return _run(args)
    except (SimulatorError, ValueError, OSError, yaml.YAMLError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
