import argparse
import sys
from pathlib import Path

# Ensure local repo package is used even if another "dspsim" is on PYTHONPATH.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dspsim import create_device
from dspsim.adau146x import host
from dspsim.core.address_space import Page
from dspsim.core.spi_bus import SPIBus


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Update a DSP parameter block with safeload.")
    parser.add_argument("--device", default="adau1467", help="Device name")
    parser.add_argument(
        "--address",
        type=lambda s: int(s, 0),
        default=0x0200,
        help="Parameter address to update",
    )
    parser.add_argument(
        "--steps",
        type=int,
        default=4,
        help="Number of parameter updates to send",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    dsp = create_device(args.device)
    bus = SPIBus(dsp)
    layout = dsp.config.safeload

    for step in range(args.steps):
        gains = [0x00800000 >> step, 0x00400000 >> step]
        host.safeload(bus, args.address, gains, layout=layout)
        words = dsp.read_memory_block(args.address, len(gains), Page.A)
        print(f"step {step}:", " ".join(f"0x{w:08X}" for w in words))

    print(f"safeloads committed: {dsp.safeload.commit_count}")


if __name__ == "__main__":
    main()
