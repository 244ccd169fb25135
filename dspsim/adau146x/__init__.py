"""Analog Devices ADAU146x SigmaDSP implementations.

Importing this package registers the "adau1467" and "adau1463" devices.
"""

from dspsim.core.device import register_device

from .consts import VARIANT_ADAU1463, VARIANT_ADAU1467
from .device import ADAU1463, ADAU1467, ADAU146x

register_device(VARIANT_ADAU1467, ADAU1467)
register_device(VARIANT_ADAU1463, ADAU1463)

__all__ = ["ADAU146x", "ADAU1467", "ADAU1463"]
