"""Protocol processors: decoded instruction -> optional normalized event.

This package provides:
- CpmmProcessor, ClmmProcessor, AmmV4Processor
- BaseProcessor (shared filtering / emission) and the Route table vocabulary
"""

from rayalert.processors.amm_v4 import AmmV4Processor
from rayalert.processors.base import BaseProcessor, ProcessorStats, Route
from rayalert.processors.clmm import ClmmProcessor
from rayalert.processors.cpmm import CpmmProcessor

__all__ = [
    "AmmV4Processor",
    "BaseProcessor",
    "ProcessorStats",
    "Route",
    "ClmmProcessor",
    "CpmmProcessor",
]
