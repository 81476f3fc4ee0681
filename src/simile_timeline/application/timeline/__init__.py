"""
Timeline - Multi-Band Assembly

Combines ethers, layout and scale ticks into per-band views.
"""

from .band_builder import BandBuilder, BandView

__all__ = [
    "BandBuilder",
    "BandView",
]
