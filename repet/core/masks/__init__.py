"""
init for masks files
"""

from .mask_base import MaskBase
from .binary_mask import BinaryMask
from .soft_mask import SoftMask, harden_mask

__all__ = ['MaskBase', 'BinaryMask', 'SoftMask', 'harden_mask']
