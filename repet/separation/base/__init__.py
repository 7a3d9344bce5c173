"""
Base for all methods
--------------------

.. autoclass:: repet.separation.SeparationBase
    :members:
    :autosummary:

Base for masking-based methods
------------------------------

.. autoclass:: repet.separation.MaskSeparationBase
    :members:
    :autosummary:

"""

from .separation_base import (
    SeparationBase,
    SeparationException,
    InvalidPeriodRange,
    InvalidParameter,
)
from .mask_separation_base import MaskSeparationBase
