"""
Separation algorithms
=====================

Base classes
------------

These classes hold what every masking-based separation shares: a private copy
of the input signal, its STFT, the masks made by ``run`` and the resynthesis of
one estimate per mask.

.. automodule:: repet.separation.base
    :members:
    :autosummary:
    :undoc-members:

Primitive methods
-----------------

Methods based on primitives, hard-wired perceptual grouping cues. Repetition
is one of them: what repeats is heard as the background.

.. automodule:: repet.separation.primitive
    :members:
    :autosummary:
    :undoc-members:

"""

from .base import (
    SeparationBase,
    MaskSeparationBase,
    SeparationException,
    InvalidPeriodRange,
    InvalidParameter,
)

from . import primitive
from .primitive import Repet
