"""
Core
====

AudioSignals
------------
.. autoclass:: repet.core.AudioSignal
    :members:
    :autosummary:

Masks
-----
.. automodule:: repet.core.masks
    :members:
    :autosummary:

Constants
------------
.. automodule:: repet.core.constants
    :members:
    :autosummary:

STFT utilities
--------------
.. automodule:: repet.core.stft_utils
    :members:
    :autosummary:

General utilities
-----------------
.. automodule:: repet.core.utils
    :members:
    :autosummary:

"""

from .audio_signal import AudioSignal, STFTParams, AudioSignalException, InvalidSelection
from . import constants
from . import stft_utils
from . import utils
from . import masks

__all__ = [
    'AudioSignal',
    'STFTParams',
    'AudioSignalException',
    'InvalidSelection',
    'constants',
    'stft_utils',
    'utils',
    'masks',
]
