# Current repet version
__version__ = '0.1.0'

from .core import AudioSignal, STFTParams, AudioSignalException, InvalidSelection
from .core import utils, stft_utils, constants, masks

from . import core
from . import separation
from .separation import (
    Repet,
    SeparationException,
    InvalidPeriodRange,
    InvalidParameter,
)
from .session import RepetSession, SelectionStateMachine, InteractionState, InvalidTransition
