"""
A repository containing all of the constants frequently used in
this repeating-pattern separation stuff.
"""
__all__ = ['DEFAULT_SAMPLE_RATE', 'DEFAULT_WIN_LEN_PARAM', 'DEFAULT_BIT_DEPTH',
           'EPSILON', 'WINDOW_HAMMING', 'WINDOW_HANN', 'WINDOW_DEFAULT',
           'ALL_WINDOWS', 'LEN_INDEX', 'CHAN_INDEX', 'STFT_VERT_INDEX',
           'STFT_LEN_INDEX', 'STFT_CHAN_INDEX', 'DEFAULT_MIN_PERIOD',
           'DEFAULT_MAX_PERIOD', 'DEFAULT_HARDNESS', 'DEFAULT_MASK_THRESHOLD',
           'MIN_REPETITIONS']

DEFAULT_SAMPLE_RATE = 44100  #: (int): Default sample rate. 44.1 kHz, CD-quality
DEFAULT_WIN_LEN_PARAM = 0.04  #: (float): Default window length. 40ms, audio is stationary around there
DEFAULT_BIT_DEPTH = 16  #: (int): Default bit depth. 16-bits, CD-quality
EPSILON = 1e-16  #: (float): epsilon for determining small values

WINDOW_HAMMING = 'hamming'  #: (str): Name for calling Hamming window. 'hamming'
WINDOW_HANN = 'hann'  #: (str): Name for calling Hann window. 'hann'
WINDOW_RECTANGULAR = 'boxcar'  #: (str): Name for calling Rectangular window. 'boxcar'

WINDOW_DEFAULT = WINDOW_HAMMING  #: (str): Default window, periodic Hamming.
ALL_WINDOWS = [WINDOW_HAMMING, WINDOW_HANN, WINDOW_RECTANGULAR]
"""list(str): list of all windows that satisfy constant overlap-add at half-window hops
"""

BINARY_MASK = 'binary'
""" String alias for setting this object to return :class:`core.masks.binary_mask.BinaryMask` objects
"""

SOFT_MASK = 'soft'
""" String alias for setting this object to return :class:`core.masks.soft_mask.SoftMask` objects
"""

# ############# Array Indices ############# #

# audio_data
LEN_INDEX = 1  #: (int): Index of the number of samples in an audio signal.
CHAN_INDEX = 0  #: (int): Index of the number of channels in an audio signal.

# stft_data
STFT_VERT_INDEX = 0
"""
(int) Index of the number of frequency (vertical) values in a time-frequency representation. 
"""
STFT_LEN_INDEX = 1
"""
(int) Index of the number of time (horizontal) hops in a time-frequency representation. 
"""
STFT_CHAN_INDEX = 2
"""
(int) Index of the number of channels in a time-frequency representation. 
"""

# ############# REPET defaults ############# #

DEFAULT_MIN_PERIOD = 1.0  #: (float): Shortest repeating period searched for, in seconds.
DEFAULT_MAX_PERIOD = 10.0  #: (float): Longest repeating period searched for, in seconds.
DEFAULT_HARDNESS = 0.0  #: (float): Masking hardness. 0 keeps the original soft mask.
DEFAULT_MASK_THRESHOLD = 0.5  #: (float): Pivot around which hardening spreads the mask.
MIN_REPETITIONS = 3
"""
(int) The repeating period can be at most ``1 / MIN_REPETITIONS`` of the beat spectrum, so 
that the median is taken over enough repetitions to mean something.
"""
