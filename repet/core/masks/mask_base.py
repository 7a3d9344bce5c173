"""
Base class for the REPET masks. A mask is stored as a three dimensional numpy :obj:`ndarray`
with dimensions ``[NUM_FREQ, NUM_HOPS, NUM_CHAN]`` (see :ref:`constants`). 2D input is given
a single channel axis.

Masks made by REPET cover the non-negative frequencies only (``window_length // 2 + 1`` bins), they are
mirrored onto the full spectrum when applied, see :func:`AudioSignal.apply_mask`.
"""

import numpy as np

from .. import utils
from .. import constants


class MaskBase(object):
    """
    Args:
        input_mask (:obj:`np.ndarray`): A 2- or 3-dimensional numpy ``ndarray`` representing a mask.

    """
    def __init__(self, input_mask):
        self._mask = None
        self.mask = input_mask

    @property
    def mask(self):
        """
        The mask data, ``(n_frequency_bins, n_frames, n_channels)``. Subclasses check the values
        in :func:`_validate_mask`: 0/1 (or bools) for :class:`core.masks.binary_mask.BinaryMask`,
        ``[0.0, 1.0]`` for :class:`core.masks.soft_mask.SoftMask`.

        Raises:
            :obj:`ValueError` if not a 2D or 3D :obj:`np.ndarray`, or if values fail validation.
            :obj:`NotImplementedError` on the base class.

        """
        return self._mask

    @mask.setter
    def mask(self, value):
        if not isinstance(value, np.ndarray):
            raise ValueError('Type of self.mask must be np.ndarray!')

        if value.ndim == 2:
            value = np.expand_dims(value, axis=constants.STFT_CHAN_INDEX)

        if value.ndim != 3:
            raise ValueError(f'Masks must have 2 or 3 dimensions, got {value.ndim}!')

        self._mask = self._validate_mask(value)

    def get_channel(self, ch):
        """
        Channel ``ch`` of the mask as a 2D :obj:`np.ndarray`.

        Raises:
            :obj:`ValueError` if not ``0 <= ch < num_channels``.

        """
        if not 0 <= ch < self.num_channels:
            raise ValueError(
                f'Cannot get channel {ch} for object w/ {self.num_channels} channels!'
                ' (0-based)'
            )

        return utils._get_axis(self.mask, constants.STFT_CHAN_INDEX, ch)

    @property
    def num_channels(self):
        """(int) Number of channels this mask has."""
        return self.mask.shape[constants.STFT_CHAN_INDEX]

    @property
    def shape(self):
        """(tuple) Shape of the mask data."""
        return self.mask.shape

    @staticmethod
    def _validate_mask(mask_):
        raise NotImplementedError('Cannot call base class! Use BinaryMask or SoftMask!')

    def invert_mask(self):
        raise NotImplementedError('Cannot call base class! Use BinaryMask or SoftMask!')

    def __eq__(self, other):
        return np.array_equal(self.mask, other.mask)

    def __ne__(self, other):
        return not self.__eq__(other)
