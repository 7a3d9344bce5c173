"""
The :class:`BinaryMask` class is for creating a time-frequency mask with binary values. Like all
:class:`core.masks.mask_base.MaskBase` objects, :class:`BinaryMask` is initialized with a 2D or 3D numpy array
containing the mask data. The data type (numpy.dtype) of the initial mask can be either bool, int, or float.
The mask is stored as a 3-dimensional boolean-valued numpy array.

If the data type of the input mask is int it is expected that all values are either 0 or 1. If the data type
of the mask is float, all values must be within 1e-2 of either 1 or 0. Otherwise :class:`BinaryMask` raises
an exception.

A REPET run with ``mask_type='binary'`` returns :class:`BinaryMask` objects. They are the ``hardness = 1``
end of :func:`core.masks.soft_mask.harden_mask`.
"""

import numpy as np

from . import mask_base


class BinaryMask(mask_base.MaskBase):
    """
    Class for creating a Binary Mask to apply to a time-frequency representation of the audio.

    Args:
        input_mask (:obj:`np.ndarray`): 2- or 3-D :obj:`np.array` that represents the mask.
    """

    @staticmethod
    def _validate_mask(mask_):
        if mask_.dtype == bool:
            return mask_
        elif mask_.dtype.kind in np.typecodes['AllInteger']:
            if np.max(mask_) > 1 or np.min(mask_) < 0:
                raise ValueError('Found values in mask that are not 0 or 1. Mask must be binary!')
        elif mask_.dtype.kind in np.typecodes['AllFloat']:
            tol = 1e-2
            # If we have a float array, ensure that all values are close to 1 or 0
            if not np.all(np.logical_or(np.isclose(mask_, [0], atol=tol), np.isclose(mask_, [1], atol=tol))):
                raise ValueError('All mask values must be close to 0 or 1!')

        return mask_ > .5

    def mask_as_ints(self, channel=None):
        """
        Returns this :class:`BinaryMask` as a numpy array of ints of 0's and 1's.

        Returns:
            numpy :obj:`ndarray` of this :obj:`BinaryMask` represented as ints instead of bools.

        """
        if channel is None:
            return self.mask.astype('int')
        else:
            return self.get_channel(channel).astype('int')

    def invert_mask(self):
        """
        Makes a new :class:`BinaryMask` object with a logical not applied to flip the values in this
        :class:`BinaryMask` object.
        """
        return BinaryMask(np.logical_not(self.mask))
