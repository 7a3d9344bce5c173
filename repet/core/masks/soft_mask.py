"""
The :class:`SoftMask` class is for creating a time-frequency mask with values in the range ``[0.0, 1.0]``. Like all
:class:`core.masks.mask_base.MaskBase` objects, :class:`SoftMask` is initialized with a 2D or 3D numpy array
containing the mask data. The data type (numpy.dtype) of the initial mask must be float.

:class:`SoftMask` (like :class:`core.masks.binary_mask.BinaryMask`) is one of the return types for the
:func:`run()` methods of :class:`separation.MaskSeparationBase`-derived objects.

Soft masks can be hardened towards a binary mask with :func:`harden_mask` (or :func:`SoftMask.harden`):
``hardness`` moves every value away from a pivot ``threshold``, towards 0 below it and towards 1 above it.
With ``hardness = 0`` the mask is untouched, with ``hardness = 1`` it is binary.

Examples:

.. code-block:: python
    :linenos:

    import numpy as np
    import repet

    mask_data = np.random.random(size=(513, 300, 1))
    soft_mask = repet.core.masks.SoftMask(mask_data)

    # spread values apart around .3, half way to a binary mask
    harder = soft_mask.harden(hardness=.5, threshold=.3)
"""

import numbers

import numpy as np

from . import mask_base
from . import binary_mask


def _check_unit_interval(value, name):
    if not isinstance(value, numbers.Real) or isinstance(value, bool):
        raise ValueError(f'{name} must be a real number in [0.0, 1.0], got {value!r}!')
    if not 0.0 <= value <= 1.0:
        raise ValueError(f'{name} must be in [0.0, 1.0], got {value}!')


def _binarize(mask, threshold):
    # a bin fully explained by the repeating model stays in the background, even at
    # threshold 1
    return (mask > threshold) | (mask == 1.0)


def harden_mask(mask, hardness, threshold):
    """
    Spreads the values of a soft mask apart around the pivot ``threshold``.

    With ``e = 1 / (1 - hardness)``, values at or below the pivot are mapped to
    ``threshold * (mask / threshold) ** e`` and values above it to
    ``1 - (1 - threshold) * ((1 - mask) / (1 - threshold)) ** e``. The pivot, 0 and 1 are
    fixed points. As ``hardness`` grows values move monotonically away from the pivot;
    ``hardness = 0`` returns the mask unchanged and ``hardness = 1`` returns the binary
    mask ``mask > threshold``, where 1 always stays 1 (the limit of the law at
    ``threshold = 1``).

    Args:
        mask (:obj:`np.ndarray`): soft mask, values in ``[0.0, 1.0]``.
        hardness (float): in ``[0.0, 1.0]``. 0 is the original mask, 1 is a binary mask.
        threshold (float): in ``[0.0, 1.0]``. Pivot value. The lower, the more energy goes
          to the background.

    Returns:
        (:obj:`np.ndarray`) hardened mask, same shape as ``mask``, float values in ``[0.0, 1.0]``.

    Raises:
        ValueError: if ``hardness`` or ``threshold`` are outside ``[0.0, 1.0]``.
    """
    _check_unit_interval(hardness, 'hardness')
    _check_unit_interval(threshold, 'threshold')

    mask = np.asarray(mask, dtype=float)

    if hardness == 0:
        return mask.copy()
    if hardness == 1:
        return _binarize(mask, threshold).astype(float)

    exponent = 1.0 / (1.0 - hardness)
    below = mask <= threshold
    hardened = np.empty_like(mask)

    if threshold > 0:
        hardened[below] = threshold * (mask[below] / threshold) ** exponent
    else:
        hardened[below] = 0.0

    above = ~below
    if threshold < 1:
        hardened[above] = 1.0 - (1.0 - threshold) * (
            (1.0 - mask[above]) / (1.0 - threshold)) ** exponent
    else:
        hardened[above] = 1.0

    return np.clip(hardened, 0.0, 1.0)


class SoftMask(mask_base.MaskBase):
    """
    A simple class for making a soft mask. The soft mask is represented as a numpy array of floats between
    0.0 and 1.0, inclusive.

    Args:
        input_mask (:obj:`np.ndarray`): 2- or 3-D :obj:`np.array` that represents the mask.
    """

    @staticmethod
    def _validate_mask(mask_):
        if mask_.dtype.kind not in np.typecodes['AllFloat']:
            raise ValueError('Mask must have type: float! Maybe you want BinaryMask?')

        if mask_.size and (np.max(mask_) > 1.0 or np.min(mask_) < 0.0):
            raise ValueError(
                'All values must be between [0.0, 1.0] for SoftMask! '
                f'max/min={np.max(mask_)}/{np.min(mask_)}')

        return mask_

    def mask_to_binary(self, threshold=0.5):
        """
        Create a new :class:`core.masks.binary_mask.BinaryMask` object from this object's data.

        Args:
            threshold (float, Optional): Threshold (between ``[0.0, 1.0]``) to set the True/False cutoff for the binary
             mask. Values of exactly 1.0 are always True.

        Returns:
            A new :class:`core.masks.binary_mask.BinaryMask` object

        """
        return binary_mask.BinaryMask(_binarize(self.mask, threshold))

    def harden(self, hardness, threshold=0.5):
        """
        Returns a new :class:`SoftMask` hardened by :func:`harden_mask`.
        """
        return SoftMask(harden_mask(self.mask, hardness, threshold))

    def invert_mask(self):
        """
        Returns a new mask with inverted values set like ``1 - mask`` for :attr:`mask`.

        Returns:
            A new :class:`SoftMask` object with values set at ``1 - mask``.

        """
        return SoftMask(np.abs(1 - self.mask))
