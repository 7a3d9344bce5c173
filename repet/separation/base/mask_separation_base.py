"""
Base class for separation algorithms that make masks. :class:`Repet` is derived
from MaskSeparationBase.
"""

import logging

from ...core import masks, constants
from ...core.masks.soft_mask import _check_unit_interval
from .separation_base import SeparationBase, SeparationException, InvalidParameter


class MaskSeparationBase(SeparationBase):
    """
    Base class for separation algorithms that create a mask (binary or soft) to do
    their separation.

    Although this class will do nothing if you instantiate and run it by itself,
    algorithms that are derived from this class are expected to fill
    :attr:`result_masks` with :class:`core.masks.mask_base.MaskBase`-derived objects
    (i.e., either a :class:`core.masks.binary_mask.BinaryMask` or
    :class:`core.masks.soft_mask.SoftMask` object) in their :func:`run()` method,
    the first one for the background and the second one for the foreground.

    Args:
        input_audio_signal: (:class:`audio_signal.AudioSignal`) An
          :class:`audio_signal.AudioSignal` object containing the mixture to be
          separated.
        mask_type: (str, BinaryMask, or SoftMask) Indicates whether to make
          binary or soft masks. See :attr:`mask_type` property for details.
        mask_threshold: (float) Value between [0.0, 1.0]. Pivot of the hardening
          and cutoff when making a binary mask. See :attr:`mask_threshold`.
        hardness: (float) Value between [0.0, 1.0]. How close the soft mask is pushed
          towards a binary mask. See :attr:`hardness`.
    """

    MASKS = {
        constants.BINARY_MASK: masks.BinaryMask,
        constants.SOFT_MASK: masks.SoftMask
    }

    def __init__(self, input_audio_signal, mask_type=constants.SOFT_MASK,
                 mask_threshold=constants.DEFAULT_MASK_THRESHOLD,
                 hardness=constants.DEFAULT_HARDNESS):
        self.stft = None
        self.result_masks = []

        super().__init__(input_audio_signal=input_audio_signal)

        self.mask_type = mask_type
        self.mask_threshold = mask_threshold
        self.hardness = hardness

        self.metadata.update({
            'mask_type': mask_type,
            'mask_threshold': mask_threshold,
            'hardness': hardness,
        })

    @property
    def mask_type(self):
        """
        This property indicates what type of mask the derived algorithm will create
        and put in :attr:`result_masks`. Options are either ``'soft'`` or ``'binary'``
        (case insensitive), or the :class:`core.masks.SoftMask` and
        :class:`core.masks.BinaryMask` classes themselves.

        A binary mask is a soft mask hardened all the way (``hardness = 1``) at
        :attr:`mask_threshold`.

        Returns:
            mask_type (class): Either :class:`core.masks.SoftMask` or
            :class:`core.masks.BinaryMask`.

        Raises:
            ValueError if set invalidly.

        Example:

        .. code-block:: python
            :linenos:

            import repet
            mixture_signal = repet.AudioSignal('mix.wav')

            # Option 1: Init with a string
            separator = repet.Repet(mixture_signal, mask_type='binary')

            # Option 2: change it later with a class
            separator.mask_type = repet.core.masks.SoftMask

        """
        return self._mask_type

    @mask_type.setter
    def mask_type(self, value):
        error = ValueError(
            f"Invalid mask type! Got {value} but valid masks are:"
            f" [{', '.join(list(self.MASKS.keys()))}]!"
        )

        if value is None:
            raise error

        if isinstance(value, str):
            value = value.lower()
            if value in self.MASKS:
                self._mask_type = self.MASKS[value]
            else:
                raise error
        elif value in self.MASKS.values():
            self._mask_type = value
        else:
            raise error

    @property
    def mask_threshold(self):
        """
        Pivot of the hardening law (see :func:`core.masks.harden_mask`) and the
        True/False cutoff if :attr:`mask_type` is binary. All values of the soft mask
        are between ``[0.0, 1.0]`` and as such :attr:`mask_threshold` is expected to be
        between ``[0.0, 1.0]``, inclusive. The lower, the more energy goes to the
        background.

        Raises:
            :class:`InvalidParameter` if not a number or if set outside ``[0.0, 1.0]``.

        """
        return self._mask_threshold

    @mask_threshold.setter
    def mask_threshold(self, value):
        self._mask_threshold = self._validate_unit_interval(value, 'mask_threshold')

    @property
    def hardness(self):
        """
        How far the soft mask is pushed towards a binary mask, between ``[0.0, 1.0]``.
        ``0`` keeps the soft mask, ``1`` makes it binary at :attr:`mask_threshold`.

        Raises:
            :class:`InvalidParameter` if not a number or if set outside ``[0.0, 1.0]``.
        """
        return self._hardness

    @hardness.setter
    def hardness(self, value):
        self._hardness = self._validate_unit_interval(value, 'hardness')

    @staticmethod
    def _validate_unit_interval(value, name):
        try:
            _check_unit_interval(value, name)
        except ValueError as e:
            raise InvalidParameter(str(e)) from e
        return float(value)

    def shape_mask(self, soft_mask_data):
        """
        Turns soft mask data into a mask of :attr:`mask_type`: hardened by
        :attr:`hardness` around :attr:`mask_threshold` for soft masks, cut at
        :attr:`mask_threshold` for binary masks.

        Args:
            soft_mask_data (:obj:`np.ndarray`): values in ``[0.0, 1.0]``.

        Returns:
            A :class:`core.masks.SoftMask` or :class:`core.masks.BinaryMask`.
        """
        soft_mask = masks.SoftMask(soft_mask_data)

        if self.mask_type == masks.BinaryMask:
            return soft_mask.mask_to_binary(self.mask_threshold)

        return soft_mask.harden(self.hardness, self.mask_threshold)

    def _preprocess_audio_signal(self):
        """
        Masking based separation algorithm always need an STFT to work with.
        So here, the STFT of the AudioSignal object belonging to this separation
        algorithm is taken. It also resets the `self.result_masks` object to
        an empty list - new audio signal means new masks.

        This gets called when the `self.audio_signal` is set.
        """
        self.stft = self.audio_signal.stft()
        self.result_masks = []
        logging.debug(f'{type(self).__name__}: STFT of shape {self.stft.shape}')

    def run(self):
        """Runs mask-based separation algorithm. Base class: Do not call directly!

        Raises:
            NotImplementedError: Cannot call base class!
        """
        raise NotImplementedError('Cannot call base class!')

    def make_audio_signals(self):
        """
        Makes :class:`audio_signal.AudioSignal` objects after mask-based
        separation algorithm is run. This looks in ``self.result_masks``
        which must be filled by ``run`` in the algorithm that
        subclasses this. It applies each mask to the mixture audio
        signal and returns a list of the estimates, which are each
        AudioSignal objects with the length of the separated selection.

        Returns:
            list: List of AudioSignal objects corresponding to the
              separated estimates, ``[background, foreground]``.
        """
        if not self.result_masks:
            raise SeparationException(
                "self.result_masks is empty! Did you call self.run()?")

        estimates = []
        for mask in self.result_masks:
            if not isinstance(mask, self.mask_type):
                raise SeparationException(
                    f"Expected {self.mask_type} but got {type(mask)} "
                    f"in self.result_masks!"
                )
            estimate = self.audio_signal.apply_mask(mask, overwrite=False)
            estimate.istft()
            estimates.append(estimate)
        return estimates
