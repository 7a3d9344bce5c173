"""
Foreground/background via REPET
-------------------------------

.. autoclass:: repet.separation.primitive.Repet
    :autosummary:

"""

from .repet import Repet
