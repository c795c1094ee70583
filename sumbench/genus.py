"""
Genus-bucketed exact summation (Kobbelt's algorithm).

Values are filed under their genus, ``2 * exponent_field + last_mantissa_bit``.
Two values of the same genus, or of complementary genus (``genus ^ 1``) and
opposite sign, always add without rounding.  Merging such pairs as they are
inserted keeps the exact total of the table unchanged while shrinking it,
and the few survivors are added smallest genus first at the end.
"""

from typing import Dict, Iterator, Optional, Tuple

import numpy as np

from .precision import Precision


class GenusTable:
    """
    Table holding at most one pending value per genus.

    Attributes:
        precision: Working precision of the stored values
        merges: Number of exact pairwise merges performed so far
    """

    def __init__(self, precision: Precision):
        self.precision = precision
        self.merges = 0
        self._slots: Dict[int, object] = {}

    def __len__(self):
        return len(self._slots)

    def __contains__(self, genus):
        return genus in self._slots

    def __iter__(self) -> Iterator[Tuple[int, object]]:
        """Iterate over (genus, value) pairs in ascending genus order."""
        for genus in sorted(self._slots):
            yield genus, self._slots[genus]

    def insert(self, value):
        """
        Insert a finite value, merging it with residents while possible.

        Each merge removes one resident and re-queues the exact sum, so the
        loop ends after at most ``len(self) + 1`` iterations.
        """
        pending = [self.precision.dtype(value)]
        while pending:
            value = pending.pop()
            genus = self.precision.genus(value)

            resident = self._slots.pop(genus, None)
            if resident is not None:
                pending.append(value + resident)
                self.merges += 1
                continue

            partner = genus ^ 1
            other = self._slots.get(partner)
            if other is not None and np.sign(other) != np.sign(value):
                del self._slots[partner]
                pending.append(value + other)
                self.merges += 1
            else:
                self._slots[genus] = value

    def drain(self, precision: Optional[Precision] = None):
        """
        Sum the resident values in ascending genus order.

        Args:
            precision: Accumulator precision (default: the table's own)

        Returns:
            Sum as a scalar of the accumulator precision
        """
        precision = precision or self.precision
        total = precision.zero()
        for _, value in self:
            total = total + precision.dtype(value)
        return total
