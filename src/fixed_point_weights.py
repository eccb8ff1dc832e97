import logging
from collections import namedtuple
from math import floor

import numpy as np

_log = logging.getLogger(__name__)

# --- Fixed-point parameters ---
WEIGHT_BITS = 14  # Number of fractional bits in a weight
WEIGHT_ONE = 1 << WEIGHT_BITS  # 16384, represents 1.0

# Each tap is saturated to a signed 16-bit value before rounding,
# so the convolution accumulator cannot overflow per tap.
INT16_MIN = -(2**15)  # -32768
INT16_MAX = (2**15) - 1  # 32767


def saturate(value, min_val, max_val):
    if value < min_val:
        return min_val
    elif value > max_val:
        return max_val
    return value


def round_half_up(value):
    """Rounds to nearest, ties toward +inf. Equivalent to floor(value + 0.5)."""
    return int(floor(value + 0.5))


def quantize_tap(value):
    """Saturates a scaled filter sample to INT16 range, then rounds it to an integer weight."""
    return round_half_up(saturate(value, INT16_MIN, INT16_MAX))


class WeightTable(namedtuple('WeightTable', ['weights', 'i0', 'i1'])):
    """
    Integer convolution coefficients for one destination sample.

    weights[k] goes with the source sample at a0 + i0 + k, where a0 is the
    base coordinate the table was built against. i0 and i1 are inclusive.
    """
    __slots__ = ()

    def __len__(self):
        return len(self.weights)

    def source_indices(self, a0=0):
        """Absolute source indices covered by the table."""
        return np.arange(a0 + self.i0, a0 + self.i1 + 1)

    def as_float(self, weight_one=WEIGHT_ONE):
        return self.weights.astype(np.float64) / weight_one


def _freeze(weights):
    array = np.asarray(weights, dtype=np.int64)
    array.flags.writeable = False
    return array


def build_weight_table(filt, weight_one, center, a0, a1, trim_zeros=False, debug=False, logger=None):
    """
    Samples a positioned filter into integer weights that sum exactly to weight_one.

    Args:
        filt: FilterCapability providing evaluate(center, i), min_index(center)
              and max_index(center).
        weight_one (int): Fixed-point value of 1.0; the weights sum to it.
        center (float): Continuous source coordinate the filter is centered on.
        a0 (int): First usable absolute source index (inclusive).
        a1 (int): Last usable absolute source index (inclusive).
        trim_zeros (bool): Drop leading and trailing taps that round to zero.
        debug (bool): Emit the per-call weight trace at DEBUG level.
        logger (logging.Logger): Destination of the trace. Defaults to the module logger.
    Returns:
        WeightTable: weights plus the retained range as offsets from a0.
    """
    log = logger if logger is not None else _log

    # Source coordinate range of the positioned filter, clamped to [a0..a1]
    i0 = max(filt.min_index(center), a0)
    i1 = min(filt.max_index(center), a1)
    if i0 > i1:
        # Support lies entirely outside the usable range: keep the nearest in-range sample
        i0 = i1 = saturate(int(center + 0.5), a0, a1)

    # Normalize so that sum of scale*eval() is approximately weight_one
    den = 0.0
    for i in range(i0, i1 + 1):
        den += filt.evaluate(center, i)
    scale = weight_one if den == 0 else weight_one / den

    if trim_zeros:
        still_zero = True
        first_nonzero = i0
        last_nonzero = i0
        for i in range(i0, i1 + 1):
            t = quantize_tap(scale * filt.evaluate(center, i))
            if still_zero and t == 0:
                first_nonzero = i + 1
            else:
                still_zero = False
                if t != 0:
                    last_nonzero = i
        if not still_zero:
            i0 = first_nonzero
        # All taps zero: leave i0 in range, the sum==0 fallback below handles it
        i1 = max(last_nonzero, i0)

    weights = np.zeros(i1 - i0 + 1, dtype=np.int64)
    total = 0
    for idx, i in enumerate(range(i0, i1 + 1)):
        t = quantize_tap(scale * filt.evaluate(center, i))
        weights[idx] = t
        total += t

    if total == 0:
        i1 = i0
        weights = np.array([weight_one], dtype=np.int64)
    elif total != weight_one:
        # Fudge the center sample so that the sum is exactly weight_one
        c = int(center + 0.5)
        if c >= i1:
            c = i1 - 1
        if c < i0:
            c = i0
        delta = weight_one - total
        if debug:
            log.debug("[%d]+=%d", c, delta)
        weights[c - i0] += delta

    if debug:
        log.debug("center=%.4f [%d..%d]\t%s", center, i0, i1,
                  " ".join("%5d" % w for w in weights))

    return WeightTable(_freeze(weights), i0 - a0, i1 - a0)
