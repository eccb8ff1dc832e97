import numpy as np

from fixed_point_weights import WEIGHT_ONE, build_weight_table
from resampling_filters import make_filter, source_center


def make_axis_tables(in_length, out_length, method='bicubic', weight_one=WEIGHT_ONE,
                     trim_zeros=True, blur=1.0, offset=0.0, debug=False, logger=None):
    """
    Builds one weight table per destination sample along a single axis.

    Args:
        in_length (int): Number of source samples.
        out_length (int): Number of destination samples.
        method (str): Kernel name, see resampling_filters.KERNELS.
        weight_one (int): Fixed-point value of 1.0.
        trim_zeros (bool): Drop leading/trailing taps that round to zero.
        blur (float): Kernel stretch factor (>1 blurs, <1 sharpens).
        offset (float): Shift of the sampling grid in source pixels.
        debug (bool): Trace every table through `logger`.
        logger (logging.Logger): Optional trace destination.
    Returns:
        list of WeightTable: tables[b] holds offsets relative to source index 0.
    """
    if in_length <= 0 or out_length <= 0:
        raise ValueError('in_length and out_length must be positive')

    scale = 1.0 * out_length / in_length
    filt = make_filter(method, scale=scale, blur=blur)

    tables = []
    for b in range(out_length):
        center = source_center(b, scale, offset)
        tables.append(build_weight_table(filt, weight_one, center, 0, in_length - 1,
                                         trim_zeros=trim_zeros, debug=debug, logger=logger))
    return tables


def max_table_width(tables):
    return max(len(t) for t in tables)


def pack_tables(tables, a0=0):
    """
    Pads tables to a common width, the layout vectorized consumers expect.

    Padding entries carry a zero weight and repeat the last valid source index,
    so gathering with `indices` never reads outside the source.
    Returns:
        (np.ndarray, np.ndarray): int64 weights and int32 indices, both of shape (len(tables), width).
    """
    width = max_table_width(tables)
    weights = np.zeros((len(tables), width), dtype=np.int64)
    indices = np.zeros((len(tables), width), dtype=np.int32)
    for row, table in enumerate(tables):
        n = len(table)
        weights[row, :n] = table.weights
        indices[row, :n] = table.source_indices(a0)
        indices[row, n:] = a0 + table.i1
    return weights, indices
