import abc
from math import ceil, floor

import numpy as np


class FilterCapability(abc.ABC):
    """
    A continuous filter positioned in source space.

    Only three read-only queries are needed to build a weight table, so any
    kernel (box, triangle, cubic, Lanczos...) can be plugged in.
    """

    @abc.abstractmethod
    def evaluate(self, center, offset):
        """Filter response at integer source index `offset` for a filter centered at `center`."""

    @abc.abstractmethod
    def min_index(self, center):
        """First source index inside the filter support."""

    @abc.abstractmethod
    def max_index(self, center):
        """Last source index inside the filter support."""


# --- Kernels ---
# Each kernel takes a distance (float or np.ndarray) in units of source samples.

def box(x):
    x = np.array(x).astype(np.float64)
    return np.where((x >= -0.5) & (x < 0.5), 1.0, 0.0)


def triangle(x):
    x = np.array(x).astype(np.float64)
    lessthanzero = np.logical_and((x >= -1), x < 0)
    greaterthanzero = np.logical_and((x <= 1), x >= 0)
    f = np.multiply((x + 1), lessthanzero) + np.multiply((1 - x), greaterthanzero)
    return f


def cubic(x, a=-0.5):
    """
    Keys cubic convolution kernel.
    See https://en.wikipedia.org/wiki/Bicubic_interpolation#Bicubic_convolution_algorithm
    Args:
        x (float or np.ndarray): Distance from the sample point.
        a (float): The 'a' parameter, typically -0.5, -0.75, or -1.0.
    Returns:
        float or np.ndarray: The kernel weight.
    """
    x = np.array(x).astype(np.float64)
    absx = np.absolute(x)
    absx2 = np.multiply(absx, absx)
    absx3 = np.multiply(absx2, absx)
    f = np.multiply((a + 2) * absx3 - (a + 3) * absx2 + 1, absx <= 1) + \
        np.multiply(a * absx3 - 5 * a * absx2 + 8 * a * absx - 4 * a, (1 < absx) & (absx < 2))
    return f


def mitchell(x, b=1.0 / 3.0, c=1.0 / 3.0):
    """Mitchell-Netravali cubic. b=1/3, c=1/3 is the recommended compromise between blur and ringing."""
    x = np.array(x).astype(np.float64)
    absx = np.absolute(x)
    absx2 = np.multiply(absx, absx)
    absx3 = np.multiply(absx2, absx)
    near = (12 - 9 * b - 6 * c) * absx3 + (-18 + 12 * b + 6 * c) * absx2 + (6 - 2 * b)
    far = (-b - 6 * c) * absx3 + (6 * b + 30 * c) * absx2 + (-12 * b - 48 * c) * absx + (8 * b + 24 * c)
    f = np.multiply(near, absx < 1) + np.multiply(far, (1 <= absx) & (absx < 2))
    return f / 6.0


def lanczos(x, lobes=3):
    x = np.array(x).astype(np.float64)
    f = np.sinc(x) * np.sinc(x / lobes)
    return np.where(np.absolute(x) < lobes, f, 0.0)


def gaussian(x, sigma=0.5):
    # Truncated at 2 sigma by its support radius in KERNELS
    x = np.array(x).astype(np.float64)
    return np.exp(-0.5 * (x / sigma) ** 2)


# name -> (kernel, support radius)
KERNELS = {
    'box': (box, 0.5),
    'triangle': (triangle, 1.0),
    'bilinear': (triangle, 1.0),
    'bicubic': (cubic, 2.0),
    'mitchell': (mitchell, 2.0),
    'lanczos2': (lambda x: lanczos(x, lobes=2), 2.0),
    'lanczos3': (lambda x: lanczos(x, lobes=3), 3.0),
    'gaussian': (gaussian, 1.0),
}


def get_kernel(method):
    try:
        return KERNELS[method]
    except KeyError:
        raise ValueError('unidentified kernel method supplied: {}'.format(method)) from None


class ParameterizedFilter(FilterCapability):
    """
    A kernel placed in source coordinates for a given scale factor.

    Source sample i covers [i, i+1) and is sampled at its center i + 0.5.
    When shrinking (scale < 1) the kernel is stretched by 1/scale so that it
    low-passes the source; `blur` stretches it further (blur > 1) or sharpens it.
    """

    def __init__(self, kernel, support, scale=1.0, blur=1.0):
        if support <= 0:
            raise ValueError('support must be positive')
        if scale <= 0:
            raise ValueError('scale must be positive')
        if blur <= 0:
            raise ValueError('blur must be positive')
        self.kernel = kernel
        self.scale = float(scale)
        self.blur = float(blur)
        self.filter_scale = max(1.0, 1.0 / self.scale) * self.blur
        self.support = support * self.filter_scale

    @property
    def width(self):
        """Upper bound on the number of taps of any positioned instance."""
        return int(ceil(2 * self.support)) + 1

    def evaluate(self, center, offset):
        return float(self.kernel((offset + 0.5 - center) / self.filter_scale))

    def min_index(self, center):
        return int(ceil(center - self.support - 0.5))

    def max_index(self, center):
        return int(floor(center + self.support - 0.5))

    def __repr__(self):
        return 'ParameterizedFilter(support={:.3f}, scale={:.4f}, blur={:.3f})'.format(
            self.support, self.scale, self.blur)


def make_filter(method, scale=1.0, blur=1.0):
    kernel, support = get_kernel(method)
    return ParameterizedFilter(kernel, support, scale=scale, blur=blur)


def source_center(b, scale, offset=0.0):
    """Continuous source coordinate of destination sample b (pixel centers at +0.5)."""
    return (b + 0.5) / scale + offset
