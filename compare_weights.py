import argparse
import logging
import os
import sys
import time

import numpy as np
from PIL import Image

# Append src to sys.path
sys.path.append(os.path.join(os.path.dirname(__file__), 'src'))

from fixed_point_weights import WEIGHT_BITS, WEIGHT_ONE
from axis_weights import make_axis_tables, pack_tables
from resampling_filters import make_filter, source_center

# Pillow filters closest to each kernel
PIL_FILTERS = {
    'box': Image.Resampling.BOX,
    'bilinear': Image.Resampling.BILINEAR,
    'triangle': Image.Resampling.BILINEAR,
    'bicubic': Image.Resampling.BICUBIC,
    'lanczos3': Image.Resampling.LANCZOS,
}


def create_gradient_image(width, height):
    """Creates a simple grayscale gradient image as a uint8 array."""
    array = np.zeros((height, width), dtype=np.uint8)
    for y in range(height):
        for x in range(width):
            array[y, x] = int(((x + y) / (width + height)) * 255)
    return array


def fixed_round_shift(value, shift_bits):
    """Rounds to nearest, then shifts right. Equivalent to round(value / (2**shift_bits))."""
    rounding_val = 1 << (shift_bits - 1)
    return (value + rounding_val) >> shift_bits


def resize_rows_fixed_point(image_uint8, out_width, method='bicubic', trim_zeros=True):
    """
    Resizes every row of a grayscale image using integer weight tables.
    Args:
        image_uint8 (np.ndarray): 2D uint8 image.
        out_width (int): Destination row length.
        method (str): Kernel name.
        trim_zeros (bool): Trim zero taps from the tables.
    Returns:
        np.ndarray: Resized image (dtype=np.uint8).
    """
    if image_uint8.ndim != 2 or image_uint8.dtype != np.uint8:
        raise ValueError("Input image must be a 2D grayscale image of dtype uint8.")

    tables = make_axis_tables(image_uint8.shape[1], out_width, method=method, trim_zeros=trim_zeros)
    weights, indices = pack_tables(tables)

    # (H, out_width, taps) * (out_width, taps) accumulated in int64
    gathered = image_uint8[:, indices].astype(np.int64)
    acc = np.sum(gathered * weights.astype(np.int64), axis=-1)

    out = fixed_round_shift(acc, WEIGHT_BITS)
    return np.clip(out, 0, 255).astype(np.uint8)


def resize_rows_float(image, out_width, method='bicubic'):
    """Same resampling with unquantized, float-normalized kernel weights."""
    in_width = image.shape[1]
    scale = 1.0 * out_width / in_width
    filt = make_filter(method, scale=scale)
    out = np.zeros((image.shape[0], out_width), dtype=np.float64)
    for b in range(out_width):
        center = source_center(b, scale)
        i0 = max(filt.min_index(center), 0)
        i1 = min(filt.max_index(center), in_width - 1)
        w = np.array([filt.evaluate(center, i) for i in range(i0, i1 + 1)])
        if np.sum(w) != 0:
            w = w / np.sum(w)
        out[:, b] = image[:, i0:i1 + 1].astype(np.float64) @ w
    return np.clip(np.around(out), 0, 255).astype(np.uint8)


def calculate_psnr_mse(img1, img2):
    """Calculates PSNR and MSE between two uint8 images."""
    if img1.shape != img2.shape:
        raise ValueError("Images must have the same dimensions.")
    mse = np.mean((img1.astype(np.float64) - img2.astype(np.float64)) ** 2)
    if mse == 0:
        psnr = float('inf')
    else:
        psnr = 20 * np.log10(255.0 / np.sqrt(mse))
    return psnr, mse


def analyze_table_sizes(in_width, out_width, method):
    print("\n--- Table Size Analysis ---")
    untrimmed = make_axis_tables(in_width, out_width, method=method, trim_zeros=False)
    trimmed = make_axis_tables(in_width, out_width, method=method, trim_zeros=True)
    taps_untrimmed = sum(len(t) for t in untrimmed)
    taps_trimmed = sum(len(t) for t in trimmed)
    print(f"  Taps without trimming: {taps_untrimmed}")
    print(f"  Taps with trimming:    {taps_trimmed}")
    print(f"  Saved multiplies per row: {taps_untrimmed - taps_trimmed}")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Compare fixed-point weight tables against float and Pillow resizing.")
    parser.add_argument('--method', default='bicubic', choices=sorted(PIL_FILTERS))
    parser.add_argument('--in-width', type=int, default=64)
    parser.add_argument('--out-width', type=int, default=96)
    parser.add_argument('--height', type=int, default=16)
    parser.add_argument('--no-trim', action='store_true', help="Keep zero taps at the table edges.")
    parser.add_argument('--debug', action='store_true', help="Trace the weight tables of the first rows.")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    trim_zeros = not args.no_trim

    image = create_gradient_image(args.in_width, args.height)
    print(f"Gradient image: {image.shape}, resizing rows to {args.out_width} with '{args.method}'")

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
        make_axis_tables(args.in_width, min(args.out_width, 8), method=args.method,
                         trim_zeros=trim_zeros, debug=True, logger=logging.getLogger("weights"))

    start_time = time.time()
    fixed = resize_rows_fixed_point(image, args.out_width, method=args.method, trim_zeros=trim_zeros)
    print(f"Fixed-point (WEIGHT_ONE={WEIGHT_ONE}) completed in {time.time() - start_time:.4f} seconds.")

    start_time = time.time()
    floating = resize_rows_float(image, args.out_width, method=args.method)
    print(f"Float completed in {time.time() - start_time:.4f} seconds.")

    pil_img = Image.fromarray(image).resize((args.out_width, args.height), PIL_FILTERS[args.method])
    pillow = np.array(pil_img, dtype=np.uint8)

    psnr, mse = calculate_psnr_mse(fixed, floating)
    print(f"Fixed vs Float:  MSE {mse:.4f}  PSNR {psnr:.2f} dB")
    psnr, mse = calculate_psnr_mse(fixed, pillow)
    print(f"Fixed vs Pillow: MSE {mse:.4f}  PSNR {psnr:.2f} dB")

    analyze_table_sizes(args.in_width, args.out_width, args.method)


if __name__ == '__main__':
    main()
