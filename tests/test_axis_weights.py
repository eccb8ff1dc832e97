import os
import sys
import unittest

import numpy as np
from PIL import Image

# src for the library modules, the repo root for the comparison script
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from fixed_point_weights import WEIGHT_ONE
from axis_weights import make_axis_tables, max_table_width, pack_tables
from compare_weights import (calculate_psnr_mse, create_gradient_image,
                             resize_rows_fixed_point, resize_rows_float)


class TestAxisTables(unittest.TestCase):

    def test_one_table_per_destination_sample(self):
        tables = make_axis_tables(10, 23, method='bicubic')
        self.assertEqual(len(tables), 23)
        for table in tables:
            self.assertEqual(int(table.weights.sum()), WEIGHT_ONE)
            self.assertGreaterEqual(table.i0, 0)
            self.assertLessEqual(table.i1, 9)

    def test_identity_scale_is_pass_through(self):
        tables = make_axis_tables(8, 8, method='bicubic', trim_zeros=True)
        for b, table in enumerate(tables):
            self.assertEqual((table.i0, table.i1), (b, b))
            np.testing.assert_array_equal(table.weights, [WEIGHT_ONE])

    def test_untrimmed_identity_keeps_zero_taps(self):
        tables = make_axis_tables(8, 8, method='bicubic', trim_zeros=False)
        # Away from the edges the cubic spans five source samples
        self.assertEqual(len(tables[4]), 5)
        np.testing.assert_array_equal(tables[4].weights, [0, 0, WEIGHT_ONE, 0, 0])

    def test_downscale_tables_are_wider(self):
        up = make_axis_tables(32, 64, method='lanczos3')
        down = make_axis_tables(64, 16, method='lanczos3')
        self.assertGreater(max_table_width(down), max_table_width(up))

    def test_invalid_lengths(self):
        with self.assertRaises(ValueError):
            make_axis_tables(0, 5)
        with self.assertRaises(ValueError):
            make_axis_tables(5, -1)
        with self.assertRaises(ValueError):
            make_axis_tables(5, 5, method='sinc')

    def test_pack_tables(self):
        tables = make_axis_tables(12, 5, method='bilinear')
        weights, indices = pack_tables(tables)
        width = max_table_width(tables)
        self.assertEqual(weights.shape, (5, width))
        self.assertEqual(indices.shape, (5, width))
        for row, table in enumerate(tables):
            n = len(table)
            np.testing.assert_array_equal(weights[row, :n], table.weights)
            np.testing.assert_array_equal(indices[row, :n], table.source_indices())
            self.assertTrue(np.all(weights[row, n:] == 0))
            self.assertTrue(np.all(indices[row, n:] == table.i1))
        np.testing.assert_array_equal(weights.sum(axis=1), [WEIGHT_ONE] * 5)

    def test_pack_tables_keeps_wide_weights(self):
        tables = make_axis_tables(6, 4, method='box', weight_one=2**31)
        weights, _ = pack_tables(tables)
        self.assertEqual(weights.dtype, np.int64)
        np.testing.assert_array_equal(weights.sum(axis=1), [2**31] * 4)


class TestRowResize(unittest.TestCase):

    def setUp(self):
        self.image = create_gradient_image(64, 16)

    def test_fixed_point_against_float(self):
        for method, out_width in (('bicubic', 96), ('lanczos3', 40), ('bilinear', 128)):
            fixed = resize_rows_fixed_point(self.image, out_width, method=method)
            floating = resize_rows_float(self.image, out_width, method=method)
            self.assertEqual(fixed.shape, (16, out_width))
            psnr, mse = calculate_psnr_mse(fixed, floating)
            print(f"\n{method}: fixed vs float MSE {mse:.4f}, PSNR {psnr:.2f} dB")
            self.assertLessEqual(mse, 1.0)

    def test_fixed_point_against_pillow(self):
        for method, pil_filter in (('bicubic', Image.Resampling.BICUBIC),
                                   ('bilinear', Image.Resampling.BILINEAR)):
            for out_width in (96, 40):
                fixed = resize_rows_fixed_point(self.image, out_width, method=method)
                pillow = np.array(Image.fromarray(self.image).resize((out_width, 16), pil_filter),
                                  dtype=np.uint8)
                psnr, mse = calculate_psnr_mse(fixed, pillow)
                self.assertLessEqual(mse, 2.0,
                                     f"MSE ({mse:.4f}) against Pillow {method} exceeds threshold.")

    def test_trimming_does_not_change_output(self):
        trimmed = resize_rows_fixed_point(self.image, 96, method='bicubic', trim_zeros=True)
        untrimmed = resize_rows_fixed_point(self.image, 96, method='bicubic', trim_zeros=False)
        np.testing.assert_array_equal(trimmed, untrimmed)

    def test_rejects_color_input(self):
        with self.assertRaises(ValueError):
            resize_rows_fixed_point(np.zeros((4, 4, 3), dtype=np.uint8), 8)


if __name__ == '__main__':
    unittest.main()
