'''
Author: Elia Savino
github: github.com/EliaSavino

Happy Hacking!

Descr: Camera alignment and key / drag translation.

'''
import unittest

import numpy as np

from cubeplay.cube import Move
from cubeplay.controls.alignment import resolve_alignment, alignment_for
from cubeplay.controls.translator import (
    DEFAULT_KEY_LAYOUTS,
    translate_key,
    translate_drag,
    slice_index,
)
from cubeplay.visualisation.utils_visualization import ViewCamera

IDENTITY = resolve_alignment((1, 0, 0), (0, 1, 0))


class TestAlignment(unittest.TestCase):

    def test_identity_view(self):
        a = IDENTITY
        self.assertEqual((a.v_axis, a.v_sign), ("x", 1))
        self.assertEqual((a.h_axis, a.h_sign), ("y", 1))

    def test_view_from_behind(self):
        a = resolve_alignment((-1, 0, 0), (0, 1, 0))
        self.assertEqual((a.v_axis, a.v_sign), ("x", -1))
        self.assertEqual((a.h_axis, a.h_sign), ("y", 1))

    def test_tilted_view_picks_closest_axis(self):
        right = np.array([0.2, 0.0, -0.98])
        up = np.array([0.3, 0.9, 0.1])
        a = resolve_alignment(right, up)
        self.assertEqual((a.v_axis, a.v_sign), ("z", -1))
        self.assertEqual((a.h_axis, a.h_sign), ("y", 1))

    def test_ties_go_to_first_axis(self):
        s = 1 / np.sqrt(2)
        a = resolve_alignment((s, s, 0), (0, -s, s))
        self.assertEqual(a.v_axis, "x")
        self.assertEqual((a.h_axis, a.h_sign), ("y", -1))

    def test_zero_dot_counts_as_positive(self):
        # degenerate camera: up has no component anywhere, x wins the tie at 0
        a = resolve_alignment((1, 0, 0), (0, 0, 0))
        self.assertEqual((a.h_axis, a.h_sign), ("x", 1))

    def test_view_camera_vectors(self):
        front = ViewCamera(elev=0.0, azim=-90.0)
        np.testing.assert_allclose(front.right(), [1, 0, 0], atol=1e-12)
        np.testing.assert_allclose(front.up(), [0, 1, 0], atol=1e-12)

        side = ViewCamera(elev=0.0, azim=0.0)
        np.testing.assert_allclose(side.right(), [0, 0, -1], atol=1e-12)
        a = alignment_for(side)
        self.assertEqual((a.v_axis, a.v_sign), ("z", -1))
        self.assertEqual((a.h_axis, a.h_sign), ("y", 1))

    def test_view_camera_vectors_are_orthonormal(self):
        cam = ViewCamera(elev=35.0, azim=-60.0)
        r, u = cam.right(), cam.up()
        self.assertAlmostEqual(float(np.linalg.norm(r)), 1.0)
        self.assertAlmostEqual(float(np.linalg.norm(u)), 1.0)
        self.assertAlmostEqual(float(np.dot(r, u)), 0.0)


class TestKeyTranslation(unittest.TestCase):

    def setUp(self):
        self.layout = DEFAULT_KEY_LAYOUTS[3]

    def test_slice_index(self):
        self.assertEqual([slice_index(i, 3) for i in range(3)], [-1, 0, 1])
        self.assertEqual([slice_index(i, 4) for i in range(4)], [-1.5, -0.5, 0.5, 1.5])

    def test_columns_identity_view(self):
        self.assertEqual(translate_key("q", self.layout, IDENTITY), Move("x", -1, 1))
        self.assertEqual(translate_key("w", self.layout, IDENTITY), Move("x", 0, 1))
        self.assertEqual(translate_key("e", self.layout, IDENTITY), Move("x", 1, 1))

    def test_rows_identity_view(self):
        # top row first
        self.assertEqual(translate_key("a", self.layout, IDENTITY), Move("y", 1, 1))
        self.assertEqual(translate_key("d", self.layout, IDENTITY), Move("y", -1, 1))

    def test_columns_mirror_when_axis_points_left(self):
        behind = resolve_alignment((-1, 0, 0), (0, 1, 0))
        self.assertEqual(translate_key("q", self.layout, behind), Move("x", 1, -1))
        self.assertEqual(translate_key("e", self.layout, behind), Move("x", -1, -1))

    def test_rows_flip_twice_when_upside_down(self):
        upside_down = resolve_alignment((1, 0, 0), (0, -1, 0))
        self.assertEqual(translate_key("a", self.layout, upside_down), Move("y", -1, -1))
        self.assertEqual(translate_key("d", self.layout, upside_down), Move("y", 1, -1))

    def test_layouts_per_size(self):
        self.assertEqual(translate_key("e", DEFAULT_KEY_LAYOUTS[2], IDENTITY), Move("x", 0.5, 1))
        self.assertEqual(translate_key("r", DEFAULT_KEY_LAYOUTS[4], IDENTITY), Move("x", 1.5, 1))
        self.assertEqual(translate_key("f", DEFAULT_KEY_LAYOUTS[4], IDENTITY), Move("y", -1.5, 1))
        self.assertIsNone(translate_key("w", DEFAULT_KEY_LAYOUTS[2], IDENTITY))

    def test_case_and_unknown_keys(self):
        self.assertEqual(translate_key("Q", self.layout, IDENTITY), Move("x", -1, 1))
        self.assertIsNone(translate_key("z", self.layout, IDENTITY))
        self.assertIn("S", self.layout)

    def test_duration_is_forwarded(self):
        self.assertEqual(translate_key("w", self.layout, IDENTITY, duration=0.05).duration, 0.05)


class TestDragTranslation(unittest.TestCase):

    def test_short_drag_is_a_click(self):
        self.assertIsNone(translate_drag((1, 0, 0), 9, -9, IDENTITY))

    def test_horizontal_drag_uses_vertical_control_axis(self):
        self.assertEqual(translate_drag((1, 0, -1), 30, 5, IDENTITY), Move("x", 1, 1))
        self.assertEqual(translate_drag((1, 0, -1), -30, 5, IDENTITY), Move("x", 1, -1))

    def test_vertical_drag_uses_horizontal_control_axis(self):
        self.assertEqual(translate_drag((1, -1, 0), 3, 40, IDENTITY), Move("y", -1, 1))
        self.assertEqual(translate_drag((1, -1, 0), 3, -40, IDENTITY), Move("y", -1, -1))

    def test_equal_deltas_count_as_vertical(self):
        self.assertEqual(translate_drag((0, 1, 0), 20, 20, IDENTITY).axis, "y")

    def test_sign_follows_alignment(self):
        behind = resolve_alignment((-1, 0, 0), (0, 1, 0))
        self.assertEqual(translate_drag((1, 0, 0), 30, 0, behind), Move("x", 1, -1))

    def test_slice_rounds_half_up(self):
        self.assertEqual(translate_drag((0.5, 0.5, 0.5), 30, 0, IDENTITY).slice, 1.0)
        self.assertEqual(translate_drag((-0.5, 0.5, 0.5), 30, 0, IDENTITY).slice, 0.0)
        self.assertEqual(translate_drag((-1.5, 0.5, 0.5), 30, 0, IDENTITY).slice, -1.0)


if __name__ == "__main__":
    unittest.main()
