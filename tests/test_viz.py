"""Tests for the seam painter and the GIF recorder."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest
from errors import InternalConsistencyError, RasterIOError
from seams import find_seam
from viz import RED_BGR, VizGifRecorder, paint_seam

from conftest import make_random_image, make_uniform_image


class TestPaintSeam:
    def test_paints_in_place(self):
        image = make_uniform_image(3, 4)
        out = paint_seam(image, np.array([1, 2, 3]), 'vertical')
        assert out is image
        assert image.shape == (3, 4, 3)
        assert image[0, 1].tolist() == list(RED_BGR)
        assert image[1, 2].tolist() == list(RED_BGR)
        assert image[2, 3].tolist() == list(RED_BGR)
        assert (np.all(image == RED_BGR, axis=2).sum()) == 3

    def test_horizontal(self):
        image = make_uniform_image(3, 4)
        paint_seam(image, np.array([0, 1, 1, 2]), 'horizontal', color=(7, 8, 9))
        painted = np.argwhere(np.all(image == (7, 8, 9), axis=2)).tolist()
        assert painted == [[0, 0], [1, 1], [1, 2], [2, 3]]

    def test_length_mismatch(self):
        with pytest.raises(InternalConsistencyError):
            paint_seam(make_uniform_image(3, 4), np.array([0, 0]), 'vertical')

    def test_out_of_bounds(self):
        image = make_uniform_image(3, 4)
        with pytest.raises(InternalConsistencyError):
            paint_seam(image, np.array([0, 0, 4]), 'vertical')


class TestVizGifRecorder:
    def test_samples_every_nth_seam(self, tmp_path):
        rec = VizGifRecorder(str(tmp_path / "seams.gif"), every=2)
        image = make_random_image(8, 8)
        seam = find_seam(image)
        for _ in range(5):
            rec.on_seam(image, seam, 'vertical')
        assert rec.frame_count == 3

    def test_max_frames_cap(self, tmp_path):
        rec = VizGifRecorder(str(tmp_path / "seams.gif"), max_frames=2)
        image = make_random_image(8, 8)
        seam = find_seam(image)
        for _ in range(5):
            rec.on_seam(image, seam)
        assert rec.frame_count == 2

    def test_does_not_modify_source(self, tmp_path):
        rec = VizGifRecorder(str(tmp_path / "seams.gif"))
        image = make_random_image(8, 8)
        before = image.copy()
        rec.on_seam(image, find_seam(image))
        assert np.array_equal(image, before)

    def test_writes_gif_with_shrinking_frames(self, tmp_path):
        path = tmp_path / "nested" / "seams.gif"
        rec = VizGifRecorder(str(path))
        image = make_random_image(8, 10)
        rec.on_seam(image, find_seam(image, 'vertical'), 'vertical')
        smaller = image[:7, :9].copy()
        rec.on_seam(smaller, find_seam(smaller, 'horizontal'), 'horizontal')
        rec.close()
        assert path.exists()
        assert path.stat().st_size > 0

    def test_close_without_frames_writes_nothing(self, tmp_path):
        path = tmp_path / "empty.gif"
        VizGifRecorder(str(path)).close()
        assert not path.exists()

    def test_unwritable_directory(self, tmp_path):
        blocker = tmp_path / "file.txt"
        blocker.write_text("not a directory")
        with pytest.raises(RasterIOError):
            VizGifRecorder(str(blocker / "sub" / "s.gif"))
