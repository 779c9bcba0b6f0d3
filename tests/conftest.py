"""Shared test fixtures for the seam-carving test suite."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
import pytest


def make_uniform_image(H, W, color=(100, 100, 100)):
    """Solid-color uint8 BGR image."""
    img = np.zeros((H, W, 3), dtype=np.uint8)
    img[:, :] = color
    return img


def make_random_image(H, W, seed=0):
    """Reproducible noise image."""
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(H, W, 3), dtype=np.uint8)


def make_stripe_image(H, W, cols):
    """Black image with a bright, row-alternating stripe over `cols`.

    The alternation gives the stripe interior vertical gradient energy too.
    """
    img = np.zeros((H, W, 3), dtype=np.uint8)
    for y in range(H):
        img[y, cols] = 255 if y % 2 == 0 else 100
    return img


def brute_force_min_path(energy, direction='vertical'):
    """Minimum total energy over every connected border-to-border path."""
    if direction == 'horizontal':
        energy = energy.T
    H, W = energy.shape

    def best_from(y, x):
        if y == H - 1:
            return energy[y, x]
        return energy[y, x] + min(best_from(y + 1, nx) for nx in (x - 1, x, x + 1) if 0 <= nx < W)

    return min(best_from(0, x) for x in range(W))


@pytest.fixture
def uniform_3x3():
    return make_uniform_image(3, 3)


@pytest.fixture
def noise_image():
    return make_random_image(10, 12, seed=7)
