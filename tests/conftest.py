import numpy as np
import pytest

# Two visually separated groups: 15 points around (3, 2.6), 18 around (7.9, 6.3)
LOWER_GROUP = [
    (1, 2), (1, 3), (2, 2), (2, 3), (2, 4),
    (3, 1), (3, 2), (3, 3), (3, 4), (4, 1), (4, 2), (4, 3),
    (4, 4), (5, 2), (5, 3),
]
UPPER_GROUP = [
    (6, 5), (6, 6), (6, 7), (7, 5), (7, 6), (7, 7), (7, 8),
    (8, 4), (8, 5), (8, 6), (8, 7), (8, 8), (9, 5), (9, 6),
    (9, 7), (9, 8), (10, 6), (10, 7),
]


@pytest.fixture
def float_points():
    return [(float(x), float(y)) for x, y in LOWER_GROUP + UPPER_GROUP]


@pytest.fixture
def uint8_points():
    return [(np.uint8(x), np.uint8(y)) for x, y in LOWER_GROUP + UPPER_GROUP]


@pytest.fixture
def blobs():
    rng = np.random.default_rng(1234)
    centres = np.array([[0.0, 0.0], [50.0, 0.0], [0.0, 50.0]])
    return np.vstack([rng.normal(c, 1.0, size=(40, 2)) for c in centres])
