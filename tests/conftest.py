"""
Спільні фікстури для тестів tetraflip.
"""
import logging
import random

import pytest

from tetraflip.geom import Pt
from tetraflip.logging_config import setup_logging
from tetraflip.mesh import TetMesh
from tetraflip.simplex import Tetrahedron


@pytest.fixture(scope="session", autouse=True)
def setup_test_logging():
    setup_logging(level=logging.DEBUG)
    yield


@pytest.fixture
def cube_points():
    """8 вершин одиничного куба, лексикографічно впорядковані."""
    return [
        Pt(0, 0, 0), Pt(0, 0, 1), Pt(0, 1, 0), Pt(0, 1, 1),
        Pt(1, 0, 0), Pt(1, 0, 1), Pt(1, 1, 0), Pt(1, 1, 1),
    ]


@pytest.fixture
def five_points():
    """
    Кутовий тетраедр + точка поза ним, але всередині його описаної сфери
    (центр (0.5, 0.5, 0.5), r ≈ 0.866). Лексикографічний порядок.
    """
    return [
        Pt(0, 0, 0), Pt(0, 0, 1), Pt(0, 1, 0), Pt(1, 0, 0),
        Pt(1.0, 0.6, 0.6),
    ]


@pytest.fixture
def pentahedron_pair():
    """
    Два тетраедри зі спільною основою (1,2,3): A над нею з вершиною 0, B — з вершиною 4.
    Орієнтації узгоджені з геометрією five_points.
    """
    a = Tetrahedron(0, 1, 2, 3)
    b = Tetrahedron(4, 3, 2, 1)
    return a, b


@pytest.fixture
def pair_mesh(pentahedron_pair):
    a, b = pentahedron_pair
    mesh = TetMesh()
    assert mesh.add(a)
    assert mesh.add(b)
    return mesh


@pytest.fixture
def random_points():
    def make(n, seed=0):
        rng = random.Random(seed)
        return [Pt(rng.random(), rng.random(), rng.random()) for _ in range(n)]
    return make


def snapshot(mesh):
    """Стан сітки, який можна порівнювати на рівність."""
    return (
        mesh.tetrahedra,
        mesh.boundary,
        mesh.interior_faces,
        frozenset((f, t) for f, t in mesh.boundary_items()),
    )


@pytest.fixture(name="snapshot")
def snapshot_fixture():
    return snapshot
