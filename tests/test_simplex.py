from itertools import permutations

import pytest

from tetraflip.simplex import Tetrahedron, Triangle


def _parity(perm):
    """0 для парної перестановки, 1 для непарної."""
    perm = list(perm)
    swaps = 0
    for i in range(len(perm)):
        while perm[i] != i:
            j = perm[i]
            perm[i], perm[j] = perm[j], perm[i]
            swaps += 1
    return swaps % 2


# ---------- Triangle ----------
def test_triangle_rotations_are_equal():
    t = Triangle(1, 2, 3)
    assert t == Triangle(2, 3, 1)
    assert t == Triangle(3, 1, 2)
    assert hash(t) == hash(Triangle(2, 3, 1)) == hash(Triangle(3, 1, 2))


def test_triangle_reflections_are_not_equal():
    t = Triangle(1, 2, 3)
    for other in (Triangle(1, 3, 2), Triangle(3, 2, 1), Triangle(2, 1, 3)):
        assert t != other


def test_triangle_flip():
    t = Triangle(1, 2, 3)
    assert t.flip == Triangle(1, 3, 2)
    assert t.flip.flip == t
    assert t.flip != t


def test_triangle_as_dict_key():
    d = {Triangle("a", "b", "c"): 1}
    assert d[Triangle("c", "a", "b")] == 1
    assert Triangle("a", "c", "b") not in d


def test_triangle_with_duplicate_vertices_does_not_crash():
    t = Triangle(1, 1, 2)
    # рівність для повторених вершин не визначена, але виклик не падає
    assert isinstance(t == Triangle(1, 2, 1), bool)
    assert hash(t) == hash(Triangle(1, 2, 1)) == hash(Triangle(2, 1, 1))
    assert isinstance(hash(Triangle(5, 5, 5)), int)


def test_triangle_align_and_edges():
    t = Triangle(1, 2, 3)
    assert t.edges == ((1, 2), (2, 3), (3, 1))
    aligned = t.align((3, 1))
    assert aligned.base == (3, 1) and aligned.vertex == 2
    assert aligned == t
    assert t.align((1, 3)) is None
    assert Triangle.from_edge(7, (8, 9)) == Triangle(7, 8, 9)


# ---------- Tetrahedron ----------
def test_tetrahedron_equality_matches_orientation():
    base = (10, 20, 30, 40)
    t = Tetrahedron(*base)
    even = odd = 0
    for perm in permutations(range(4)):
        other = Tetrahedron(*(base[i] for i in perm))
        if _parity(perm) == 0:
            even += 1
            assert t == other, perm
            assert hash(t) == hash(other), perm
        else:
            odd += 1
            assert t != other, perm
    assert even == odd == 12


def test_tetrahedron_faces_and_base():
    t = Tetrahedron(1, 2, 3, 4)
    assert t.faces == (Triangle(1, 2, 3), Triangle(2, 1, 4), Triangle(3, 4, 1), Triangle(4, 3, 2))
    assert t.base == Triangle(4, 3, 2)
    assert t.vertex == 1
    assert len(t.vertex_faces) == 3 and all(1 in f.points for f in t.vertex_faces)


def test_tetrahedron_from_base_roundtrip():
    base = Triangle(5, 6, 7)
    t = Tetrahedron.from_base(9, base)
    assert t.vertex == 9
    assert t.base == base


def test_tetrahedron_flip_reverses_orientation():
    t = Tetrahedron(1, 2, 3, 4)
    assert t.flip != t
    assert t.flip.flip == t
    assert set(t.flip.points) == set(t.points)


@pytest.mark.parametrize("face_index", range(4))
def test_tetrahedron_align_on_every_face(face_index):
    t = Tetrahedron(1, 2, 3, 4)
    face = t.faces[face_index]
    aligned = t.align(face)
    assert aligned == t
    assert aligned.base == face


def test_tetrahedron_align_missing_face():
    t = Tetrahedron(1, 2, 3, 4)
    assert t.align(Triangle(1, 3, 2)) is None
    assert t.align(Triangle(1, 2, 9)) is None


def test_tetrahedron_split_covers_every_face():
    t = Tetrahedron(1, 2, 3, 4)
    parts = t.split(0)
    assert len(parts) == 4
    assert all(p.vertex == 0 for p in parts)
    assert {p.base for p in parts} == set(t.faces)


def test_map_rewrites_references():
    t = Tetrahedron(1, 2, 3, 4)
    m = t.map(lambda v: v * 10)
    assert m == Tetrahedron(10, 20, 30, 40)
    assert Triangle(1, 2, 3).map(str) == Triangle("1", "2", "3")
