"""
tetraflip — інкрементальна 3D тетраедралізація Делоне локальними фліпами.
TetMesh веде облік граничних/внутрішніх граней, Delaunay3D вставляє точки по одній.
"""

__version__ = "0.2.0"

from tetraflip.geom import Pt, EPS, centroid, extent, unique_points, lexicographic_order
from tetraflip.predicates import orient3d, visible_from_point, circumsphere, segment_crosses_triangle
from tetraflip.simplex import Triangle, Tetrahedron
from tetraflip.mesh import TetMesh, boundary_of
from tetraflip.config import DelaunayConfig, load_config
from tetraflip.delaunay import (
    Delaunay3D, DelaunayStats, AmbiguousFlipError,
    delaunay, delaunay_ordered, is_delaunay, delaunay_violations,
)
from tetraflip.pipeline import tetrahedralize

__all__ = [
    "Pt", "EPS", "centroid", "extent", "unique_points", "lexicographic_order",
    "orient3d", "visible_from_point", "circumsphere", "segment_crosses_triangle",
    "Triangle", "Tetrahedron", "TetMesh", "boundary_of",
    "DelaunayConfig", "load_config",
    "Delaunay3D", "DelaunayStats", "AmbiguousFlipError",
    "delaunay", "delaunay_ordered", "is_delaunay", "delaunay_violations",
    "tetrahedralize", "__version__",
]
