from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Tuple

from .config import DelaunayConfig
from .delaunay import delaunay
from .geom import Pt, unique_points

logger = logging.getLogger(__name__)


def tetrahedralize(
    points: Iterable[Tuple[float, float, float]],
    backend: str = "internal",
    config: Optional[DelaunayConfig] = None,
) -> Tuple[List[Pt], List[Tuple[int, int, int]], List[Tuple[int, int, int, int]]]:
    """
    Повний пайплайн:
      - прибирає дублікати точок;
      - будує 3D Делоне-тетраедралізацію (наш інкрементальний алгоритм або SciPy/Qhull);
      - гранична поверхня сітки = опукла оболонка -> surface_triangles.

    Повертає:
      pts       — список Pt у фінальному порядку;
      surface   — список трикутників оболонки (індекси у pts; для "internal" нормаль дивиться назовні);
      tets      — список тетраедрів (індекси у pts).
    """
    pts: List[Pt] = unique_points(points)
    if len(pts) < 4:
        raise ValueError("Need at least 4 distinct points")

    name = backend.lower()
    if name == "internal":
        mesh = delaunay(pts, config)
        tets = [t.points for t in mesh]
        surface = [f.points for f in mesh.boundary]
        logger.debug("tetrahedralize: %d points, %d tets, %d surface triangles",
                     len(pts), len(tets), len(surface))
        return pts, surface, tets

    if name == "scipy":
        try:
            import numpy as np
            from scipy.spatial import Delaunay
        except ImportError as e:
            raise RuntimeError(
                "backend='scipy', але SciPy не встановлено. "
                "Встанови scipy або використай backend='internal'."
            ) from e

        arr = np.array([(p.x, p.y, p.z) for p in pts], dtype=float)

        # 3D Delaunay (Qhull під капотом)
        dela = Delaunay(arr, qhull_options="QJ")  # QJ = joggle для робастності
        tets = [tuple(int(i) for i in simplex) for simplex in dela.simplices]
        surface = [tuple(int(i) for i in tri) for tri in dela.convex_hull]
        return pts, surface, tets

    raise ValueError(f"Unknown backend: {backend}")
