# tetraflip/delaunay.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .config import DelaunayConfig
from .geom import Pt, as_pt, dist, extent, lexicographic_order, norm, sub
from .mesh import TetMesh
from .predicates import circumsphere, collinear, orient3d, segment_crosses_triangle, visible_from_point
from .simplex import Tetrahedron, Triangle

logger = logging.getLogger(__name__)


class AmbiguousFlipError(RuntimeError):
    """Для 3->2 фліпу знайшлося більше одного ребра з третім тетраедром: сітка зіпсована."""


@dataclass
class DelaunayStats:
    points_inserted: int = 0
    points_skipped: int = 0      # точка не бачить жодної граничної грані
    hull_tetrahedra: int = 0
    flips_23: int = 0
    flips_32: int = 0
    unflippable: int = 0         # порушення, для якого немає допустимого фліпу
    truncated: int = 0           # вставки, обірвані запобіжником max_flips_per_point


class Delaunay3D:
    """
    Інкрементальна 3D Делоне локальними перетвореннями (фліпами 2->3 / 3->2).

    Точки мають бути вже впорядковані так, щоб кожна наступна лежала поза опуклою
    оболонкою попередніх (наприклад, лексикографічно, див. delaunay()).
    Для кожної точки:
      1) до сітки додаються тетраедри над усіма граничними гранями, які точка «бачить»;
      2) колишні граничні грані (тепер внутрішні) йдуть у стек;
      3) поки стек не порожній: якщо протилежна вершина сусіда лежить строго всередині
         описаної сфери — фліп, і зовнішні грані п'ятивершинника знову йдуть у стек.
    Вироджені входи (співпадаючі точки, ко-сферичні/копланарні четвірки) не гарантовані.
    """

    def __init__(self, points: Iterable, config: Optional[DelaunayConfig] = None):
        self.points: List[Pt] = [as_pt(p) for p in points]
        self.config = config or DelaunayConfig()
        self.mesh: TetMesh[int] = TetMesh()
        self.stats = DelaunayStats()
        self.seed: Optional[Tuple[int, int, int, int]] = None

    # ---- стартовий тетраедр ----
    def _find_seed(self) -> Optional[Tuple[int, int, int, int]]:
        """
        Перша точка, перша відмінна від неї, перша не колінеарна, перша не копланарна.
        Пороги відносні: eps масштабується розміром bounding box входу.
        """
        P = self.points
        n = len(P)
        if n < 4:
            return None
        size = extent(P)
        if size == 0.0:
            return None
        eps = self.config.eps
        tol_len, tol_area, tol_vol = eps * size, eps * size ** 2, eps * size ** 3
        i0 = 0
        i1 = next((j for j in range(1, n) if norm(sub(P[j], P[i0])) > tol_len), None)
        if i1 is None:
            return None
        i2 = next((k for k in range(i1 + 1, n) if not collinear(P[i0], P[i1], P[k], tol_area)), None)
        if i2 is None:
            return None
        i3 = next((l for l in range(i2 + 1, n)
                   if abs(orient3d(P[i0], P[i1], P[i2], P[l])) > tol_vol), None)
        if i3 is None:
            return None
        return (i0, i1, i2, i3)

    def _build_seed(self) -> bool:
        seed = self._find_seed()
        if seed is None:
            logger.warning("Delaunay: %d points contain no non-coplanar quadruple; mesh left empty",
                           len(self.points))
            return False
        i0, i1, i2, i3 = seed
        first = Tetrahedron(i0, i1, i2, i3)
        # усі грані мають дивитися назовні: orient3d(a,b,c,d) < 0
        if orient3d(*(self.points[v] for v in first)) > 0:
            first = first.flip
        self.mesh.add(first)
        self.seed = seed
        logger.debug("Delaunay: seed tetrahedron %r", first)
        return True

    # ---- вставка однієї точки ----
    def insert(self, p_idx: int) -> bool:
        """Додати точку p_idx (має лежати поза поточною оболонкою). False — точку пропущено."""
        P = self.points
        p = P[p_idx]

        # 1) видимі граничні грані -> нові тетраедри
        new_tetras: List[Tetrahedron[int]] = []
        stack: List[Triangle[int]] = []
        queued: Set[Triangle[int]] = set()
        for bound, _owner in self.mesh.boundary_items():
            a, b, c = (P[v] for v in bound)
            if visible_from_point(a, b, c, p):
                new_tetras.append(Tetrahedron(p_idx, bound.a, bound.b, bound.c))
                stack.append(bound)
                queued.add(bound)

        if not new_tetras:
            logger.warning("Delaunay: point %d sees no boundary face (inside hull or degenerate); skipped",
                           p_idx)
            self.stats.points_skipped += 1
            return False

        # 2) розширити оболонку
        for t in new_tetras:
            if not self.mesh.add(t):
                logger.warning("Delaunay: hull tetrahedron %r conflicts with the mesh", t)
        self.stats.hull_tetrahedra += len(new_tetras)

        # 3) відновити властивість Делоне
        self._repair(stack, queued, p_idx)
        self.stats.points_inserted += 1
        return True

    def add_point(self, point) -> int:
        """
        Дописати нову точку в кінець і вставити її. Повертає її індекс.
        Точка всередині поточної оболонки (або на ній) не вставляється: вона лишається
        у points, але не стає вершиною сітки, і рахується у stats.points_skipped.
        """
        self.points.append(as_pt(point))
        idx = len(self.points) - 1
        if self.seed is None:
            if len(self.points) >= 4:
                self._build_seed()
                for i in range(len(self.points)):
                    if self.seed is not None and i not in self.seed:
                        self.insert(i)
            return idx
        self.insert(idx)
        return idx

    def _repair(self, stack: List[Triangle[int]], queued: Set[Triangle[int]], p_idx: int) -> None:
        limit = self.config.max_flips_per_point
        flips = 0
        while stack:
            bound = stack.pop()
            queued.discard(bound)

            inner = self.mesh.get_interior(bound)
            outer = self.mesh.get_interior(bound.flip)
            if inner is None or outer is None:
                continue
            hulla = inner.align(bound)
            hullb = outer.align(bound.flip)
            if hulla is None or hullb is None:
                continue
            if not self._violates(hulla, hullb):
                continue

            if flips >= limit:
                logger.warning("Delaunay: point %d exceeded %d flips; %d faces left unchecked",
                               p_idx, limit, len(stack) + 1)
                self.stats.truncated += 1
                return

            done = self._flip(bound, hulla, hullb)
            if done is None:
                self.stats.unflippable += 1
                continue
            flips += 1

            # зовнішні грані перетвореного п'ятивершинника могли стати «поганими»
            bound, hulla, hullb = done
            av, bv = hulla.vertex, hullb.vertex
            for face in (
                Triangle(bv, bound.a, bound.b),
                Triangle(bv, bound.b, bound.c),
                Triangle(bv, bound.c, bound.a),
                Triangle(av, bound.b, bound.a),
                Triangle(av, bound.c, bound.b),
                Triangle(av, bound.a, bound.c),
            ):
                if face not in queued and self.mesh.get_interior(face) is not None:
                    stack.append(face)
                    queued.add(face)

    def _violates(self, hulla: Tetrahedron[int], hullb: Tetrahedron[int]) -> bool:
        """Чи лежить вершина hullb строго всередині описаної сфери hulla."""
        P = self.points
        sphere = circumsphere(*(P[v] for v in hulla))
        if sphere is None:
            return False
        centre, radius = sphere
        return dist(P[hullb.vertex], centre) < radius * (1.0 - self.config.flip_tolerance)

    def _flip(
        self, bound: Triangle[int], hulla: Tetrahedron[int], hullb: Tetrahedron[int]
    ) -> Optional[Tuple[Triangle[int], Tetrahedron[int], Tetrahedron[int]]]:
        """
        2->3, якщо відрізок між вершинами перетинає спільну грань (опуклий випадок),
        інакше 3->2 через ребро грані, навколо якого рівно три тетраедри.
        Повертає (грань, тетраедр над нею, тетраедр під нею) після фліпу, або None.
        """
        P = self.points
        av, bv = hulla.vertex, hullb.vertex
        a, b, c = (P[v] for v in bound)
        if segment_crosses_triangle(a, b, c, P[bv], P[av]):
            if self.mesh.split_pentahedron(hulla, hullb):
                self.stats.flips_23 += 1
                return bound, hulla, hullb
            return None

        # увігнутий випадок: шукаємо третій тетраедр (av, bv, ребро грані)
        matches = []
        for key, (e0, e1) in ((bound.c, (bound.a, bound.b)),
                              (bound.a, (bound.b, bound.c)),
                              (bound.b, (bound.c, bound.a))):
            if self.mesh.contains(Tetrahedron(av, bv, e0, e1)):
                matches.append((key, e0, e1))
        if not matches:
            return None
        if len(matches) > 1:
            raise AmbiguousFlipError(
                f"face {bound!r}: {len(matches)} edges have a third tetrahedron around {av}-{bv}")

        key, e0, e1 = matches[0]
        nbound = Triangle(av, bv, key)
        na = Tetrahedron.from_base(e1, nbound)
        nb = Tetrahedron.from_base(e0, nbound.flip)
        if self.mesh.merge_pentahedron(na, nb):
            self.stats.flips_32 += 1
            return nbound, na, nb
        return None

    def build(self) -> TetMesh[int]:
        """
        Побудувати тетраедралізацію для всіх points у їхньому порядку.
        Повторний виклик нічого не робить: нові точки додаються через add_point.
        """
        if self.seed is not None:
            return self.mesh
        if not self._build_seed():
            return self.mesh
        order = [i for i in range(len(self.points)) if i not in self.seed]
        every = self.config.log_every
        for k, i in enumerate(order, 1):
            self.insert(i)
            if every and k % every == 0:
                logger.info("Delaunay: %d/%d points, %d tetrahedra", k, len(order), len(self.mesh))
        s = self.stats
        logger.info("Delaunay: %d points -> %d tetrahedra (2-3 flips: %d, 3-2 flips: %d, unflippable: %d)",
                    len(self.points), len(self.mesh), s.flips_23, s.flips_32, s.unflippable)
        return self.mesh


def delaunay_ordered(points: Sequence, config: Optional[DelaunayConfig] = None) -> TetMesh[int]:
    """Делоне для вже впорядкованих точок; вершини сітки — індекси у points."""
    return Delaunay3D(points, config).build()


def delaunay(points: Sequence, config: Optional[DelaunayConfig] = None) -> TetMesh[int]:
    """
    Делоне для довільного порядку: лексикографічне сортування, побудова,
    переведення індексів назад у вихідну нумерацію.
    """
    pts = [as_pt(p) for p in points]
    order = lexicographic_order(pts)
    mesh = delaunay_ordered([pts[i] for i in order], config)
    return mesh.map(lambda k: order[k])


# ---------- перевірки ----------
def delaunay_violations(
    mesh: TetMesh[int], points: Sequence[Pt], tol: float = 1e-9
) -> List[Tuple[Tetrahedron[int], int]]:
    """Пари (тетраедр, вершина), де вершина сітки строго всередині описаної сфери тетраедра."""
    used = sorted({v for t in mesh for v in t})
    out: List[Tuple[Tetrahedron[int], int]] = []
    for t in mesh:
        sphere = circumsphere(*(points[v] for v in t))
        if sphere is None:
            continue
        centre, radius = sphere
        for v in used:
            if v in t.points:
                continue
            if dist(points[v], centre) < radius * (1.0 - tol):
                out.append((t, v))
    return out


def is_delaunay(mesh: TetMesh[int], points: Sequence[Pt], tol: float = 1e-9) -> bool:
    return not delaunay_violations(mesh, points, tol)
