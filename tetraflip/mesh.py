# tetraflip/mesh.py
from __future__ import annotations
import logging
from typing import (Callable, Dict, Generic, Hashable, Iterable, Iterator, List,
                    Optional, Sequence, Set, Tuple, TypeVar)

import meshio
import numpy as np

from .geom import Pt
from .predicates import orient3d
from .simplex import Tetrahedron, Triangle

logger = logging.getLogger(__name__)

V = TypeVar("V", bound=Hashable)
W = TypeVar("W", bound=Hashable)


class _FaceTable(Generic[V]):
    """
    Спільна логіка обліку граней для живої сітки і для «чернетки» транзакції.
    Нащадки реалізують лише примітиви доступу до трьох таблиць:
      - множина тетраедрів;
      - boundary: грань -> єдиний тетраедр, якому вона належить;
      - interior: грань -> тетраедр з ЦЬОГО боку грані (кожна внутрішня грань
        зареєстрована двічі, по разу на кожне намотування).
    """

    # ---------- примітиви ----------
    def _has_tetra(self, t: Tetrahedron[V]) -> bool: raise NotImplementedError
    def _put_tetra(self, t: Tetrahedron[V]) -> None: raise NotImplementedError
    def _drop_tetra(self, t: Tetrahedron[V]) -> None: raise NotImplementedError
    def _get_boundary(self, f: Triangle[V]) -> Optional[Tetrahedron[V]]: raise NotImplementedError
    def _set_boundary(self, f: Triangle[V], t: Tetrahedron[V]) -> None: raise NotImplementedError
    def _del_boundary(self, f: Triangle[V]) -> None: raise NotImplementedError
    def _get_interior(self, f: Triangle[V]) -> Optional[Tetrahedron[V]]: raise NotImplementedError
    def _set_interior(self, f: Triangle[V], t: Tetrahedron[V]) -> None: raise NotImplementedError
    def _del_interior(self, f: Triangle[V]) -> None: raise NotImplementedError

    # ---------- облік граней ----------
    def can_add(self, tetra: Tetrahedron[V]) -> bool:
        """Чи можна додати тетраедр: жодна з його граней ще не зайнята (ні як межа, ні як внутрішня)."""
        for face in tetra.faces:
            if self._get_interior(face) is not None or self._get_boundary(face) is not None:
                return False
        return True

    def add(self, tetra: Tetrahedron[V]) -> bool:
        if not self.can_add(tetra):
            return False
        self.add_unchecked(tetra)
        return True

    def add_unchecked(self, tetra: Tetrahedron[V]) -> None:
        """
        Додати без перевірки. Якщо can_add(tetra) хибне, інваріант сітки ламається —
        це відповідальність того, хто викликає.
        """
        for face in tetra.faces:
            flipped = face.flip
            other = self._get_boundary(flipped)
            if other is not None:
                # межа стає внутрішньою гранню: реєструємо обидва намотування
                self._del_boundary(flipped)
                self._set_interior(flipped, other)
                self._set_interior(face, tetra)
            else:
                self._set_boundary(face, tetra)
        self._put_tetra(tetra)

    def remove(self, tetra: Tetrahedron[V]) -> bool:
        if not self._has_tetra(tetra):
            return False
        self._drop_tetra(tetra)
        for face in tetra.faces:
            if self._get_interior(face) is not None:
                # сусід по той бік знову стає власником граничної грані
                flipped = face.flip
                other = self._get_interior(flipped)
                self._del_interior(face)
                self._del_interior(flipped)
                if other is not None:
                    self._set_boundary(flipped, other)
            else:
                self._del_boundary(face)
        return True


class _Staged(_FaceTable[V]):
    """
    Чернетка змін поверх живої TetMesh: читає «наскрізь», пише у власні оверлеї.
    commit() переносить зміни у сітку; якщо commit() не викликано, сітка не змінюється.
    """

    def __init__(self, mesh: "TetMesh[V]"):
        self._mesh = mesh
        self._tetras: Dict[Tetrahedron[V], bool] = {}
        # None у значенні: запис видалено
        self._boundaries: Dict[Triangle[V], Optional[Tetrahedron[V]]] = {}
        self._interiors: Dict[Triangle[V], Optional[Tetrahedron[V]]] = {}

    def _has_tetra(self, t):
        if t in self._tetras:
            return self._tetras[t]
        return t in self._mesh._tetras

    def _put_tetra(self, t):
        self._tetras[t] = True

    def _drop_tetra(self, t):
        self._tetras[t] = False

    def _get_boundary(self, f):
        if f in self._boundaries:
            return self._boundaries[f]
        return self._mesh._boundaries.get(f)

    def _set_boundary(self, f, t):
        self._boundaries[f] = t

    def _del_boundary(self, f):
        self._boundaries[f] = None

    def _get_interior(self, f):
        if f in self._interiors:
            return self._interiors[f]
        return self._mesh._interiors.get(f)

    def _set_interior(self, f, t):
        self._interiors[f] = t

    def _del_interior(self, f):
        self._interiors[f] = None

    def commit(self) -> None:
        m = self._mesh
        for t, present in self._tetras.items():
            m._tetras.discard(t)
            if present:
                m._tetras.add(t)
        for table, live in ((self._boundaries, m._boundaries), (self._interiors, m._interiors)):
            for f, owner in table.items():
                live.pop(f, None)
                if owner is not None:
                    live[f] = owner


class TetMesh(_FaceTable[V]):
    """
    Тетраедральна сітка над посиланнями на вершини (координат не зберігає).
      - tetrahedra: множина тетраедрів;
      - boundary: грані, що належать рівно одному тетраедру (зовнішня поверхня);
      - interior: грані, спільні для двох тетраедрів, у обох намотуваннях.
    Усі зміни синхронні; невдалі операції повертають False і нічого не змінюють.
    """

    def __init__(self):
        self._tetras: Set[Tetrahedron[V]] = set()
        self._boundaries: Dict[Triangle[V], Tetrahedron[V]] = {}
        self._interiors: Dict[Triangle[V], Tetrahedron[V]] = {}

    @classmethod
    def from_tetrahedra(cls, tetras: Iterable[Tetrahedron[V]]) -> "TetMesh[V]":
        mesh: TetMesh[V] = cls()
        for t in tetras:
            if not mesh.add(t):
                raise ValueError(f"tetrahedron {t!r} conflicts with the mesh")
        return mesh

    # ---------- примітиви ----------
    def _has_tetra(self, t): return t in self._tetras
    def _put_tetra(self, t): self._tetras.add(t)
    def _drop_tetra(self, t): self._tetras.discard(t)
    def _get_boundary(self, f): return self._boundaries.get(f)
    def _set_boundary(self, f, t): self._boundaries[f] = t
    def _del_boundary(self, f): self._boundaries.pop(f, None)
    def _get_interior(self, f): return self._interiors.get(f)
    def _set_interior(self, f, t): self._interiors[f] = t
    def _del_interior(self, f): self._interiors.pop(f, None)

    # ---------- запити ----------
    def __len__(self) -> int:
        return len(self._tetras)

    def __iter__(self) -> Iterator[Tetrahedron[V]]:
        return iter(list(self._tetras))

    def __contains__(self, tetra: object) -> bool:
        return tetra in self._tetras

    def contains(self, tetra: Tetrahedron[V]) -> bool:
        return tetra in self._tetras

    def get_interior(self, face: Triangle[V]) -> Optional[Tetrahedron[V]]:
        """Тетраедр з боку орієнтованої грані face, або None, якщо грань гранична чи відсутня."""
        return self._interiors.get(face)

    def is_boundary(self, face: Triangle[V]) -> bool:
        return face in self._boundaries

    def neighbor(self, tetra: Tetrahedron[V], face: Triangle[V]) -> Optional[Tetrahedron[V]]:
        """Сусід tetra через його грань face (None — межа, або face не з tetra)."""
        if tetra not in self._tetras or self._interiors.get(face) != tetra:
            return None
        return self._interiors.get(face.flip)

    @property
    def tetrahedra(self) -> frozenset:
        return frozenset(self._tetras)

    @property
    def boundary(self) -> frozenset:
        return frozenset(self._boundaries)

    @property
    def interior_faces(self) -> frozenset:
        return frozenset(self._interiors)

    def boundary_items(self) -> List[Tuple[Triangle[V], Tetrahedron[V]]]:
        """Граничні грані разом із тетраедрами, яким вони належать (знімок)."""
        return list(self._boundaries.items())

    # ---------- локальні перетворення ----------
    def merge_pentahedron(self, a: Tetrahedron[V], b: Tetrahedron[V]) -> bool:
        """
        3 -> 2. a і b мають спільну основу (основа b — flip основи a). Зараз п'ятивершинник
        між ними розбитий на три тетраедри, кожен з яких містить одне ребро основи та обидві
        вершини a.vertex, b.vertex. Ці три замінюються на a і b. При конфлікті — False без змін.
        """
        base = a.base
        if b.base != base.flip:
            return False
        olds = [
            Tetrahedron(b.vertex, a.vertex, base.a, base.b),
            Tetrahedron(b.vertex, a.vertex, base.b, base.c),
            Tetrahedron(b.vertex, a.vertex, base.c, base.a),
        ]
        staged: _Staged[V] = _Staged(self)
        for t in olds:
            if not staged.remove(t):
                logger.debug("merge_pentahedron: %r is not in the mesh", t)
                return False
        if not (staged.add(a) and staged.add(b)):
            logger.debug("merge_pentahedron: %r/%r conflict with the mesh", a, b)
            return False
        staged.commit()
        return True

    def split_pentahedron(self, a: Tetrahedron[V], b: Tetrahedron[V]) -> bool:
        """
        2 -> 3. a і b мають спільну основу; замінюються трьома тетраедрами, кожен з яких
        містить одне ребро основи та обидві вершини. При конфлікті — False без змін.
        """
        base = a.base
        if b.base != base.flip:
            return False
        news = [
            Tetrahedron(base.a, base.b, b.vertex, a.vertex),
            Tetrahedron(base.b, base.c, b.vertex, a.vertex),
            Tetrahedron(base.c, base.a, b.vertex, a.vertex),
        ]
        staged: _Staged[V] = _Staged(self)
        if not (staged.remove(a) and staged.remove(b)):
            logger.debug("split_pentahedron: %r/%r are not both in the mesh", a, b)
            return False
        for t in news:
            if not staged.add(t):
                logger.debug("split_pentahedron: %r conflicts with the mesh", t)
                return False
        staged.commit()
        return True

    def map(self, fn: Callable[[V], W]) -> "TetMesh[W]":
        """
        Нова незалежна сітка з переписаними посиланнями на вершини.
        fn має бути ін'єктивною на використаних вершинах, інакше результат не гарантований.
        """
        out: TetMesh[W] = TetMesh()
        out._tetras = {t.map(fn) for t in self._tetras}
        out._boundaries = {f.map(fn): t.map(fn) for f, t in self._boundaries.items()}
        out._interiors = {f.map(fn): t.map(fn) for f, t in self._interiors.items()}
        return out

    # ---------- валідація сітки ----------
    def validate(self, points: Optional[Sequence[Pt]] = None) -> dict:
        """
        Перевірка інваріанту сітки:
          - кожна грань кожного тетраедра або гранична, або внутрішня (не обидва, не жодне)
            і записана саме за цим тетраедром;
          - внутрішні грані зареєстровані в обох намотуваннях;
          - записи таблиць посилаються на тетраедри сітки, що справді мають цю грань;
          - (якщо задано points) орієнтація кожного тетраедра: orient3d(a,b,c,d) < 0.
        Повертає словник з діагностикою (порожні списки = все ок).
        """
        unregistered: list = []
        wrong_owner: list = []
        double_registered: list = []
        stale: list = []
        unpaired: list = []
        bad_orientation: list = []

        for t in self._tetras:
            for f in t.faces:
                in_b = f in self._boundaries
                in_i = f in self._interiors
                if in_b and in_i:
                    double_registered.append(f)
                elif not (in_b or in_i):
                    unregistered.append((t, f))
                elif (self._boundaries if in_b else self._interiors)[f] != t:
                    wrong_owner.append((t, f))

        for table in (self._boundaries, self._interiors):
            for f, owner in table.items():
                if owner not in self._tetras or f not in owner.faces:
                    stale.append((f, owner))

        for f in self._interiors:
            if f.flip not in self._interiors or f.flip in self._boundaries:
                unpaired.append(f)
        for f in self._boundaries:
            if f.flip in self._boundaries or f.flip in self._interiors:
                unpaired.append(f)

        if points is not None:
            for t in self._tetras:
                a, b, c, d = (points[i] for i in t)
                if orient3d(a, b, c, d) >= 0:
                    bad_orientation.append(t)

        return {
            "tetrahedra": len(self._tetras),
            "boundary_faces": len(self._boundaries),
            "interior_faces": len(self._interiors) // 2,
            "unregistered_faces": unregistered,        # [(tetra, face), ...]
            "wrong_owner": wrong_owner,                # грань записана за іншим тетраедром
            "double_registered": double_registered,    # грань і межа, і внутрішня
            "stale_entries": stale,                    # [(face, owner), ...]
            "unpaired_faces": unpaired,                # внутрішня без пари / межа з парою
            "bad_orientation": bad_orientation,
        }

    def is_valid(self, points: Optional[Sequence[Pt]] = None) -> bool:
        report = self.validate(points)
        return not any(v for k, v in report.items() if isinstance(v, list))

    # ---------- експорт ----------
    def boundary_off(self, points: Sequence[Pt]) -> str:
        """
        Повертає OFF для граничної поверхні сітки; points індексуються посиланнями на вершини.
        """
        bfaces = list(self._boundaries)
        used = sorted({v for tri in bfaces for v in tri})
        remap = {old: i for i, old in enumerate(used)}

        lines = ["OFF", f"{len(used)} {len(bfaces)} 0"]
        for vi in used:
            p = points[vi]
            lines.append(f"{p.x} {p.y} {p.z}")
        for tri in bfaces:
            a, b, c = (remap[v] for v in tri)
            lines.append(f"3 {a} {b} {c}")
        return "\n".join(lines)

    def write_boundary_off(self, path: str, points: Sequence[Pt]) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.boundary_off(points))

    def to_meshio(self, points: Sequence[Pt]) -> meshio.Mesh:
        """Уся тетра-сітка як meshio.Mesh (вершини перенумеровано підряд, комірки "tetra")."""
        tets = list(self._tetras)
        used = sorted({v for t in tets for v in t})
        remap = {old: i for i, old in enumerate(used)}
        coords = np.array([tuple(points[vi]) for vi in used], dtype=float).reshape(-1, 3)
        cells = np.array([[remap[v] for v in t] for t in tets], dtype=int).reshape(-1, 4)
        return meshio.Mesh(coords, [("tetra", cells)])

    def write_vtk_unstructured(self, path: str, points: Sequence[Pt]) -> None:
        """Формат визначається розширенням path (.vtu, .vtk, ...)."""
        self.to_meshio(points).write(path)


# ---------- утиліти ----------
def boundary_of(tetras: Iterable[Tetrahedron[V]]) -> Set[Triangle[V]]:
    """Граничні трикутники (що належать рівно одному тетраедру) довільного набору тетраедрів."""
    cur: Set[Triangle[V]] = set()
    for t in tetras:
        for f in t.faces:
            flipped = f.flip
            if flipped in cur:
                cur.remove(flipped)
            else:
                cur.add(f)
    return cur
