# tetraflip/simplex.py
"""
Трикутник і тетраедр над довільним типом «посилання на вершину» (зазвичай int).

Рівність тут навмисно нестандартна:
  - Triangle рівні з точністю до циклічного зсуву (a,b,c) == (b,c,a) == (c,a,b),
    але НЕ до відображення: (a,c,b) — це та сама грань, видима з іншого боку (flip).
  - Tetrahedron рівні з точністю до 12 парних перестановок (обертань),
    непарні перестановки дають тетраедр протилежної орієнтації.
Хеші узгоджені з цією рівністю, тому обидва типи можна класти в set/dict як ключі.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, Optional, Tuple, TypeVar

V = TypeVar("V", bound=Hashable)
W = TypeVar("W", bound=Hashable)

Edge = Tuple[V, V]  # орієнтоване ребро (u, v)


@dataclass(frozen=True, eq=False)
class Triangle(Generic[V]):
    """Орієнтована грань. Лицьова сторона — у напрямку (b-a)x(c-a)."""
    a: V
    b: V
    c: V

    @staticmethod
    def from_edge(vertex: V, edge: Edge) -> "Triangle[V]":
        return Triangle(vertex, edge[0], edge[1])

    def __iter__(self):
        yield self.a; yield self.b; yield self.c

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Triangle):
            return NotImplemented
        a, b, c = other.a, other.b, other.c
        if self.a == a:
            return self.b == b and self.c == c
        if self.a == b:
            return self.b == c and self.c == a
        if self.a == c:
            return self.b == a and self.c == b
        return False

    def __hash__(self) -> int:
        # сума хешів трьох обертань не змінюється при циклічному зсуві
        a, b, c = self.a, self.b, self.c
        return hash((a, b, c)) + hash((b, c, a)) + hash((c, a, b))

    def __repr__(self) -> str:
        return f"Triangle({self.a!r}, {self.b!r}, {self.c!r})"

    @property
    def points(self) -> Tuple[V, V, V]:
        return (self.a, self.b, self.c)

    @property
    def vertex(self) -> V:
        return self.a

    @property
    def base(self) -> Edge:
        return (self.b, self.c)

    @property
    def flip(self) -> "Triangle[V]":
        return Triangle(self.a, self.c, self.b)

    @property
    def edges(self) -> Tuple[Edge, Edge, Edge]:
        return ((self.a, self.b), (self.b, self.c), (self.c, self.a))

    def align(self, base: Edge) -> Optional["Triangle[V]"]:
        """Обертання трикутника, у якого (b, c) == base; None, якщо такого ребра немає."""
        a, b, c = self.a, self.b, self.c
        if (a, b) == tuple(base): return Triangle(c, a, b)
        if (b, c) == tuple(base): return Triangle(a, b, c)
        if (c, a) == tuple(base): return Triangle(b, c, a)
        return None

    def map(self, fn: Callable[[V], W]) -> "Triangle[W]":
        return Triangle(fn(self.a), fn(self.b), fn(self.c))


@dataclass(frozen=True, eq=False)
class Tetrahedron(Generic[V]):
    """
    Тетраедр (a, b, c, d): a — вершина («apex»), основа — грань (d, c, b).
    Грані: (a,b,c), (b,a,d), (c,d,a), (d,c,b). Для «правильно» орієнтованого
    тетраедра (orient3d(a,b,c,d) < 0) лицьові сторони всіх граней дивляться назовні.
    """
    a: V
    b: V
    c: V
    d: V

    @staticmethod
    def from_base(vertex: V, base: Triangle[V]) -> "Tetrahedron[V]":
        return Tetrahedron(vertex, base.c, base.b, base.a)

    def __iter__(self):
        yield self.a; yield self.b; yield self.c; yield self.d

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tetrahedron):
            return NotImplemented
        # переписуємо other парною перестановкою так, щоб першою стала self.a
        a, b, c, d = other.a, other.b, other.c, other.d
        rest = Triangle(self.b, self.c, self.d)
        if self.a == a:
            return rest == Triangle(b, c, d)
        if self.a == b:
            return rest == Triangle(c, a, d)
        if self.a == c:
            return rest == Triangle(a, b, d)
        if self.a == d:
            return rest == Triangle(c, b, a)
        return False

    def __hash__(self) -> int:
        # обертання тетраедра лише переставляє (і циклічно зсуває) його грані
        return sum(hash(f) for f in self.faces)

    def __repr__(self) -> str:
        return f"Tetrahedron({self.a!r}, {self.b!r}, {self.c!r}, {self.d!r})"

    @property
    def points(self) -> Tuple[V, V, V, V]:
        return (self.a, self.b, self.c, self.d)

    @property
    def vertex(self) -> V:
        return self.a

    @property
    def base(self) -> Triangle[V]:
        return Triangle(self.d, self.c, self.b)

    @property
    def flip(self) -> "Tetrahedron[V]":
        return Tetrahedron(self.a, self.c, self.b, self.d)

    @property
    def faces(self) -> Tuple[Triangle[V], Triangle[V], Triangle[V], Triangle[V]]:
        a, b, c, d = self.a, self.b, self.c, self.d
        return (
            Triangle(a, b, c),
            Triangle(b, a, d),
            Triangle(c, d, a),
            Triangle(d, c, b),
        )

    @property
    def vertex_faces(self) -> Tuple[Triangle[V], Triangle[V], Triangle[V]]:
        """Три грані, що містять вершину a."""
        return self.faces[:3]

    def align(self, face: Triangle[V]) -> Optional["Tetrahedron[V]"]:
        """Рівний тетраедр, основою якого є face; None, якщо face не є гранню."""
        opposite = (self.d, self.c, self.b, self.a)
        for f, v in zip(self.faces, opposite):
            if f == face:
                return Tetrahedron.from_base(v, face)
        return None

    def split(self, mid: V) -> Tuple["Tetrahedron[V]", ...]:
        """Чотири тетраедри тієї ж орієнтації з вершиною mid над кожною гранню."""
        return tuple(Tetrahedron.from_base(mid, f) for f in self.faces)

    def map(self, fn: Callable[[V], W]) -> "Tetrahedron[W]":
        return Tetrahedron(fn(self.a), fn(self.b), fn(self.c), fn(self.d))
