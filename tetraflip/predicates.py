# tetraflip/predicates.py
from __future__ import annotations
from math import fabs
from typing import Optional, Tuple

import numpy as np

from .geom import Pt, add, sub, cross, dot, norm, scale, EPS

def orient3d(a: Pt, b: Pt, c: Pt, d: Pt) -> float:
    """>0 якщо d лежить з лицьового боку трикутника (a,b,c), тобто у напрямку (b-a)x(c-a)."""
    ab = sub(b, a)
    ac = sub(c, a)
    ad = sub(d, a)
    return dot(cross(ab, ac), ad)

def signed_distance_to_plane(a: Pt, b: Pt, c: Pt, p: Pt) -> float:
    n = cross(sub(b, a), sub(c, a))
    area2 = norm(n)
    if area2 == 0.0:
        return 0.0
    return orient3d(a, b, c, p) / area2

def visible_from_point(a: Pt, b: Pt, c: Pt, p: Pt, eps: float = 0.0) -> bool:
    """Строгий тест знака: p з лицьового боку (a,b,c). Копланарна точка грань не бачить."""
    return orient3d(a, b, c, p) > eps

def collinear(a: Pt, b: Pt, c: Pt, eps: float = EPS) -> bool:
    return norm(cross(sub(b, a), sub(c, a))) <= eps

def circumsphere(a: Pt, b: Pt, c: Pt, d: Pt) -> Optional[Tuple[Pt, float]]:
    """
    Центр і радіус сфери через чотири точки.
    None, якщо точки копланарні (система вироджена).
    """
    if orient3d(a, b, c, d) == 0.0:
        return None
    m = np.array([list(sub(b, a)), list(sub(c, a)), list(sub(d, a))], dtype=float)
    rhs = 0.5 * np.einsum("ij,ij->i", m, m)
    try:
        x = np.linalg.solve(m, rhs)
    except np.linalg.LinAlgError:
        return None
    if not np.all(np.isfinite(x)):
        return None
    offset = Pt(float(x[0]), float(x[1]), float(x[2]))
    return add(a, offset), norm(offset)

def segment_crosses_triangle(a: Pt, b: Pt, c: Pt, start: Pt, end: Pt) -> bool:
    """
    Чи перетинає відрізок start->end трикутник (a,b,c) (включно з межами).
    Паралельний площині відрізок не перетинає.
    """
    u = sub(b, a)
    v = sub(c, a)
    n = cross(u, v)
    direction = sub(end, start)
    den = dot(n, direction)
    if den == 0.0:
        return False
    r = -dot(n, sub(start, a)) / den
    if r < 0.0 or r > 1.0:
        return False
    w = sub(add(start, scale(direction, r)), a)
    uu = dot(u, u); uv = dot(u, v); vv = dot(v, v)
    wu = dot(w, u); wv = dot(w, v)
    d = uv*uv - uu*vv
    if fabs(d) == 0.0:
        return False
    s = (uv*wv - vv*wu) / d
    t = (uv*wu - uu*wv) / d
    return s >= 0.0 and t >= 0.0 and s + t <= 1.0
