# examples/demo_incremental.py
from tetraflip.delaunay import Delaunay3D, is_delaunay
from tetraflip.logging_config import setup_logging

if __name__ == "__main__":
    setup_logging("INFO")
    # кутовий тетраедр + точки, що по черзі розширюють оболонку
    raw = [
        (0,0,0), (0,0,1), (0,1,0), (1,0,0),
        (1,0.6,0.6), (1.2,1.1,0.2), (1.5,0.3,1.4)
    ]

    d3 = Delaunay3D([])
    for p in raw:
        idx = d3.add_point(p)
        s = d3.stats
        print(f"+{idx}: tets={len(d3.mesh)} boundary={len(d3.mesh.boundary)} "
              f"flips 2-3={s.flips_23} 3-2={s.flips_32}")

    print("valid:", d3.mesh.is_valid(d3.points))
    print("delaunay:", is_delaunay(d3.mesh, d3.points))
