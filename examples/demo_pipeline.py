# examples/demo_pipeline.py
from tetraflip.logging_config import setup_logging
from tetraflip.pipeline import tetrahedralize

if __name__ == "__main__":
    setup_logging("DEBUG")
    cube = [
        (0,0,0), (1,0,0), (1,1,0), (0,1,0),
        (0,0,1), (1,0,1), (1,1,1), (0,1,1),
        (0.5,0.5,0.5), (0.2,0.8,0.3), (0.8,0.2,0.7)
    ]

    for backend in ("internal", "scipy"):
        pts, surface, tets = tetrahedralize(cube, backend=backend)
        print(f"[{backend}] vertices: {len(pts)}, surface triangles: {len(surface)}, tets: {len(tets)}")
