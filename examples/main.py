# examples/main.py
from __future__ import annotations
import argparse

from tetraflip.config import DelaunayConfig, load_config
from tetraflip.delaunay import Delaunay3D, is_delaunay
from tetraflip.geom import lexicographic_order, unique_points
from tetraflip.logging_config import setup_logging


def main():
    parser = argparse.ArgumentParser(description="Інкрементальна 3D Делоне: куб + кілька внутрішніх точок")
    parser.add_argument("--config", help="YAML з параметрами DelaunayConfig")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--log-file")
    args = parser.parse_args()

    setup_logging(args.log_level, args.log_file)
    config = load_config(args.config) if args.config else DelaunayConfig()

    # --- 1) Вхідні дані ---
    points = [
        (0, 0, 0),
        (1, 0, 0),
        (1, 1, 0),
        (0, 1, 0),
        (0, 0, 1),
        (1, 0, 1),
        (1, 1, 1),
        (0, 1, 1),
        (0.5, 0.5, 0.5),
        (0.2, 0.8, 0.3),
        (0.8, 0.2, 0.7),
    ]
    pts = unique_points(points)
    pts = [pts[i] for i in lexicographic_order(pts)]

    # --- 2) Делоне ---
    d3 = Delaunay3D(pts, config)
    mesh = d3.build()

    print(f"Вершини:          {len(pts)}")
    print(f"Граней оболонки:  {len(mesh.boundary)}")
    print(f"Тетраедрів:       {len(mesh)}")
    print("STATS:", d3.stats)

    # --- 3) Валідація ---
    report = mesh.validate(pts)
    print("VALIDATION:", report)
    print("DELAUNAY:", is_delaunay(mesh, pts))

    # --- 4) boundary.off: гранична поверхня сітки ---
    mesh.write_boundary_off("boundary.off", pts)
    print("boundary.off записано (граничні трикутники сітки).")

    # --- 5) volume.vtk: уся тетра-сітка ---
    mesh.write_vtk_unstructured("volume.vtk", pts)
    print("volume.vtk записано (вся тетра-сітка для ParaView/MeshLab).")


if __name__ == "__main__":
    main()
