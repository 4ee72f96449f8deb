import argparse
import logging
import os
import sys

import matplotlib.pyplot as plt
import numpy as np
import trimesh

from data_types import HalfEdgeMesh
from export import export_mode_svgs
from harmonics import (
    AreaOption,
    HarmonicsError,
    apply_fixed_points,
    build_cotangent_laplacian,
    build_graph_laplacian,
    decompose,
    detect_features,
    error_diagnostic,
)
from harmonics.logging_config import setup_logging
from plotting import plot_mode_grid

logger = logging.getLogger("harmonics.cli")

DEFAULT_MODE_COUNT = 12


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Compute the manifold harmonics (vibration modes) of a mesh.')
    parser.add_argument('mesh_filepath', type=str, help='Path to any mesh file trimesh can load')
    parser.add_argument('--laplacian', choices=['graph', 'cotangent'], default='cotangent', help='Laplace operator to decompose')
    parser.add_argument('--area-option', type=int, choices=[0, 1, 2], default=int(AreaOption.VORONOI),
                        help='Cotangent weighting: 0 = barycentric, 1 = Voronoi, 2 = unweighted')
    parser.add_argument('--modes', type=int, default=DEFAULT_MODE_COUNT, help='Number of modes to keep')
    parser.add_argument('--fix-boundary', action='store_true', help='Fix the boundary vertices of an open mesh')
    parser.add_argument('--svg-dir', type=str, default=None, help='Directory to write one SVG colour map per mode')
    parser.add_argument('--plot', action='store_true', help='Show the modes in a matplotlib grid')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    parser.add_argument('--log-file', type=str, default=None, help='Write the full debug log to this file')
    return parser.parse_args(argv)


def load_mesh(filepath: str) -> HalfEdgeMesh:
    if not os.path.isfile(filepath):
        logger.error(f"The file {filepath} does not exist.")
        sys.exit(1)

    try:
        mesh = trimesh.load(filepath, force='mesh', process=False)
    except Exception as e:
        logger.error(f"Error loading the mesh file: {e}")
        sys.exit(1)
    return HalfEdgeMesh.from_trimesh(mesh)


def boundary_vertices(mesh: HalfEdgeMesh) -> np.ndarray:
    return np.unique(mesh.halfedge_start[mesh.halfedge_face == -1])


def main(argv=None):
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    try:
        mesh = load_mesh(args.mesh_filepath)
        logger.info(f"Loaded mesh with {mesh.vertex_count} vertices and {mesh.face_count} faces")

        if args.laplacian == 'graph':
            laplacian = build_graph_laplacian(mesh)
        else:
            laplacian = build_cotangent_laplacian(mesh, args.area_option)

        mode_count = args.modes
        if args.fix_boundary:
            fixed = boundary_vertices(mesh)
            if len(fixed) == 0:
                logger.warning("The mesh is closed, no boundary vertices to fix")
            else:
                result = apply_fixed_points(laplacian, mesh, mesh.vertices[fixed])
                laplacian = result.laplacian
                mode_count = min(mode_count, result.max_mode_count)
                logger.info(f"Fixed {len(result.fixed_indices)} boundary vertices")

        eigenvalues, eigenvectors = decompose(laplacian, mode_count)
    except HarmonicsError as e:
        diagnostic = error_diagnostic(e)
        logger.error(f"{diagnostic.kind.value}: {diagnostic.message}")
        sys.exit(1)

    for mode, (eigenvalue, features) in enumerate(zip(eigenvalues, detect_features(mesh, eigenvectors))):
        logger.info(f"Mode {mode}: eigenvalue {eigenvalue:.6f} | peaks {features.peaks} | troughs {features.troughs}")

    if args.svg_dir:
        filenames = export_mode_svgs(mesh, eigenvectors, args.svg_dir)
        logger.info(f"Wrote {len(filenames)} SVG files to {args.svg_dir}")

    if args.plot:
        plot_mode_grid(mesh, eigenvectors, eigenvalues=eigenvalues)
        plt.show()


if __name__ == "__main__":
    main()
