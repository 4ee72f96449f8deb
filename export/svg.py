import os

import numpy as np
from numpy.typing import NDArray
import svgwrite

from data_types import HalfEdgeMesh
from harmonics import config
from harmonics.synthesis import face_colour_map


def create_frame(vertices: NDArray[np.float64], frame_size: int = config.SVG_FRAME_SIZE) -> tuple[int, int]:
    """
    Width and height of a frame holding the XY bounding box, scaled so the larger side is ``frame_size``.
    """
    x_range, y_range = np.ptp(vertices[:, :2], axis=0)
    if x_range == 0 and y_range == 0:
        raise ValueError("The mesh has no extent in the XY plane")

    ratio = frame_size / max(x_range, y_range)
    return int(np.ceil(x_range * ratio)), int(np.ceil(y_range * ratio))


def map_to_frame(vertices: NDArray[np.float64], frame: tuple[int, int]) -> NDArray[np.float64]:
    """
    Map the XY coordinates of the vertices into the frame.

    SVG y runs downwards, so y is flipped to keep the top view unmirrored.
    """
    xy = vertices[:, :2]
    xy_min = xy.min(axis=0)
    xy_range = np.ptp(xy, axis=0)
    xy_range[xy_range == 0] = 1.0

    mapped = (xy - xy_min) / xy_range * np.array(frame, dtype=np.float64)
    mapped[:, 1] = frame[1] - mapped[:, 1]
    return mapped


def coordinate_to_svg(coordinate: NDArray[np.float64]) -> tuple[float, float]:
    return (float(coordinate[0]), float(coordinate[1]))


def generate_mode_svg(mesh: HalfEdgeMesh, face_colours: NDArray[np.int64], filename: str, frame_size: int = config.SVG_FRAME_SIZE, title: str = None):
    """
    Write the top view of a mesh with each face filled by a greyscale level.

    Parameters:
    ----------
    mesh : HalfEdgeMesh
        Mesh whose XY projection is drawn
    face_colours : NDArray[np.int64]
        Greyscale level (0-255) per face
    filename : str
        Output SVG path
    frame_size : int
        Size in px of the larger side of the drawing
    title : str, optional
        Text written below the drawing
    """
    if len(face_colours) != mesh.face_count:
        raise ValueError(f"Expected {mesh.face_count} face colours, got {len(face_colours)}")

    width, height = create_frame(mesh.vertices, frame_size)
    points = map_to_frame(mesh.vertices, (width, height))

    title_height = 20 if title else 0
    svg = svgwrite.Drawing(filename, size=(f"{width}px", f"{height + title_height}px"), profile='tiny')

    for face_idx, face in enumerate(mesh.faces):
        level = int(face_colours[face_idx])
        svg.add(svg.polygon(
            points=[coordinate_to_svg(points[v]) for v in face],
            fill=svgwrite.rgb(level, level, level),
            stroke=svgwrite.rgb(level, level, level),
            stroke_width=0.5,
        ))

    if title:
        svg.add(svg.text(title,
                         insert=(2, height + title_height - 5),
                         font_size=12,
                         font_family="Arial"))

    svg.save()


def export_mode_svgs(mesh: HalfEdgeMesh, eigenvectors: NDArray[np.float64], directory: str, frame_size: int = config.SVG_FRAME_SIZE, prefix: str = "mode") -> list[str]:
    """Write one face colour map per mode into ``directory``. Returns the written paths."""
    os.makedirs(directory, exist_ok=True)
    filenames = []
    for mode in range(np.shape(eigenvectors)[1]):
        filename = os.path.join(directory, f"{prefix}_{mode:03d}.svg")
        generate_mode_svg(mesh, face_colour_map(mesh, eigenvectors, mode), filename, frame_size, title=f"Mode {mode}")
        filenames.append(filename)
    return filenames
