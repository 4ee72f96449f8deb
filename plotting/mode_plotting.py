import numpy as np
from numpy.typing import NDArray
import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d.art3d import Poly3DCollection

from data_types import HalfEdgeMesh
from harmonics.synthesis import HarmonicShape, face_colour_map


def _set_equal_limits(ax, vertices: NDArray[np.float64]):
    # Auto-adjust limits to include all vertices
    x_min, x_max = vertices[:, 0].min(), vertices[:, 0].max()
    y_min, y_max = vertices[:, 1].min(), vertices[:, 1].max()
    z_min, z_max = vertices[:, 2].min(), vertices[:, 2].max()

    buffer = max(x_max - x_min, y_max - y_min, z_max - z_min) * 0.05
    ax.set_xlim(x_min - buffer, x_max + buffer)
    ax.set_ylim(y_min - buffer, y_max + buffer)
    ax.set_zlim(z_min - buffer, z_max + buffer)
    ax.set_box_aspect([1, 1, 1])


def _add_faces(ax, mesh: HalfEdgeMesh, face_colors, edge_color='black', edge_width=0.3):
    polygons = [mesh.vertices[list(face)] for face in mesh.faces]
    poly3d = Poly3DCollection(polygons, linewidths=edge_width, edgecolors=edge_color)
    poly3d.set_facecolor(face_colors)
    ax.add_collection3d(poly3d)


def plot_mode(mesh: HalfEdgeMesh, eigenvectors: NDArray[np.float64], mode: int, title=None, figsize=(8, 6), ax=None, with_edges=True):
    """
    Plots a mesh with its faces coloured by the greyscale map of one mode.

    Parameters
    ----------
    mesh : HalfEdgeMesh
        Mesh the modes were computed for (any polygon faces).
    eigenvectors : NDArray[np.float64]
        Mode matrix, one mode per column.
    mode : int
        Column of the mode to show.
    ax : matplotlib.axes.Axes, optional
        Existing 3D axes to plot on. If None, new figure and axes are created.

    Returns
    -------
    fig : matplotlib.figure.Figure
    ax : matplotlib.axes.Axes
    """
    if ax is None:
        fig = plt.figure(figsize=figsize)
        ax = fig.add_subplot(111, projection='3d')
    else:
        fig = ax.figure

    levels = face_colour_map(mesh, eigenvectors, mode) / 255.0
    face_colors = np.column_stack([levels, levels, levels, np.ones_like(levels)])
    _add_faces(ax, mesh, face_colors, edge_color='black' if with_edges else 'none', edge_width=0.3 if with_edges else 0)

    ax.set_title(title if title is not None else f"Mode {mode}")
    ax.set_xlabel("X")
    ax.set_ylabel("Y")
    ax.set_zlabel("Z")
    _set_equal_limits(ax, mesh.vertices)
    return fig, ax


def plot_mode_grid(mesh: HalfEdgeMesh, eigenvectors: NDArray[np.float64], modes=None, columns=4, eigenvalues=None, figsize_per_plot=(3, 3)):
    """Plot several modes side by side, optionally labelled with their eigenvalues."""
    if modes is None:
        modes = list(range(np.shape(eigenvectors)[1]))
    rows = max(1, int(np.ceil(len(modes) / columns)))

    fig = plt.figure(figsize=(figsize_per_plot[0] * columns, figsize_per_plot[1] * rows))
    for k, mode in enumerate(modes):
        ax = fig.add_subplot(rows, columns, k + 1, projection='3d')
        title = f"Mode {mode}"
        if eigenvalues is not None:
            title += f"\nλ = {eigenvalues[mode]:.4f}"
        plot_mode(mesh, eigenvectors, mode, title=title, ax=ax, with_edges=False)
        ax.set_axis_off()

    plt.tight_layout()
    return fig


def plot_harmonic_mesh(shape: HarmonicShape, title="Harmonic Shape", figsize=(10, 8), ax=None, cmap='gray'):
    """Plot a displaced mesh with each face coloured by the mean greyscale level of its vertices."""
    if ax is None:
        fig = plt.figure(figsize=figsize)
        ax = fig.add_subplot(111, projection='3d')
    else:
        fig = ax.figure

    colormap = plt.get_cmap(cmap)
    face_levels = np.array([shape.colours[list(face)].mean() for face in shape.mesh.faces]) / 255.0
    _add_faces(ax, shape.mesh, colormap(face_levels))

    ax.set_title(title)
    ax.set_xlabel("X")
    ax.set_ylabel("Y")
    ax.set_zlabel("Z")
    _set_equal_limits(ax, shape.mesh.vertices)

    plt.tight_layout()
    return fig, ax
