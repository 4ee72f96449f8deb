"""
Half-edge mesh used as the read-only topology view for all harmonic operations.
"""

import copy
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray
import trimesh

from .errors import InvalidTopologyError


@dataclass(eq=False)
class HalfEdgeMesh:
    """
    Polygon mesh with half-edge adjacency.

    Halfedges ``2e`` and ``2e + 1`` belong to undirected edge ``e``; ``2e`` points from
    the lower to the higher vertex index. A halfedge without an adjacent face lies on
    the boundary and has ``halfedge_face == -1``.
    """
    vertices: NDArray[np.float64]  # V x 3 array of vertex coordinates
    faces: list[tuple[int, ...]]  # counter-clockwise polygons of vertex *indices*

    edges: NDArray[np.int64] = field(init=False, repr=False)  # E x 2, lower index first
    halfedge_start: NDArray[np.int64] = field(init=False, repr=False)
    halfedge_next: NDArray[np.int64] = field(init=False, repr=False)
    halfedge_prev: NDArray[np.int64] = field(init=False, repr=False)
    halfedge_face: NDArray[np.int64] = field(init=False, repr=False)
    face_halfedge_lists: list[list[int]] = field(init=False, repr=False)
    neighbours: list[list[int]] = field(init=False, repr=False)
    incident_faces: list[list[int]] = field(init=False, repr=False)

    def __post_init__(self):
        self.vertices = np.array(self.vertices, dtype=np.float64).reshape(-1, 3)
        self.faces = [tuple(int(v) for v in face) for face in self.faces]
        self._build_topology()

    @classmethod
    def from_trimesh(cls, mesh: trimesh.Trimesh) -> "HalfEdgeMesh":
        return cls(np.asarray(mesh.vertices), np.asarray(mesh.faces).tolist())

    @classmethod
    def from_polygons(cls, points, polygons, decimals: int = 3) -> "HalfEdgeMesh":
        """
        Create a mesh from a vertex point list and face polygons given as point lists.

        Polygon corners are matched to vertices by coordinate equality after rounding to
        ``decimals``. A closed polygon (last point equal to the first) is accepted.
        """
        points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        lookup = {}
        for index, point in enumerate(np.round(points, decimals)):
            lookup.setdefault(tuple(point), index)

        faces = []
        for polygon in polygons:
            polygon = np.asarray(polygon, dtype=np.float64).reshape(-1, 3)
            if len(polygon) > 1 and np.allclose(polygon[0], polygon[-1]):
                polygon = polygon[:-1]
            face = []
            for corner in np.round(polygon, decimals):
                key = tuple(corner)
                if key not in lookup:
                    raise InvalidTopologyError(f"Polygon corner {corner.tolist()} does not match any vertex")
                face.append(lookup[key])
            faces.append(face)
        return cls(points, faces)

    def _build_topology(self):
        num_vertices = len(self.vertices)
        edge_index = {}
        edges = []
        face_halfedge_lists = []
        halfedge_face = {}

        for face_idx, face in enumerate(self.faces):
            if len(face) < 3:
                raise InvalidTopologyError(f"Face {face_idx} has fewer than 3 vertices")
            if len(set(face)) != len(face):
                raise InvalidTopologyError(f"Face {face_idx} repeats a vertex")
            if min(face) < 0 or max(face) >= num_vertices:
                raise InvalidTopologyError(f"Face {face_idx} references a vertex outside [0, {num_vertices})")

            halfedges = []
            for k in range(len(face)):
                v1, v2 = face[k], face[(k + 1) % len(face)]
                key = (min(v1, v2), max(v1, v2))
                if key not in edge_index:
                    edge_index[key] = len(edges)
                    edges.append(key)
                he = 2 * edge_index[key] + (0 if v1 < v2 else 1)
                if he in halfedge_face:
                    raise InvalidTopologyError(
                        f"Halfedge {v1}->{v2} is used by faces {halfedge_face[he]} and {face_idx} "
                        "(non-manifold edge or inconsistent orientation)"
                    )
                halfedge_face[he] = face_idx
                halfedges.append(he)
            face_halfedge_lists.append(halfedges)

        num_halfedges = 2 * len(edges)
        self.edges = np.array(edges, dtype=np.int64).reshape(-1, 2)
        start = np.empty(num_halfedges, dtype=np.int64)
        start[0::2] = self.edges[:, 0]
        start[1::2] = self.edges[:, 1]
        face_of = np.full(num_halfedges, -1, dtype=np.int64)
        next_he = np.full(num_halfedges, -1, dtype=np.int64)
        prev_he = np.full(num_halfedges, -1, dtype=np.int64)

        for face_idx, halfedges in enumerate(face_halfedge_lists):
            for k, he in enumerate(halfedges):
                face_of[he] = face_idx
                next_he[he] = halfedges[(k + 1) % len(halfedges)]
                prev_he[he] = halfedges[k - 1]

        # Boundary halfedges are chained around the holes they bound
        boundary_out = {}
        for he in np.where(face_of == -1)[0]:
            boundary_out.setdefault(int(start[he]), int(he))
        for he in np.where(face_of == -1)[0]:
            end_vertex = start[he ^ 1]
            nxt = boundary_out[int(end_vertex)]
            next_he[he] = nxt
            prev_he[nxt] = he

        neighbours = [[] for _ in range(num_vertices)]
        for v1, v2 in edges:
            neighbours[v1].append(v2)
            neighbours[v2].append(v1)

        incident_faces = [[] for _ in range(num_vertices)]
        for face_idx, face in enumerate(self.faces):
            for v in face:
                incident_faces[v].append(face_idx)

        for array in (self.edges, start, face_of, next_he, prev_he):
            array.setflags(write=False)
        self.halfedge_start = start
        self.halfedge_face = face_of
        self.halfedge_next = next_he
        self.halfedge_prev = prev_he
        self.face_halfedge_lists = face_halfedge_lists
        self.neighbours = neighbours
        self.incident_faces = incident_faces
        self._halfedge_lookup = {
            (int(start[he]), int(start[he ^ 1])): he for he in range(num_halfedges)
        }

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def face_count(self) -> int:
        return len(self.faces)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    @property
    def halfedge_count(self) -> int:
        return len(self.halfedge_start)

    def face_vertices(self, face_index: int) -> tuple[int, ...]:
        return self.faces[face_index]

    def face_halfedges(self, face_index: int) -> list[int]:
        return self.face_halfedge_lists[face_index]

    def pair(self, halfedge_index: int) -> int:
        return halfedge_index ^ 1

    def halfedge_end(self, halfedge_index: int) -> int:
        return int(self.halfedge_start[halfedge_index ^ 1])

    def find_halfedge(self, start_vertex: int, end_vertex: int) -> int:
        """Return the halfedge from start_vertex to end_vertex, or -1 if they are not connected."""
        return self._halfedge_lookup.get((start_vertex, end_vertex), -1)

    def is_boundary_halfedge(self, halfedge_index: int) -> bool:
        return self.halfedge_face[halfedge_index] == -1

    def vertex_neighbours(self, vertex_index: int) -> list[int]:
        return self.neighbours[vertex_index]

    def vertex_faces(self, vertex_index: int) -> list[int]:
        return self.incident_faces[vertex_index]

    def valence(self, vertex_index: int) -> int:
        return len(self.neighbours[vertex_index])

    def is_triangulated(self) -> bool:
        return all(len(face) == 3 for face in self.faces)

    def triangle_array(self) -> NDArray[np.int64]:
        """F x 3 face array; only valid for triangulated meshes."""
        if not self.is_triangulated():
            raise InvalidTopologyError("The mesh has to be triangulated")
        return np.array(self.faces, dtype=np.int64).reshape(-1, 3)

    def with_vertices(self, vertices: NDArray[np.float64]) -> "HalfEdgeMesh":
        """Return a copy sharing this topology but with new vertex positions."""
        vertices = np.array(vertices, dtype=np.float64).reshape(-1, 3)
        if len(vertices) != self.vertex_count:
            raise InvalidTopologyError(
                f"Expected {self.vertex_count} vertex positions, got {len(vertices)}"
            )
        mesh_copy = copy.copy(self)
        mesh_copy.vertices = vertices
        return mesh_copy

    def to_trimesh(self) -> trimesh.Trimesh:
        """Convert to a trimesh, fan-triangulating polygons with more than 3 corners."""
        triangles = []
        for face in self.faces:
            for k in range(1, len(face) - 1):
                triangles.append([face[0], face[k], face[k + 1]])
        return trimesh.Trimesh(vertices=self.vertices.copy(), faces=np.array(triangles, dtype=np.int64), process=False)
