"""Wavefront OBJ parsing, indexed meshes built from it and a named mesh library."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

import numpy as np

_WHITE = (1.0, 1.0, 1.0)
_TANGENT_STRIDE = 14
_NORMAL_OFFSET = 3
_TEXCOORD_OFFSET = 6
_TANGENT_OFFSET = 8
_BITANGENT_OFFSET = 11


@dataclass(frozen=True)
class ObjIndex:
    """Zero-based indices of one face corner; -1 marks an absent attribute."""

    vertex_index: int
    texcoord_index: int = -1
    normal_index: int = -1


@dataclass
class ObjData:
    """Attributes and triangulated shapes read from an OBJ document."""

    vertices: list[tuple[float, float, float]] = field(default_factory=list)
    texcoords: list[tuple[float, float]] = field(default_factory=list)
    normals: list[tuple[float, float, float]] = field(default_factory=list)
    shapes: list[tuple[str, list[ObjIndex]]] = field(default_factory=list)


def _floats(tokens: Sequence[str], count: int, lineno: int, keyword: str) -> list[float]:
    if len(tokens) < count:
        raise ValueError(f"line {lineno}: '{keyword}' needs {count} numbers")
    try:
        return [float(t) for t in tokens[:count]]
    except ValueError:
        raise ValueError(f"line {lineno}: bad number in '{keyword}' statement") from None


def _resolve(token: str, count: int, lineno: int) -> int:
    try:
        value = int(token)
    except ValueError:
        raise ValueError(f"line {lineno}: bad face index {token!r}") from None
    if value > 0:
        return value - 1
    if value < 0 and count + value >= 0:
        return count + value
    raise ValueError(f"line {lineno}: face index {value} is out of range")


def _corner(token: str, obj: ObjData, lineno: int) -> ObjIndex:
    parts = token.split("/")
    if len(parts) > 3 or not parts[0]:
        raise ValueError(f"line {lineno}: bad face corner {token!r}")
    vertex = _resolve(parts[0], len(obj.vertices), lineno)
    texcoord = (
        _resolve(parts[1], len(obj.texcoords), lineno)
        if len(parts) > 1 and parts[1]
        else -1
    )
    normal = (
        _resolve(parts[2], len(obj.normals), lineno)
        if len(parts) > 2 and parts[2]
        else -1
    )
    return ObjIndex(vertex, texcoord, normal)


def parse_obj(text: str) -> ObjData:
    """Parse OBJ text; polygons are split into triangle fans."""
    obj = ObjData()
    shape_name = ""
    corners: list[ObjIndex] = []

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        keyword, *tokens = line.split()
        if keyword == "v":
            x, y, z = _floats(tokens, 3, lineno, keyword)
            obj.vertices.append((x, y, z))
        elif keyword == "vt":
            values = _floats(tokens, 1, lineno, keyword)
            v = _floats(tokens[1:], 1, lineno, keyword)[0] if len(tokens) > 1 else 0.0
            obj.texcoords.append((values[0], v))
        elif keyword == "vn":
            x, y, z = _floats(tokens, 3, lineno, keyword)
            obj.normals.append((x, y, z))
        elif keyword == "f":
            face = [_corner(token, obj, lineno) for token in tokens]
            if len(face) < 3:
                raise ValueError(f"line {lineno}: a face needs at least three corners")
            for second, third in zip(face[1:], face[2:]):
                corners.extend((face[0], second, third))
        elif keyword in ("o", "g"):
            if corners:
                obj.shapes.append((shape_name, corners))
                corners = []
            shape_name = " ".join(tokens)

    if corners:
        obj.shapes.append((shape_name, corners))
    return obj


@dataclass(frozen=True)
class MeshPart:
    """A run of indices belonging to one shape of the source file."""

    vertex_offset: int
    vertex_count: int


@dataclass
class Mesh:
    """Interleaved vertex data with triangle indices.

    Each vertex holds, in order: position, normal (if loaded), texture
    coordinate (if loaded), colour, then tangent and bitangent (if generated).
    """

    name: str
    data: np.ndarray
    indices: np.ndarray
    parts: list[MeshPart]
    stride: int
    has_normals: bool = False
    has_texcoords: bool = False
    has_tangents: bool = False

    @property
    def vertex_count(self) -> int:
        return self.data.size // self.stride if self.stride else 0

    @property
    def vertices(self) -> np.ndarray:
        """The vertex data as one row per vertex."""
        return self.data.reshape(-1, self.stride)


def mesh_name_from_path(filepath: str) -> str:
    """Return the file name of ``filepath`` without its extension."""
    start = max(filepath.rfind("/"), filepath.rfind("\\")) + 1
    dot = filepath.rfind(".")
    if dot == -1 or dot < start:
        return filepath[start:]
    return filepath[start:dot]


def _lookup(values: Sequence[tuple[float, ...]], index: int, what: str) -> tuple[float, ...]:
    if not 0 <= index < len(values):
        raise ValueError(f"{what} index {index} is out of range")
    return values[index]


def calculate_tangent_and_bitangent(
    normal: Sequence[float],
    face_tangent: Sequence[float],
    face_bitangent: Sequence[float],
) -> tuple[np.ndarray, np.ndarray]:
    """Orthogonalise a face tangent against ``normal`` and derive the bitangent."""
    n = np.asarray(normal, dtype=np.float64)
    ft = np.asarray(face_tangent, dtype=np.float64)
    fb = np.asarray(face_bitangent, dtype=np.float64)
    with np.errstate(divide="ignore", invalid="ignore"):
        tangent = ft - n * np.dot(n, ft)
        tangent = tangent / np.linalg.norm(tangent)
    side = np.cross(n, tangent)
    handedness = -1.0 if np.dot(side, fb) < 0.0 else 1.0
    return tangent, handedness * side


def generate_tangent_space_vectors(data: Sequence[float] | np.ndarray) -> np.ndarray:
    """Fill tangents and bitangents of a triangle list.

    Each vertex row is 14 floats: position, normal, texture coordinate,
    tangent, bitangent; every three rows form one triangle. Returns a new
    array of the same shape as ``data``.
    """
    arr = np.array(data, dtype=np.float32)
    flat = arr.ndim == 1
    if flat:
        if arr.size % _TANGENT_STRIDE:
            raise ValueError(f"data length must be a multiple of {_TANGENT_STRIDE}")
        arr = arr.reshape(-1, _TANGENT_STRIDE)
    if arr.ndim != 2 or arr.shape[1] != _TANGENT_STRIDE:
        raise ValueError(f"each vertex must hold {_TANGENT_STRIDE} floats")
    if len(arr) % 3:
        raise ValueError("vertex count must be a multiple of three")

    for first in range(0, len(arr), 3):
        rows = arr[first : first + 3].astype(np.float64)
        v1, v2, v3 = rows[:, 0:3]
        w1, w2, w3 = rows[:, _TEXCOORD_OFFSET : _TEXCOORD_OFFSET + 2]
        edge1, edge2 = v2 - v1, v3 - v1
        s1, t1 = w2 - w1
        s2, t2 = w3 - w1
        with np.errstate(divide="ignore", invalid="ignore"):
            r = np.float64(1.0) / (s1 * t2 - s2 * t1)
            face_tangent = (t2 * edge1 - t1 * edge2) * r
            face_bitangent = (s1 * edge2 - s2 * edge1) * r
        for offset, row in enumerate(rows):
            normal = row[_NORMAL_OFFSET : _NORMAL_OFFSET + 3]
            tangent, bitangent = calculate_tangent_and_bitangent(
                normal, face_tangent, face_bitangent
            )
            arr[first + offset, _TANGENT_OFFSET : _TANGENT_OFFSET + 3] = tangent
            arr[first + offset, _BITANGENT_OFFSET : _BITANGENT_OFFSET + 3] = bitangent

    return arr.ravel() if flat else arr


def build_mesh(
    name: str,
    obj: ObjData,
    load_normals: bool = False,
    load_texcoords: bool = False,
    generate_tangent_space_vectors: bool = False,
    unify: bool = False,
) -> Mesh:
    """Build an indexed mesh from parsed OBJ data, merging identical vertices.

    Tangents are generated only when normals and texture coordinates are
    loaded. ``unify`` centres the mesh and scales it into the unit cube.
    """
    if not obj.vertices:
        raise ValueError(f"model '{name}' has no vertices")
    if load_normals and not obj.normals:
        raise ValueError(f"Could not load normal vectors data in the '{name}' model.")
    if load_texcoords and not obj.texcoords:
        raise ValueError(f"Could not load texture coordinates data in the '{name}' model.")
    with_tangents = generate_tangent_space_vectors and load_normals and load_texcoords

    low = list(obj.vertices[0])
    high = list(obj.vertices[0])
    unique: dict[tuple[float, ...], int] = {}
    rows: list[list[float]] = []
    tangent_rows: list[list[float]] = []
    indices: list[int] = []
    parts: list[MeshPart] = []

    for _shape_name, corners in obj.shapes:
        part_offset = len(indices)
        for corner in corners:
            pos = _lookup(obj.vertices, corner.vertex_index, "vertex")
            normal = (
                _lookup(obj.normals, corner.normal_index, "normal")
                if load_normals
                else (0.0, 0.0, 0.0)
            )
            if load_texcoords:
                u, v = _lookup(obj.texcoords, corner.texcoord_index, "texture coordinate")
                texcoord = (u, 1.0 - v)
            else:
                texcoord = (0.0, 0.0)

            if unify:
                low = [min(a, b) for a, b in zip(low, pos)]
                high = [max(a, b) for a, b in zip(high, pos)]

            key = (*pos, *texcoord, *_WHITE, *normal)
            if key not in unique:
                unique[key] = len(rows)
                row = list(pos)
                if load_normals:
                    row.extend(normal)
                if load_texcoords:
                    row.extend(texcoord)
                row.extend(_WHITE)
                if with_tangents:
                    row.extend([0.0] * 6)
                rows.append(row)
            indices.append(unique[key])
            if with_tangents:
                tangent_rows.append([*pos, *normal, *texcoord, *([0.0] * 6)])

        count = len(indices) - part_offset
        if count > 0:
            parts.append(MeshPart(part_offset, count))

    stride = 3 + 3 + (3 if load_normals else 0) + (2 if load_texcoords else 0)
    stride += 6 if with_tangents else 0
    vertices = np.array(rows, dtype=np.float32).reshape(-1, stride)

    if with_tangents and tangent_rows:
        filled = generate_tangent_space_vectors_impl(np.array(tangent_rows, dtype=np.float32))
        for row, index in zip(filled, indices):
            vertices[index, stride - 6 :] = row[_TANGENT_OFFSET:]

    if unify:
        centre = [0.5 * (a + b) for a, b in zip(low, high)]
        extent = max(
            max(abs(a - c), abs(b - c)) for a, b, c in zip(low, high, centre)
        )
        if extent == 0.0 or not math.isfinite(extent):
            raise ValueError(f"cannot unify model '{name}': it has no extent")
        vertices[:, 0:3] = (vertices[:, 0:3] - np.array(centre, dtype=np.float32)) / np.float32(
            extent
        )

    return Mesh(
        name=name,
        data=vertices.ravel(),
        indices=np.array(indices, dtype=np.uint32),
        parts=parts,
        stride=stride,
        has_normals=load_normals,
        has_texcoords=load_texcoords,
        has_tangents=with_tangents,
    )


generate_tangent_space_vectors_impl = generate_tangent_space_vectors


def load_mesh(
    filepath: str | Path,
    load_normals: bool = False,
    load_texcoords: bool = False,
    generate_tangent_space_vectors: bool = False,
    unify: bool = False,
) -> Mesh:
    """Read an OBJ file and build a mesh named after the file."""
    path = str(filepath)
    text = Path(path).read_text(encoding="utf-8", errors="replace")
    return build_mesh(
        mesh_name_from_path(path),
        parse_obj(text),
        load_normals,
        load_texcoords,
        generate_tangent_space_vectors,
        unify,
    )


class ModelLibrary:
    """Meshes kept by name."""

    def __init__(self) -> None:
        self._meshes: dict[str, Mesh] = {}

    def add(self, mesh: Mesh, name: str | None = None) -> None:
        """Store ``mesh`` under ``name``, or under its own name."""
        key = mesh.name if name is None else name
        if key in self._meshes:
            raise ValueError(f"Model '{key}' already exists!")
        self._meshes[key] = mesh

    def load(
        self,
        filepath: str | Path,
        load_normals: bool = False,
        load_texcoords: bool = False,
        generate_tangent_space_vectors: bool = False,
        unify: bool = False,
        name: str | None = None,
    ) -> Mesh:
        """Load a mesh from ``filepath``, store it and return it."""
        mesh = load_mesh(
            filepath, load_normals, load_texcoords, generate_tangent_space_vectors, unify
        )
        self.add(mesh, name)
        return mesh

    def get(self, name: str) -> Mesh:
        try:
            return self._meshes[name]
        except KeyError:
            raise KeyError(f"Model '{name}' not found!") from None

    def exists(self, name: str) -> bool:
        return name in self._meshes

    def __contains__(self, name: object) -> bool:
        return name in self._meshes

    def __len__(self) -> int:
        return len(self._meshes)