import numpy as np
import pytest

from planetsim.model import (
    Mesh,
    MeshPart,
    ModelLibrary,
    ObjIndex,
    build_mesh,
    calculate_tangent_and_bitangent,
    generate_tangent_space_vectors,
    load_mesh,
    mesh_name_from_path,
    parse_obj,
)

QUAD = """\
# a unit quad made of two triangles
v 0 0 0
v 1 0 0
v 1 1 0
v 0 1 0
vt 0 0
vt 1 0
vt 1 1
vt 0 1
vn 0 0 1
o quad
f 1/1/1 2/2/1 3/3/1
f 1/1/1 3/3/1 4/4/1
"""

TRIANGLE = """\
v 0 0 0
v 4 0 0
v 0 2 0
vt 0 0
vt 1 0
vt 0 1
f 1/1 2/2 3/3
"""


def test_parse_obj_makes_indices_zero_based():
    obj = parse_obj(QUAD)
    assert len(obj.vertices) == 4
    assert len(obj.texcoords) == 4
    assert obj.normals == [(0.0, 0.0, 1.0)]
    name, corners = obj.shapes[0]
    assert name == "quad"
    assert corners[0] == ObjIndex(0, 0, 0)
    assert corners[5] == ObjIndex(3, 3, 0)


def test_parse_obj_triangulates_polygons_as_fans():
    obj = parse_obj("v 0 0 0\nv 1 0 0\nv 1 1 0\nv 0 1 0\nf 1 2 3 4\n")
    _, corners = obj.shapes[0]
    assert [c.vertex_index for c in corners] == [0, 1, 2, 0, 2, 3]
    assert all(c.texcoord_index == -1 and c.normal_index == -1 for c in corners)


def test_parse_obj_negative_indices_are_relative():
    obj = parse_obj("v 0 0 0\nv 1 0 0\nv 0 1 0\nf -3 -2 -1\n")
    assert [c.vertex_index for c in obj.shapes[0][1]] == [0, 1, 2]


def test_parse_obj_splits_shapes_on_groups():
    text = "v 0 0 0\nv 1 0 0\nv 0 1 0\ng a\nf 1 2 3\ng b\nf 3 2 1\n"
    obj = parse_obj(text)
    assert [name for name, _ in obj.shapes] == ["a", "b"]


@pytest.mark.parametrize(
    "text",
    ["v 0 0\n", "v 0 0 x\n", "v 0 0 0\nf 1 1\n", "v 0 0 0\nf 0 1 1\n", "v 0 0 0\nf -5 1 1\n"],
)
def test_parse_obj_rejects_malformed_input(text):
    with pytest.raises(ValueError):
        parse_obj(text)


def test_mesh_name_from_path_strips_directories_and_extension():
    assert mesh_name_from_path("C:\\dev\\PlanetSim\\assets\\models\\chalet.obj") == "chalet"
    assert mesh_name_from_path("assets/models/chalet.obj") == "chalet"
    assert mesh_name_from_path("chalet") == "chalet"
    assert mesh_name_from_path("dir.v2/chalet") == "chalet"


def test_build_mesh_merges_shared_vertices():
    mesh = build_mesh("quad", parse_obj(QUAD), load_texcoords=True)
    assert mesh.stride == 8
    assert mesh.vertex_count == 4
    assert mesh.indices.tolist() == [0, 1, 2, 0, 2, 3]
    assert mesh.parts == [MeshPart(0, 6)]


def test_build_mesh_vertex_layout_and_flipped_texcoords():
    obj = parse_obj(QUAD)
    mesh = build_mesh("quad", obj, load_texcoords=True)
    rows = mesh.vertices
    for row, (x, y, z), (u, v) in zip(rows, obj.vertices, obj.texcoords):
        assert row[0:3].tolist() == [x, y, z]
        assert row[3:5].tolist() == [u, 1.0 - v]
        assert row[5:8].tolist() == [1.0, 1.0, 1.0]


def test_build_mesh_with_normals_extends_stride():
    mesh = build_mesh("quad", parse_obj(QUAD), load_normals=True, load_texcoords=True)
    assert mesh.stride == 11
    assert np.allclose(mesh.vertices[:, 3:6], [0.0, 0.0, 1.0])


def test_build_mesh_missing_normals_raises():
    with pytest.raises(ValueError):
        build_mesh("tri", parse_obj(TRIANGLE), load_normals=True)


def test_build_mesh_missing_texcoords_raises():
    with pytest.raises(ValueError):
        build_mesh("tri", parse_obj("v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 3\n"), load_texcoords=True)


def test_build_mesh_unify_centres_and_scales():
    mesh = build_mesh("tri", parse_obj(TRIANGLE), unify=True)
    positions = mesh.vertices[:, 0:3]
    assert np.isclose(np.abs(positions).max(), 1.0)
    assert np.allclose((positions.min(axis=0) + positions.max(axis=0)) / 2, 0.0)


def test_build_mesh_unify_without_extent_raises():
    with pytest.raises(ValueError):
        build_mesh("dot", parse_obj("v 1 1 1\nf 1 1 1\n"), unify=True)


def test_build_mesh_tangents_are_unit_and_orthogonal():
    mesh = build_mesh(
        "quad",
        parse_obj(QUAD),
        load_normals=True,
        load_texcoords=True,
        generate_tangent_space_vectors=True,
    )
    assert mesh.has_tangents
    assert mesh.stride == 17
    rows = mesh.vertices
    normals, tangents, bitangents = rows[:, 3:6], rows[:, 11:14], rows[:, 14:17]
    assert np.allclose(np.linalg.norm(tangents, axis=1), 1.0)
    assert np.allclose(np.sum(normals * tangents, axis=1), 0.0, atol=1e-6)
    assert np.allclose(np.abs(np.cross(normals, tangents)), np.abs(bitangents))


def test_tangents_need_normals_and_texcoords():
    mesh = build_mesh("quad", parse_obj(QUAD), load_texcoords=True, generate_tangent_space_vectors=True)
    assert not mesh.has_tangents
    assert mesh.stride == 8


def test_calculate_tangent_and_bitangent_handedness():
    tangent, bitangent = calculate_tangent_and_bitangent((0, 0, 1), (1, 0, 1), (0, -1, 0))
    assert np.allclose(tangent, [1.0, 0.0, 0.0])
    assert np.allclose(bitangent, -np.cross([0, 0, 1], tangent))


def test_generate_tangent_space_vectors_keeps_flat_shape():
    data = np.zeros(14 * 3, dtype=np.float32)
    data.reshape(-1, 14)[:, 3:6] = [0.0, 0.0, 1.0]
    data.reshape(-1, 14)[:, 0:3] = [[0, 0, 0], [1, 0, 0], [0, 1, 0]]
    data.reshape(-1, 14)[:, 6:8] = [[0, 0], [1, 0], [0, 1]]
    result = generate_tangent_space_vectors(data)
    assert result.shape == data.shape
    rows = result.reshape(-1, 14)
    assert np.allclose(rows[:, 0:8], data.reshape(-1, 14)[:, 0:8])
    assert np.allclose(np.linalg.norm(rows[:, 8:11], axis=1), 1.0)


@pytest.mark.parametrize("shape", [(13,), (2, 14), (3, 12)])
def test_generate_tangent_space_vectors_rejects_bad_shapes(shape):
    with pytest.raises(ValueError):
        generate_tangent_space_vectors(np.zeros(shape))


def test_load_mesh_names_mesh_after_file(tmp_path):
    path = tmp_path / "chalet.obj"
    path.write_text(QUAD)
    mesh = load_mesh(path, False, True, False, False)
    assert isinstance(mesh, Mesh)
    assert mesh.name == "chalet"
    assert mesh.indices.size == 6


def test_model_library_load_get_and_exists(tmp_path):
    path = tmp_path / "chalet.obj"
    path.write_text(QUAD)
    library = ModelLibrary()
    mesh = library.load(path, load_texcoords=True)
    assert library.get("chalet") is mesh
    assert library.exists("chalet")
    assert "chalet" in library
    assert not library.exists("other")


def test_model_library_load_under_other_name(tmp_path):
    path = tmp_path / "chalet.obj"
    path.write_text(QUAD)
    library = ModelLibrary()
    mesh = library.load(path, name="house")
    assert library.get("house") is mesh
    assert "chalet" not in library


def test_model_library_duplicate_and_missing(tmp_path):
    library = ModelLibrary()
    mesh = build_mesh("tri", parse_obj(TRIANGLE))
    library.add(mesh)
    with pytest.raises(ValueError):
        library.add(mesh)
    with pytest.raises(KeyError):
        library.get("missing")
    assert len(library) == 1