import pytest

from libp3d.transforms import (
    convert_mesh_transform,
    convert_socket_transform,
    convert_vec3,
    quat_from_axis_angle,
    quat_to_mat4,
)

from conftest import IDENTITY


def test_convert_vec3_swaps_y_and_z():
    assert convert_vec3((1.0, 2.0, 3.0)) == (1.0, 3.0, -2.0)


def test_convert_vec3_is_not_its_own_inverse():
    once = convert_vec3((1.0, 2.0, 3.0))
    assert convert_vec3(once) == (1.0, -2.0, -3.0)


def test_mesh_transform_keeps_rotation_block():
    m = [
        [0.1, 0.2, 0.3, 7.0],
        [0.4, 0.5, 0.6, 8.0],
        [0.7, 0.8, 0.9, 9.0],
        [0.0, 0.0, 0.0, 1.0],
    ]
    assert convert_mesh_transform(m) == (
        0.1, 0.2, 0.3, 7.0,
        0.4, 0.5, 0.6, 9.0,
        0.7, 0.8, 0.9, -8.0,
        0.0, 0.0, 0.0, 1.0,
    )


def test_x_rotation_from_quaternion():
    import math

    m = quat_to_mat4(quat_from_axis_angle((1.0, 0.0, 0.0), -math.pi / 2))
    expected = [
        [1, 0, 0, 0],
        [0, 0, -1, 0],
        [0, 1, 0, 0],
        [0, 0, 0, 1],
    ]
    for row, exp in zip(m.tolist(), expected):
        assert row == pytest.approx(exp, abs=1e-6)


def test_socket_identity_becomes_z_mirror():
    out = convert_socket_transform(IDENTITY)
    assert len(out) == 16
    assert out == pytest.approx(
        (1, 0, 0, 0, 0, 1, 0, 0, 0, 0, -1, 0, 0, 0, 0, 1), abs=1e-6
    )


def test_socket_translation_is_remapped():
    m = [[1, 0, 0, 0.5], [0, 1, 0, 2.0], [0, 0, 1, -1.0], [0, 0, 0, 1]]
    out = convert_socket_transform(m)
    assert out == pytest.approx(
        (1, 0, 0, 0.5, 0, 1, 0, -1.0, 0, 0, -1, -2.0, 0, 0, 0, 1), abs=1e-6
    )


def test_socket_and_mesh_paths_differ():
    assert convert_socket_transform(IDENTITY) != pytest.approx(
        convert_mesh_transform(IDENTITY), abs=1e-6
    )


def test_socket_rotation_about_authoring_up():
    # 90 degrees about authoring +Z (up)
    m = [[0, -1, 0, 0], [1, 0, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]]
    out = convert_socket_transform(m)
    assert out == pytest.approx(
        (0, 0, -1, 0, 0, 1, 0, 0, -1, 0, 0, 0, 0, 0, 0, 1), abs=1e-6
    )
