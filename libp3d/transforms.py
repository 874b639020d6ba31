"""libp3d.transforms

Authoring space (.p3di): Z up, Y forward.
Engine space (.p3d/.p3dr): Y up, Z forward.

Positions and normals only need the axis swap. Mesh nodes swap their
translation and keep the 3x3 block as-is. Sockets are authored as arrow
gizmos, so their whole basis is rotated and mirrored into the engine's
attachment axes. Keep the socket and mesh paths separate; they are not
two flavours of the same conversion.

Matrices are row-major 4x4 with translation in the fourth column, and
products are taken in float32 like the engine does.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

from .model import Vec3

_F32 = np.float32


def convert_vec3(v: Sequence[float]) -> Vec3:
    x, y, z = v
    return (x, z, -y)


# ----------------------------
# Socket basis
#   R_fix: (x, y, z) -> (x, z, -y) applied to the rows
#   R_x:   -90 degrees about +X, via quaternion
#   S_z:   mirror Z (handedness flip)
# engine = R_fix . M . R_x . S_z
# ----------------------------

_R_FIX = np.array(
    [
        [1, 0, 0, 0],
        [0, 0, 1, 0],
        [0, -1, 0, 0],
        [0, 0, 0, 1],
    ],
    dtype=_F32,
)

_S_Z = np.diag(np.array([1, 1, -1, 1], dtype=_F32))


def quat_from_axis_angle(axis: Vec3, angle: float) -> Tuple[float, float, float, float]:
    half = _F32(angle) * _F32(0.5)
    s = _F32(math.sin(half))
    c = _F32(math.cos(half))
    return (_F32(axis[0]) * s, _F32(axis[1]) * s, _F32(axis[2]) * s, c)


def quat_to_mat4(q: Tuple[float, float, float, float]) -> np.ndarray:
    # row-vector convention (v' = v . M), i.e. the transpose of the
    # usual column-vector rotation matrix
    x, y, z, w = (_F32(c) for c in q)
    xx, yy, zz = x * x, y * y, z * z
    xy, wz = x * y, z * w
    xz, wy = z * x, y * w
    yz, wx = y * z, x * w
    one, two = _F32(1.0), _F32(2.0)
    return np.array(
        [
            [one - two * (yy + zz), two * (xy + wz), two * (xz - wy), 0],
            [two * (xy - wz), one - two * (zz + xx), two * (yz + wx), 0],
            [two * (xz + wy), two * (yz - wx), one - two * (yy + xx), 0],
            [0, 0, 0, 1],
        ],
        dtype=_F32,
    )


_R_X = quat_to_mat4(quat_from_axis_angle((1.0, 0.0, 0.0), -math.pi / 2))


def convert_socket_transform(t: Sequence[Sequence[float]]) -> Tuple[float, ...]:
    m = np.array(t, dtype=_F32).reshape(4, 4)
    m = _R_FIX @ m
    m = m @ _R_X
    m = m @ _S_Z
    return tuple(float(c) for c in m.reshape(16))


# ----------------------------
# Mesh node
#   3x3 block copied, translation (tx, ty, tz) -> (tx, tz, -ty)
# ----------------------------

def convert_mesh_transform(t: Sequence[Sequence[float]]) -> Tuple[float, ...]:
    tx, ty, tz = t[0][3], t[1][3], t[2][3]
    return (
        t[0][0], t[0][1], t[0][2], tx,
        t[1][0], t[1][1], t[1][2], tz,
        t[2][0], t[2][1], t[2][2], -ty,
        t[3][0], t[3][1], t[3][2], t[3][3],
    )
