"""libp3d.writer

P3D / P3DR writer.

Layout (little-endian; int32 counts, float32 values):

  magic            b"P3D" (model) or b"P3DR" (rig), no terminator
  int32 version
  int32 socket_count
  socket[]:
    name             ASCII + NUL
    u8 has_parent
    parent           ASCII + NUL (only if has_parent)
    float32[16]      socket transform (row-major)
  int32 mesh_count
  mesh[] (recursive):
    name             ASCII + NUL
    float32[16]      mesh transform (row-major)
    -- model only --
    u8 material
    int32 face_count
    face[]:
      float32[3]       normal
      vertex[4]:       float32[3] position, float32[2] uv
    -- end model only --
    int32 child_count
    mesh[]           children

Every face is stored as four vertices because the engine only renders
quads; a triangle repeats its third vertex.
"""

from __future__ import annotations

import io
import logging
import struct
from typing import Optional

from .errors import UnsupportedPolygon
from .model import CompileOptions, EmitMode, Material, P3dFace, P3dMesh, P3dModel
from .transforms import convert_mesh_transform, convert_socket_transform, convert_vec3
from .uvsnap import UvSnapper

log = logging.getLogger(__name__)

_MAT4 = struct.Struct("<16f")
_VEC3 = struct.Struct("<3f")
_VERTEX = struct.Struct("<5f")


def material_code(name: Optional[str], mesh_name: str = "") -> int:
    mat = Material.from_p3di_name(name)
    if mat is None:
        expected = ", ".join(m.p3di_name for m in Material)
        log.warning(
            f"Mesh '{mesh_name}': unknown material {name!r}, expected one of {expected}; "
            f"using {Material.DIFFUSE_OPAQUE.p3di_name}"
        )
        return int(Material.DIFFUSE_OPAQUE)
    return int(mat)


class _P3dWriter:
    __slots__ = ("out", "mode", "snap")

    def __init__(self, mode: EmitMode, snap: UvSnapper):
        self.out = io.BytesIO()
        self.mode = mode
        self.snap = snap

    def s32(self, v: int) -> None:
        self.out.write(struct.pack("<i", v))

    def u8(self, v: int) -> None:
        self.out.write(struct.pack("<B", v))

    def strz(self, s: str) -> None:
        self.out.write(s.encode("ascii"))
        self.out.write(b"\x00")

    def vec3(self, v) -> None:
        self.out.write(_VEC3.pack(*convert_vec3(v)))

    def model(self, model: P3dModel) -> bytes:
        self.out.write(self.mode.magic)
        self.s32(model.version)

        self.s32(len(model.sockets))
        for socket in model.sockets:
            self.strz(socket.name)
            self.u8(1 if socket.parent is not None else 0)
            if socket.parent is not None:
                self.strz(socket.parent)

            log.debug(f"Socket '{socket.name}' authored transform: {socket.transform}")
            self.out.write(_MAT4.pack(*convert_socket_transform(socket.transform)))

        self.s32(len(model.meshes))
        for mesh in model.meshes:
            self.mesh(mesh)

        return self.out.getvalue()

    def mesh(self, mesh: P3dMesh) -> None:
        self.strz(mesh.name)
        self.out.write(_MAT4.pack(*convert_mesh_transform(mesh.transform)))

        if self.mode is EmitMode.MODEL:
            self.u8(material_code(mesh.material, mesh.name))
            self.s32(len(mesh.faces))
            for face in mesh.faces:
                self.face(face, mesh.name)

        self.s32(len(mesh.children))
        for child in mesh.children:
            self.mesh(child)

    def face(self, face: P3dFace, mesh_name: str) -> None:
        vertices = face.vertices
        if len(vertices) == 3:
            # repeat the last triangle vertex to make a quad
            vertices = (*vertices, vertices[2])
        elif len(vertices) != 4:
            raise UnsupportedPolygon(mesh_name, len(vertices))

        self.vec3(face.normal)
        snap = self.snap
        for vert in vertices:
            x, y, z = convert_vec3(vert.position)
            u, v = vert.texture
            self.out.write(_VERTEX.pack(x, y, z, snap(u), snap(v)))


def emit(model: P3dModel, mode: EmitMode, options: Optional[CompileOptions] = None) -> bytes:
    """Serialize a model tree to P3D (mode=MODEL) or P3DR (mode=RIG) bytes.

    Raises UnsupportedPolygon for any face that is not a triangle or quad
    (model mode only; rig output never looks at faces).
    """
    snap = UvSnapper.from_options(options or CompileOptions())
    return _P3dWriter(mode, snap).model(model)


def write_p3d(
    model: P3dModel,
    out_path: str,
    mode: EmitMode,
    options: Optional[CompileOptions] = None,
) -> int:
    """Emit and write to disk. Returns the number of bytes written.

    The whole file is built in memory first, so a failed emit never leaves
    a truncated output behind.
    """
    data = emit(model, mode, options)
    with open(out_path, "wb") as f:
        f.write(data)
    log.info(f"Wrote {mode.magic.decode('ascii')} {out_path} ({len(data)} bytes)")
    return len(data)
