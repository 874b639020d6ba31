from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .model import Material, P3dFile, P3dModel


# -----------------------------
# High-level DTOs shared by the .p3di and compiled-file summaries
# -----------------------------

@dataclass
class MeshInfo:
    name: str
    depth: int
    material: Optional[str]
    triangles: int
    quads: int
    other: int = 0  # faces the writer would reject; only possible in .p3di

    @property
    def faces(self) -> int:
        return self.triangles + self.quads + self.other


@dataclass
class SocketInfo:
    name: str
    parent: Optional[str]


@dataclass
class P3dSummary:
    kind: str  # "p3di", "P3D" or "P3DR"
    version: int
    sockets: List[SocketInfo]
    meshes: List[MeshInfo]

    @property
    def face_count(self) -> int:
        return sum(m.faces for m in self.meshes)


def summarize_p3di(model: P3dModel) -> P3dSummary:
    meshes: List[MeshInfo] = []

    def visit(mesh, depth):
        counts = {3: 0, 4: 0}
        other = 0
        for face in mesh.faces:
            n = len(face.vertices)
            if n in counts:
                counts[n] += 1
            else:
                other += 1
        meshes.append(MeshInfo(mesh.name, depth, mesh.material, counts[3], counts[4], other))
        for child in mesh.children:
            visit(child, depth + 1)

    for mesh in model.meshes:
        visit(mesh, 0)

    return P3dSummary(
        kind="p3di",
        version=model.version,
        sockets=[SocketInfo(s.name, s.parent) for s in model.sockets],
        meshes=meshes,
    )


def _material_name(code: Optional[int]) -> Optional[str]:
    if code is None:
        return None
    try:
        return Material(code).p3di_name
    except ValueError:
        return f"<unknown {code}>"


def summarize_p3d(p3d: P3dFile) -> P3dSummary:
    meshes: List[MeshInfo] = []

    def visit(mesh, depth):
        # triangles were padded to quads by repeating the third vertex
        tris = sum(1 for f in mesh.faces if f.is_padded_triangle)
        meshes.append(
            MeshInfo(mesh.name, depth, _material_name(mesh.material), tris, len(mesh.faces) - tris)
        )
        for child in mesh.children:
            visit(child, depth + 1)

    for mesh in p3d.meshes:
        visit(mesh, 0)

    return P3dSummary(
        kind=p3d.magic.decode("ascii"),
        version=p3d.version,
        sockets=[SocketInfo(s.name, s.parent) for s in p3d.sockets],
        meshes=meshes,
    )
