from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional, Tuple

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]
Mat4 = Tuple[Tuple[float, float, float, float], ...]


# -----------------------------
# Intermediate model tree (.p3di)
#
# Built once by libp3d.p3di and never mutated afterwards; the model
# writer, rig writer and UV map rasterizer all walk the same instance.
# -----------------------------

@dataclass(frozen=True)
class P3dVertex:
    position: Vec3
    texture: Vec2


@dataclass(frozen=True)
class P3dFace:
    normal: Vec3
    vertices: Tuple[P3dVertex, ...]


@dataclass(frozen=True)
class P3dMesh:
    name: str
    transform: Mat4
    material: Optional[str] = None
    faces: Tuple[P3dFace, ...] = ()
    children: Tuple["P3dMesh", ...] = ()

    def walk(self):
        """Yield this mesh and then every descendant, pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class P3dSocket:
    name: str
    transform: Mat4
    parent: Optional[str] = None


@dataclass(frozen=True)
class P3dModel:
    version: int
    sockets: Tuple[P3dSocket, ...] = ()
    meshes: Tuple[P3dMesh, ...] = ()

    def walk_meshes(self):
        for mesh in self.meshes:
            yield from mesh.walk()


# -----------------------------
# Binary format enums
# -----------------------------

class Material(IntEnum):
    DIFFUSE_OPAQUE = 0
    DIFFUSE_CUTOUT = 1
    DIFFUSE_TRANSLUCENT = 2
    EMISSIVE = 3

    @property
    def p3di_name(self) -> str:
        return "MAT_" + self.name

    @classmethod
    def from_p3di_name(cls, name: Optional[str]) -> Optional["Material"]:
        if not name or not name.startswith("MAT_"):
            return None
        return cls.__members__.get(name[4:])


class EmitMode(Enum):
    MODEL = "model"
    RIG = "rig"

    @property
    def magic(self) -> bytes:
        return b"P3D" if self is EmitMode.MODEL else b"P3DR"


# -----------------------------
# Compile options
# -----------------------------

DEFAULT_SNAP_RESOLUTION = 128
DEFAULT_SNAP_EPSILON = 0.1
DEFAULT_MAP_RESOLUTION = 256


@dataclass
class CompileOptions:
    generate_model: bool = True
    generate_rig: bool = True
    generate_map: bool = False
    snap_enabled: bool = True
    snap_resolution: int = DEFAULT_SNAP_RESOLUTION
    snap_epsilon: float = DEFAULT_SNAP_EPSILON
    map_resolution: int = DEFAULT_MAP_RESOLUTION


# -----------------------------
# Decoded binary records (libp3d.reader)
# -----------------------------

@dataclass
class P3dSocketRecord:
    name: str
    parent: Optional[str]
    transform: Tuple[float, ...]


@dataclass
class P3dFaceRecord:
    normal: Vec3
    # always four (position, uv) pairs; triangles repeat the third vertex
    vertices: Tuple[Tuple[Vec3, Vec2], ...]

    @property
    def is_padded_triangle(self) -> bool:
        return self.vertices[3] == self.vertices[2]


@dataclass
class P3dMeshRecord:
    name: str
    transform: Tuple[float, ...]
    material: Optional[int] = None
    faces: List[P3dFaceRecord] = field(default_factory=list)
    children: List["P3dMeshRecord"] = field(default_factory=list)

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class P3dFile:
    magic: bytes
    version: int
    sockets: List[P3dSocketRecord]
    meshes: List[P3dMeshRecord]

    @property
    def is_rig(self) -> bool:
        return self.magic == b"P3DR"
