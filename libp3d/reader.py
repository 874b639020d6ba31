"""libp3d.reader

P3D / P3DR reader.

Decodes what libp3d.writer produces back into plain records so compiled
files can be inspected (`p3dc summary`) and checked. The magic decides the
layout: b"P3DR" has no material, faces or vertices in its mesh records.
"""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass
from typing import Optional

from .errors import P3dReadError
from .model import P3dFaceRecord, P3dFile, P3dMeshRecord, P3dSocketRecord

# recursion guard for corrupt or hostile files; the writer itself has no depth limit
_MAX_DEPTH = 512


@dataclass
class _Bin:
    data: bytes
    ofs: int = 0

    def tell(self) -> int:
        return self.ofs

    def read(self, n: int) -> bytes:
        b = self.data[self.ofs : self.ofs + n]
        if len(b) != n:
            raise P3dReadError(f"Unexpected EOF at {self.ofs}, need {n}")
        self.ofs += n
        return b

    def u8(self) -> int:
        return self.read(1)[0]

    def s32(self) -> int:
        return struct.unpack("<i", self.read(4))[0]

    def count(self, what: str) -> int:
        ofs = self.ofs
        n = self.s32()
        if n < 0:
            raise P3dReadError(f"Negative {what} count {n} at offset {ofs}")
        return n

    def floats(self, n: int) -> tuple:
        return struct.unpack(f"<{n}f", self.read(4 * n))

    def strz(self) -> str:
        end = self.data.find(b"\x00", self.ofs)
        if end < 0:
            raise P3dReadError(f"Unterminated string at {self.ofs}")
        raw = self.data[self.ofs : end]
        try:
            s = raw.decode("ascii")
        except UnicodeDecodeError:
            raise P3dReadError(f"Non-ASCII name at {self.ofs}") from None
        self.ofs = end + 1
        return s


def _read_face(b: _Bin) -> P3dFaceRecord:
    normal = b.floats(3)
    vertices = []
    for _ in range(4):
        v = b.floats(5)
        vertices.append((v[0:3], v[3:5]))
    return P3dFaceRecord(normal=normal, vertices=tuple(vertices))


def _read_mesh(b: _Bin, rig: bool, depth: int = 0) -> P3dMeshRecord:
    if depth > _MAX_DEPTH:
        raise P3dReadError(f"Mesh hierarchy deeper than {_MAX_DEPTH} at offset {b.tell()}")

    mesh = P3dMeshRecord(name=b.strz(), transform=b.floats(16))
    if not rig:
        mesh.material = b.u8()
        for _ in range(b.count("face")):
            mesh.faces.append(_read_face(b))

    for _ in range(b.count("child")):
        mesh.children.append(_read_mesh(b, rig, depth + 1))
    return mesh


def read_p3d(data: bytes, rig: Optional[bool] = None) -> P3dFile:
    """Decode P3D or P3DR bytes.

    A model whose version starts with byte 0x52 looks like b"P3DR" too, so
    callers that know the kind of file pass `rig` explicitly.
    """
    b = _Bin(data)
    if rig is None:
        rig = data[:4] == b"P3DR"
    if rig:
        if data[:4] != b"P3DR":
            raise P3dReadError("Not a P3DR file (missing 'P3DR' magic)")
        magic = b.read(4)
    else:
        if data[:3] != b"P3D":
            raise P3dReadError("Not a P3D file (missing 'P3D' magic)")
        magic = b.read(3)

    version = b.s32()

    sockets = []
    for _ in range(b.count("socket")):
        name = b.strz()
        has_parent = b.u8()
        if has_parent not in (0, 1):
            raise P3dReadError(f"Bad has_parent flag {has_parent} at offset {b.tell() - 1}")
        parent = b.strz() if has_parent else None
        sockets.append(P3dSocketRecord(name=name, parent=parent, transform=b.floats(16)))

    meshes = [_read_mesh(b, rig) for _ in range(b.count("mesh"))]

    if b.tell() != len(data):
        raise P3dReadError(f"{len(data) - b.tell()} trailing bytes after offset {b.tell()}")

    return P3dFile(magic=magic, version=version, sockets=sockets, meshes=meshes)


def read_p3d_file(path: str) -> P3dFile:
    ext = os.path.splitext(path)[1].lower()
    rig = {".p3d": False, ".p3dr": True}.get(ext)
    with open(path, "rb") as f:
        data = f.read()
    return read_p3d(data, rig)
