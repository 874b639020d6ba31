"""libp3d.p3di

Loads the JSON intermediate format (.p3di) into the frozen model tree.

Shape:

    {
      "version": 1,
      "sockets": [{"name": "...", "parent": "...", "transform": [[4], [4], [4], [4]]}],
      "meshes":  [{"name": "...", "transform": [...], "material": "MAT_...",
                   "faces": [{"normal": [3], "vertices": [{"v": [3], "t": [2]}]}],
                   "children": [...]}]
    }

Missing sockets/meshes/faces/children arrays read as empty. Names are
checked here (non-empty, ASCII, no NUL) because the binary writer stores
them as NUL-terminated ASCII. Face vertex counts are left alone: the
writer and the rasterizer each have their own rule for bad polygons.
"""

from __future__ import annotations

import json
from typing import Any, List, Optional

from .errors import InputParseError
from .model import P3dFace, P3dMesh, P3dModel, P3dSocket, P3dVertex

_F32_MAX = 3.4028234663852886e38


def _floats(value: Any, n: int, where: str) -> tuple:
    if not isinstance(value, list) or len(value) != n:
        raise InputParseError(f"expected an array of {n} numbers", where)
    out = []
    for i, x in enumerate(value):
        # bool is an int subclass; true/false is never a coordinate
        if isinstance(x, bool) or not isinstance(x, (int, float)):
            raise InputParseError("expected a number", f"{where}[{i}]")
        try:
            x = float(x)
        except OverflowError:
            x = float("inf")
        if not abs(x) <= _F32_MAX:
            raise InputParseError("number out of float32 range", f"{where}[{i}]")
        out.append(x)
    return tuple(out)


def _matrix(value: Any, where: str) -> tuple:
    if not isinstance(value, list) or len(value) != 4:
        raise InputParseError("expected a 4x4 matrix", where)
    return tuple(_floats(row, 4, f"{where}[{i}]") for i, row in enumerate(value))


def _name(value: Any, where: str) -> str:
    if not isinstance(value, str) or not value:
        raise InputParseError("expected a non-empty string", where)
    if "\x00" in value:
        raise InputParseError("name contains a NUL character", where)
    try:
        value.encode("ascii")
    except UnicodeEncodeError:
        raise InputParseError(f"name {value!r} is not ASCII", where) from None
    return value


def _array(obj: dict, key: str, where: str) -> List[Any]:
    value = obj.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise InputParseError("expected an array", f"{where}.{key}")
    return value


def _object(value: Any, where: str) -> dict:
    if not isinstance(value, dict):
        raise InputParseError("expected an object", where)
    return value


def _parse_vertex(value: Any, where: str) -> P3dVertex:
    obj = _object(value, where)
    return P3dVertex(
        position=_floats(obj.get("v"), 3, f"{where}.v"),
        texture=_floats(obj.get("t"), 2, f"{where}.t"),
    )


def _parse_face(value: Any, where: str) -> P3dFace:
    obj = _object(value, where)
    vertices = _array(obj, "vertices", where)
    return P3dFace(
        normal=_floats(obj.get("normal"), 3, f"{where}.normal"),
        vertices=tuple(_parse_vertex(v, f"{where}.vertices[{i}]") for i, v in enumerate(vertices)),
    )


def _parse_mesh(value: Any, where: str) -> P3dMesh:
    obj = _object(value, where)
    material = obj.get("material")
    if material is not None and not isinstance(material, str):
        raise InputParseError("expected a string", f"{where}.material")

    faces = _array(obj, "faces", where)
    children = _array(obj, "children", where)
    return P3dMesh(
        name=_name(obj.get("name"), f"{where}.name"),
        transform=_matrix(obj.get("transform"), f"{where}.transform"),
        material=material,
        faces=tuple(_parse_face(f, f"{where}.faces[{i}]") for i, f in enumerate(faces)),
        children=tuple(_parse_mesh(c, f"{where}.children[{i}]") for i, c in enumerate(children)),
    )


def _parse_socket(value: Any, where: str) -> P3dSocket:
    obj = _object(value, where)
    parent: Optional[str] = obj.get("parent")
    if parent is not None:
        parent = _name(parent, f"{where}.parent")
    return P3dSocket(
        name=_name(obj.get("name"), f"{where}.name"),
        parent=parent,
        transform=_matrix(obj.get("transform"), f"{where}.transform"),
    )


def model_from_dict(doc: Any) -> P3dModel:
    root = _object(doc, "$")
    version = root.get("version")
    if isinstance(version, bool) or not isinstance(version, int):
        raise InputParseError("expected an integer", "$.version")
    if not -(2 ** 31) <= version < 2 ** 31:
        raise InputParseError("does not fit in int32", "$.version")

    sockets = _array(root, "sockets", "$")
    meshes = _array(root, "meshes", "$")
    return P3dModel(
        version=version,
        sockets=tuple(_parse_socket(s, f"$.sockets[{i}]") for i, s in enumerate(sockets)),
        meshes=tuple(_parse_mesh(m, f"$.meshes[{i}]") for i, m in enumerate(meshes)),
    )


def parse_p3di(text: str) -> P3dModel:
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as e:
        raise InputParseError(f"invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e
    return model_from_dict(doc)


def load_p3di(path: str) -> P3dModel:
    with open(path, "rb") as f:
        data = f.read()
    try:
        # a leading UTF-8 BOM is dropped
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise InputParseError(f"not UTF-8 text: {e.reason} at byte {e.start}", path) from e
    return parse_p3di(text)
