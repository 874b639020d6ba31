import copy
import json

import pytest

IDENTITY = [[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 1, 0], [0, 0, 0, 1]]


def tri(normal=(0, 0, 1), uvs=((0, 0), (1, 0), (1, 1)), positions=None):
    positions = positions or [(0, 0, 0), (1, 0, 0), (1, 1, 0)]
    return {
        "normal": list(normal),
        "vertices": [{"v": list(p), "t": list(t)} for p, t in zip(positions, uvs)],
    }


def quad(normal=(0, 0, 1), uvs=((0, 0), (1, 0), (1, 1), (0, 1)), positions=None):
    positions = positions or [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]
    return {
        "normal": list(normal),
        "vertices": [{"v": list(p), "t": list(t)} for p, t in zip(positions, uvs)],
    }


def mesh(name, faces=(), children=(), material="MAT_DIFFUSE_OPAQUE", transform=None):
    return {
        "name": name,
        "transform": copy.deepcopy(transform or IDENTITY),
        "material": material,
        "faces": list(faces),
        "children": list(children),
    }


@pytest.fixture
def blaster_doc():
    """A small but complete .p3di document: two sockets, a nested mesh tree."""
    return {
        "version": 3,
        "sockets": [
            {"name": "grip", "transform": copy.deepcopy(IDENTITY)},
            {
                "name": "muzzle",
                "parent": "grip",
                "transform": [[1, 0, 0, 0.5], [0, 1, 0, 2.0], [0, 0, 1, -1.0], [0, 0, 0, 1]],
            },
        ],
        "meshes": [
            mesh(
                "Body",
                faces=[tri(), quad(normal=(0, -1, 0))],
                children=[
                    mesh("Barrel", faces=[quad()], material="MAT_EMISSIVE",
                         transform=[[1, 0, 0, 1], [0, 1, 0, 2], [0, 0, 1, 3], [0, 0, 0, 1]]),
                    mesh("Scope", material="MAT_DIFFUSE_CUTOUT"),
                ],
            ),
            mesh("Mag", faces=[tri()], material="MAT_DIFFUSE_TRANSLUCENT"),
        ],
    }


@pytest.fixture
def write_p3di(tmp_path):
    def _write(doc, name="model.p3di"):
        path = tmp_path / name
        path.write_text(json.dumps(doc), encoding="utf-8")
        return path

    return _write
