from __future__ import annotations


class P3dError(RuntimeError):
    pass


class InputParseError(P3dError):
    """Malformed .p3di text or a document that does not match the model shape."""

    def __init__(self, message: str, location: str = ""):
        self.location = location
        super().__init__(f"{location}: {message}" if location else message)


class UnsupportedPolygon(P3dError):
    def __init__(self, mesh_name: str, vertex_count: int):
        self.mesh_name = mesh_name
        self.vertex_count = vertex_count
        super().__init__(
            f"Mesh '{mesh_name}': only triangles and quads supported, found {vertex_count}-gon"
        )


class P3dReadError(P3dError):
    pass
