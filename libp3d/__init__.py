"""libp3d: compile .p3di mesh descriptions into P3D models, P3DR rigs and UV maps."""

from .errors import InputParseError, P3dError, P3dReadError, UnsupportedPolygon
from .model import CompileOptions, EmitMode, Material, P3dModel
from .p3di import load_p3di, parse_p3di
from .reader import read_p3d, read_p3d_file
from .uvmap import rasterize, write_uv_map
from .writer import emit, write_p3d

__all__ = [
    "CompileOptions",
    "EmitMode",
    "InputParseError",
    "Material",
    "P3dError",
    "P3dModel",
    "P3dReadError",
    "UnsupportedPolygon",
    "emit",
    "load_p3di",
    "parse_p3di",
    "rasterize",
    "read_p3d",
    "read_p3d_file",
    "write_p3d",
    "write_uv_map",
]
