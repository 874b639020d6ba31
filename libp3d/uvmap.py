"""libp3d.uvmap

Paints every face's UV footprint into a square RGBA image, as a guide for
texture painting. Faces are coloured by their normal and drawn in mesh
pre-order, so later faces cover earlier ones where they overlap.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

from PIL import Image, ImageDraw

from .model import DEFAULT_SNAP_EPSILON, DEFAULT_SNAP_RESOLUTION, P3dFace, P3dModel
from .uvsnap import UvSnapper

log = logging.getLogger(__name__)

# negative-facing normal components are dimmed so back faces stay distinguishable
_BACK_FACE_SCALE = 0.7


def normal_color(normal: Sequence[float]) -> Tuple[int, int, int, int]:
    rgb = []
    for c in normal:
        if c < 0:
            c = abs(c) * _BACK_FACE_SCALE
        rgb.append(max(0, min(255, round(c * 255))))
    return (rgb[0], rgb[1], rgb[2], 255)


def face_uv_points(face: P3dFace, snap: UvSnapper) -> Optional[list]:
    """Snapped (u, v) points of a face in image orientation, or None when
    the face can't be drawn (bad vertex count or collapsed footprint)."""
    if not 3 <= len(face.vertices) <= 4:
        return None
    # UV origin is bottom-left, image origin is top-left
    points = [(snap(t[0]), snap(1.0 - t[1])) for t in (v.texture for v in face.vertices)]
    if len(set(points)) < 3:
        return None
    return points


def rasterize(
    model: P3dModel,
    resolution: int,
    snap_enabled: bool = True,
    snap_resolution: int = DEFAULT_SNAP_RESOLUTION,
    snap_epsilon: float = DEFAULT_SNAP_EPSILON,
) -> Image.Image:
    if resolution <= 0:
        raise ValueError(f"map resolution must be positive, got {resolution}")

    snap = UvSnapper(snap_enabled, snap_resolution, snap_epsilon)
    img = Image.new("RGBA", (resolution, resolution), (0, 0, 0, 0))
    # ImageDraw.polygon never anti-aliases
    draw = ImageDraw.Draw(img)

    drawn = skipped = 0
    for mesh in model.walk_meshes():
        for i, face in enumerate(mesh.faces):
            points = face_uv_points(face, snap)
            if points is None:
                log.debug(f"Mesh '{mesh.name}': skipping degenerate face {i}")
                skipped += 1
                continue
            draw.polygon(
                [(u * resolution, v * resolution) for u, v in points],
                fill=normal_color(face.normal),
            )
            drawn += 1

    log.debug(f"UV map: {drawn} faces drawn, {skipped} skipped")
    return img


def write_uv_map(
    model: P3dModel,
    out_path: str,
    resolution: int,
    snap_enabled: bool = True,
    snap_resolution: int = DEFAULT_SNAP_RESOLUTION,
    snap_epsilon: float = DEFAULT_SNAP_EPSILON,
) -> None:
    img = rasterize(model, resolution, snap_enabled, snap_resolution, snap_epsilon)
    img.save(out_path, format="PNG")
    log.info(f"Wrote UV map {out_path} ({resolution}x{resolution})")
