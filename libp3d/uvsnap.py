"""libp3d.uvsnap

Pixel-art textures want UV seams exactly on pixel boundaries, but authoring
tools export coordinates that are a hair off. A coordinate is pulled onto
the nearest grid line only when it is within `epsilon` pixels of it; UVs
that are deliberately off-grid are left alone.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .model import DEFAULT_SNAP_EPSILON, DEFAULT_SNAP_RESOLUTION, CompileOptions

_F32 = np.float32


def snap_tex_coord(
    f: float,
    enabled: bool = True,
    resolution: int = DEFAULT_SNAP_RESOLUTION,
    epsilon: float = DEFAULT_SNAP_EPSILON,
) -> float:
    if not enabled:
        return f

    # float32 throughout, same as the stored coordinate
    scaled = _F32(f) * _F32(resolution)
    if not np.isfinite(scaled):
        return f
    rounded = _F32(round(float(scaled)))  # round-half-even
    if abs(float(rounded) - float(scaled)) < epsilon:
        return float(rounded / _F32(resolution))
    return f


@dataclass(frozen=True)
class UvSnapper:
    enabled: bool = True
    resolution: int = DEFAULT_SNAP_RESOLUTION
    epsilon: float = DEFAULT_SNAP_EPSILON

    def __call__(self, f: float) -> float:
        return snap_tex_coord(f, self.enabled, self.resolution, self.epsilon)

    @classmethod
    def from_options(cls, options: CompileOptions) -> "UvSnapper":
        return cls(options.snap_enabled, options.snap_resolution, options.snap_epsilon)
