"""Scene camera with orthographic and perspective projections."""

from __future__ import annotations

import math
from enum import IntEnum
from typing import Any, Callable

import numpy as np


class ProjectionType(IntEnum):
    """How a scene camera projects the scene."""

    PERSPECTIVE = 0
    ORTHOGRAPHIC = 1


def ortho(left: float, right: float, bottom: float, top: float, near: float, far: float) -> np.ndarray:
    """Right-handed orthographic projection mapping depth to [-1, 1].

    The matrix is in row-major mathematical form: it multiplies column vectors
    from the left and carries the translation in its last column.
    """
    l, r, b, t, n, f = (np.float64(v) for v in (left, right, bottom, top, near, far))
    m = np.identity(4)
    with np.errstate(divide="ignore", invalid="ignore"):
        m[0, 0] = 2.0 / (r - l)
        m[1, 1] = 2.0 / (t - b)
        m[2, 2] = -2.0 / (f - n)
        m[0, 3] = -(r + l) / (r - l)
        m[1, 3] = -(t + b) / (t - b)
        m[2, 3] = -(f + n) / (f - n)
    return m


def perspective(fov: float, aspect: float, near: float, far: float) -> np.ndarray:
    """Right-handed perspective projection mapping depth to [-1, 1].

    ``fov`` is the vertical field of view in radians. The matrix is in
    row-major mathematical form, like :func:`ortho`.
    """
    fov, aspect, n, f = (np.float64(v) for v in (fov, aspect, near, far))
    m = np.zeros((4, 4))
    with np.errstate(divide="ignore", invalid="ignore"):
        tan_half = np.tan(fov / 2.0)
        m[0, 0] = 1.0 / (aspect * tan_half)
        m[1, 1] = 1.0 / tan_half
        m[2, 2] = -(f + n) / (f - n)
        m[3, 2] = -1.0
        m[2, 3] = -(2.0 * f * n) / (f - n)
    return m


class _ProjectionParam:
    """Camera attribute whose assignment rebuilds the projection."""

    def __init__(self, convert: Callable[[Any], Any] = float) -> None:
        self._convert = convert
        self._attr = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self._attr = "_" + name

    def __get__(self, obj: Any, owner: type | None = None) -> Any:
        if obj is None:
            return self
        return getattr(obj, self._attr)

    def __set__(self, obj: Any, value: Any) -> None:
        setattr(obj, self._attr, self._convert(value))
        obj._recalculate_projection()


class SceneCamera:
    """Camera whose projection follows its settings and the viewport's aspect ratio."""

    projection_type = _ProjectionParam(ProjectionType)
    perspective_vertical_fov = _ProjectionParam()
    perspective_near_clip = _ProjectionParam()
    perspective_far_clip = _ProjectionParam()
    orthographic_size = _ProjectionParam()
    orthographic_near_clip = _ProjectionParam()
    orthographic_far_clip = _ProjectionParam()

    def __init__(self) -> None:
        self._projection_type = ProjectionType.ORTHOGRAPHIC
        self._perspective_vertical_fov = math.radians(45.0)
        self._perspective_near_clip = 0.01
        self._perspective_far_clip = 1000.0
        self._orthographic_size = 10.0
        self._orthographic_near_clip = -1.0
        self._orthographic_far_clip = 1.0
        self._aspect_ratio = 0.0
        self._projection = np.identity(4)
        self._recalculate_projection()

    @property
    def aspect_ratio(self) -> float:
        return self._aspect_ratio

    @property
    def projection(self) -> np.ndarray:
        """The current 4x4 projection matrix."""
        return self._projection

    def set_orthographic(self, size: float, near_clip: float, far_clip: float) -> None:
        """Switch to an orthographic projection with these settings."""
        self._projection_type = ProjectionType.ORTHOGRAPHIC
        self._orthographic_size = float(size)
        self._orthographic_near_clip = float(near_clip)
        self._orthographic_far_clip = float(far_clip)
        self._recalculate_projection()

    def set_perspective(self, fov: float, near_clip: float, far_clip: float) -> None:
        """Switch to a perspective projection with these settings."""
        self._projection_type = ProjectionType.PERSPECTIVE
        self._perspective_vertical_fov = float(fov)
        self._perspective_near_clip = float(near_clip)
        self._perspective_far_clip = float(far_clip)
        self._recalculate_projection()

    def set_viewport_size(self, width: int, height: int) -> None:
        """Take the aspect ratio from a viewport; both sides must be positive."""
        if width <= 0 or height <= 0:
            raise ValueError(f"viewport size must be positive, got {width}x{height}")
        self._aspect_ratio = float(width) / float(height)
        self._recalculate_projection()

    def _recalculate_projection(self) -> None:
        if self._projection_type == ProjectionType.PERSPECTIVE:
            self._projection = perspective(
                self._perspective_vertical_fov,
                self._aspect_ratio,
                self._perspective_near_clip,
                self._perspective_far_clip,
            )
        else:
            half_width = self._orthographic_size * self._aspect_ratio * 0.5
            half_height = self._orthographic_size * 0.5
            self._projection = ortho(
                -half_width,
                half_width,
                -half_height,
                half_height,
                self._orthographic_near_clip,
                self._orthographic_far_clip,
            )