"""Affine transforms that keep a part texture locked to its footprint.

A texture is authored for the un-rotated, un-mirrored part. To draw it for
any of the 8 rotation x mirror states, the image goes through (applied
right to left, in the image's own pixel space):

    translate(tx, ty) @ scale(m, 1) @ rotate(deg) @ scale(s)
        @ translate(-anchor)

  * ``translate(-anchor)`` moves the texture anchor (the pixel that sits on
    the part's top-left grid corner) to the origin.
  * ``scale(s)`` converts texture pixels to screen pixels
    (``s = cell_size / pixels_per_cell``).
  * ``rotate(deg)`` turns clockwise in y-down screen space.
  * ``scale(m, 1)`` mirrors horizontally (``m = -1``). Mirroring is composed
    *after* rotation, i.e. it flips what is on screen rather than rotating
    an already-flipped image.
  * ``translate(tx, ty)`` moves the rotated/mirrored footprint back into the
    positive quadrant so its bounding box starts at the part's top-left.

Matrices are 3x3 homogeneous numpy arrays acting on column vectors
``(x, y, 1)``.
"""

from __future__ import annotations

import numpy as np

from .types import ROTATIONS, PixelPoint, TextureBinding

# (cos, sin) per legal rotation, exact so 90-degree turns stay integral.
_ROTATION_TRIG = {
    0: (1.0, 0.0),
    90: (0.0, 1.0),
    180: (-1.0, 0.0),
    270: (0.0, -1.0),
}


def _check_rotation(rotation_deg: int) -> None:
    if rotation_deg not in ROTATIONS:
        raise ValueError(
            f"rotation_deg must be one of {ROTATIONS}, got {rotation_deg}"
        )


def translate(tx: float, ty: float) -> np.ndarray:
    return np.array(
        [[1.0, 0.0, tx], [0.0, 1.0, ty], [0.0, 0.0, 1.0]], dtype=np.float64
    )


def scale(sx: float, sy: float | None = None) -> np.ndarray:
    if sy is None:
        sy = sx
    return np.array(
        [[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]], dtype=np.float64
    )


def rotate(rotation_deg: int) -> np.ndarray:
    """Clockwise rotation in y-down screen space."""
    _check_rotation(rotation_deg)
    c, s = _ROTATION_TRIG[rotation_deg]
    return np.array(
        [[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]], dtype=np.float64
    )


def texture_offset(
    base_width: int,
    base_height: int,
    cell_size: float,
    rotation_deg: int,
    mirrored: bool,
) -> tuple[float, float]:
    """Translation that puts the transformed footprint back at the origin.

    ``base_width``/``base_height`` are in cells, before any rotation.
    """
    _check_rotation(rotation_deg)
    w_px = base_width * cell_size
    h_px = base_height * cell_size
    if not mirrored:
        offsets = {
            0: (0.0, 0.0),
            90: (h_px, 0.0),
            180: (w_px, h_px),
            270: (0.0, w_px),
        }
    else:
        offsets = {
            0: (w_px, 0.0),
            90: (0.0, 0.0),
            180: (0.0, h_px),
            270: (h_px, w_px),
        }
    tx, ty = offsets[rotation_deg]
    return float(tx), float(ty)


def image_transform(
    base_width: int,
    base_height: int,
    cell_size: float,
    rotation_deg: int,
    mirrored: bool,
    anchor: PixelPoint,
    pixel_scale: float,
) -> np.ndarray:
    """Compose the full texture-space -> footprint-space matrix."""
    tx, ty = texture_offset(
        base_width, base_height, cell_size, rotation_deg, mirrored
    )
    return (
        translate(tx, ty)
        @ scale(-1.0 if mirrored else 1.0, 1.0)
        @ rotate(rotation_deg)
        @ scale(pixel_scale)
        @ translate(-anchor.x, -anchor.y)
    )


def binding_transform(
    binding: TextureBinding,
    cell_size: float,
    rotation_deg: int,
    mirrored: bool,
) -> np.ndarray:
    return image_transform(
        binding.base_width,
        binding.base_height,
        cell_size,
        rotation_deg,
        mirrored,
        binding.anchor,
        cell_size / binding.pixels_per_cell,
    )


def apply(matrix: np.ndarray, x: float, y: float) -> tuple[float, float]:
    """Map one point through a 3x3 matrix."""
    px, py, _ = matrix @ np.array([x, y, 1.0])
    return float(px), float(py)


def pil_affine_data(matrix: np.ndarray) -> tuple[float, ...]:
    """Coefficients for ``PIL.Image.transform(..., Image.AFFINE, data)``.

    PIL maps each *output* pixel back to an input pixel, so it needs the
    inverse matrix.
    """
    inv = np.linalg.inv(matrix)
    return tuple(float(v) for v in inv[:2, :].flatten())
