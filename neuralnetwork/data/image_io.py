"""Image adapters: directories of images in, misclassified rows out."""

from __future__ import annotations

import warnings
from pathlib import Path

import numpy as np

from ..core.types import Array
from .dataset import DataSet


def _read_image(path: Path) -> Array:
    import matplotlib.image as mpimg  # imported lazily for headless safety

    pixels = np.asarray(mpimg.imread(path), dtype=np.float64)
    if pixels.ndim == 2:
        pixels = np.stack([pixels] * 3, axis=-1)
    pixels = pixels[..., :3]
    if pixels.max(initial=0.0) > 1.0:
        pixels = pixels / 255.0
    return pixels


def image_to_row(pixels: Array, color: bool) -> Array:
    """Flatten an ``H x W x 3`` image into one feature row.

    Grayscale rows hold the channel mean per pixel; color rows hold the red,
    green and blue planes one after the other.
    """

    if color:
        return np.concatenate([pixels[..., channel].reshape(-1) for channel in range(3)])
    return pixels.mean(axis=-1).reshape(-1)


def row_to_image(row: Array, width: int, height: int, color: bool) -> Array:
    """Inverse of :func:`image_to_row`; a trailing truth value is ignored."""

    row = np.asarray(row, dtype=np.float64).reshape(-1)
    plane = width * height
    if color:
        channels = [row[i * plane : (i + 1) * plane].reshape(height, width) for i in range(3)]
        pixels = np.stack(channels, axis=-1)
    else:
        pixels = row[:plane].reshape(height, width)
    return np.clip(pixels, 0.0, 1.0)


def load_from_directory(
    directory: str | Path,
    width: int,
    height: int,
    color: bool,
    truth: float,
    dataset: DataSet,
) -> int:
    """Append every correctly sized image in ``directory`` to ``dataset``.

    Returns the number of images added.
    """

    directory = Path(directory)
    if not directory.is_dir():
        warnings.warn(f"no files in directory [{directory}]", RuntimeWarning, stacklevel=2)
        return 0
    added = 0
    for path in sorted(p for p in directory.iterdir() if p.is_file()):
        pixels = _read_image(path)
        got_height, got_width = pixels.shape[:2]
        if got_width != width or got_height != height:
            warnings.warn(
                f"image [{path}] not correct size, skipping (want {width}x{height}, "
                f"got {got_width}x{got_height})",
                RuntimeWarning,
                stacklevel=2,
            )
            continue
        dataset.add_sample(image_to_row(pixels, color), truth)
        added += 1
    return added


def save_image(row: Array, width: int, height: int, color: bool, path: str | Path) -> Path:
    """Write a feature row as a PNG image."""

    import matplotlib

    matplotlib.use("Agg", force=True)
    import matplotlib.pyplot as plt

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pixels = row_to_image(row, width, height, color)
    if color:
        plt.imsave(path, pixels)
    else:
        plt.imsave(path, pixels, cmap="gray", vmin=0.0, vmax=1.0)
    return path


__all__ = ["image_to_row", "row_to_image", "load_from_directory", "save_image"]
