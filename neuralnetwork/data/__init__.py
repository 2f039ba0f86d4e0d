"""Dataset storage and the CSV/image adapters that fill it."""

from .csv_io import read_csv_rows, write_csv_rows
from .dataset import DataSet
from .image_io import load_from_directory, save_image

__all__ = ["DataSet", "read_csv_rows", "write_csv_rows", "load_from_directory", "save_image"]
