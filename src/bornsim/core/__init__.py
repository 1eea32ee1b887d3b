"""
Core: problem definition (grid, ROI embedding, medium, solver options).
"""

from .config import SolverOptions, default_pixel_size
from .grid import ROI, Grid2D, embed, extract, physical_axes, roi_shape
from .medium import SampleMedium, center_permittivity

__all__ = [
    "ROI",
    "Grid2D",
    "SampleMedium",
    "SolverOptions",
    "default_pixel_size",
    "center_permittivity",
    "embed",
    "extract",
    "physical_axes",
    "roi_shape",
]
