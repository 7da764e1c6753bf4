"""Transforms and codec glue.

Modules:
- axis: exact flips, transpose/transverse and quarter turns
- resize: separable resampling plus fit / fill / thumbnail
- rotate: arbitrary-angle rotation with background fill
- convolution: Gaussian blur, 3x3 / 5x5 kernels, unsharp mask
- orientation: EXIF orientation correction
- image_loader / image_saver: Pillow-backed decoder and encoder
"""

from .axis import clone, flip_h, flip_v, rotate90, rotate180, rotate270, transpose, transverse
from .convolution import (
    ConvolveOptions,
    Kernel,
    blur,
    convolve,
    convolve_3x3,
    convolve_5x5,
    edge_detect,
    emboss,
    sharpen,
    unsharp_mask,
)
from .filters import ResampleFilter, get_filter
from .image_cropper import Anchor, crop, crop_anchor, crop_center
from .orientation import Orientation, fix_orientation
from .parallel import TransformConfig
from .resize import fill, fit, resize, thumbnail
from .rotate import rotate

__all__ = [
    "Anchor",
    "ConvolveOptions",
    "Kernel",
    "Orientation",
    "ResampleFilter",
    "TransformConfig",
    "blur",
    "clone",
    "convolve",
    "convolve_3x3",
    "convolve_5x5",
    "crop",
    "crop_anchor",
    "crop_center",
    "edge_detect",
    "emboss",
    "fill",
    "fit",
    "fix_orientation",
    "flip_h",
    "flip_v",
    "get_filter",
    "resize",
    "rotate",
    "rotate90",
    "rotate180",
    "rotate270",
    "sharpen",
    "thumbnail",
    "transpose",
    "transverse",
    "unsharp_mask",
]
