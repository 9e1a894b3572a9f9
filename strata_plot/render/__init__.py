from .base import RenderSurface
from .raster import RasterSurface
from .svg import SvgSurface

__all__ = ["RasterSurface", "RenderSurface", "SvgSurface"]
