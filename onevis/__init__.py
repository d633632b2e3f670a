"""Read .ONE volumetric scene files and compute what is needed to render them."""

__version__ = "0.1.0"
__all__ = ["reader", "geometry", "camera", "layout", "cli"]