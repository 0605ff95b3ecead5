"""Grid-map raycasting explorer with XPM textures, doors and a minimap."""

__version__ = "0.1.0"
__all__ = ["__version__"]