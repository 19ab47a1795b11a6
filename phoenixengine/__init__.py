"""Scene, entity, event, camera, shader-source and profiling core of a small 2D game engine."""

__version__ = "0.1.0"