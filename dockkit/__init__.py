"""Tools for inspecting container images, building launchers that run them, and building ping jobs."""

__version__ = "0.1.0"