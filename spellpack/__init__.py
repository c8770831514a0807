"""Convert unpacked stat/spell definitions into a compact record stream for the viewer."""

__version__ = "0.3.0"
