"""Idea Canvas: per-project spatial canvases of typed nodes, edges, AI documents and comments."""

__version__ = "0.3.0"
