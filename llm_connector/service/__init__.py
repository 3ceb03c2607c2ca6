"""Outer surfaces: the FastAPI relay (``app``), its dev server and the CLI.

Submodules are imported on demand so that the core package does not require
FastAPI or uvicorn at import time.
"""
