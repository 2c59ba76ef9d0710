"""
opencafe

Top-level package for the OpenCafe loyalty and café management backend.

Responsibilities:
- Expose package version metadata.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"

