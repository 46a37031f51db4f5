"""
PantryPal household pantry service.

The package exposes the REST API, persistence helpers and the recipe matching
pipeline used to suggest dishes from what is already in the pantry.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
