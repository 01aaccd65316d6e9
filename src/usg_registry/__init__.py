"""
Top-level package for the USG registry tooling.

The validation and index-building engine lives under
`usg_registry.registry_validator`.
"""

__all__: list[str] = []
