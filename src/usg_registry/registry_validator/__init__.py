"""Registry validator: consistency checks and index builder for the USG registry."""

from .catalogue import DEFAULT_COLLECTIONS, CollectionSpec, ReferenceSpec, resolve_load_order
from .config import RegistryProfile
from .errors import RegistryError
from .report import RegistryReport
from .runner import RegistryValidator

__all__ = [
    "CollectionSpec",
    "DEFAULT_COLLECTIONS",
    "ReferenceSpec",
    "RegistryError",
    "RegistryProfile",
    "RegistryReport",
    "RegistryValidator",
    "resolve_load_order",
]
