"""Bestiary loading from YAML files."""

from .loader import (
    Bestiary,
    BestiaryLoadError,
    import_bestiary,
    load_all_bestiaries,
    load_bestiary,
    load_yaml_file,
)

__all__ = [
    "Bestiary",
    "BestiaryLoadError",
    "import_bestiary",
    "load_all_bestiaries",
    "load_bestiary",
    "load_yaml_file",
]
