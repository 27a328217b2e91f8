class CraftmasterError(Exception):
    """Base error for Craftmaster engine exceptions."""


class UnknownCatalogEntry(CraftmasterError, KeyError):
    """Raised when an item, recipe, enemy or skill id is not in its catalog."""

    def __init__(self, kind: str, entry_id: str):
        super().__init__(f"Unknown {kind} id: {entry_id}")
        self.kind = kind
        self.entry_id = entry_id

    def __str__(self) -> str:
        return self.args[0]


class InventoryError(CraftmasterError):
    """Raised when removing more of an item than the inventory holds."""


class EquipError(CraftmasterError):
    """Raised when an item cannot be equipped or a slot cannot be emptied."""


class CatalogValidationError(CraftmasterError):
    """Raised when bundled or supplied catalog data fails schema validation."""

    def __init__(self, message: str, errors=None):
        super().__init__(message)
        self.errors = list(errors or [])

    def to_human(self) -> str:
        parts = [str(self)]
        for e in self.errors:
            path = "/".join(str(p) for p in e.path) or "<root>"
            parts.append(f" - at {path}: {e.message}")
        return "\n".join(parts)


class ConfigError(CraftmasterError):
    """Raised when the engine configuration file is malformed."""
