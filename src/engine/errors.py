"""
src/engine/errors.py
────────────────────
Typed errors raised by the assessment engine.
"""


class ConfigurationError(ValueError):
    """The engine was asked to do something it has no configuration for."""


class UnsupportedEquipmentError(ConfigurationError):
    """Unknown equipment family, unknown variant, or a variant outside its family."""

    def __init__(self, family: str, variant: str, detail: str = ""):
        self.family = family
        self.variant = variant
        message = f"Unsupported equipment {family}/{variant}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
