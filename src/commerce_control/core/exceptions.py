"""Error taxonomy shared by the admin, storefront and webhook layers."""

from typing import Any, Dict, List, Optional

from pydantic import ValidationError


class CommerceControlError(Exception):
    """Base class for errors raised by this service."""


class SettingsValidationError(CommerceControlError):
    """Submitted settings were rejected; the stored record is left unchanged."""

    def __init__(self, key: str, errors: List[Dict[str, Any]]):
        self.key = key
        self.errors = errors
        fields = ", ".join(".".join(str(p) for p in e.get("loc", ())) for e in errors)
        super().__init__(f"Invalid {key} settings: {fields or 'malformed input'}")

    @classmethod
    def from_pydantic(cls, key: str, exc: ValidationError) -> "SettingsValidationError":
        errors = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        return cls(key, errors)


class NotFoundError(CommerceControlError):
    """Requested record does not exist."""

    def __init__(self, what: str, identifier: Optional[Any] = None):
        self.what = what
        self.identifier = identifier
        super().__init__(f"{what} not found")
