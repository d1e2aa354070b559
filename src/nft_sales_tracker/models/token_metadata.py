"""Token metadata resolved from a tokenURI document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Trait:
    """One entry of the metadata `attributes` array."""

    trait_type: str
    value: str | int | float

    def to_dict(self) -> dict[str, Any]:
        return {"trait_type": self.trait_type, "value": self.value}

    @classmethod
    def from_attribute(cls, raw: Any) -> Trait | None:
        """Build from a raw attribute; None if it lacks trait_type or value."""
        if not isinstance(raw, dict):
            return None
        trait_type = raw.get("trait_type")
        value = raw.get("value")
        if not isinstance(trait_type, str) or value is None:
            return None
        if not isinstance(value, (str, int, float)) or isinstance(value, bool):
            value = str(value)
        return cls(trait_type=trait_type, value=value)


@dataclass(frozen=True, slots=True)
class TokenMetadata:
    """Display data for one token: resolved image URL and trait list."""

    image_url: str | None
    traits: tuple[Trait, ...] = ()


@dataclass(frozen=True, slots=True)
class SaleMetadata:
    """Metadata attached to one sale: images for up to N tokens, traits for single sales."""

    image_urls: tuple[str, ...] = ()
    traits: tuple[Trait, ...] = ()
