from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from propcheck.core.config import Settings, get_settings


@dataclass(frozen=True, slots=True)
class ValidatorOptions:
    """Execution options for one validation call."""
    groups: frozenset[str] | None = None
    skip_missing_properties: bool = False
    dismiss_default_messages: bool = False

    @classmethod
    def create(cls, groups: Iterable[str] | None = None, **kwargs) -> ValidatorOptions:
        return cls(groups=frozenset(groups) if groups is not None else None, **kwargs)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> ValidatorOptions:
        settings = settings or get_settings()
        return cls(
            skip_missing_properties=settings.SKIP_MISSING_PROPERTIES,
            dismiss_default_messages=settings.DISMISS_DEFAULT_MESSAGES,
        )
