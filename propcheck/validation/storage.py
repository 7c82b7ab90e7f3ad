"""Metadata registry - stores descriptors per target and custom predicate registrations."""
from __future__ import annotations

from .metadata import ConstraintMetadata, ValidationMetadata
from propcheck.core.logging import registry_logger

log = registry_logger()


class MetadataStorage:
    """Registry of constraint descriptors and custom predicate classes.

    Descriptors are looked up by the validated object's class (including
    inherited descriptors from base classes) or by a schema name.
    """

    def __init__(self) -> None:
        self._validation_metadatas: list[ValidationMetadata] = []
        self._constraint_metadatas: list[ConstraintMetadata] = []

    def add_validation_metadata(self, metadata: ValidationMetadata) -> None:
        self._validation_metadatas.append(metadata)
        log.debug("descriptor_registered", target=metadata.target_name,
                  property=metadata.property_name, kind=metadata.type.value)

    def add_constraint_metadata(self, metadata: ConstraintMetadata) -> None:
        self._constraint_metadatas.append(metadata)
        log.debug("predicate_registered", predicate=metadata.target.__name__, name=metadata.name)

    def has_validation_metadatas(self, target: type | str) -> bool:
        return any(m.target == target for m in self._validation_metadatas)

    def get_target_validation_metadatas(
        self,
        target: type,
        target_schema: str | None = None,
        groups: frozenset[str] | None = None,
    ) -> list[ValidationMetadata]:
        """Descriptors applicable to an instance of ``target``.

        Own descriptors (declared on ``target`` itself or on ``target_schema``)
        come first. Descriptors of base classes follow in MRO order, except
        where a nearer class already covers the same property and kind.
        """
        own = [
            m for m in self._validation_metadatas
            if (m.target is target or (target_schema is not None and m.target == target_schema))
            and m.is_active_for(groups)
        ]
        result = list(own)
        covered = {(m.property_name, m.type) for m in own}
        for base in target.__mro__[1:]:
            declared = [m for m in self._validation_metadatas if m.target is base and m.is_active_for(groups)]
            result.extend(m for m in declared if (m.property_name, m.type) not in covered)
            covered.update((m.property_name, m.type) for m in declared)
        return result

    @staticmethod
    def group_by_property_name(metadatas: list[ValidationMetadata]) -> dict[str, list[ValidationMetadata]]:
        grouped: dict[str, list[ValidationMetadata]] = {}
        for metadata in metadatas:
            grouped.setdefault(metadata.property_name, []).append(metadata)
        return grouped

    def get_target_validator_constraints(self, target: type | None) -> list[ConstraintMetadata]:
        return [m for m in self._constraint_metadatas if m.target is target]

    def clear(self) -> None:
        self._validation_metadatas.clear()
        self._constraint_metadatas.clear()


_STORAGE = MetadataStorage()


def get_metadata_storage() -> MetadataStorage:
    """Return the process-wide metadata storage."""
    return _STORAGE
