"""Rule implementations and the ordered rule registry."""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Sequence, Set

from . import associations, columns, entity
from .base import Rule, RuleCheck

_BUILTIN_FACTORIES: Dict[str, Callable[[Sequence[str]], RuleCheck]] = {
    "missing-namespace": lambda _: entity.missing_namespace,
    "missing-id": lambda _: entity.missing_id,
    "orphan-generated-value": lambda _: entity.orphan_generated_value,
    "orphan-sequence-generator": lambda _: entity.orphan_sequence_generator,
    "public-property": lambda _: entity.public_property,
    "unknown-column-type": columns.unknown_column_type,
    "string-length": lambda _: columns.string_length,
    "decimal-precision": lambda _: columns.decimal_precision,
    "type-mismatch": lambda _: columns.type_mismatch,
    "mapped-and-inversed": lambda _: associations.mapped_and_inversed,
    "many-to-one-mapped-by": lambda _: associations.many_to_one_mapped_by,
    "one-to-many-mapped-by": lambda _: associations.one_to_many_mapped_by,
    "missing-target-entity": lambda _: associations.missing_target_entity,
    "embeddable-association": lambda _: associations.embeddable_association,
    "join-column": lambda _: associations.join_column,
    "join-table": lambda _: associations.join_table,
    "order-by": lambda _: associations.order_by,
    "collection-init": lambda _: associations.collection_init,
    "lifecycle-callbacks": lambda _: entity.lifecycle_callbacks,
    "repository-return-type": lambda _: entity.repository_return_type,
    "datetime-import": lambda _: entity.datetime_import,
}

RULE_IDS = tuple(_BUILTIN_FACTORIES)


def build_rules(
    extra_column_types: Iterable[str] = (),
    disabled: Iterable[str] = (),
) -> List[Rule]:
    """Return the rules in reporting order, minus any disabled identifiers."""

    disabled_set: Set[str] = {name.lower() for name in disabled}
    unknown = disabled_set.difference(RULE_IDS)
    if unknown:
        raise ValueError(f"Unknown rules requested: {', '.join(sorted(unknown))}")

    extra = tuple(extra_column_types)
    return [
        Rule(identifier=name, check=factory(extra))
        for name, factory in _BUILTIN_FACTORIES.items()
        if name not in disabled_set
    ]


__all__ = [
    "RULE_IDS",
    "Rule",
    "RuleCheck",
    "build_rules",
]
