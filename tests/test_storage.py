import pytest

from propcheck.core.errors import ConfigurationError
from propcheck.validation import (
    MetadataStorage,
    Rule,
    ValidationType,
    ValidatorConstraint,
    custom,
    max_length,
    min_length,
    not_empty,
    register_rules,
    rules,
    schema,
    get_metadata_storage,
    validator_constraint,
)


class Base:
    pass


class Child(Base):
    pass


class Unrelated:
    pass


def kinds(metadatas):
    return [(m.property_name, m.type, m.target) for m in metadatas]


def test_lookup_by_class(storage):
    register_rules(storage, Base, {"name": [not_empty(), min_length(2)]})
    register_rules(storage, Unrelated, {"name": not_empty()})

    result = storage.get_target_validation_metadatas(Base)

    assert kinds(result) == [
        ("name", ValidationType.NOT_EMPTY, Base),
        ("name", ValidationType.MIN_LENGTH, Base),
    ]


def test_inherited_rules_apply_to_subclasses(storage):
    register_rules(storage, Base, {"name": not_empty(), "code": max_length(4)})
    register_rules(storage, Child, {"age": not_empty()})

    result = storage.get_target_validation_metadatas(Child)

    assert kinds(result) == [
        ("age", ValidationType.NOT_EMPTY, Child),
        ("name", ValidationType.NOT_EMPTY, Base),
        ("code", ValidationType.MAX_LENGTH, Base),
    ]


def test_own_rule_overrides_inherited_rule_of_same_kind(storage):
    register_rules(storage, Base, {"code": [max_length(4), not_empty()]})
    register_rules(storage, Child, {"code": max_length(8)})

    result = storage.get_target_validation_metadatas(Child)

    assert [(m.type, m.constraints, m.target) for m in result] == [
        (ValidationType.MAX_LENGTH, (8,), Child),
        (ValidationType.NOT_EMPTY, (), Base),
    ]


def test_schema_lookup(storage):
    register_rules(storage, "signup", {"email": not_empty()})

    assert kinds(storage.get_target_validation_metadatas(dict, "signup")) == [
        ("email", ValidationType.NOT_EMPTY, "signup"),
    ]
    assert storage.get_target_validation_metadatas(dict) == []


def test_group_filter(storage):
    register_rules(storage, Base, {"a": not_empty(groups={"x"}), "b": not_empty(groups={"y"}), "c": not_empty()})

    result = storage.get_target_validation_metadatas(Base, groups=frozenset({"x"}))

    assert [m.property_name for m in result] == ["a", "c"]


def test_group_by_property_name_preserves_order(storage):
    register_rules(storage, Base, {"a": not_empty(), "b": not_empty()})
    register_rules(storage, Base, {"a": min_length(1)})

    grouped = storage.group_by_property_name(storage.get_target_validation_metadatas(Base))

    assert list(grouped) == ["a", "b"]
    assert [m.type for m in grouped["a"]] == [ValidationType.NOT_EMPTY, ValidationType.MIN_LENGTH]


def test_predicate_registration(storage):
    @validator_constraint(name="always", storage=storage)
    class Always(ValidatorConstraint):
        def validate(self, value, obj, constraints):
            return True

    registered = storage.get_target_validator_constraints(Always)

    assert [(m.target, m.name) for m in registered] == [(Always, "always")]
    assert storage.get_target_validator_constraints(Base) == []


def test_rule_binding():
    metadata = custom(Unrelated, 1, each=True, groups=["g"], message="m").bind(Base, "field")

    assert metadata.type is ValidationType.CUSTOM_VALIDATION
    assert metadata.constraint_cls is Unrelated
    assert metadata.constraints == (1,)
    assert metadata.each is True
    assert metadata.groups == frozenset({"g"})
    assert metadata.target_name == "Base"


def test_register_rules_rejects_non_rules(storage):
    with pytest.raises(ConfigurationError):
        register_rules(storage, Base, {"name": ["not a rule"]})


def test_custom_requires_a_class():
    with pytest.raises(ConfigurationError):
        custom(lambda v: True)


def test_decorators_use_global_storage():
    @rules(name=not_empty())
    class Declared:
        pass

    name = schema("signup", email=not_empty())

    storage = get_metadata_storage()
    assert name == "signup"
    assert storage.has_validation_metadatas(Declared)
    assert storage.has_validation_metadatas("signup")
    assert isinstance(not_empty(), Rule)


def test_clear(storage):
    register_rules(storage, Base, {"name": not_empty()})
    storage.clear()

    assert storage.get_target_validation_metadatas(Base) == []
    assert isinstance(storage, MetadataStorage)


class Middle(Base):
    pass


class Leaf(Middle):
    pass


def test_nearest_ancestor_wins_for_same_property_and_kind(storage):
    register_rules(storage, Base, {"name": [min_length(5), not_empty()]})
    register_rules(storage, Middle, {"name": min_length(2)})

    result = storage.get_target_validation_metadatas(Leaf)

    assert [(m.type, m.constraints, m.target) for m in result] == [
        (ValidationType.MIN_LENGTH, (2,), Middle),
        (ValidationType.NOT_EMPTY, (), Base),
    ]
