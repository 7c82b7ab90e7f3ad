import asyncio
from collections import Counter

import pytest

from propcheck.core.errors import NestedValidationError
from propcheck.validation import (
    ConstraintMetadata,
    ExecutionContext,
    ValidationExecutor,
    ValidatorConstraint,
    ValidatorOptions,
    array_not_empty,
    custom,
    is_email,
    max_length,
    min_length,
    min_value,
    nested,
    not_empty,
    validator_constraint,
)


class Model:
    def __init__(self, **fields):
        self.__dict__.update(fields)


class User(Model):
    pass


class Address(Model):
    pass


class Profile(Model):
    pass


class Item(Model):
    pass


class Order(Model):
    pass


class IsEven(ValidatorConstraint):
    def validate(self, value, obj, constraints):
        return isinstance(value, int) and value % 2 == 0


class IsEvenLater(ValidatorConstraint):
    async def validate(self, value, obj, constraints):
        await asyncio.sleep(0)
        return isinstance(value, int) and value % 2 == 0


class Exploding(ValidatorConstraint):
    def validate(self, value, obj, constraints):
        raise RuntimeError("lookup service down")


class ExplodingLater(ValidatorConstraint):
    async def validate(self, value, obj, constraints):
        await asyncio.sleep(0)
        raise RuntimeError("lookup service down")


def pairs(violations):
    return Counter((v.property, v.type) for v in violations)


# =============================================================================
# Selection and skip handling
# =============================================================================

async def test_object_without_descriptors_yields_empty_list(validator):
    assert await validator.validate(User(name="")) == []


async def test_not_empty_reports_empty_string(validator, declare):
    declare(User, name=not_empty())

    violations = await validator.validate(User(name=""))

    assert len(violations) == 1
    violation = violations[0]
    assert violation.property == "name"
    assert violation.type == "not_empty"
    assert violation.target == "User"
    assert violation.message == "name should not be empty"
    assert violation.value == ""


@pytest.mark.parametrize("value", [None, ""])
async def test_not_empty_ignores_skip_missing_properties(validator, declare, value):
    declare(User, name=not_empty())

    violations = await validator.validate(User(name=value), ValidatorOptions(skip_missing_properties=True))

    assert [v.property for v in violations] == ["name"]


@pytest.mark.parametrize("value", [None, "", 0, False])
async def test_skip_missing_properties_suppresses_other_kinds(validator, declare, storage, value):
    validator_constraint(name="is_even", storage=storage)(IsEven)
    declare(User, name=[min_length(3), is_email(), custom(IsEven), nested()])

    violations = await validator.validate(User(name=value), ValidatorOptions(skip_missing_properties=True))

    assert violations == []


async def test_missing_value_is_checked_without_skip(validator, declare):
    declare(User, name=[min_length(3), is_email()])

    violations = await validator.validate(User(name=""))

    assert pairs(violations) == Counter({("name", "min_length"): 1, ("name", "is_email"): 1})


async def test_empty_list_is_not_treated_as_missing(validator, declare):
    declare(Order, items=array_not_empty())

    violations = await validator.validate(Order(items=[]), ValidatorOptions(skip_missing_properties=True))

    assert [v.type for v in violations] == ["array_not_empty"]


async def test_absent_attribute_reads_as_none(validator, declare):
    declare(User, name=not_empty())

    violations = await validator.validate(User())

    assert len(violations) == 1
    assert violations[0].value is None


async def test_synchronous_violations_keep_traversal_order(validator, declare):
    declare(User, name=[min_length(3), not_empty()], age=min_value(18), email=is_email())

    violations = await validator.validate(User(name="", age=3, email="nope"))

    assert [(v.property, v.type) for v in violations] == [
        ("name", "not_empty"),
        ("name", "min_length"),
        ("age", "min"),
        ("email", "is_email"),
    ]


# =============================================================================
# Groups
# =============================================================================

@pytest.mark.parametrize(
    "groups,expected",
    [
        (None, 1),
        (["A"], 1),
        (["B"], 0),
        (["A", "B"], 1),
    ],
)
async def test_group_filtering(validator, declare, groups, expected):
    declare(User, name=min_length(5, groups={"A"}))

    violations = await validator.validate(User(name="abc"), ValidatorOptions.create(groups=groups))

    assert len(violations) == expected


async def test_ungrouped_descriptor_always_applies(validator, declare):
    declare(User, name=min_length(5))

    violations = await validator.validate(User(name="abc"), ValidatorOptions.create(groups=["B"]))

    assert len(violations) == 1


# =============================================================================
# Built-in checks with each
# =============================================================================

async def test_each_reports_at_most_one_violation(validator, declare):
    declare(User, tags=max_length(3, each=True))

    violations = await validator.validate(User(tags=["ok", "too-long", "also-too-long"]))

    assert len(violations) == 1
    assert violations[0].property == "tags"
    assert violations[0].value == ["ok", "too-long", "also-too-long"]


async def test_each_passes_when_all_elements_pass(validator, declare):
    declare(User, tags=max_length(3, each=True))

    assert await validator.validate(User(tags=("a", "bb", "ccc"))) == []


async def test_each_on_non_sequence_is_a_violation(validator, declare):
    declare(User, tags=max_length(3, each=True))

    violations = await validator.validate(User(tags="ab"))

    assert [v.type for v in violations] == ["max_length"]


# =============================================================================
# Custom checks
# =============================================================================

async def test_sync_custom_predicate_uses_registered_name(validator, declare, storage):
    validator_constraint(name="is_even", storage=storage)(IsEven)
    declare(User, age=custom(IsEven))

    assert await validator.validate(User(age=4)) == []
    violations = await validator.validate(User(age=3))

    assert len(violations) == 1
    assert violations[0].type == "is_even"
    assert violations[0].message == "age is invalid"


async def test_unnamed_predicate_falls_back_to_kind(validator, declare, storage):
    validator_constraint(storage=storage)(IsEven)
    declare(User, age=custom(IsEven))

    violations = await validator.validate(User(age=3))

    assert violations[0].type == "custom_validation"


async def test_async_custom_predicate_is_joined(validator, declare, storage):
    validator_constraint(name="is_even", storage=storage)(IsEvenLater)
    declare(User, age=custom(IsEvenLater), name=not_empty())

    violations = await validator.validate(User(age=3, name=""))

    assert pairs(violations) == Counter({("age", "is_even"): 1, ("name", "not_empty"): 1})


async def test_every_registration_of_a_predicate_runs(validator, declare, storage):
    validator_constraint(name="even_now", storage=storage)(IsEven)
    storage.add_constraint_metadata(ConstraintMetadata(target=IsEven, name="even_again"))
    declare(User, age=custom(IsEven))

    violations = await validator.validate(User(age=1))

    assert sorted(v.type for v in violations) == ["even_again", "even_now"]


async def test_custom_each_over_sequence_reports_once(validator, declare, storage):
    validator_constraint(name="is_even", storage=storage)(IsEvenLater)
    declare(User, scores=custom(IsEvenLater, each=True))

    assert await validator.validate(User(scores=[2, 4])) == []
    violations = await validator.validate(User(scores=[1, 2, 3]))

    assert len(violations) == 1
    assert violations[0].type == "is_even"


@pytest.mark.parametrize("predicate", [Exploding, ExplodingLater])
async def test_failing_predicate_degrades_to_violation(validator, declare, storage, predicate):
    validator_constraint(name="lookup", storage=storage)(predicate)
    declare(User, name=[custom(predicate), not_empty()])

    violations = await validator.validate(User(name=""))

    assert pairs(violations) == Counter({("name", "lookup"): 1, ("name", "not_empty"): 1})


async def test_unregistered_predicate_runs_nothing(validator, declare):
    declare(User, age=custom(IsEven))

    assert await validator.validate(User(age=3)) == []


async def test_predicate_receives_owner_and_constraints(validator, declare, storage):
    seen = []

    class Recorder(ValidatorConstraint):
        def validate(self, value, obj, constraints):
            seen.append((value, obj, constraints))
            return True

    validator_constraint(storage=storage)(Recorder)
    declare(User, age=custom(Recorder, 1, "two"))
    user = User(age=30)

    await validator.validate(user)

    assert seen == [(30, user, (1, "two"))]


async def test_predicate_instances_come_from_container(validator, declare, storage, container):
    class Threshold(ValidatorConstraint):
        def __init__(self, limit=10):
            self.limit = limit

        def validate(self, value, obj, constraints):
            return value <= self.limit

    validator_constraint(name="threshold", storage=storage)(Threshold)
    container.register(Threshold, Threshold(limit=100))
    declare(User, age=custom(Threshold))

    assert await validator.validate(User(age=50)) == []


async def test_predicate_default_message_is_used(validator, declare, storage):
    class Positive(ValidatorConstraint):
        def validate(self, value, obj, constraints):
            return value > 0

        def default_message(self, value, constraints):
            return "$property must be positive, got $value"

    validator_constraint(name="positive", storage=storage)(Positive)
    declare(User, age=custom(Positive))

    violations = await validator.validate(User(age=-1))

    assert violations[0].message == "age must be positive, got -1"


# =============================================================================
# Nested checks
# =============================================================================

async def test_nested_object_violation_is_attributed_to_nested_target(validator, declare):
    declare(Address, zip=not_empty())
    declare(Profile, addr=nested())

    violations = await validator.validate(Profile(addr=Address(zip="")))

    assert len(violations) == 1
    assert violations[0].property == "zip"
    assert violations[0].target == "Address"


async def test_nested_array_recurses_into_every_element(validator, declare):
    declare(Item, name=not_empty())
    declare(Order, items=nested())

    violations = await validator.validate(Order(items=[Item(name=""), Item(name="ok"), Item(name="")]))

    assert pairs(violations) == Counter({("name", "not_empty"): 2})
    assert {v.target for v in violations} == {"Item"}


async def test_nested_async_violations_surface_after_sync_pass(validator, declare, storage):
    validator_constraint(name="is_even", storage=storage)(IsEvenLater)
    declare(Item, qty=custom(IsEvenLater))
    declare(Order, items=nested(), ref=not_empty())

    violations = await validator.validate(Order(ref="", items=[Item(qty=1), Item(qty=2), Item(qty=3)]))

    assert pairs(violations) == Counter({("qty", "is_even"): 2, ("ref", "not_empty"): 1})


async def test_deeply_nested_async_work_is_awaited(validator, declare, storage):
    validator_constraint(name="is_even", storage=storage)(IsEvenLater)
    declare(Item, qty=custom(IsEvenLater))
    declare(Order, items=nested())
    declare(User, orders=nested())

    user = User(orders=[Order(items=[Item(qty=1)]), Order(items=[Item(qty=5), Item(qty=7)])])
    violations = await validator.validate(user)

    assert pairs(violations) == Counter({("qty", "is_even"): 3})


@pytest.mark.parametrize("value", [None, 3, "street", 1.5, True])
async def test_nested_on_primitive_raises(validator, declare, value):
    declare(Profile, addr=nested())

    with pytest.raises(NestedValidationError) as exc_info:
        await validator.validate(Profile(addr=value))

    assert exc_info.value.code.name == "E7001_NESTED_SHAPE_MISMATCH"


async def test_nested_failure_discards_launched_work(validator, declare, storage):
    validator_constraint(name="is_even", storage=storage)(IsEvenLater)
    declare(Profile, age=custom(IsEvenLater), addr=nested())

    with pytest.raises(NestedValidationError):
        await validator.validate(Profile(age=3, addr="street"))


async def test_nested_primitive_elements_are_ignored(validator, declare):
    declare(Order, items=nested())

    assert await validator.validate(Order(items=["a", 1, None])) == []


async def test_schema_backed_sequence_skips_primitive_elements(validator, declare):
    declare("tree", label=not_empty(), children=nested())
    payload = {"label": "root", "children": ["x", 3, None, {"label": "", "children": []}]}

    violations = await validator.validate(payload, schema="tree")

    assert [(v.target, v.property) for v in violations] == [("dict", "label")]


async def test_nested_mapping_with_explicit_schema(validator, declare):
    declare("profile", addr=nested(schema="address"))
    declare("address", zip=not_empty())

    violations = await validator.validate({"addr": {"zip": ""}}, schema="profile")

    assert [(v.property, v.target) for v in violations] == [("zip", "dict")]


async def test_nested_mapping_reuses_declaring_schema(validator, declare):
    declare("tree", label=not_empty(), children=nested())
    payload = {"label": "root", "children": [{"label": "", "children": []}, {"label": "leaf", "children": []}]}

    violations = await validator.validate(payload, schema="tree")

    assert [(v.property, v.value) for v in violations] == [("label", "")]


async def test_schema_rules_combine_with_class_rules(validator, declare):
    declare(User, name=not_empty())
    declare("admin", role=not_empty())

    violations = await validator.validate(User(name="", role=""), schema="admin")

    assert pairs(violations) == Counter({("name", "not_empty"): 1, ("role", "not_empty"): 1})


# =============================================================================
# Context and idempotence
# =============================================================================

async def test_repeated_runs_yield_same_violations(validator, declare, storage):
    validator_constraint(name="is_even", storage=storage)(IsEvenLater)
    declare(Item, qty=custom(IsEvenLater), name=not_empty())
    declare(Order, items=nested())
    order = Order(items=[Item(qty=1, name=""), Item(qty=3, name="x")])

    first = await validator.validate(order)
    second = await validator.validate(order)

    assert pairs(first) == pairs(second)
    assert first is not second


async def test_nested_executors_share_one_context(validator, declare):
    declare(Item, name=not_empty())
    declare(Order, items=nested(), ref=not_empty())
    context = ExecutionContext()

    result = await ValidationExecutor(validator, context=context).execute(Order(ref="", items=[Item(name="")]))

    assert result is context.errors
    assert len(context.errors) == 2
    assert context.pending == []


async def test_context_join_awaits_work_added_while_waiting():
    context = ExecutionContext()
    done = []

    async def inner():
        done.append("inner")

    async def outer():
        context.pending.append(inner())
        done.append("outer")

    context.pending.append(outer())
    await context.join()

    assert done == ["outer", "inner"]


async def test_grandparent_rule_overridden_by_parent(validator, declare):
    class Base(Model):
        pass

    class Middle(Base):
        pass

    class Leaf(Middle):
        pass

    declare(Base, name=min_length(5))
    declare(Middle, name=min_length(2))

    assert await validator.validate(Leaf(name="abc")) == []
    assert [v.message for v in await validator.validate(Leaf(name="a"))] == [
        "name must be longer than or equal to 2 characters",
    ]


async def test_each_reports_once_for_several_failing_elements(validator, declare):
    declare(User, tags=min_length(2, each=True))

    violations = await validator.validate(User(tags=["a", "b", "ok"]))

    assert [(v.property, v.type) for v in violations] == [("tags", "min_length")]
