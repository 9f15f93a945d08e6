"""Unit tests for target descriptor derivation."""

import collections.abc
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, ClassVar, Literal, Optional

import pytest
from pydantic import BaseModel, Field

from argbind.core.descriptors import (
    Alias,
    Construction,
    FieldDescriptor,
    TargetKind,
    describe_type,
    to_camel_case,
)
from argbind.core.numeric import INT32


@dataclass
class BookInput:
    name: str
    author_id: Annotated[int, Alias("authorId")]
    tags: list[str] = field(default_factory=list)


@dataclass
class Computed:
    value: int = field(init=False, default=0)


class BookModel(BaseModel):
    name: str
    author_id: int = Field(default=0, alias="authorId")


class BookBean:
    name: str | None = None
    author_id: int | None = None
    registry_key: ClassVar[str] = "books"
    _cache: dict | None = None


class Keyword:
    term: str

    def __init__(self, term: str) -> None:
        self.term = term


class Color(Enum):
    RED = "red"


@dataclass
class TreeNode:
    label: str
    children: list["TreeNode"] = field(default_factory=list)


class TestScalarDescriptors:
    @pytest.mark.parametrize("hint", [str, int, float, bool, Decimal, Color, Keyword])
    def test_scalar_kinds(self, hint: type) -> None:
        descriptor = describe_type(hint)
        assert descriptor.kind is TargetKind.SCALAR
        assert descriptor.target_type is hint
        assert descriptor.fields == ()

    def test_any_and_object(self) -> None:
        assert describe_type(Any).kind is TargetKind.ANY
        assert describe_type(object).kind is TargetKind.ANY

    def test_optional_unwraps(self) -> None:
        descriptor = describe_type(Optional[int])
        assert descriptor.kind is TargetKind.SCALAR
        assert descriptor.target_type is int
        assert descriptor.optional is True

    def test_pipe_optional_unwraps(self) -> None:
        descriptor = describe_type(str | None)
        assert descriptor.optional is True
        assert descriptor.target_type is str

    def test_union_of_types_rejected(self) -> None:
        with pytest.raises(TypeError, match="only Optional"):
            describe_type(int | str)

    def test_annotated_bounds(self) -> None:
        descriptor = describe_type(Annotated[int, INT32])
        assert descriptor.bounds == INT32
        assert descriptor.display_name == "int"

    def test_bounds_on_non_int_rejected(self) -> None:
        with pytest.raises(TypeError, match="NumericBounds"):
            describe_type(Annotated[str, INT32])

    def test_literal(self) -> None:
        descriptor = describe_type(Literal["a", "b"])
        assert descriptor.kind is TargetKind.SCALAR
        assert descriptor.target_type is str
        assert descriptor.choices == ("a", "b")

    def test_mixed_literal_targets_object(self) -> None:
        assert describe_type(Literal["a", 1]).target_type is object

    def test_non_type_hint_rejected(self) -> None:
        with pytest.raises(TypeError):
            describe_type("BookInput")


class TestCollectionDescriptors:
    def test_list(self) -> None:
        descriptor = describe_type(list[int])
        assert descriptor.kind is TargetKind.SEQUENCE
        assert descriptor.container is list
        assert descriptor.element.target_type is int
        assert descriptor.zero_value() == []

    def test_bare_list_has_any_elements(self) -> None:
        assert describe_type(list).element.kind is TargetKind.ANY

    def test_abstract_sequence_builds_list(self) -> None:
        descriptor = describe_type(collections.abc.Sequence[str])
        assert descriptor.container is list

    def test_homogeneous_tuple(self) -> None:
        descriptor = describe_type(tuple[int, ...])
        assert descriptor.container is tuple
        assert descriptor.zero_value() == ()

    def test_fixed_tuple_rejected(self) -> None:
        with pytest.raises(TypeError, match="Fixed-length"):
            describe_type(tuple[int, str])

    def test_set_zero_value(self) -> None:
        assert describe_type(set[str]).zero_value() == set()

    def test_mapping(self) -> None:
        descriptor = describe_type(dict[str, float])
        assert descriptor.kind is TargetKind.MAPPING
        assert descriptor.element.target_type is float
        assert descriptor.zero_value() == {}

    def test_mapping_with_non_string_keys_rejected(self) -> None:
        with pytest.raises(TypeError, match="keyed by str"):
            describe_type(dict[int, str])

    def test_descriptors_are_cached(self) -> None:
        assert describe_type(list[BookInput]) is describe_type(list[BookInput])


class TestCompositeDescriptors:
    def test_dataclass_fields(self) -> None:
        descriptor = describe_type(BookInput)
        assert descriptor.kind is TargetKind.COMPOSITE
        assert descriptor.construction is Construction.DATACLASS
        assert [f.name for f in descriptor.fields] == ["name", "author_id", "tags"]
        author = descriptor.fields[1]
        assert author.alias == "authorId"
        assert author.has_default is False
        assert descriptor.fields[2].has_default is True
        assert descriptor.fields[2].target.kind is TargetKind.SEQUENCE

    def test_dataclass_without_init_fields_is_scalar(self) -> None:
        assert describe_type(Computed).kind is TargetKind.SCALAR

    def test_pydantic_fields(self) -> None:
        descriptor = describe_type(BookModel)
        assert descriptor.construction is Construction.PYDANTIC
        fields = {f.name: f for f in descriptor.fields}
        assert fields["author_id"].alias == "authorId"
        assert fields["author_id"].has_default is True
        assert fields["name"].has_default is False

    def test_plain_class_fields(self) -> None:
        descriptor = describe_type(BookBean)
        assert descriptor.construction is Construction.ATTRIBUTES
        assert [f.name for f in descriptor.fields] == ["name", "author_id"]

    def test_class_requiring_constructor_arguments_is_scalar(self) -> None:
        assert describe_type(Keyword).kind is TargetKind.SCALAR

    def test_recursive_type(self) -> None:
        descriptor = describe_type(TreeNode)
        children = descriptor.fields[1].target
        assert children.element is descriptor

    def test_unbindable_field_rejected_when_owner_described(self) -> None:
        @dataclass
        class Inner:
            value: int | str

        @dataclass
        class Outer:
            inner: Optional[Inner] = None

        with pytest.raises(TypeError, match="Outer.inner.*Inner.value"):
            describe_type(Outer)
        with pytest.raises(TypeError, match="Inner.value"):
            describe_type(list[Inner])

    def test_inherited_attribute_default(self) -> None:
        class Base:
            limit: int = 10

        class Page(Base):
            offset: int = 0

        fields = {f.name: f for f in describe_type(Page).fields}
        assert fields["limit"].has_default is True
        assert fields["offset"].has_default is True

    def test_composite_zero_value(self) -> None:
        assert describe_type(BookInput).zero_value() is None


class TestFieldNames:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("author_id", "authorId"),
            ("name", "name"),
            ("published_at_utc", "publishedAtUtc"),
            ("_internal_id", "_internalId"),
        ],
    )
    def test_to_camel_case(self, name: str, expected: str) -> None:
        assert to_camel_case(name) == expected

    def test_lookup_key_prefers_alias(self) -> None:
        f = FieldDescriptor(name="author_id", hint=int, alias="writer")
        assert f.lookup_key() == "writer"
        assert f.lookup_key(camel_case=True) == "writer"

    def test_lookup_key_camel_case(self) -> None:
        f = FieldDescriptor(name="author_id", hint=int)
        assert f.lookup_key() == "author_id"
        assert f.lookup_key(camel_case=True) == "authorId"
