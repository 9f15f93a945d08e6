"""Unit tests for the YAML rendering of bound values."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from argbind.io import dump_yaml, to_plain


class Genre(Enum):
    FICTION = "fiction"


@dataclass
class Book:
    id: int
    genre: Genre
    price: Decimal


class Author(BaseModel):
    name: str
    book_ids: list[int] = Field(default_factory=list, alias="bookIds")


class Keyword:
    def __init__(self, term: str) -> None:
        self.term = term
        self._hits = 0


class TestToPlain:
    def test_dataclass(self) -> None:
        book = Book(id=1, genre=Genre.FICTION, price=Decimal("9.90"))
        assert to_plain(book) == {"id": 1, "genre": "FICTION", "price": "9.90"}

    def test_pydantic_uses_field_names(self) -> None:
        author = Author(name="Ann", bookIds=(1, 2))
        assert to_plain(author) == {"name": "Ann", "book_ids": [1, 2]}

    def test_plain_object_skips_private_attributes(self) -> None:
        assert to_plain(Keyword("go")) == {"term": "go"}

    def test_collections(self) -> None:
        assert to_plain((1, 2)) == [1, 2]
        assert to_plain({1: None}) == {"1": None}
        assert to_plain(frozenset({"a"})) == ["a"]

    def test_fallback_to_str(self) -> None:
        assert to_plain(complex(1, 2)) == "(1+2j)"


class TestDumpYaml:
    def test_nested_output(self) -> None:
        output = dump_yaml({"books": [Book(id=1, genre=Genre.FICTION, price=Decimal("1"))]})
        assert output == "books:\n  - id: 1\n    genre: FICTION\n    price: '1'\n"

    def test_scalar_output(self) -> None:
        assert dump_yaml({"id": 5}) == "id: 5\n"
