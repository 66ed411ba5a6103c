"""Unit tests for ModelMapper."""

from __future__ import annotations

import inspect
from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from media_query.core.exceptions import HydrationError
from media_query.mapping.model import (
    ModelMapper,
    bind_constructor_args,
    constructor_parameters,
    snake_to_camel,
)

COLUMNS = ["id", "title"]


@dataclass
class TodoDC:
    id: str
    title: str


class TodoPydantic(BaseModel):
    id: int
    title: str


class TodoPlain:
    def __init__(self, id: str, title: str) -> None:
        self.id = id
        self.title = title


class TodoWithDefault:
    def __init__(self, id: str, title: str = "untitled") -> None:
        self.id = id
        self.title = title


class TodoVarArgs:
    def __init__(self, *values: str) -> None:
        self.values = values


class TodoFields:
    id: str
    title: str


class TodoBare:
    pass


class TodoCamel:
    __camel_case_fields__ = True

    id: str
    dueDate: str


class TestBindConstructorArgs:
    def test_positional_in_column_order(self) -> None:
        params = constructor_parameters(TodoPlain)
        assert bind_constructor_args(params, ("1", "run")) == ["1", "run"]

    def test_extra_columns_are_dropped(self) -> None:
        params = constructor_parameters(TodoPlain)
        assert bind_constructor_args(params, ("1", "run", "extra")) == ["1", "run"]

    def test_optional_parameters_may_be_missing(self) -> None:
        params = constructor_parameters(TodoWithDefault)
        assert bind_constructor_args(params, ("1",)) == ["1"]

    def test_var_positional_takes_everything(self) -> None:
        params = constructor_parameters(TodoVarArgs)
        assert bind_constructor_args(params, ("1", "run", "x")) == ["1", "run", "x"]

    def test_too_few_columns(self) -> None:
        params = constructor_parameters(TodoPlain)
        with pytest.raises(HydrationError, match="missing \\['title'\\]"):
            bind_constructor_args(params, ("1",))

    def test_no_constructor_has_no_parameters(self) -> None:
        assert constructor_parameters(TodoBare) == []
        assert constructor_parameters(TodoFields) == []

    def test_self_is_not_a_parameter(self) -> None:
        names = [p.name for p in constructor_parameters(TodoPlain)]
        assert names == ["id", "title"]
        assert all(isinstance(p, inspect.Parameter) for p in constructor_parameters(TodoPlain))


class TestModelMapper:
    def test_map_to_dataclass_positionally(self) -> None:
        result = ModelMapper(TodoDC).map_row(COLUMNS, ("1", "run"))
        assert result == TodoDC("1", "run")

    def test_positional_ignores_column_names(self) -> None:
        result = ModelMapper(TodoDC).map_row(["a", "b"], ("1", "run"))
        assert result == TodoDC("1", "run")

    def test_map_to_plain_class(self) -> None:
        result = ModelMapper(TodoPlain).map_row(COLUMNS, ("1", "run"))
        assert isinstance(result, TodoPlain)
        assert (result.id, result.title) == ("1", "run")

    def test_map_to_pydantic_by_name(self) -> None:
        result = ModelMapper(TodoPydantic).map_row(["title", "id"], ("run", "42"))
        assert isinstance(result, TodoPydantic)
        assert result.id == 42  # Coerced from str to int
        assert result.title == "run"

    def test_pydantic_validation_error(self) -> None:
        with pytest.raises(HydrationError, match="TodoPydantic"):
            ModelMapper(TodoPydantic).map_row(["id"], ("not-a-number",))

    def test_field_assignment_by_name(self) -> None:
        result = ModelMapper(TodoFields).map_row(["title", "id", "ignored"], ("run", "1", "x"))
        assert (result.id, result.title) == ("1", "run")
        assert not hasattr(result, "ignored")

    def test_field_assignment_is_case_sensitive(self) -> None:
        result = ModelMapper(TodoFields).map_row(["ID", "title"], ("1", "run"))
        assert not hasattr(result, "id")
        assert result.title == "run"

    def test_undeclared_fields_take_every_column(self) -> None:
        result = ModelMapper(TodoBare).map_row(COLUMNS, ("1", "run"))
        assert (result.id, result.title) == ("1", "run")

    def test_snake_case_columns_on_camel_case_fields(self) -> None:
        result = ModelMapper(TodoCamel).map_row(["id", "due_date"], ("1", "2024-01-01"))
        assert result.dueDate == "2024-01-01"
        assert result.id == "1"

    def test_snake_case_not_mapped_without_opt_in(self) -> None:
        class Todo:
            dueDate: str

        result = ModelMapper(Todo).map_row(["due_date"], ("2024-01-01",))
        assert not hasattr(result, "dueDate")

    def test_too_few_columns_for_constructor(self) -> None:
        with pytest.raises(HydrationError, match="TodoPlain"):
            ModelMapper(TodoPlain).map_row(["id"], ("1",))

    def test_target_must_be_a_class(self) -> None:
        with pytest.raises(HydrationError, match="not a class"):
            ModelMapper("TodoPlain")  # type: ignore[arg-type]

    def test_snake_to_camel(self) -> None:
        assert snake_to_camel("due_date") == "dueDate"
        assert snake_to_camel("created_at_utc") == "createdAtUtc"
        assert snake_to_camel("id") == "id"
