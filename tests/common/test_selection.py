from __future__ import annotations
from typing import List, Optional, Union
import pytest
from pydantic import BaseModel
from graph_resolve import Selection, parse_selection, InvalidSelectionError


def test_of():
    s = Selection.of('name', books=Selection.of('title'))
    assert s.to_dict() == {'name': None, 'books': {'title': None}}
    assert list(s) == ['name', 'books']
    assert 'books' in s
    assert len(s) == 2


def test_of_rejects_plain_nested():
    with pytest.raises(TypeError):
        Selection.of('name', books=['title'])


def test_parse_list_form():
    s = parse_selection(['name', {'books': ['title', {'author': ['name']}]}])
    assert s == Selection.of('name', books=Selection.of('title', author=Selection.of('name')))


def test_parse_dict_form():
    s = parse_selection({'name': None, 'books': {'title': None}})
    assert s == Selection.of('name', books=Selection.of('title'))


def test_parse_keeps_selection_instance():
    s = Selection.of('id')
    assert parse_selection(s) is s


def test_parse_duplicate_field():
    with pytest.raises(InvalidSelectionError, match='duplicate field name "name"'):
        parse_selection(['name', 'name'])


def test_parse_bad_input():
    with pytest.raises(InvalidSelectionError, match='cannot build selection from int'):
        parse_selection(1)
    with pytest.raises(InvalidSelectionError, match='field name must be a string'):
        parse_selection([1])


def test_scalars(schema):
    assert Selection.scalars(schema.get_entity('Book')).to_dict() == {
        'id': None, 'title': None, 'author_id': None}


class AuthorView(BaseModel):
    name: str


class BookView(BaseModel):
    title: str
    author: Optional[AuthorView] = None


class AuthorWithBooks(BaseModel):
    id: int
    books: List[BookView] = []


def test_from_model():
    s = Selection.from_model(AuthorWithBooks)
    assert s.to_dict() == {
        'id': None,
        'books': {
            'title': None,
            'author': {'name': None}
        }
    }


def test_validate_ok(schema):
    s = parse_selection(['name', {'books': ['title', {'author': ['id', {'books': ['id']}]}]}])
    s.validate_for(schema, schema.get_entity('Author'))


@pytest.mark.parametrize('data, message', [
    (['name', 'isbn'], 'Author.isbn: field not found on Author'),
    (['name', {'books': ['isbn']}], 'Author.books.isbn: field not found on Book'),
    (['books'], 'Author.books: relationship requires a sub selection'),
    ([{'name': ['x']}], 'Author.name: scalar field does not accept a sub selection'),
    ([], 'Author: selection is empty'),
    ([{'books': []}], 'Author.books: selection is empty'),
])
def test_validate_errors(schema, data, message):
    s = parse_selection(data)
    with pytest.raises(InvalidSelectionError) as e:
        s.validate_for(schema, schema.get_entity('Author'))
    assert str(e.value) == message


class Magazine(BaseModel):
    issue: int


class ShelfView(BaseModel):
    label: Union[int, str]
    item: Optional[Union[BookView, Magazine]] = None


def test_from_model_rejects_union_of_models():
    with pytest.raises(InvalidSelectionError, match='cannot derive a single shape'):
        Selection.from_model(ShelfView)


class LabelView(BaseModel):
    label: Optional[Union[int, str]] = None


def test_from_model_union_of_scalars_is_a_leaf():
    assert Selection.from_model(LabelView).to_dict() == {'label': None}
