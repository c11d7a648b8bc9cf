from typing import Optional
import pytest
from pydantic import BaseModel
from graph_resolve import Entity, Relationship, Schema, Store, Resolver


class Author(BaseModel):
    id: int
    name: str


class Book(BaseModel):
    id: int
    title: str
    author_id: Optional[int] = None


def build_schema() -> Schema:
    return Schema(entities=[
        Entity(name='Author', kls=Author, relationships=[
            Relationship(name='books', target='Book', field='id', target_field='author_id', load_many=True),
        ]),
        Entity(name='Book', kls=Book, relationships=[
            Relationship(name='author', target='Author', field='author_id'),
        ]),
    ])


@pytest.fixture
def schema():
    return build_schema()


@pytest.fixture
def store(schema):
    s = Store(schema)
    s.seed('Author', [
        dict(id=1, name="George Orwell"),
        dict(id=2, name="J.K. Rowling"),
    ])
    s.seed('Book', [
        dict(id=1, title="1984", author_id=1),
        dict(id=2, title="Animal Farm", author_id=1),
        dict(id=3, title="Harry Potter and the Philosopher's Stone", author_id=2),
    ])
    return s


@pytest.fixture
def resolver(store):
    return Resolver(store)
