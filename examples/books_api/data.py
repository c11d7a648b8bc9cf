from typing import Optional
from pydantic import BaseModel
from graph_resolve import Entity, Relationship, Schema, Store


class Author(BaseModel):
    id: int
    name: str


class Book(BaseModel):
    id: int
    title: str
    author_id: Optional[int] = None


schema = Schema(
    description='authors and their books',
    entities=[
        Entity(name='Author', kls=Author, relationships=[
            Relationship(name='books', target='Book', field='id', target_field='author_id', load_many=True),
        ]),
        Entity(name='Book', kls=Book, relationships=[
            Relationship(name='author', target='Author', field='author_id'),
        ]),
    ])


AUTHORS = [
    dict(id=1, name="George Orwell"),
    dict(id=2, name="J.K. Rowling"),
]

BOOKS = [
    dict(id=1, title="1984", author_id=1),
    dict(id=2, title="Animal Farm", author_id=1),
    dict(id=3, title="Harry Potter and the Philosopher's Stone", author_id=2),
]


def create_store() -> Store:
    store = Store(schema)
    store.seed('Author', AUTHORS)
    store.seed('Book', BOOKS)
    return store
