import asyncio
from dataclasses import dataclass
import pytest
from graph_resolve import build_list, build_object
from graph_resolve.utils.dataloader import RelationshipLoader


@dataclass
class Item:
    id: int
    group: int


items = [Item(1, 10), Item(2, 10), Item(3, 20)]


def test_build_list():
    result = list(build_list(items, [10, 20, 30], lambda x: x.group))
    assert result == [[Item(1, 10), Item(2, 10)], [Item(3, 20)], []]


def test_build_object_first_wins():
    result = list(build_object(items, [10, 20, 30], lambda x: x.group))
    assert result == [Item(1, 10), Item(3, 20), None]


@pytest.mark.asyncio
async def test_relationship_loader_batches(schema, store):
    rel = schema.get_entity('Author').get_relationship('books')
    loader = RelationshipLoader(rel, store['Book'], 'author_id')

    calls = []
    origin = loader.batch_load_fn

    async def spy(keys):
        calls.append(list(keys))
        return await origin(keys)

    loader.batch_load_fn = spy

    orwell, rowling, nobody = await asyncio.gather(loader.load(1), loader.load(2), loader.load(3))
    assert [b.title for b in orwell] == ['1984', 'Animal Farm']
    assert [b.title for b in rowling] == ["Harry Potter and the Philosopher's Stone"]
    assert nobody == []
    assert calls == [[1, 2, 3]]


@pytest.mark.asyncio
async def test_relationship_loader_by_key(schema, store):
    rel = schema.get_entity('Book').get_relationship('author')
    loader = RelationshipLoader(rel, store['Author'], 'id')
    authors = await loader.load_many([2, 1, 5])
    assert [a.name if a else None for a in authors] == ['J.K. Rowling', 'George Orwell', None]
