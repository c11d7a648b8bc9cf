import pytest
from graph_resolve import Selection, InvalidSelectionError


@pytest.mark.asyncio
async def test_author_with_books(resolver):
    author = await resolver.resolve_by_key('Author', 1, Selection.of(books=Selection.of('title')))
    assert author == {'books': [{'title': '1984'}, {'title': 'Animal Farm'}]}


@pytest.mark.asyncio
async def test_name_only_never_includes_other_fields(resolver):
    author = await resolver.resolve_by_key('Author', 1, ['name'])
    assert author == {'name': 'George Orwell'}
    assert 'id' not in author
    assert 'books' not in author


@pytest.mark.asyncio
async def test_missing_key_is_none(resolver):
    assert await resolver.resolve_by_key('Author', 99, ['name']) is None
    assert await resolver.resolve_by_key('Book', 0, ['title', {'author': ['name']}]) is None


@pytest.mark.asyncio
async def test_invalid_selection_raises_even_if_absent(resolver):
    with pytest.raises(InvalidSelectionError):
        await resolver.resolve_by_key('Author', 99, ['isbn'])


@pytest.mark.asyncio
async def test_book_with_author(resolver):
    book = await resolver.resolve_by_key('Book', 3, ['title', {'author': ['id', 'name']}])
    assert book == {
        'title': "Harry Potter and the Philosopher's Stone",
        'author': {'id': 2, 'name': 'J.K. Rowling'},
    }


@pytest.mark.asyncio
async def test_unhashable_key_is_none(resolver):
    assert await resolver.resolve_by_key('Author', [1], ['name']) is None
