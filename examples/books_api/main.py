from typing import List
from fastapi import FastAPI, HTTPException, Query

from graph_resolve import (
    Selection,
    config_resolver,
    create_selection_model,
    GraphResolveError,
    InstanceValidationError)
import examples.books_api.data as data
import examples.books_api.views as vw

store = data.create_store()
BookResolver = config_resolver('BookResolver', store=store)

BOOK_SELECTION = Selection.from_model(vw.BookView)
BookListItem = create_selection_model(data.schema, 'Book', BOOK_SELECTION, name='BookListItem')

app = FastAPI(debug=True)


@app.get('/authors', response_model=List[vw.AuthorView])
async def get_authors():
    return await BookResolver().resolve_collection('Author', Selection.from_model(vw.AuthorView))


@app.get('/authors/{author_id}', response_model=vw.AuthorView)
async def get_author(author_id: int):
    author = await BookResolver().resolve_by_key('Author', author_id, Selection.from_model(vw.AuthorView))
    if author is None:
        raise HTTPException(status_code=404, detail='author not found')
    return author


@app.get('/books', response_model=List[BookListItem])  # type: ignore
async def get_books():
    return await BookResolver().resolve_collection('Book', BOOK_SELECTION)


@app.get('/books/search', response_model=vw.BookView)
async def search_book(title: str = Query(...)):
    book = await BookResolver().find_by('Book', 'title', title, Selection.from_model(vw.BookView))
    if book is None:
        raise HTTPException(status_code=404, detail='book not found')
    return book


@app.get('/books/{book_id}', response_model=vw.BookView)
async def get_book(book_id: int):
    book = await BookResolver().resolve_by_key('Book', book_id, Selection.from_model(vw.BookView))
    if book is None:
        raise HTTPException(status_code=404, detail='book not found')
    return book


@app.post('/books', status_code=201)
async def create_book(payload: vw.BookCreate):
    if store['Author'].get(payload.author_id) is None:
        raise HTTPException(status_code=404, detail='author not found')
    try:
        return BookResolver().create_instance('Book', payload.model_dump())
    except InstanceValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors)


@app.post('/query')
async def query(req: vw.QueryRequest):
    """selection endpoint, answers {"data": ...} with exactly the requested fields"""
    resolver = BookResolver()
    try:
        if req.key is None:
            result = await resolver.resolve_collection(req.entity, req.selection)
        else:
            result = await resolver.resolve_by_key(req.entity, req.key, req.selection)
    except GraphResolveError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {'data': result}
