from typing import List, Optional
from pydantic import BaseModel


class BookSummary(BaseModel):
    id: int
    title: str


class AuthorView(BaseModel):
    id: int
    name: str
    books: List[BookSummary] = []


class AuthorSummary(BaseModel):
    id: int
    name: str


class BookView(BaseModel):
    id: int
    title: str
    author: Optional[AuthorSummary] = None


class BookCreate(BaseModel):
    title: str
    author_id: int


class QueryRequest(BaseModel):
    entity: str
    key: Optional[int] = None
    selection: dict
