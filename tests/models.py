"""Models shared by the test suite; definitions are named "models.<Class>"."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from pydantic import BaseModel, Field


class Status(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"


@dataclass
class Sizes:
    width: int
    height: int = 0


@dataclass
class Product:
    id: int
    name: str = field(metadata={"desc": "Display name", "example": "Lamp"})
    price: float = field(metadata={"example": "9.5"})
    status: Status
    sizes: Sizes
    tags: list[str]
    created_at: datetime = field(metadata={"json": "createdAt"})
    category_id: Optional[int] = field(default=None, metadata={"json": "category_id,omitempty"})
    internal: str = field(default="", metadata={"json": "-"})


@dataclass
class Node:
    value: str
    children: list["Node"] = field(default_factory=list)


@dataclass
class LinkedNode:
    value: int
    next: Optional["LinkedNode"] = field(default=None, metadata={"desc": "Next node"})


@dataclass
class Author:
    name: str
    books: list["Book"] = field(default_factory=list)


@dataclass
class Book:
    title: str
    author: Author


@dataclass
class Audit:
    created_by: str
    updated_by: str = ""


@dataclass
class Order:
    id: int
    audit: Audit = field(metadata={"embed": True})
    lines: dict[str, int]
    notes: Any = None
    callback: Callable[[], None] | None = None


class Customer(BaseModel):
    id: int
    email: str = Field(alias="emailAddress", description="Contact email", examples=["a@b.c"])
    nickname: str | None = None
    secret: str = Field(default="", exclude=True)
    orders: list[Order] = []


@dataclass
class ErrorResponse:
    code: int
    message: str

    def get_description(self) -> str:
        return self.message

    def get_return_code(self) -> str:
        return str(self.code)


@dataclass
class Empty:
    pass


class Labels(dict[str, str]):
    pass


T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    items: list[T]
    total: int
