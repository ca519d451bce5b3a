# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
"""Queryable HTML document model used by the checker.

The checker only talks to the :class:`Document` and :class:`Element`
protocols below. :func:`parse_html` provides the BeautifulSoup-backed
implementation; it uses the stdlib ``html.parser`` builder so that malformed
build output is recovered best-effort and every tag keeps its source line.
"""
from __future__ import annotations

from typing import Callable, Iterator, Protocol

from bs4 import BeautifulSoup, Tag

PARSER = "html.parser"


class DocumentParseError(ValueError):
    pass


class Element(Protocol):
    @property
    def tag(self) -> str: ...

    @property
    def line(self) -> int | None: ...

    def get(self, name: str) -> str | None: ...

    def has(self, name: str) -> bool: ...

    def classes(self) -> tuple[str, ...]: ...

    def text(self) -> str: ...

    def ancestors(self) -> Iterator["Element"]: ...

    def descendants(self) -> Iterator["Element"]: ...


Predicate = Callable[[Element], bool]


class Document(Protocol):
    def root(self) -> Element | None: ...

    def elements(self) -> Iterator[Element]: ...

    def select(self, predicate: Predicate) -> list[Element]: ...


# --- predicates -------------------------------------------------------------


def tag(*names: str) -> Predicate:
    wanted = {n.lower() for n in names}
    return lambda el: el.tag in wanted


def has_attr(name: str) -> Predicate:
    return lambda el: el.has(name)


def attr_equals(name: str, value: str) -> Predicate:
    return lambda el: el.get(name) == value


def attr_contains(name: str, needle: str) -> Predicate:
    return lambda el: needle in (el.get(name) or "")


def has_class(*names: str) -> Predicate:
    wanted = set(names)
    return lambda el: bool(wanted.intersection(el.classes()))


def text_contains(needle: str) -> Predicate:
    return lambda el: needle in el.text()


def all_of(*predicates: Predicate) -> Predicate:
    return lambda el: all(p(el) for p in predicates)


def any_of(*predicates: Predicate) -> Predicate:
    return lambda el: any(p(el) for p in predicates)


def find_in(element: Element, predicate: Predicate) -> list[Element]:
    return [el for el in element.descendants() if predicate(el)]


def has_ancestor(element: Element, predicate: Predicate) -> bool:
    return any(predicate(el) for el in element.ancestors())


# --- BeautifulSoup implementation -------------------------------------------


class SoupElement:
    __slots__ = ("_tag",)

    def __init__(self, node: Tag) -> None:
        self._tag = node

    def __repr__(self) -> str:
        return f"<SoupElement {self.tag} line={self.line}>"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SoupElement) and other._tag is self._tag

    def __hash__(self) -> int:
        return id(self._tag)

    @property
    def tag(self) -> str:
        return (self._tag.name or "").lower()

    @property
    def line(self) -> int | None:
        return getattr(self._tag, "sourceline", None)

    def get(self, name: str) -> str | None:
        value = self._tag.attrs.get(name.lower())
        if value is None:
            return None
        if isinstance(value, (list, tuple)):
            return " ".join(value)
        return str(value)

    def has(self, name: str) -> bool:
        return name.lower() in self._tag.attrs

    def classes(self) -> tuple[str, ...]:
        return tuple((self.get("class") or "").split())

    def text(self) -> str:
        return " ".join(self._tag.get_text(" ").split())

    def ancestors(self) -> Iterator[SoupElement]:
        for parent in self._tag.parents:
            if isinstance(parent, BeautifulSoup):
                break
            yield SoupElement(parent)

    def descendants(self) -> Iterator[SoupElement]:
        for node in self._tag.descendants:
            if isinstance(node, Tag):
                yield SoupElement(node)


class SoupDocument:
    def __init__(self, soup: BeautifulSoup) -> None:
        self._soup = soup

    def root(self) -> SoupElement | None:
        html = self._soup.find("html")
        return SoupElement(html) if isinstance(html, Tag) else None

    def elements(self) -> Iterator[SoupElement]:
        for node in self._soup.find_all(True):
            yield SoupElement(node)

    def select(self, predicate: Predicate) -> list[SoupElement]:
        return [el for el in self.elements() if predicate(el)]


def parse_html(html: str) -> SoupDocument:
    """Parse markup into a :class:`SoupDocument`.

    ``html.parser`` recovers from almost anything; whatever it still rejects
    is raised as :class:`DocumentParseError`.
    """
    try:
        soup = BeautifulSoup(html, PARSER, multi_valued_attributes=None)
    except Exception as exc:
        raise DocumentParseError(f"{type(exc).__name__}: {exc}") from exc
    return SoupDocument(soup)
