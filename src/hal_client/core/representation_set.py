from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Union,
    overload,
)

from .errors import HalClientError, NotFoundError

if TYPE_CHECKING:  # pragma: no cover
    from .representation import Representation


class RepresentationSet(Sequence["Representation"]):
    """
    Ordered, read-only collection of Representations.
    Every relation query returns one, whether the relation is single or
    multi valued.
    """

    def __init__(self, items: Iterable["Representation"] = ()):
        self._items = tuple(items)

    @overload
    def __getitem__(self, index: int) -> "Representation": ...

    @overload
    def __getitem__(self, index: slice) -> "RepresentationSet": ...

    def __getitem__(
        self, index: Union[int, slice]
    ) -> Union["Representation", "RepresentationSet"]:
        if isinstance(index, slice):
            return RepresentationSet(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator["Representation"]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RepresentationSet):
            return self._items == other._items
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    @property
    def first(self) -> Optional["Representation"]:
        return self._items[0] if self._items else None

    @property
    def hrefs(self) -> List[Optional[str]]:
        return [r.href for r in self._items]

    def includes_href(self, href: str) -> bool:
        return any(r.href == href for r in self._items)

    def related(self, name: str, /, **template_params: Any) -> "RepresentationSet":
        """Follow `name` from every member; members without it are skipped."""
        found: List["Representation"] = []
        for member in self._items:
            try:
                found.extend(member.related(name, **template_params))
            except NotFoundError:
                continue
        return RepresentationSet(found)

    def post(self, body: Any, headers: Optional[Dict[str, str]] = None) -> Any:
        if len(self._items) != 1:
            raise HalClientError(
                f"Cannot POST to a set of {len(self._items)} representations; "
                "expected exactly one."
            )
        return self._items[0].post(body, headers=headers)

    def __repr__(self) -> str:
        return f"<RepresentationSet {self.hrefs}>"


__all__ = ["RepresentationSet"]
