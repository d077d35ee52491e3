from __future__ import annotations

import inspect
import logging
from functools import cached_property
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple, Union

from jsonpointer import JsonPointer
from pydantic import ValidationError

from .errors import (
    HalClientError,
    InvalidRepresentationError,
    MissingTransportError,
    NotFoundError,
)
from .models import Link
from .namespaces import NamespaceResolver
from .representation_set import RepresentationSet

if TYPE_CHECKING:  # pragma: no cover
    from ..client import HalClient

logger = logging.getLogger("hal_client.representation")

HAL_CONTENT_TYPE = "application/hal+json"
RESERVED_KEYS = ("_links", "_embedded")

_MISSING = object()

Default = Union[Any, Callable[[], Any], Callable[[str], Any]]


def _pointer(base: str, *parts: Any) -> str:
    return base + JsonPointer.from_parts([str(p) for p in parts]).path


def _accepts_argument(fn: Callable[..., Any]) -> bool:
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        # builtins without a signature
        return True
    return any(
        p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.VAR_POSITIONAL)
        for p in params
    )


class Representation:
    """
    A single HAL+JSON resource.

    Properties, links and embedded resources are read through one
    relation-keyed API. Embedded resources are wrapped eagerly; link targets
    are fetched through `hal_client` only when a relation is asked for.

    A Representation built from `href` alone stands for a link target whose
    body has not been fetched yet. Its body is loaded from `hal_client` on
    first use.
    """

    def __init__(
        self,
        *,
        parsed_json: Optional[Dict[str, Any]] = None,
        href: Optional[str] = None,
        hal_client: Optional["HalClient"] = None,
        pointer: str = "",
    ):
        if parsed_json is None and href is None:
            raise ValueError("parsed_json or href must be provided.")
        if parsed_json is not None and not isinstance(parsed_json, dict):
            raise InvalidRepresentationError(
                pointer,
                f"HAL document must be a JSON object, got {type(parsed_json).__name__}",
            )

        self._raw = parsed_json
        self._href = href
        self.hal_client = hal_client
        self.pointer = pointer

    # --- Body ---

    @property
    def raw(self) -> Dict[str, Any]:
        """The wrapped JSON object, fetched on first use for link targets."""
        if self._raw is None:
            if self.hal_client is None:
                raise MissingTransportError(
                    f"Cannot load {self._href}: no HalClient configured."
                )
            self._raw = self.hal_client.get(self._href).raw
        return self._raw

    @property
    def properties(self) -> Dict[str, Any]:
        return {k: v for k, v in self.raw.items() if k not in RESERVED_KEYS}

    # --- Identity ---

    @property
    def href(self) -> Optional[str]:
        if self._href is not None:
            return self._href
        links = self._section("_links")
        if "self" not in links:
            return None
        link = self._parse_link(links["self"], _pointer(self.pointer, "_links", "self"))
        return link.href

    @cached_property
    def namespaces(self) -> NamespaceResolver:
        return NamespaceResolver.from_links(
            self._section("_links"), pointer=_pointer(self.pointer, "_links")
        )

    # --- Relations ---

    @property
    def relations(self) -> List[str]:
        names: List[str] = []
        for section in RESERVED_KEYS[::-1]:
            for name in self._section(section):
                if name != "curies" and name not in names:
                    names.append(name)
        return names

    def related(self, name: str, /, **template_params: Any) -> RepresentationSet:
        kind, key, entries = self._resolve(name)
        logger.debug(
            "resolving relation",
            extra={"rel": key, "pointer": _pointer(self.pointer, kind, key)},
        )

        if kind == "_embedded":
            return RepresentationSet(
                Representation(
                    parsed_json=body, hal_client=self.hal_client, pointer=where
                )
                for where, body in entries
            )

        return RepresentationSet(
            self._follow(link.expand(**template_params)) for _, link in entries
        )

    def related_hrefs(self, name: str, /, **template_params: Any) -> List[str]:
        kind, key, entries = self._resolve(name)

        if kind == "_links":
            return [link.expand(**template_params) for _, link in entries]

        hrefs = []
        for where, body in entries:
            href = Representation(parsed_json=body, pointer=where).href
            if href is None:
                raise InvalidRepresentationError(
                    where, "embedded resource has no self link"
                )
            hrefs.append(href)
        return hrefs

    def has_related(self, name: str) -> bool:
        try:
            _, _, entries = self._resolve(name)
        except HalClientError:
            return False
        return len(entries) > 0

    # --- Lookup ---
    # `property` shadows the builtin inside the class body, so it stays
    # below every @property declaration.

    def property(self, name: str) -> Any:
        if name in RESERVED_KEYS or name not in self.raw:
            raise NotFoundError(name, f"No property named {name!r}")
        return self.raw[name]

    def fetch(self, name: str, default: Default = _MISSING) -> Any:
        """
        Property value, else related resources, else `default`.
        A callable default is invoked with `name`, or with nothing when it
        takes no arguments.
        """
        if name not in RESERVED_KEYS and name in self.raw:
            return self.raw[name]
        try:
            return self.related(name)
        except NotFoundError:
            if default is _MISSING:
                raise NotFoundError(name) from None
        if not callable(default):
            return default
        return default(name) if _accepts_argument(default) else default()

    def __getitem__(self, name: str) -> Optional[RepresentationSet]:
        try:
            return self.related(name)
        except (NotFoundError, InvalidRepresentationError):
            return None

    # --- Actions ---

    def post(self, body: Any, headers: Optional[Dict[str, str]] = None) -> Any:
        if self.hal_client is None:
            raise MissingTransportError(
                f"Cannot POST to {self.href}: no HalClient configured."
            )
        target = self.href
        if target is None:
            raise InvalidRepresentationError(
                _pointer(self.pointer, "_links", "self"),
                "cannot POST to a representation without a self link",
            )
        # the transport sets the HAL content type unless `headers` overrides it
        return self.hal_client.post(target, body, headers=headers)

    # --- Internals ---

    def _follow(self, href: str) -> "Representation":
        if self.hal_client is None:
            return Representation(href=href)
        return self.hal_client.get(href)

    def _section(self, key: str) -> Dict[str, Any]:
        value = self.raw.get(key)
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise InvalidRepresentationError(
                _pointer(self.pointer, key), f"{key} must be a JSON object"
            )
        return value

    def _candidates(self, name: str) -> List[str]:
        return [name, *self.namespaces.equivalents(name)]

    def _resolve(self, name: str) -> Tuple[str, str, List[Tuple[str, Any]]]:
        """
        Locate `name` and validate its entries.
        Returns (section, matched key, [(pointer, entry), ...]).
        """
        candidates = self._candidates(name)

        embedded = self._section("_embedded")
        for key in candidates:
            if key in embedded:
                return "_embedded", key, self._embedded_entries(key, embedded[key])

        links = self._section("_links")
        for key in candidates:
            if key in links and key != "curies":
                return "_links", key, self._link_entries(key, links[key])

        raise NotFoundError(name, f"No relation named {name!r}")

    def _embedded_entries(self, key: str, value: Any) -> List[Tuple[str, Any]]:
        where = _pointer(self.pointer, "_embedded", key)
        if isinstance(value, dict):
            return [(where, value)]
        if isinstance(value, list) and all(isinstance(v, dict) for v in value):
            return [(f"{where}/{i}", v) for i, v in enumerate(value)]
        raise InvalidRepresentationError(
            where, "embedded entry must be an object or an array of objects"
        )

    def _link_entries(self, key: str, value: Any) -> List[Tuple[str, Link]]:
        where = _pointer(self.pointer, "_links", key)
        if isinstance(value, dict):
            return [(where, self._parse_link(value, where))]
        if isinstance(value, list):
            # bad members are reported at the relation key
            return [
                (f"{where}/{i}", self._parse_link(v, where))
                for i, v in enumerate(value)
            ]
        raise InvalidRepresentationError(
            where, "link entry must be an object or an array of objects"
        )

    @staticmethod
    def _parse_link(value: Any, where: str) -> Link:
        if not isinstance(value, dict):
            raise InvalidRepresentationError(
                where, "link entry must be an object with a string href"
            )
        try:
            return Link.model_validate(value)
        except ValidationError as exc:
            raise InvalidRepresentationError(
                where, "link entry must be an object with a string href"
            ) from exc

    # --- Dunder ---

    def _identity(self) -> Optional[str]:
        try:
            return self.href
        except InvalidRepresentationError:
            return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Representation):
            return NotImplemented
        mine, theirs = self._identity(), other._identity()
        if mine is not None or theirs is not None:
            return mine == theirs
        return self.raw == other.raw

    def __hash__(self) -> int:
        return hash(self._identity())

    def __repr__(self) -> str:
        return f"<Representation: {self._identity() or '(anonymous)'}>"

    __str__ = __repr__


__all__ = ["Representation", "HAL_CONTENT_TYPE"]
