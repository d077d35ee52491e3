"""CURIE table for a single HAL document."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterator, List, Optional, Pattern
from urllib.parse import unquote

from pydantic import ValidationError

from .errors import InvalidRepresentationError, NotFoundError
from .models import Curie

logger = logging.getLogger("hal_client.namespaces")

_EXPRESSION = re.compile(r"\{([^}]*)\}")
_OPERATORS = "+#./;?&"


def _compile_template(template: str) -> Optional[Pattern[str]]:
    """
    Turn a curie template into a pattern capturing the `rel` variable.
    Returns None when the template has no `rel` expression.
    Other expressions match anything; callers confirm by re-expanding.
    """
    parts: List[str] = []
    pos = 0
    captured = False
    for m in _EXPRESSION.finditer(template):
        parts.append(re.escape(template[pos : m.start()]))
        pos = m.end()

        body = m.group(1)
        op = body[:1] if body[:1] in _OPERATORS else ""
        names = [n.split(":")[0].rstrip("*") for n in body[len(op) :].split(",")]

        if not captured and names == ["rel"] and op in ("", "+", "#", ".", "/"):
            if op not in ("", "+"):
                parts.append(re.escape(op))
            parts.append("(?P<rel>.+?)")
            captured = True
        else:
            parts.append(".*?")
    parts.append(re.escape(template[pos:]))

    if not captured:
        return None
    return re.compile("".join(parts))


class NamespaceResolver:
    """
    Maps curie prefixes to URI templates and back.

    Built from the `curies` entry of a document's `_links`, which may be one
    curie object or an array of them. Later duplicates of a prefix replace
    earlier ones.
    """

    def __init__(self, curies: Optional[Dict[str, Curie]] = None):
        self._curies: Dict[str, Curie] = dict(curies or {})
        self._patterns: Dict[str, Optional[Pattern[str]]] = {
            prefix: _compile_template(c.href) for prefix, c in self._curies.items()
        }

    @classmethod
    def from_links(
        cls, links: Dict[str, Any], *, pointer: str = ""
    ) -> "NamespaceResolver":
        """Build from a `_links` object; `pointer` locates that object."""
        raw = links.get("curies")
        if raw is None:
            return cls()

        base = f"{pointer}/curies"
        if isinstance(raw, dict):
            entries = [(base, raw)]
        elif isinstance(raw, list):
            entries = [(f"{base}/{i}", item) for i, item in enumerate(raw)]
        else:
            raise InvalidRepresentationError(
                base, "curies must be an object or an array of objects"
            )

        curies: Dict[str, Curie] = {}
        for where, item in entries:
            try:
                curie = Curie.model_validate(item)
            except ValidationError as exc:
                raise InvalidRepresentationError(
                    where, "curie must be an object with string name and href"
                ) from exc
            if curie.name in curies:
                logger.warning(
                    "duplicate curie prefix, last one wins",
                    extra={"pointer": where, "rel": curie.name},
                )
            curies[curie.name] = curie
        return cls(curies)

    @property
    def prefixes(self) -> List[str]:
        return list(self._curies)

    def __contains__(self, prefix: object) -> bool:
        return prefix in self._curies

    def __len__(self) -> int:
        return len(self._curies)

    def __iter__(self) -> Iterator[str]:
        return iter(self._curies)

    def expand(self, prefix: str, suffix: str) -> str:
        try:
            curie = self._curies[prefix]
        except KeyError:
            raise NotFoundError(prefix, f"Unknown curie prefix {prefix!r}") from None
        return curie.expand(suffix)

    def _suffix_for(self, prefix: str, full_uri: str) -> Optional[str]:
        pattern = self._patterns.get(prefix)
        if pattern is None:
            return None
        m = pattern.fullmatch(full_uri)
        if not m:
            return None
        suffix = unquote(m.group("rel"))
        if self.expand(prefix, suffix) != full_uri:
            return None
        return suffix

    def matches(self, prefix: str, full_uri: str) -> bool:
        """True iff expanding `prefix` with some suffix yields `full_uri`."""
        if prefix not in self._curies:
            return False
        return self._suffix_for(prefix, full_uri) is not None

    def compact(self, full_uri: str) -> List[str]:
        """All `prefix:suffix` names that expand to `full_uri`."""
        names = []
        for prefix in self._curies:
            suffix = self._suffix_for(prefix, full_uri)
            if suffix is not None:
                names.append(f"{prefix}:{suffix}")
        return names

    def equivalents(self, name: str) -> List[str]:
        """
        Other spellings of a relation name.
        A curie maps to its full URI; a full URI maps to its curie forms.
        """
        found: List[str] = []
        prefix, sep, suffix = name.partition(":")
        if sep and prefix in self._curies:
            found.append(self.expand(prefix, suffix))
        for alt in self.compact(name):
            if alt != name and alt not in found:
                found.append(alt)
        return found

    def __repr__(self) -> str:
        return f"<NamespaceResolver {sorted(self._curies)}>"


__all__ = ["NamespaceResolver"]
