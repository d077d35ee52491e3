from __future__ import annotations

from typing import Any, Optional

import uritemplate
from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr


class Link(BaseModel):
    """
    A single HAL link object.
    Only `href` is required; `templated` marks an RFC 6570 URI Template.
    """

    href: StrictStr
    templated: StrictBool = False
    title: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None

    model_config = ConfigDict(extra="ignore", frozen=True)

    def expand(self, **params: Any) -> str:
        if not self.templated:
            return self.href
        # undefined variables are dropped, not left as literal braces
        return uritemplate.expand(self.href, params)


class Curie(BaseModel):
    name: StrictStr
    href: StrictStr
    templated: bool = True

    model_config = ConfigDict(extra="ignore", frozen=True)

    def expand(self, rel: str) -> str:
        return uritemplate.expand(self.href, rel=rel)


__all__ = ["Link", "Curie"]
