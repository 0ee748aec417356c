"""What a catalog operation ends with: one render or one redirect."""
from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class Render:
    """Render ``view`` with ``data``; ``data`` always carries a ``title``."""

    view: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Redirect:
    """Send the client to ``url``."""

    url: str


Outcome = Union[Render, Redirect]
