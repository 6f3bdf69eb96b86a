"""Parsing helpers for ``isayitforward://`` deep links."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import parse_qsl, urlsplit

from sif_notifications.domain.entities.notification import DEEP_LINK_SCHEME


@dataclass(frozen=True)
class DeepLink:
    """Destination encoded in a deep link, e.g. ``isayitforward://sif/42``."""

    path: str
    parameters: dict[str, str] = field(default_factory=dict)

    @property
    def target_id(self) -> str | None:
        return self.parameters.get("id")


def parse_deep_link(url: str) -> DeepLink | None:
    """Return the :class:`DeepLink` for ``url`` or ``None`` when it is not one of ours."""

    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    if parts.scheme != DEEP_LINK_SCHEME or not parts.netloc:
        return None

    parameters: dict[str, str] = {}
    components = [segment for segment in parts.path.split("/") if segment]
    if components:
        parameters["id"] = components[0]
    parameters.update(parse_qsl(parts.query))
    return DeepLink(path=parts.netloc, parameters=parameters)


def is_valid_deep_link(url: str) -> bool:
    return parse_deep_link(url) is not None


__all__ = ["DeepLink", "is_valid_deep_link", "parse_deep_link"]
