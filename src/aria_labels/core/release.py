"""
Records exchanged between the release feed, the cache and the host.
"""

from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any, Mapping

from .versions import strip_tag_prefix


@dataclass(frozen=True)
class Release:
    """The latest release as published by the release feed."""

    tag_name: str
    published_at: str = ""
    body: str = ""
    zipball_url: str = ""
    html_url: str = ""

    @property
    def version(self) -> str:
        """The tag without its leading ``v``."""
        return strip_tag_prefix(self.tag_name)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional["Release"]:
        """Build from feed JSON; None when the document has no tag."""
        if not data or not data.get("tag_name"):
            return None
        return cls(
            tag_name=str(data["tag_name"]),
            published_at=str(data.get("published_at") or ""),
            body=str(data.get("body") or ""),
            zipball_url=str(data.get("zipball_url") or ""),
            html_url=str(data.get("html_url") or ""),
        )


@dataclass
class UpdateOffer:
    """An available update, as listed in the host's update check."""

    id: str
    url: str
    slug: str
    package: str
    new_version: str

    @classmethod
    def for_release(cls, release: Release, slug: str) -> "UpdateOffer":
        return cls(
            id=release.html_url,
            url=release.html_url,
            slug=slug,
            package=release.zipball_url,
            new_version=release.tag_name,
        )


@dataclass
class UpdateCheck:
    """The host's record of installed versions and offered updates.

    ``checked`` maps plugin files to installed versions; ``response`` maps
    plugin files to offers.
    """

    checked: Optional[Dict[str, str]] = None
    response: Dict[str, UpdateOffer] = field(default_factory=dict)


@dataclass
class PluginInformation:
    """Details shown in the host's plugin information popup."""

    name: str
    slug: str
    version: str
    author: str
    author_profile: str
    homepage: str
    short_description: str
    last_updated: str
    download_link: str
    requires: str = ""
    requires_php: str = ""
    sections: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
