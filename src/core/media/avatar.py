"""
Avatar rendering model.

An avatar shows the user's picture when one is available and loads, and
falls back to their initials otherwise. The image lifecycle is an explicit
state machine so the "no retry after failure" rule is visible and tested
rather than an accident of component lifetime:

    LOADING --mark_loaded--> LOADED
    LOADING --mark_failed--> FAILED
    LOADED  --mark_failed--> FAILED

FAILED is terminal for the renderer instance.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .urls import resolve_storage_url

DEFAULT_INITIALS = "U"
DEFAULT_ALT = "User"


class AvatarSize(Enum):
    """Fixed avatar sizes. Adding one means adding a CSS mapping below."""
    SM = "sm"
    MD = "md"
    LG = "lg"
    XL = "xl"


SIZE_CLASSES: dict[AvatarSize, str] = {
    AvatarSize.SM: "h-8 w-8",
    AvatarSize.MD: "h-10 w-10",
    AvatarSize.LG: "h-16 w-16",
    AvatarSize.XL: "h-24 w-24",
}


class ImageState(Enum):
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


def initials_for(name: Optional[str]) -> str:
    """
    Initials from the first two whitespace-separated words of a name.

    "Ada Lovelace" -> "AL", "Madonna" -> "M", None -> "U".
    """
    if not name:
        return DEFAULT_INITIALS

    words = name.split()
    if not words:
        return DEFAULT_INITIALS

    return "".join(word[0] for word in words[:2]).upper()


@dataclass(frozen=True)
class AvatarView:
    """What a template needs to draw one avatar."""
    image_url: Optional[str]
    initials: str
    alt: str
    size_classes: str

    @property
    def shows_image(self) -> bool:
        return self.image_url is not None


class AvatarRenderer:
    """
    Per-avatar rendering state.

    One instance corresponds to one avatar on a page. The storage reference
    is resolved once at construction; load outcomes are reported through
    mark_loaded() / mark_failed().
    """

    def __init__(
        self,
        src: Optional[str],
        name: Optional[str] = None,
        size: AvatarSize | str = AvatarSize.MD,
        base_url: Optional[str] = None,
    ) -> None:
        self._size = AvatarSize(size)
        self._name = name
        self._display_url = resolve_storage_url(src, base_url)
        self._state = ImageState.LOADING

    @property
    def state(self) -> ImageState:
        return self._state

    @property
    def display_url(self) -> str:
        return self._display_url

    @property
    def initials(self) -> str:
        return initials_for(self._name)

    def mark_loaded(self) -> None:
        """Record a successful load. Ignored once the image has failed."""
        if self._state is ImageState.LOADING:
            self._state = ImageState.LOADED

    def mark_failed(self) -> None:
        """Record a load failure. One-way: there is no way back to LOADING."""
        self._state = ImageState.FAILED

    def render(self) -> AvatarView:
        failed = self._state is ImageState.FAILED

        return AvatarView(
            image_url=None if failed else self._display_url,
            initials=self.initials,
            alt=self._name or DEFAULT_ALT,
            size_classes=SIZE_CLASSES[self._size],
        )
