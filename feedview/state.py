"""View state for a community page.

``ViewState`` is immutable; every change produces a new value through
``ViewStore.update`` so reducers stay pure and the presentation layer can
compare old and new states cheaply.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional
from urllib.parse import urlsplit

from feedsync.models.schemas import GetSiteResponse
from feedsync.models.sorts import DataType
from feedsync.query_params import ViewFilters
from feedsync.request_state import EMPTY, RequestState, Success
from feedsync.utils.logger import get_logger

logger = get_logger(__name__)

Listener = Callable[["ViewState"], None]


@dataclass(frozen=True)
class ViewState:
    """Everything the community page renders from."""

    filters: ViewFilters = field(default_factory=ViewFilters)
    community_res: RequestState = EMPTY
    posts_res: RequestState = EMPTY
    comments_res: RequestState = EMPTY
    site_res: Optional[GetSiteResponse] = None
    show_sidebar_mobile: bool = False

    @property
    def listing_res(self) -> RequestState:
        """The listing slot selected by the current data type."""
        if self.filters.data_type == DataType.POST:
            return self.posts_res
        return self.comments_res

    @property
    def document_title(self) -> str:
        if not isinstance(self.community_res, Success) or self.site_res is None:
            return ""
        title = self.community_res.data.community_view.community.title
        return f"{title} - {self.site_res.site_view.site.name}"

    @property
    def community_languages(self) -> List[int]:
        # An empty list from the server means the community allows every site language.
        if not isinstance(self.community_res, Success):
            return []
        langs = self.community_res.data.discussion_languages
        if not langs and self.site_res is not None:
            return [lang.id for lang in self.site_res.all_languages]
        return list(langs)

    @property
    def rss_url(self) -> Optional[str]:
        if not isinstance(self.community_res, Success):
            return None
        actor_id = self.community_res.data.community_view.community.actor_id
        if not actor_id:
            return None
        url = urlsplit(actor_id)
        return f"{url.scheme}://{url.netloc}/feeds{url.path}.xml?sort={self.filters.sort.value}"


class ViewStore:
    """Holds the current ``ViewState`` and tells listeners when it changes."""

    def __init__(self, state: Optional[ViewState] = None):
        self._state = state or ViewState()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> ViewState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, fn: Callable[[ViewState], ViewState]) -> ViewState:
        new_state = fn(self._state)
        if new_state is self._state:
            return new_state
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)
        return new_state

    def set(self, **changes) -> ViewState:
        return self.update(lambda s: replace(s, **changes))
