"""Fetch orchestration for the community page.

Decides which remote calls populate the view:

- On mount, either hydrate from data the server already fetched for this
  exact route, or fetch from the network. Never both.
- On a filter change, refetch only the listing the data type selects.
- On navigation to another community, refetch the community as well.

A community failure stops the listing fetch; a listing failure leaves the
community slot alone. Each slot numbers its requests so a response that
arrives after a newer request for the same slot was issued is dropped.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from typing import Awaitable, Dict, Optional, Tuple
from urllib.parse import unquote, urlsplit

from feedsync.config import get_settings
from feedsync.models.forms import GetComments, GetCommunity, GetPosts
from feedsync.models.schemas import GetSiteResponse
from feedsync.models.sorts import DataType, ListingType
from feedsync.query_params import ViewFilters, parse
from feedsync.request_state import LOADING, Failure, RequestState, Success, api_wrapper
from feedsync.session import UserSession
from feedsync.utils.logger import get_logger

from .state import ViewState, ViewStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class InitialData:
    """Results of the server-side fetch for one community route."""

    community: RequestState
    posts: Optional[RequestState] = None
    comments: Optional[RequestState] = None


@dataclass
class IsoData:
    """Data handed over by the server-rendering pass.

    ``route_data`` is cleared once a page has consumed it.
    """

    path: str
    site_res: Optional[GetSiteResponse] = None
    route_data: Optional[InitialData] = None


def split_community_path(path: str) -> Tuple[str, str]:
    """``/c/<name>?<query>`` -> (name, query)."""
    url = urlsplit(path)
    parts = url.path.split("/")
    if len(parts) < 3 or parts[1] != "c" or not parts[2]:
        raise ValueError(f"Not a community path: {path!r}")
    return unquote(parts[2]), url.query


def is_initial_route(iso_data: Optional[IsoData], path: str) -> bool:
    return (
        iso_data is not None
        and iso_data.route_data is not None
        and iso_data.path == path
    )


def posts_form(name: str, filters: ViewFilters, auth: Optional[str], limit: int) -> GetPosts:
    return GetPosts(
        community_name=name,
        page=filters.page,
        limit=limit,
        sort=filters.sort,
        type_=ListingType.ALL,
        saved_only=False,
        auth=auth,
    )


def comments_form(
    name: str, filters: ViewFilters, auth: Optional[str], limit: int
) -> GetComments:
    return GetComments(
        community_name=name,
        page=filters.page,
        limit=limit,
        sort=filters.comment_sort,
        type_=ListingType.ALL,
        saved_only=False,
        auth=auth,
    )


async def fetch_initial_data(
    client,
    path: str,
    session: Optional[UserSession] = None,
    fetch_limit: Optional[int] = None,
) -> InitialData:
    """Server-rendering pass: fetch the community and the selected listing.

    The community lookup always runs; exactly one listing lookup runs and the
    other listing is left as ``None``.
    """
    name, query = split_community_path(path)
    filters = parse(query, session)
    auth = session.auth if session else None
    limit = fetch_limit or get_settings().fetch_limit

    community_call = api_wrapper(client.get_community(GetCommunity(name=name, auth=auth)))
    if filters.data_type == DataType.POST:
        listing_call = api_wrapper(client.get_posts(posts_form(name, filters, auth, limit)))
    else:
        listing_call = api_wrapper(client.get_comments(comments_form(name, filters, auth, limit)))

    community, listing = await asyncio.gather(community_call, listing_call)
    if filters.data_type == DataType.POST:
        return InitialData(community=community, posts=listing)
    return InitialData(community=community, comments=listing)


def hydrate(state: ViewState, initial_data: InitialData) -> ViewState:
    """Move server-fetched results into the view; absent listings stay as they are."""
    changes = {"community_res": initial_data.community}
    if initial_data.posts is not None:
        changes["posts_res"] = initial_data.posts
    if initial_data.comments is not None:
        changes["comments_res"] = initial_data.comments
    return replace(state, **changes)


class FetchOrchestrator:
    """Issues the reads that keep a ``ViewStore`` populated."""

    def __init__(
        self,
        client,
        store: ViewStore,
        session: Optional[UserSession] = None,
        fetch_limit: Optional[int] = None,
    ):
        self.client = client
        self.store = store
        self.session = session or UserSession()
        self.fetch_limit = fetch_limit or get_settings().fetch_limit
        self._latest: Dict[str, int] = {"community_res": 0, "posts_res": 0, "comments_res": 0}

    async def mount(
        self, name: str, iso_data: Optional[IsoData] = None, path: Optional[str] = None
    ) -> ViewState:
        if path is not None and is_initial_route(iso_data, path):
            initial_data = iso_data.route_data
            iso_data.route_data = None
            logger.info("Hydrating community %s from server data", name)
            return self.store.update(lambda s: hydrate(s, initial_data))

        logger.info("Fetching community %s", name)
        community_res = await self.fetch_community(name)
        if not isinstance(community_res, Success):
            return self.store.state
        return await self.refetch(name)

    async def fetch_community(self, name: str) -> RequestState:
        form = GetCommunity(name=name, auth=self.session.auth)
        res = await self._load("community_res", self.client.get_community(form))
        if isinstance(res, Failure):
            logger.warning("Community %s failed to load: %s", name, res.error.error)
        return res

    async def refetch(self, name: str) -> ViewState:
        """Reload the listing selected by the current filters."""
        filters = self.store.state.filters
        auth = self.session.auth
        if filters.data_type == DataType.POST:
            slot = "posts_res"
            call = self.client.get_posts(posts_form(name, filters, auth, self.fetch_limit))
        else:
            slot = "comments_res"
            call = self.client.get_comments(comments_form(name, filters, auth, self.fetch_limit))

        res = await self._load(slot, call)
        if isinstance(res, Failure):
            logger.warning("Listing %s for %s failed: %s", slot, name, res.error.error)
        return self.store.state

    def invalidate_listings(self) -> None:
        """Make any listing request still in flight stale."""
        self._latest["posts_res"] += 1
        self._latest["comments_res"] += 1

    async def _load(self, slot: str, call: Awaitable) -> RequestState:
        self._latest[slot] += 1
        request_id = self._latest[slot]
        self.store.set(**{slot: LOADING})

        res = await api_wrapper(call)
        if request_id != self._latest[slot]:
            logger.debug(
                "Dropping stale %s response (request %d, latest %d)",
                slot, request_id, self._latest[slot],
            )
            return res
        self.store.set(**{slot: res})
        return res
