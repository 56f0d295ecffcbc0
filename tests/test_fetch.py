"""Tests for feedview/fetch.py."""

import asyncio
import os
import sys
from unittest.mock import AsyncMock

import pytest

# Ensure project root is on path
ROOT = os.path.dirname(os.path.dirname(__file__))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from feedsync.errors import ApiError
from feedsync.models.schemas import GetPostsResponse
from feedsync.models.sorts import CommentSortType, DataType, SortType
from feedsync.query_params import ViewFilters
from feedsync.request_state import EMPTY, LOADING, Failure, Success
from feedview.fetch import (
    FetchOrchestrator,
    InitialData,
    IsoData,
    fetch_initial_data,
    hydrate,
    split_community_path,
)
from feedview.state import ViewState, ViewStore
from factories import make_client, make_community_response, make_post_view, make_session

PATH = "/c/python?dataType=Post&page=1&sort=Active"


def make_orchestrator(client, filters=None):
    store = ViewStore(ViewState(filters=filters or ViewFilters()))
    return FetchOrchestrator(client, store, fetch_limit=40), store


class TestSplitCommunityPath:
    def test_name_and_query(self):
        assert split_community_path("/c/python?page=2") == ("python", "page=2")

    def test_percent_encoded_name(self):
        assert split_community_path("/c/caf%C3%A9") == ("café", "")

    @pytest.mark.parametrize("path", ["/", "/u/alice", "/c/", "/post/1"])
    def test_rejects_other_routes(self, path):
        with pytest.raises(ValueError):
            split_community_path(path)


class TestHydrate:
    def test_absent_listing_stays_empty(self):
        community = Success(make_community_response())
        posts = Success(GetPostsResponse(posts=[make_post_view(1)]))

        state = hydrate(ViewState(), InitialData(community=community, posts=posts))

        assert state.community_res is community
        assert state.posts_res is posts
        assert state.comments_res is EMPTY


class TestMount:
    def test_initial_data_skips_network(self):
        client = make_client()
        orchestrator, store = make_orchestrator(client)
        community = Success(make_community_response())
        posts = Success(GetPostsResponse(posts=[make_post_view(1)]))
        iso = IsoData(path=PATH, route_data=InitialData(community=community, posts=posts))

        state = asyncio.run(orchestrator.mount("python", iso, PATH))

        assert state.community_res is community
        assert state.posts_res is posts
        client.get_community.assert_not_called()
        client.get_posts.assert_not_called()
        client.get_comments.assert_not_called()

    def test_initial_data_is_consumed_once(self):
        client = make_client()
        orchestrator, _ = make_orchestrator(client)
        iso = IsoData(
            path=PATH,
            route_data=InitialData(community=Success(make_community_response()), posts=Success(GetPostsResponse(posts=[]))),
        )

        asyncio.run(orchestrator.mount("python", iso, PATH))
        assert iso.route_data is None

        asyncio.run(orchestrator.mount("python", iso, PATH))
        client.get_community.assert_awaited_once()
        client.get_posts.assert_awaited_once()

    def test_initial_data_for_another_path_is_ignored(self):
        client = make_client()
        orchestrator, _ = make_orchestrator(client)
        iso = IsoData(path="/c/rust", route_data=InitialData(community=Success(make_community_response("rust"))))

        asyncio.run(orchestrator.mount("python", iso, PATH))

        client.get_community.assert_awaited_once()
        assert iso.route_data is not None

    def test_fetches_community_and_one_listing(self):
        client = make_client()
        orchestrator, _ = make_orchestrator(client)

        state = asyncio.run(orchestrator.mount("python"))

        assert isinstance(state.community_res, Success)
        assert [p.post.id for p in state.posts_res.data.posts] == [1, 2]
        assert state.comments_res is EMPTY
        client.get_community.assert_awaited_once()
        client.get_posts.assert_awaited_once()
        client.get_comments.assert_not_called()

    def test_posts_form(self):
        client = make_client()
        orchestrator, _ = make_orchestrator(client, ViewFilters(sort=SortType.NEW, page=3))
        orchestrator.session = make_session(auth="tok")

        asyncio.run(orchestrator.mount("python"))

        form = client.get_posts.call_args.args[0]
        assert form.community_name == "python"
        assert form.page == 3
        assert form.limit == 40
        assert form.sort == SortType.NEW
        assert form.saved_only is False
        assert form.auth == "tok"

    def test_comments_use_comment_sort(self):
        client = make_client()
        orchestrator, store = make_orchestrator(client, ViewFilters(data_type=DataType.COMMENT))

        state = asyncio.run(orchestrator.mount("python"))

        form = client.get_comments.call_args.args[0]
        assert form.sort == CommentSortType.HOT
        assert [c.comment.id for c in state.comments_res.data.comments] == [11, 12]
        client.get_posts.assert_not_called()

    def test_community_failure_stops_listing(self):
        client = make_client(get_community=AsyncMock(side_effect=ApiError("couldnt_find_community", 404)))
        orchestrator, _ = make_orchestrator(client)

        state = asyncio.run(orchestrator.mount("python"))

        assert isinstance(state.community_res, Failure)
        assert state.community_res.error.error == "couldnt_find_community"
        assert state.posts_res is EMPTY
        client.get_posts.assert_not_called()

    def test_listing_failure_keeps_community(self):
        client = make_client(get_posts=AsyncMock(side_effect=ApiError("network_error")))
        orchestrator, _ = make_orchestrator(client)

        state = asyncio.run(orchestrator.mount("python"))

        assert isinstance(state.community_res, Success)
        assert isinstance(state.posts_res, Failure)


class TestRefetch:
    def test_loading_is_published_before_result(self):
        client = make_client()
        orchestrator, store = make_orchestrator(client)
        seen = []
        store.subscribe(lambda s: seen.append(s.posts_res))

        asyncio.run(orchestrator.refetch("python"))

        assert seen[0] is LOADING
        assert isinstance(seen[-1], Success)

    def test_stale_response_is_dropped(self):
        pages = {2: [21], 3: [31]}

        async def scenario():
            events = {2: asyncio.Event(), 3: asyncio.Event()}

            async def get_posts(form):
                await events[form.page].wait()
                return GetPostsResponse(posts=[make_post_view(pid) for pid in pages[form.page]])

            client = make_client(get_posts=get_posts)
            orchestrator, store = make_orchestrator(client)

            store.set(filters=ViewFilters(page=2))
            older = asyncio.create_task(orchestrator.refetch("python"))
            await asyncio.sleep(0)
            store.set(filters=ViewFilters(page=3))
            newer = asyncio.create_task(orchestrator.refetch("python"))
            await asyncio.sleep(0)

            events[3].set()
            await newer
            events[2].set()
            await older
            return store.state

        state = asyncio.run(scenario())

        assert [p.post.id for p in state.posts_res.data.posts] == [31]
        assert state.filters.page == 3

    def test_invalidated_listing_is_not_committed(self):
        async def scenario():
            release = asyncio.Event()

            async def get_posts(form):
                await release.wait()
                return GetPostsResponse(posts=[make_post_view(900)])

            orchestrator, store = make_orchestrator(make_client(get_posts=get_posts))
            pending = asyncio.create_task(orchestrator.refetch("python"))
            await asyncio.sleep(0)
            orchestrator.invalidate_listings()
            store.set(posts_res=EMPTY)
            release.set()
            await pending
            return store.state

        assert asyncio.run(scenario()).posts_res is EMPTY


class TestFetchInitialData:
    def test_posts_route(self):
        client = make_client()

        data = asyncio.run(fetch_initial_data(client, PATH, fetch_limit=40))

        assert isinstance(data.community, Success)
        assert isinstance(data.posts, Success)
        assert data.comments is None
        client.get_comments.assert_not_called()

    def test_comments_route(self):
        client = make_client()

        data = asyncio.run(fetch_initial_data(client, "/c/python?dataType=Comment", fetch_limit=40))

        assert data.posts is None
        assert isinstance(data.comments, Success)
        client.get_posts.assert_not_called()

    def test_failures_are_captured(self):
        client = make_client(get_community=AsyncMock(side_effect=ApiError("couldnt_find_community", 404)))

        data = asyncio.run(fetch_initial_data(client, PATH, fetch_limit=40))

        assert isinstance(data.community, Failure)
        assert isinstance(data.posts, Success)
