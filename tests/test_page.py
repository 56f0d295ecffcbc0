"""Tests for feedview/page.py."""

import asyncio
import os
import sys
from unittest.mock import AsyncMock, MagicMock

import pytest

# Ensure project root is on path
ROOT = os.path.dirname(os.path.dirname(__file__))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from feedsync.errors import ApiError
from feedsync.models import forms
from feedsync.models.schemas import (
    BlockPersonResponse,
    CommunityResponse,
    CommunityView,
    GetPostsResponse,
    PersonView,
    PostResponse,
    PurgeItemResponse,
)
from feedsync.models.sorts import DataType, SortType, SubscribedType
from feedsync.query_params import ViewFilters
from feedsync.request_state import EMPTY, Failure, Success
from feedsync.session import SessionBlockRegistry
from feedview.fetch import InitialData, IsoData
from feedview.page import CommunityPage
from factories import (
    make_client,
    make_community,
    make_community_response,
    make_person,
    make_post_view,
    make_session,
    make_site,
)


@pytest.fixture()
def navigator():
    return MagicMock()


@pytest.fixture()
def notifier():
    return MagicMock()


@pytest.fixture()
def session():
    return make_session(auth="jwt-token")


def mounted_page(client, navigator, notifier, session, path="/c/python"):
    page = CommunityPage(
        client,
        path,
        session=session,
        navigator=navigator,
        notifier=notifier,
        fetch_limit=40,
    )
    asyncio.run(page.mount())
    return page


# ===========================================================================
# Construction
# ===========================================================================


class TestConstruction:
    def test_filters_come_from_the_url(self, session):
        page = CommunityPage(make_client(), "/c/python?dataType=Comment&sort=New&page=4", session=session)
        f = page.state.filters
        assert (f.data_type, f.sort, f.page) == (DataType.COMMENT, SortType.NEW, 4)

    def test_user_default_sort(self):
        page = CommunityPage(make_client(), "/c/python", session=make_session(default_sort=SortType.TOP_WEEK))
        assert page.state.filters.sort == SortType.TOP_WEEK

    def test_site_from_iso_data(self):
        site = make_site()
        page = CommunityPage(make_client(), "/c/python", iso_data=IsoData(path="/c/python", site_res=site))
        assert page.state.site_res is site

    def test_rejects_non_community_path(self):
        with pytest.raises(ValueError):
            CommunityPage(make_client(), "/u/alice")

    def test_mount_hydrates_from_iso_data(self, navigator, notifier, session):
        client = make_client()
        community = Success(make_community_response())
        iso = IsoData(path="/c/python", site_res=make_site(), route_data=InitialData(community=community))
        page = CommunityPage(client, "/c/python", session=session, iso_data=iso)

        asyncio.run(page.mount())

        assert page.state.community_res is community
        assert page.state.document_title == "Python - Lemmy Example"
        client.get_community.assert_not_called()
        client.get_site.assert_not_called()

    def test_client_side_mount_loads_site(self, navigator, notifier, session):
        client = make_client()
        page = mounted_page(client, navigator, notifier, session)

        assert page.state.document_title == "Python - Lemmy Example"
        assert client.get_site.call_args.args[0].auth == "jwt-token"

    def test_site_failure_does_not_block_mount(self, navigator, notifier, session):
        client = make_client(get_site=AsyncMock(side_effect=ApiError("network_error")))
        page = mounted_page(client, navigator, notifier, session)

        assert page.state.site_res is None
        assert isinstance(page.state.community_res, Success)
        client.get_posts.assert_awaited_once()


# ===========================================================================
# Filters
# ===========================================================================


class TestFilterChanges:
    def test_page_change(self, navigator, notifier, session):
        client = make_client()
        page = mounted_page(client, navigator, notifier, session)

        asyncio.run(page.handle_page_change(2))

        pushed = navigator.push.call_args.args[0]
        assert pushed.startswith("/c/python?")
        assert "page=2" in pushed
        assert "sort=Active" in pushed
        assert client.get_posts.call_args.args[0].page == 2

    def test_sort_change_resets_page(self, navigator, notifier, session):
        client = make_client()
        page = mounted_page(client, navigator, notifier, session, "/c/python?page=3")

        asyncio.run(page.handle_sort_change(SortType.NEW))

        assert page.state.filters.page == 1
        assert page.state.filters.sort == SortType.NEW
        form = client.get_posts.call_args.args[0]
        assert (form.page, form.sort) == (1, SortType.NEW)

    def test_data_type_change_fetches_comments(self, navigator, notifier, session):
        client = make_client()
        page = mounted_page(client, navigator, notifier, session, "/c/python?page=2")

        state = asyncio.run(page.handle_data_type_change(DataType.COMMENT))

        assert state.filters == ViewFilters(data_type=DataType.COMMENT, page=1)
        client.get_comments.assert_awaited_once()
        assert "dataType=Comment" in navigator.push.call_args.args[0]
        # The community is not fetched again.
        client.get_community.assert_awaited_once()

    def test_navigate_to_other_community(self, navigator, notifier, session):
        client = make_client()
        page = mounted_page(client, navigator, notifier, session)
        client.get_community.return_value = make_community_response(name="rust", title="Rust")

        state = asyncio.run(page.navigate("/c/rust?page=2"))

        assert page.name == "rust"
        assert state.community_res.data.community_view.community.title == "Rust"
        assert client.get_community.await_count == 2
        assert client.get_posts.call_args.args[0].community_name == "rust"

    def test_navigate_same_community_new_filters(self, navigator, notifier, session):
        client = make_client()
        page = mounted_page(client, navigator, notifier, session)

        asyncio.run(page.navigate("/c/python?page=5"))

        assert page.state.filters.page == 5
        client.get_community.assert_awaited_once()
        assert client.get_posts.await_count == 2

    def test_navigate_same_url_is_a_no_op(self, navigator, notifier, session):
        client = make_client()
        page = mounted_page(client, navigator, notifier, session)

        asyncio.run(page.navigate("/c/python"))

        assert client.get_posts.await_count == 1

    def test_old_listing_is_dropped_after_switching_community(self, navigator, notifier, session):
        async def scenario():
            release = asyncio.Event()

            async def get_posts(form):
                if form.page == 2:
                    await release.wait()
                    return GetPostsResponse(posts=[make_post_view(900)])
                return GetPostsResponse(posts=[make_post_view(1)])

            client = make_client(get_posts=get_posts)
            page = CommunityPage(client, "/c/python", session=session, navigator=navigator, fetch_limit=40)
            await page.mount()
            client.get_community = AsyncMock(side_effect=ApiError("couldnt_find_community", 404))

            pending = asyncio.create_task(page.handle_page_change(2))
            await asyncio.sleep(0)
            await page.navigate("/c/rust")
            release.set()
            await pending
            return page.state

        state = asyncio.run(scenario())

        assert isinstance(state.community_res, Failure)
        assert state.posts_res is EMPTY

    def test_sidebar_toggle(self, session):
        page = CommunityPage(make_client(), "/c/python", session=session)
        assert page.toggle_sidebar_mobile().show_sidebar_mobile is True
        assert page.toggle_sidebar_mobile().show_sidebar_mobile is False


# ===========================================================================
# Mutations
# ===========================================================================


class TestMutations:
    def test_auth_is_attached(self, navigator, notifier, session):
        client = make_client(like_post=AsyncMock(return_value=PostResponse(post_view=make_post_view(1, score=5))))
        page = mounted_page(client, navigator, notifier, session)

        asyncio.run(page.handle_post_vote(forms.CreatePostLike(post_id=1, score=1)))

        assert client.like_post.call_args.args[0].auth == "jwt-token"
        assert page.state.posts_res.data.posts[0].counts.score == 5

    def test_failure_toasts_and_keeps_state(self, navigator, notifier, session):
        client = make_client(lock_post=AsyncMock(side_effect=ApiError("not_a_moderator", 400)))
        page = mounted_page(client, navigator, notifier, session)
        before = page.state

        after = asyncio.run(page.handle_lock_post(forms.LockPost(post_id=1, locked=True)))

        assert after is before
        notifier.toast.assert_called_once_with("not_a_moderator", "danger")

    def test_unexpected_errors_propagate(self, navigator, notifier, session):
        client = make_client(save_post=AsyncMock(side_effect=RuntimeError("boom")))
        page = mounted_page(client, navigator, notifier, session)

        with pytest.raises(RuntimeError):
            asyncio.run(page.handle_save_post(forms.SavePost(post_id=1, save=True)))

    def test_purge_post_leaves_the_page(self, navigator, notifier, session):
        client = make_client(purge_post=AsyncMock(return_value=PurgeItemResponse(success=True)))
        page = mounted_page(client, navigator, notifier, session)

        asyncio.run(page.handle_purge_post(forms.PurgePost(post_id=1)))

        notifier.toast.assert_called_once_with("purge_success", "success")
        navigator.push.assert_called_once_with("/")

    def test_block_person_updates_registry(self, navigator, notifier, session):
        res = BlockPersonResponse(person_view=PersonView(person=make_person(5)), blocked=True)
        client = make_client(block_person=AsyncMock(return_value=res))
        page = mounted_page(client, navigator, notifier, session)

        asyncio.run(page.handle_block_person(forms.BlockPerson(person_id=5, block=True)))

        assert SessionBlockRegistry(session).blocked_person_ids == {5}
        notifier.toast.assert_called_once_with("blocked", "success")

    def test_block_goes_through_injected_registry(self, navigator, notifier, session):
        res = BlockPersonResponse(person_view=PersonView(person=make_person(5)), blocked=True)
        client = make_client(block_person=AsyncMock(return_value=res))
        registry = MagicMock()
        page = CommunityPage(client, "/c/python", session=session, block_registry=registry)

        asyncio.run(page.handle_block_person(forms.BlockPerson(person_id=5, block=True)))

        registry.update_person_block.assert_called_once_with(res)

    def test_follow_syncs_session(self, navigator, notifier, session):
        view = CommunityView(community=make_community(), subscribed=SubscribedType.SUBSCRIBED)
        client = make_client(follow_community=AsyncMock(return_value=CommunityResponse(community_view=view)))
        page = mounted_page(client, navigator, notifier, session)

        state = asyncio.run(page.handle_follow(forms.FollowCommunity(community_id=7, follow=True)))

        assert state.community_res.data.community_view.subscribed == SubscribedType.SUBSCRIBED
        assert [f.community.id for f in session.my_user.follows] == [7]

    def test_any_registry_shape_is_accepted(self, navigator, notifier, session):
        class RecordingRegistry:
            def __init__(self):
                self.people = []

            def update_community_block(self, res):
                pass

            def update_person_block(self, res):
                self.people.append(res.person_view.person.id)

        res = BlockPersonResponse(person_view=PersonView(person=make_person(5)), blocked=True)
        registry = RecordingRegistry()
        client = make_client(block_person=AsyncMock(return_value=res))
        page = CommunityPage(client, "/c/python", session=session, block_registry=registry)

        asyncio.run(page.handle_block_person(forms.BlockPerson(person_id=5, block=True)))

        assert registry.people == [5]
        assert session.my_user.person_blocks == []
