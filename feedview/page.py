"""Community page controller.

Wires the codec, the fetch orchestrator and the reconciler to a remote
client. The presentation layer subscribes to ``page.store`` and calls the
``handle_*`` coroutines in response to user input; each returns the
resulting ``ViewState``.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Awaitable, Callable, Optional, Protocol

from feedsync.models import forms
from feedsync.models.schemas import GetSiteResponse
from feedsync.models.sorts import DataType, SortType
from feedsync.query_params import community_path, parse, update_filters
from feedsync.request_state import Failure, Success, api_wrapper
from feedsync.session import BlockRegistry, SessionBlockRegistry, UserSession
from feedsync.utils.logger import get_logger

from .fetch import FetchOrchestrator, IsoData, split_community_path
from .reconcile import (
    Effect,
    MutationKind,
    Navigate,
    Notify,
    RecordCommunityBlock,
    RecordPersonBlock,
    SyncFollow,
    effects_for,
    reduce,
)
from .state import ViewState, ViewStore

logger = get_logger(__name__)


class Navigator(Protocol):
    def push(self, path: str) -> None: ...


class Notifier(Protocol):
    def toast(self, message: str, level: str = "success") -> None: ...


class CommunityPage:
    """One mounted community route (``/c/<name>?<filters>``)."""

    def __init__(
        self,
        client,
        path: str,
        session: Optional[UserSession] = None,
        navigator: Optional[Navigator] = None,
        notifier: Optional[Notifier] = None,
        block_registry: Optional[BlockRegistry] = None,
        iso_data: Optional[IsoData] = None,
        fetch_limit: Optional[int] = None,
    ):
        self.client = client
        self.session = session or UserSession()
        self.navigator = navigator
        self.notifier = notifier
        self.block_registry = block_registry or SessionBlockRegistry(self.session)
        self.iso_data = iso_data

        self.path = path
        self.name, query = split_community_path(path)
        site_res = iso_data.site_res if iso_data else None
        self.store = ViewStore(ViewState(filters=parse(query, self.session), site_res=site_res))
        self.orchestrator = FetchOrchestrator(client, self.store, self.session, fetch_limit)

    @property
    def state(self) -> ViewState:
        return self.store.state

    async def mount(self) -> ViewState:
        # Without a server pass there is no site data to render the title from.
        if self.iso_data is None and self.state.site_res is None:
            await self.load_site()
        return await self.orchestrator.mount(self.name, self.iso_data, self.path)

    async def load_site(self) -> Optional[GetSiteResponse]:
        res = await api_wrapper(self.client.get_site(self._with_auth(forms.GetSite())))
        if isinstance(res, Failure):
            logger.warning("Site failed to load: %s", res.error.error)
            return None
        self.store.set(site_res=res.data)
        return res.data

    # ------------------------------------------------------------------
    # Filters and navigation
    # ------------------------------------------------------------------

    async def handle_page_change(self, page: int) -> ViewState:
        return await self.update_url(page=page)

    async def handle_sort_change(self, sort: SortType) -> ViewState:
        return await self.update_url(sort=sort, page=1)

    async def handle_data_type_change(self, data_type: DataType) -> ViewState:
        return await self.update_url(data_type=data_type, page=1)

    async def update_url(
        self,
        data_type: Optional[DataType] = None,
        sort: Optional[SortType] = None,
        page: Optional[int] = None,
    ) -> ViewState:
        filters = update_filters(self.state.filters, data_type=data_type, sort=sort, page=page)
        self.path = community_path(self.name, filters)
        self.store.set(filters=filters)
        if self.navigator is not None:
            self.navigator.push(self.path)
        return await self.orchestrator.refetch(self.name)

    async def navigate(self, path: str) -> ViewState:
        """Follow a history change (back/forward or a link) to a community path."""
        name, query = split_community_path(path)
        filters = parse(query, self.session)
        self.path = path

        if name != self.name:
            logger.info("Navigating from community %s to %s", self.name, name)
            self.name = name
            # Listings still loading belong to the old community.
            self.orchestrator.invalidate_listings()
            self.store.update(lambda s: ViewState(filters=filters, site_res=s.site_res))
            community_res = await self.orchestrator.fetch_community(name)
            if not isinstance(community_res, Success):
                return self.state
            return await self.orchestrator.refetch(name)

        if filters == self.state.filters:
            return self.state
        self.store.set(filters=filters)
        return await self.orchestrator.refetch(name)

    def toggle_sidebar_mobile(self) -> ViewState:
        return self.store.update(
            lambda s: replace(s, show_sidebar_mobile=not s.show_sidebar_mobile)
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _with_auth(self, form: forms.Form) -> forms.Form:
        if form.auth is None and self.session.auth is not None:
            return form.model_copy(update={"auth": self.session.auth})
        return form

    async def _mutate(
        self,
        kind: MutationKind,
        call: Callable[[forms.Form], Awaitable],
        form: forms.Form,
    ) -> ViewState:
        res = await api_wrapper(call(self._with_auth(form)))
        if isinstance(res, Failure):
            logger.warning("%s failed: %s", kind.value, res.error.error)
        self.store.update(lambda s: reduce(s, kind, res))
        for effect in effects_for(kind, res):
            self._run_effect(effect)
        return self.state

    def _run_effect(self, effect: Effect) -> None:
        if isinstance(effect, Navigate):
            logger.info("Leaving community %s for %s", self.name, effect.path)
            if self.navigator is not None:
                self.navigator.push(effect.path)
        elif isinstance(effect, Notify):
            if self.notifier is not None:
                self.notifier.toast(effect.message, effect.level)
        elif isinstance(effect, RecordCommunityBlock):
            self.block_registry.update_community_block(effect.response)
        elif isinstance(effect, RecordPersonBlock):
            self.block_registry.update_person_block(effect.response)
        elif isinstance(effect, SyncFollow):
            self.session.sync_follow(effect.community_view)

    # Community

    async def handle_edit_community(self, form: forms.EditCommunity) -> ViewState:
        return await self._mutate(MutationKind.EDIT_COMMUNITY, self.client.edit_community, form)

    async def handle_delete_community(self, form: forms.DeleteCommunity) -> ViewState:
        return await self._mutate(
            MutationKind.DELETE_COMMUNITY, self.client.delete_community, form
        )

    async def handle_remove_community(self, form: forms.RemoveCommunity) -> ViewState:
        return await self._mutate(
            MutationKind.REMOVE_COMMUNITY, self.client.remove_community, form
        )

    async def handle_follow(self, form: forms.FollowCommunity) -> ViewState:
        return await self._mutate(
            MutationKind.FOLLOW_COMMUNITY, self.client.follow_community, form
        )

    async def handle_block_community(self, form: forms.BlockCommunity) -> ViewState:
        return await self._mutate(MutationKind.BLOCK_COMMUNITY, self.client.block_community, form)

    async def handle_transfer_community(self, form: forms.TransferCommunity) -> ViewState:
        return await self._mutate(
            MutationKind.TRANSFER_COMMUNITY, self.client.transfer_community, form
        )

    async def handle_add_mod_to_community(self, form: forms.AddModToCommunity) -> ViewState:
        return await self._mutate(
            MutationKind.ADD_MOD_TO_COMMUNITY, self.client.add_mod_to_community, form
        )

    async def handle_purge_community(self, form: forms.PurgeCommunity) -> ViewState:
        return await self._mutate(MutationKind.PURGE_COMMUNITY, self.client.purge_community, form)

    # Person

    async def handle_ban_from_community(self, form: forms.BanFromCommunity) -> ViewState:
        return await self._mutate(
            MutationKind.BAN_FROM_COMMUNITY, self.client.ban_from_community, form
        )

    async def handle_ban_person(self, form: forms.BanPerson) -> ViewState:
        return await self._mutate(MutationKind.BAN_PERSON, self.client.ban_person, form)

    async def handle_block_person(self, form: forms.BlockPerson) -> ViewState:
        return await self._mutate(MutationKind.BLOCK_PERSON, self.client.block_person, form)

    async def handle_purge_person(self, form: forms.PurgePerson) -> ViewState:
        return await self._mutate(MutationKind.PURGE_PERSON, self.client.purge_person, form)

    async def handle_add_admin(self, form: forms.AddAdmin) -> ViewState:
        return await self._mutate(MutationKind.ADD_ADMIN, self.client.add_admin, form)

    # Posts

    async def handle_create_post(self, form: forms.CreatePost) -> ViewState:
        return await self._mutate(MutationKind.CREATE_POST, self.client.create_post, form)

    async def handle_edit_post(self, form: forms.EditPost) -> ViewState:
        return await self._mutate(MutationKind.EDIT_POST, self.client.edit_post, form)

    async def handle_post_vote(self, form: forms.CreatePostLike) -> ViewState:
        return await self._mutate(MutationKind.VOTE_POST, self.client.like_post, form)

    async def handle_delete_post(self, form: forms.DeletePost) -> ViewState:
        return await self._mutate(MutationKind.DELETE_POST, self.client.delete_post, form)

    async def handle_remove_post(self, form: forms.RemovePost) -> ViewState:
        return await self._mutate(MutationKind.REMOVE_POST, self.client.remove_post, form)

    async def handle_save_post(self, form: forms.SavePost) -> ViewState:
        return await self._mutate(MutationKind.SAVE_POST, self.client.save_post, form)

    async def handle_lock_post(self, form: forms.LockPost) -> ViewState:
        return await self._mutate(MutationKind.LOCK_POST, self.client.lock_post, form)

    async def handle_feature_post(self, form: forms.FeaturePost) -> ViewState:
        return await self._mutate(MutationKind.FEATURE_POST, self.client.feature_post, form)

    async def handle_post_report(self, form: forms.CreatePostReport) -> ViewState:
        return await self._mutate(MutationKind.REPORT_POST, self.client.create_post_report, form)

    async def handle_purge_post(self, form: forms.PurgePost) -> ViewState:
        return await self._mutate(MutationKind.PURGE_POST, self.client.purge_post, form)

    # Comments

    async def handle_create_comment(self, form: forms.CreateComment) -> ViewState:
        return await self._mutate(MutationKind.CREATE_COMMENT, self.client.create_comment, form)

    async def handle_edit_comment(self, form: forms.EditComment) -> ViewState:
        return await self._mutate(MutationKind.EDIT_COMMENT, self.client.edit_comment, form)

    async def handle_comment_vote(self, form: forms.CreateCommentLike) -> ViewState:
        return await self._mutate(MutationKind.VOTE_COMMENT, self.client.like_comment, form)

    async def handle_delete_comment(self, form: forms.DeleteComment) -> ViewState:
        return await self._mutate(MutationKind.DELETE_COMMENT, self.client.delete_comment, form)

    async def handle_remove_comment(self, form: forms.RemoveComment) -> ViewState:
        return await self._mutate(MutationKind.REMOVE_COMMENT, self.client.remove_comment, form)

    async def handle_save_comment(self, form: forms.SaveComment) -> ViewState:
        return await self._mutate(MutationKind.SAVE_COMMENT, self.client.save_comment, form)

    async def handle_distinguish_comment(self, form: forms.DistinguishComment) -> ViewState:
        return await self._mutate(
            MutationKind.DISTINGUISH_COMMENT, self.client.distinguish_comment, form
        )

    async def handle_comment_report(self, form: forms.CreateCommentReport) -> ViewState:
        return await self._mutate(
            MutationKind.REPORT_COMMENT, self.client.create_comment_report, form
        )

    async def handle_purge_comment(self, form: forms.PurgeComment) -> ViewState:
        return await self._mutate(MutationKind.PURGE_COMMENT, self.client.purge_comment, form)

    async def handle_comment_reply_read(self, form: forms.MarkCommentReplyAsRead) -> ViewState:
        return await self._mutate(
            MutationKind.MARK_COMMENT_REPLY_READ, self.client.mark_comment_reply_as_read, form
        )

    async def handle_person_mention_read(self, form: forms.MarkPersonMentionAsRead) -> ViewState:
        return await self._mutate(
            MutationKind.MARK_PERSON_MENTION_READ, self.client.mark_person_mention_as_read, form
        )
