"""Mutation reconciliation.

When the server confirms a mutation, its response is folded into the held
``ViewState`` instead of refetching the page. Each mutation kind maps to a
pure rule ``(state, response) -> state``. Rules only run on ``Success``
responses and only patch slots that are themselves ``Success``.

Lists are never reordered: an entity is replaced in place by the server's
copy (which carries recomputed scores and counts), comment creation
prepends, and every entity a rule does not touch is carried over as-is.
Anything that is not a state patch (navigation, toasts, session updates)
is described by ``effects_for`` and carried out by the page.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Tuple, TypeVar, Union

from feedsync.models.schemas import (
    AddAdminResponse,
    AddModToCommunityResponse,
    BanFromCommunityResponse,
    BanPersonResponse,
    BlockCommunityResponse,
    BlockPersonResponse,
    CommentReplyResponse,
    CommentResponse,
    CommentView,
    CommunityResponse,
    CommunityView,
    GetCommunityResponse,
    PersonMentionResponse,
    PostResponse,
    PostView,
)
from feedsync.request_state import Failure, RequestState, Success

from .state import ViewState

E = TypeVar("E")


class MutationKind(Enum):
    # Community
    EDIT_COMMUNITY = "edit_community"
    DELETE_COMMUNITY = "delete_community"
    REMOVE_COMMUNITY = "remove_community"
    FOLLOW_COMMUNITY = "follow_community"
    BLOCK_COMMUNITY = "block_community"
    TRANSFER_COMMUNITY = "transfer_community"
    ADD_MOD_TO_COMMUNITY = "add_mod_to_community"
    PURGE_COMMUNITY = "purge_community"
    # Person
    BAN_FROM_COMMUNITY = "ban_from_community"
    BAN_PERSON = "ban_person"
    BLOCK_PERSON = "block_person"
    PURGE_PERSON = "purge_person"
    ADD_ADMIN = "add_admin"
    # Post
    CREATE_POST = "create_post"
    EDIT_POST = "edit_post"
    VOTE_POST = "vote_post"
    DELETE_POST = "delete_post"
    REMOVE_POST = "remove_post"
    SAVE_POST = "save_post"
    LOCK_POST = "lock_post"
    FEATURE_POST = "feature_post"
    REPORT_POST = "report_post"
    PURGE_POST = "purge_post"
    # Comment
    CREATE_COMMENT = "create_comment"
    EDIT_COMMENT = "edit_comment"
    VOTE_COMMENT = "vote_comment"
    DELETE_COMMENT = "delete_comment"
    REMOVE_COMMENT = "remove_comment"
    SAVE_COMMENT = "save_comment"
    DISTINGUISH_COMMENT = "distinguish_comment"
    REPORT_COMMENT = "report_comment"
    PURGE_COMMENT = "purge_comment"
    MARK_COMMENT_REPLY_READ = "mark_comment_reply_read"
    MARK_PERSON_MENTION_READ = "mark_person_mention_read"


# =============================================================================
# Slot helpers
# =============================================================================


def _replace_where(items: List[E], match: Callable[[E], bool], patch: Callable[[E], E]) -> List[E]:
    """Patch matching items in place; returns ``items`` itself when nothing matched."""
    changed = False
    result = []
    for item in items:
        if match(item):
            result.append(patch(item))
            changed = True
        else:
            result.append(item)
    return result if changed else items


def _patch_posts(state: ViewState, edit: Callable[[List[PostView]], List[PostView]]) -> ViewState:
    if not isinstance(state.posts_res, Success):
        return state
    data = state.posts_res.data
    posts = edit(data.posts)
    if posts is data.posts:
        return state
    return replace(state, posts_res=Success(data.model_copy(update={"posts": posts})))


def _patch_comments(
    state: ViewState, edit: Callable[[List[CommentView]], List[CommentView]]
) -> ViewState:
    if not isinstance(state.comments_res, Success):
        return state
    data = state.comments_res.data
    comments = edit(data.comments)
    if comments is data.comments:
        return state
    return replace(state, comments_res=Success(data.model_copy(update={"comments": comments})))


def _patch_community(state: ViewState, update: Dict[str, Any]) -> ViewState:
    if not isinstance(state.community_res, Success):
        return state
    data = state.community_res.data
    return replace(state, community_res=Success(data.model_copy(update=update)))


# =============================================================================
# Rules
# =============================================================================


def update_community(state: ViewState, res: CommunityResponse) -> ViewState:
    return _patch_community(
        state,
        {
            "community_view": res.community_view,
            "discussion_languages": res.discussion_languages,
        },
    )


def update_community_full(state: ViewState, res: GetCommunityResponse) -> ViewState:
    return _patch_community(
        state, {"community_view": res.community_view, "moderators": res.moderators}
    )


def update_moderators(state: ViewState, res: AddModToCommunityResponse) -> ViewState:
    return _patch_community(state, {"moderators": res.moderators})


def update_admins(state: ViewState, res: AddAdminResponse) -> ViewState:
    if state.site_res is None:
        return state
    return replace(state, site_res=state.site_res.model_copy(update={"admins": res.admins}))


def find_and_update_post(state: ViewState, res: PostResponse) -> ViewState:
    post_view = res.post_view
    return _patch_posts(
        state,
        lambda posts: _replace_where(
            posts, lambda p: p.post.id == post_view.post.id, lambda _: post_view
        ),
    )


def create_comment(state: ViewState, res: CommentResponse) -> ViewState:
    return _patch_comments(state, lambda comments: [res.comment_view] + comments)


def find_and_update_comment(state: ViewState, res: CommentResponse) -> ViewState:
    comment_view = res.comment_view
    return _patch_comments(
        state,
        lambda comments: _replace_where(
            comments, lambda c: c.comment.id == comment_view.comment.id, lambda _: comment_view
        ),
    )


def _mark_comment_read(state: ViewState, comment_id: int, read: bool) -> ViewState:
    return _patch_comments(
        state,
        lambda comments: _replace_where(
            comments,
            lambda c: c.comment.id == comment_id,
            lambda c: c.model_copy(update={"read": read}),
        ),
    )


def mark_comment_reply_read(state: ViewState, res: CommentReplyResponse) -> ViewState:
    view = res.comment_reply_view
    return _mark_comment_read(state, view.comment.id, view.comment_reply.read)


def mark_person_mention_read(state: ViewState, res: PersonMentionResponse) -> ViewState:
    view = res.person_mention_view
    return _mark_comment_read(state, view.comment.id, view.person_mention.read)


def _fan_out(state: ViewState, person_id: int, patch: Callable[[Any], Any]) -> ViewState:
    """Patch every post and comment written by ``person_id``, in both listings."""
    state = _patch_posts(
        state, lambda posts: _replace_where(posts, lambda p: p.creator.id == person_id, patch)
    )
    return _patch_comments(
        state,
        lambda comments: _replace_where(comments, lambda c: c.creator.id == person_id, patch),
    )


def update_ban_from_community(state: ViewState, res: BanFromCommunityResponse) -> ViewState:
    return _fan_out(
        state,
        res.person_view.person.id,
        lambda item: item.model_copy(update={"creator_banned_from_community": res.banned}),
    )


def update_ban(state: ViewState, res: BanPersonResponse) -> ViewState:
    return _fan_out(
        state,
        res.person_view.person.id,
        lambda item: item.model_copy(
            update={"creator": item.creator.model_copy(update={"banned": res.banned})}
        ),
    )


def no_patch(state: ViewState, res: Any) -> ViewState:
    return state


Rule = Callable[[ViewState, Any], ViewState]

RULES: Dict[MutationKind, Rule] = {
    MutationKind.EDIT_COMMUNITY: update_community,
    MutationKind.DELETE_COMMUNITY: update_community,
    MutationKind.REMOVE_COMMUNITY: update_community,
    MutationKind.FOLLOW_COMMUNITY: update_community,
    MutationKind.BLOCK_COMMUNITY: no_patch,
    MutationKind.TRANSFER_COMMUNITY: update_community_full,
    MutationKind.ADD_MOD_TO_COMMUNITY: update_moderators,
    MutationKind.PURGE_COMMUNITY: no_patch,
    MutationKind.BAN_FROM_COMMUNITY: update_ban_from_community,
    MutationKind.BAN_PERSON: update_ban,
    MutationKind.BLOCK_PERSON: no_patch,
    MutationKind.PURGE_PERSON: no_patch,
    MutationKind.ADD_ADMIN: update_admins,
    MutationKind.CREATE_POST: find_and_update_post,
    MutationKind.EDIT_POST: find_and_update_post,
    MutationKind.VOTE_POST: find_and_update_post,
    MutationKind.DELETE_POST: find_and_update_post,
    MutationKind.REMOVE_POST: find_and_update_post,
    MutationKind.SAVE_POST: find_and_update_post,
    MutationKind.LOCK_POST: find_and_update_post,
    MutationKind.FEATURE_POST: find_and_update_post,
    MutationKind.REPORT_POST: no_patch,
    MutationKind.PURGE_POST: no_patch,
    MutationKind.CREATE_COMMENT: create_comment,
    MutationKind.EDIT_COMMENT: find_and_update_comment,
    MutationKind.VOTE_COMMENT: find_and_update_comment,
    MutationKind.DELETE_COMMENT: find_and_update_comment,
    MutationKind.REMOVE_COMMENT: find_and_update_comment,
    MutationKind.SAVE_COMMENT: find_and_update_comment,
    MutationKind.DISTINGUISH_COMMENT: find_and_update_comment,
    MutationKind.REPORT_COMMENT: no_patch,
    MutationKind.PURGE_COMMENT: no_patch,
    MutationKind.MARK_COMMENT_REPLY_READ: mark_comment_reply_read,
    MutationKind.MARK_PERSON_MENTION_READ: mark_person_mention_read,
}


def reduce(state: ViewState, kind: MutationKind, result: RequestState) -> ViewState:
    """Fold a mutation result into ``state``; non-success results change nothing."""
    if not isinstance(result, Success):
        return state
    return RULES[kind](state, result.data)


# =============================================================================
# Effects
# =============================================================================


@dataclass(frozen=True)
class Navigate:
    path: str


@dataclass(frozen=True)
class Notify:
    message: str
    level: str = "success"


@dataclass(frozen=True)
class RecordCommunityBlock:
    response: BlockCommunityResponse


@dataclass(frozen=True)
class RecordPersonBlock:
    response: BlockPersonResponse


@dataclass(frozen=True)
class SyncFollow:
    community_view: CommunityView


Effect = Union[Navigate, Notify, RecordCommunityBlock, RecordPersonBlock, SyncFollow]

# Purging what the page is showing leaves nothing to show.
NAVIGATING_PURGES = (
    MutationKind.PURGE_COMMUNITY,
    MutationKind.PURGE_POST,
    MutationKind.PURGE_COMMENT,
)


def effects_for(kind: MutationKind, result: RequestState) -> Tuple[Effect, ...]:
    """Side effects the page should carry out for a mutation result."""
    if isinstance(result, Failure):
        return (Notify(result.error.error, "danger"),)
    if not isinstance(result, Success):
        return ()

    data = result.data
    if kind in NAVIGATING_PURGES:
        return (Notify("purge_success"), Navigate("/")) if data.success else ()
    if kind == MutationKind.PURGE_PERSON:
        return (Notify("purge_success"),) if data.success else ()
    if kind in (MutationKind.REPORT_POST, MutationKind.REPORT_COMMENT):
        return (Notify("report_created"),)
    if kind == MutationKind.TRANSFER_COMMUNITY:
        return (Notify("transfer_community"),)
    if kind == MutationKind.FOLLOW_COMMUNITY:
        return (SyncFollow(data.community_view),)
    if kind == MutationKind.BLOCK_COMMUNITY:
        return (RecordCommunityBlock(data), Notify("blocked" if data.blocked else "unblocked"))
    if kind == MutationKind.BLOCK_PERSON:
        return (RecordPersonBlock(data), Notify("blocked" if data.blocked else "unblocked"))
    return ()
