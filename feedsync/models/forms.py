"""Request records sent to the Lemmy API.

Every form carries an optional ``auth`` token; the community page fills it
in from the current session when a caller leaves it empty.
"""
from typing import List, Optional

from pydantic import BaseModel

from .sorts import CommentSortType, ListingType, PostFeatureType, SortType


class Form(BaseModel):
    auth: Optional[str] = None


# Reads

class GetSite(Form):
    pass


class GetCommunity(Form):
    name: Optional[str] = None
    id: Optional[int] = None


class GetPosts(Form):
    community_name: Optional[str] = None
    page: int = 1
    limit: Optional[int] = None
    sort: Optional[SortType] = None
    type_: ListingType = ListingType.ALL
    saved_only: bool = False


class GetComments(Form):
    community_name: Optional[str] = None
    page: int = 1
    limit: Optional[int] = None
    sort: Optional[CommentSortType] = None
    type_: ListingType = ListingType.ALL
    saved_only: bool = False


# Community

class EditCommunity(Form):
    community_id: int
    title: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    banner: Optional[str] = None
    nsfw: Optional[bool] = None
    posting_restricted_to_mods: Optional[bool] = None
    discussion_languages: Optional[List[int]] = None


class DeleteCommunity(Form):
    community_id: int
    deleted: bool


class RemoveCommunity(Form):
    community_id: int
    removed: bool
    reason: Optional[str] = None
    expires: Optional[int] = None


class FollowCommunity(Form):
    community_id: int
    follow: bool


class BlockCommunity(Form):
    community_id: int
    block: bool


class AddModToCommunity(Form):
    community_id: int
    person_id: int
    added: bool


class TransferCommunity(Form):
    community_id: int
    person_id: int


class BanFromCommunity(Form):
    community_id: int
    person_id: int
    ban: bool
    remove_data: Optional[bool] = None
    reason: Optional[str] = None
    expires: Optional[int] = None


# Person / admin

class BanPerson(Form):
    person_id: int
    ban: bool
    remove_data: Optional[bool] = None
    reason: Optional[str] = None
    expires: Optional[int] = None


class BlockPerson(Form):
    person_id: int
    block: bool


class AddAdmin(Form):
    person_id: int
    added: bool


class PurgePerson(Form):
    person_id: int
    reason: Optional[str] = None


class PurgeCommunity(Form):
    community_id: int
    reason: Optional[str] = None


class PurgePost(Form):
    post_id: int
    reason: Optional[str] = None


class PurgeComment(Form):
    comment_id: int
    reason: Optional[str] = None


# Posts

class CreatePost(Form):
    name: str
    community_id: int
    url: Optional[str] = None
    body: Optional[str] = None
    nsfw: Optional[bool] = None
    language_id: Optional[int] = None


class EditPost(Form):
    post_id: int
    name: Optional[str] = None
    url: Optional[str] = None
    body: Optional[str] = None
    nsfw: Optional[bool] = None
    language_id: Optional[int] = None


class CreatePostLike(Form):
    post_id: int
    score: int


class DeletePost(Form):
    post_id: int
    deleted: bool


class RemovePost(Form):
    post_id: int
    removed: bool
    reason: Optional[str] = None


class SavePost(Form):
    post_id: int
    save: bool


class LockPost(Form):
    post_id: int
    locked: bool


class FeaturePost(Form):
    post_id: int
    featured: bool
    feature_type: PostFeatureType = PostFeatureType.COMMUNITY


class CreatePostReport(Form):
    post_id: int
    reason: str


# Comments

class CreateComment(Form):
    content: str
    post_id: int
    parent_id: Optional[int] = None
    language_id: Optional[int] = None
    form_id: Optional[str] = None


class EditComment(Form):
    comment_id: int
    content: Optional[str] = None
    language_id: Optional[int] = None
    form_id: Optional[str] = None


class CreateCommentLike(Form):
    comment_id: int
    score: int


class DeleteComment(Form):
    comment_id: int
    deleted: bool


class RemoveComment(Form):
    comment_id: int
    removed: bool
    reason: Optional[str] = None


class SaveComment(Form):
    comment_id: int
    save: bool


class DistinguishComment(Form):
    comment_id: int
    distinguished: bool


class CreateCommentReport(Form):
    comment_id: int
    reason: str


class MarkCommentReplyAsRead(Form):
    comment_reply_id: int
    read: bool


class MarkPersonMentionAsRead(Form):
    person_mention_id: int
    read: bool
