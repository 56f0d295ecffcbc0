"""Pydantic schemas for payloads returned by the Lemmy API.

These act as contracts at the API boundary so a response that changes
shape fails fast as an ``ApiError`` instead of leaking half-parsed dicts
into the view state. Unknown fields are ignored; only what the community
page reads is declared.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .sorts import SortType, ListingType, SubscribedType


# ---------------------------------------------------------------------------
# Core records
# ---------------------------------------------------------------------------


class Person(BaseModel):
    id: int
    name: str
    display_name: Optional[str] = None
    avatar: Optional[str] = None
    banned: bool = False
    local: bool = True
    actor_id: str = ""
    admin: bool = False
    bot_account: bool = False


class Community(BaseModel):
    id: int
    name: str
    title: str
    description: Optional[str] = None
    icon: Optional[str] = None
    banner: Optional[str] = None
    removed: bool = False
    deleted: bool = False
    nsfw: bool = False
    local: bool = True
    hidden: bool = False
    posting_restricted_to_mods: bool = False
    actor_id: str = ""


class Post(BaseModel):
    id: int
    name: str
    creator_id: int
    community_id: int
    url: Optional[str] = None
    body: Optional[str] = None
    removed: bool = False
    locked: bool = False
    deleted: bool = False
    nsfw: bool = False
    featured_community: bool = False
    featured_local: bool = False
    language_id: int = 0
    published: Optional[datetime] = None
    updated: Optional[datetime] = None
    ap_id: str = ""
    local: bool = True


class Comment(BaseModel):
    id: int
    creator_id: int
    post_id: int
    content: str
    removed: bool = False
    deleted: bool = False
    distinguished: bool = False
    language_id: int = 0
    path: str = "0"
    published: Optional[datetime] = None
    updated: Optional[datetime] = None
    ap_id: str = ""
    local: bool = True


class Language(BaseModel):
    id: int
    code: str
    name: str


class Site(BaseModel):
    id: int
    name: str
    actor_id: str = ""
    description: Optional[str] = None
    icon: Optional[str] = None


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


class CommunityAggregates(BaseModel):
    subscribers: int = 0
    posts: int = 0
    comments: int = 0
    users_active_day: int = 0
    users_active_week: int = 0
    users_active_month: int = 0


class PostAggregates(BaseModel):
    comments: int = 0
    score: int = 0
    upvotes: int = 0
    downvotes: int = 0


class CommentAggregates(BaseModel):
    score: int = 0
    upvotes: int = 0
    downvotes: int = 0
    child_count: int = 0


class PersonAggregates(BaseModel):
    post_count: int = 0
    comment_count: int = 0


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------


class CommunityView(BaseModel):
    community: Community
    subscribed: SubscribedType = SubscribedType.NOT_SUBSCRIBED
    blocked: bool = False
    counts: CommunityAggregates = Field(default_factory=CommunityAggregates)


class CommunityModeratorView(BaseModel):
    community: Community
    moderator: Person


class PersonView(BaseModel):
    person: Person
    counts: PersonAggregates = Field(default_factory=PersonAggregates)


class PostView(BaseModel):
    post: Post
    creator: Person
    community: Community
    counts: PostAggregates = Field(default_factory=PostAggregates)
    creator_banned_from_community: bool = False
    subscribed: SubscribedType = SubscribedType.NOT_SUBSCRIBED
    saved: bool = False
    read: bool = False
    creator_blocked: bool = False
    my_vote: Optional[int] = None
    unread_comments: int = 0


class CommentView(BaseModel):
    comment: Comment
    creator: Person
    post: Post
    community: Community
    counts: CommentAggregates = Field(default_factory=CommentAggregates)
    creator_banned_from_community: bool = False
    subscribed: SubscribedType = SubscribedType.NOT_SUBSCRIBED
    saved: bool = False
    creator_blocked: bool = False
    my_vote: Optional[int] = None
    # Inbox read state when the comment reached the viewer as a reply or mention.
    read: bool = False


class CommentReply(BaseModel):
    id: int
    recipient_id: int
    comment_id: int
    read: bool = False


class CommentReplyView(BaseModel):
    comment_reply: CommentReply
    comment: Comment
    creator: Person
    post: Post
    community: Community
    recipient: Person


class PersonMention(BaseModel):
    id: int
    recipient_id: int
    comment_id: int
    read: bool = False


class PersonMentionView(BaseModel):
    person_mention: PersonMention
    comment: Comment
    creator: Person
    post: Post
    community: Community
    recipient: Person


class PostReport(BaseModel):
    id: int
    creator_id: int
    post_id: int
    reason: str
    resolved: bool = False


class PostReportView(BaseModel):
    post_report: PostReport
    post: Post
    community: Community
    creator: Person
    post_creator: Person


class CommentReport(BaseModel):
    id: int
    creator_id: int
    comment_id: int
    reason: str
    resolved: bool = False


class CommentReportView(BaseModel):
    comment_report: CommentReport
    comment: Comment
    post: Post
    community: Community
    creator: Person
    comment_creator: Person


class SiteView(BaseModel):
    site: Site


class LocalUser(BaseModel):
    id: int
    person_id: int
    default_sort_type: Optional[SortType] = None
    default_listing_type: Optional[ListingType] = None
    show_nsfw: bool = False


class LocalUserView(BaseModel):
    local_user: LocalUser
    person: Person


class CommunityFollowerView(BaseModel):
    community: Community
    follower: Person


class CommunityBlockView(BaseModel):
    person: Person
    community: Community


class PersonBlockView(BaseModel):
    person: Person
    target: Person


class MyUserInfo(BaseModel):
    local_user_view: LocalUserView
    follows: List[CommunityFollowerView] = Field(default_factory=list)
    moderates: List[CommunityModeratorView] = Field(default_factory=list)
    community_blocks: List[CommunityBlockView] = Field(default_factory=list)
    person_blocks: List[PersonBlockView] = Field(default_factory=list)
    discussion_languages: List[int] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class GetSiteResponse(BaseModel):
    site_view: SiteView
    admins: List[PersonView] = Field(default_factory=list)
    my_user: Optional[MyUserInfo] = None
    all_languages: List[Language] = Field(default_factory=list)
    discussion_languages: List[int] = Field(default_factory=list)
    version: str = ""


class GetCommunityResponse(BaseModel):
    community_view: CommunityView
    site: Optional[Site] = None
    moderators: List[CommunityModeratorView] = Field(default_factory=list)
    online: int = 0
    discussion_languages: List[int] = Field(default_factory=list)


class CommunityResponse(BaseModel):
    community_view: CommunityView
    discussion_languages: List[int] = Field(default_factory=list)


class AddModToCommunityResponse(BaseModel):
    moderators: List[CommunityModeratorView]


class BlockCommunityResponse(BaseModel):
    community_view: CommunityView
    blocked: bool


class BanFromCommunityResponse(BaseModel):
    person_view: PersonView
    banned: bool


class BanPersonResponse(BaseModel):
    person_view: PersonView
    banned: bool


class BlockPersonResponse(BaseModel):
    person_view: PersonView
    blocked: bool


class AddAdminResponse(BaseModel):
    admins: List[PersonView]


class PurgeItemResponse(BaseModel):
    success: bool


class GetPostsResponse(BaseModel):
    posts: List[PostView]


class PostResponse(BaseModel):
    post_view: PostView


class PostReportResponse(BaseModel):
    post_report_view: PostReportView


class GetCommentsResponse(BaseModel):
    comments: List[CommentView]


class CommentResponse(BaseModel):
    comment_view: CommentView
    recipient_ids: List[int] = Field(default_factory=list)
    form_id: Optional[str] = None


class CommentReportResponse(BaseModel):
    comment_report_view: CommentReportView


class CommentReplyResponse(BaseModel):
    comment_reply_view: CommentReplyView


class PersonMentionResponse(BaseModel):
    person_mention_view: PersonMentionView
