"""Wire schemas, request forms and listing vocabularies."""
from .sorts import (
    CommentSortType,
    DataType,
    ListingType,
    PostFeatureType,
    SortType,
    SubscribedType,
    post_to_comment_sort,
)
from .schemas import (
    CommentView,
    CommunityView,
    GetCommentsResponse,
    GetCommunityResponse,
    GetPostsResponse,
    GetSiteResponse,
    MyUserInfo,
    PostView,
)

__all__ = [
    "CommentSortType",
    "DataType",
    "ListingType",
    "PostFeatureType",
    "SortType",
    "SubscribedType",
    "post_to_comment_sort",
    "CommentView",
    "CommunityView",
    "GetCommentsResponse",
    "GetCommunityResponse",
    "GetPostsResponse",
    "GetSiteResponse",
    "MyUserInfo",
    "PostView",
]
