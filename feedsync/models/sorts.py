"""Listing vocabularies shared by the codec, the forms and the API client."""
from enum import Enum


class DataType(str, Enum):
    """Which listing a community view shows."""

    POST = "Post"
    COMMENT = "Comment"


class SortType(str, Enum):
    ACTIVE = "Active"
    HOT = "Hot"
    NEW = "New"
    OLD = "Old"
    TOP_DAY = "TopDay"
    TOP_WEEK = "TopWeek"
    TOP_MONTH = "TopMonth"
    TOP_YEAR = "TopYear"
    TOP_ALL = "TopAll"
    MOST_COMMENTS = "MostComments"
    NEW_COMMENTS = "NewComments"
    TOP_HOUR = "TopHour"
    TOP_SIX_HOUR = "TopSixHour"
    TOP_TWELVE_HOUR = "TopTwelveHour"
    TOP_THREE_MONTHS = "TopThreeMonths"
    TOP_SIX_MONTHS = "TopSixMonths"
    TOP_NINE_MONTHS = "TopNineMonths"


class CommentSortType(str, Enum):
    HOT = "Hot"
    TOP = "Top"
    NEW = "New"
    OLD = "Old"


class ListingType(str, Enum):
    ALL = "All"
    LOCAL = "Local"
    SUBSCRIBED = "Subscribed"


class SubscribedType(str, Enum):
    SUBSCRIBED = "Subscribed"
    NOT_SUBSCRIBED = "NotSubscribed"
    PENDING = "Pending"


class PostFeatureType(str, Enum):
    LOCAL = "Local"
    COMMUNITY = "Community"


def post_to_comment_sort(sort: SortType) -> CommentSortType:
    """Map a post sort onto the closest comment sort."""
    if sort in (SortType.ACTIVE, SortType.HOT):
        return CommentSortType.HOT
    if sort in (SortType.NEW, SortType.NEW_COMMENTS):
        return CommentSortType.NEW
    if sort == SortType.OLD:
        return CommentSortType.OLD
    return CommentSortType.TOP
