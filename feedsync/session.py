"""Current-user snapshot and the blocked-entities registry.

Sign-in and token storage live elsewhere; whoever owns them hands a
``UserSession`` to the codec and the community page. Blocks are recorded
through a ``BlockRegistry`` so that other views can consult them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Set

from .models.schemas import (
    BlockCommunityResponse,
    BlockPersonResponse,
    CommunityBlockView,
    CommunityFollowerView,
    CommunityView,
    MyUserInfo,
    PersonBlockView,
)
from .models.sorts import SortType, SubscribedType
from .utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class UserSession:
    """Auth token and user info of whoever is signed in (both None for guests)."""

    auth: Optional[str] = None
    my_user: Optional[MyUserInfo] = None

    @property
    def default_sort_type(self) -> Optional[SortType]:
        if self.my_user is None:
            return None
        return self.my_user.local_user_view.local_user.default_sort_type

    def sync_follow(self, community_view: CommunityView) -> None:
        """Keep the followed-communities list in line with a follow response."""
        if self.my_user is None:
            return
        community = community_view.community
        follows = [f for f in self.my_user.follows if f.community.id != community.id]
        if community_view.subscribed != SubscribedType.NOT_SUBSCRIBED:
            follows.append(
                CommunityFollowerView(
                    community=community,
                    follower=self.my_user.local_user_view.person,
                )
            )
        self.my_user = self.my_user.model_copy(update={"follows": follows})


class BlockRegistry(Protocol):
    """Process-wide record of blocked communities and people."""

    def update_community_block(self, res: BlockCommunityResponse) -> None: ...

    def update_person_block(self, res: BlockPersonResponse) -> None: ...


class SessionBlockRegistry:
    """Stores blocks on the session's ``MyUserInfo`` block lists."""

    def __init__(self, session: UserSession):
        self.session = session

    @property
    def blocked_community_ids(self) -> Set[int]:
        if self.session.my_user is None:
            return set()
        return {b.community.id for b in self.session.my_user.community_blocks}

    @property
    def blocked_person_ids(self) -> Set[int]:
        if self.session.my_user is None:
            return set()
        return {b.target.id for b in self.session.my_user.person_blocks}

    def update_community_block(self, res: BlockCommunityResponse) -> None:
        mui = self.session.my_user
        if mui is None:
            return
        community = res.community_view.community
        blocks = [b for b in mui.community_blocks if b.community.id != community.id]
        if res.blocked:
            blocks.append(
                CommunityBlockView(person=mui.local_user_view.person, community=community)
            )
        logger.info("%s community %s", "Blocked" if res.blocked else "Unblocked", community.name)
        self.session.my_user = mui.model_copy(update={"community_blocks": blocks})

    def update_person_block(self, res: BlockPersonResponse) -> None:
        mui = self.session.my_user
        if mui is None:
            return
        target = res.person_view.person
        blocks = [b for b in mui.person_blocks if b.target.id != target.id]
        if res.blocked:
            blocks.append(PersonBlockView(person=mui.local_user_view.person, target=target))
        logger.info("%s person %s", "Blocked" if res.blocked else "Unblocked", target.name)
        self.session.my_user = mui.model_copy(update={"person_blocks": blocks})
