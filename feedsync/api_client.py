"""Lemmy API Client - typed async calls against the v3 HTTP API.

Each method takes a request form from ``feedsync.models.forms`` and returns
the matching response schema. Every failure (HTTP error status, transport
error, malformed body) is raised as ``ApiError`` so callers only ever have
one exception type to wrap.
"""
from typing import Optional, Type, TypeVar

import httpx
from pydantic import BaseModel

from .config import Settings, get_settings
from .errors import ApiError
from .models import forms
from .models import schemas
from .utils.logger import get_logger

logger = get_logger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class LemmyHttpClient:
    """
    Client for the Lemmy v3 API.

    Provides one coroutine per remote call used by the community page:
    - Site, community, post and comment listings
    - Community moderation (edit, delete, remove, follow, block, mods)
    - Person moderation (ban, block, purge, admins)
    - Post and comment actions (create, edit, vote, save, report, ...)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http: Optional[httpx.AsyncClient] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: API root, e.g. ``https://lemmy.example/api/v3``
                (defaults to ``LEMMY_API_URL``)
            http: Preconfigured ``httpx.AsyncClient`` (auto-created if not provided)
            settings: Settings instance (loaded from the environment if omitted)
        """
        settings = settings or get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self._http = http or httpx.AsyncClient(
            timeout=settings.request_timeout,
            headers={"User-Agent": settings.user_agent},
        )

    async def __aenter__(self) -> "LemmyHttpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @staticmethod
    def _error_key(response: httpx.Response) -> str:
        """Pull Lemmy's ``{"error": ...}`` key out of a failed response."""
        try:
            body = response.json()
        except ValueError:
            return f"http_{response.status_code}"
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return f"http_{response.status_code}"

    async def _request(
        self,
        method: str,
        endpoint: str,
        form: forms.Form,
        response_model: Type[ResponseT],
    ) -> ResponseT:
        """
        Make an API request and validate the response.

        Args:
            method: HTTP method (GET, POST, PUT)
            endpoint: API endpoint path
            form: Request record; GET sends it as query params, others as JSON
            response_model: Schema the response body must satisfy

        Returns:
            Parsed response schema
        """
        url = f"{self.base_url}{endpoint}"
        payload = form.model_dump(mode="json", exclude_none=True)
        logger.debug("%s %s", method, endpoint)

        try:
            if method == "GET":
                response = await self._http.request(method, url, params=payload)
            else:
                response = await self._http.request(method, url, json=payload)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, endpoint, exc)
            raise ApiError("network_error") from exc

        if response.status_code >= 400:
            error = self._error_key(response)
            logger.warning("%s %s -> %s (%s)", method, endpoint, response.status_code, error)
            raise ApiError(error, response.status_code)

        try:
            return response_model.model_validate(response.json())
        except ValueError as exc:
            logger.warning("%s %s returned an unexpected body: %s", method, endpoint, exc)
            raise ApiError("invalid_response", response.status_code) from exc

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_site(self, form: forms.GetSite) -> schemas.GetSiteResponse:
        return await self._request("GET", "/site", form, schemas.GetSiteResponse)

    async def get_community(self, form: forms.GetCommunity) -> schemas.GetCommunityResponse:
        return await self._request("GET", "/community", form, schemas.GetCommunityResponse)

    async def get_posts(self, form: forms.GetPosts) -> schemas.GetPostsResponse:
        return await self._request("GET", "/post/list", form, schemas.GetPostsResponse)

    async def get_comments(self, form: forms.GetComments) -> schemas.GetCommentsResponse:
        return await self._request("GET", "/comment/list", form, schemas.GetCommentsResponse)

    # ------------------------------------------------------------------
    # Community
    # ------------------------------------------------------------------

    async def edit_community(self, form: forms.EditCommunity) -> schemas.CommunityResponse:
        return await self._request("PUT", "/community", form, schemas.CommunityResponse)

    async def delete_community(self, form: forms.DeleteCommunity) -> schemas.CommunityResponse:
        return await self._request("POST", "/community/delete", form, schemas.CommunityResponse)

    async def remove_community(self, form: forms.RemoveCommunity) -> schemas.CommunityResponse:
        return await self._request("POST", "/community/remove", form, schemas.CommunityResponse)

    async def follow_community(self, form: forms.FollowCommunity) -> schemas.CommunityResponse:
        return await self._request("POST", "/community/follow", form, schemas.CommunityResponse)

    async def block_community(self, form: forms.BlockCommunity) -> schemas.BlockCommunityResponse:
        return await self._request("POST", "/community/block", form, schemas.BlockCommunityResponse)

    async def add_mod_to_community(
        self, form: forms.AddModToCommunity
    ) -> schemas.AddModToCommunityResponse:
        return await self._request("POST", "/community/mod", form, schemas.AddModToCommunityResponse)

    async def transfer_community(self, form: forms.TransferCommunity) -> schemas.GetCommunityResponse:
        return await self._request("POST", "/community/transfer", form, schemas.GetCommunityResponse)

    async def ban_from_community(
        self, form: forms.BanFromCommunity
    ) -> schemas.BanFromCommunityResponse:
        return await self._request(
            "POST", "/community/ban_user", form, schemas.BanFromCommunityResponse
        )

    # ------------------------------------------------------------------
    # Person / admin
    # ------------------------------------------------------------------

    async def ban_person(self, form: forms.BanPerson) -> schemas.BanPersonResponse:
        return await self._request("POST", "/user/ban", form, schemas.BanPersonResponse)

    async def block_person(self, form: forms.BlockPerson) -> schemas.BlockPersonResponse:
        return await self._request("POST", "/user/block", form, schemas.BlockPersonResponse)

    async def mark_person_mention_as_read(
        self, form: forms.MarkPersonMentionAsRead
    ) -> schemas.PersonMentionResponse:
        return await self._request(
            "POST", "/user/mention/mark_as_read", form, schemas.PersonMentionResponse
        )

    async def add_admin(self, form: forms.AddAdmin) -> schemas.AddAdminResponse:
        return await self._request("POST", "/admin/add", form, schemas.AddAdminResponse)

    async def purge_person(self, form: forms.PurgePerson) -> schemas.PurgeItemResponse:
        return await self._request("POST", "/admin/purge/person", form, schemas.PurgeItemResponse)

    async def purge_community(self, form: forms.PurgeCommunity) -> schemas.PurgeItemResponse:
        return await self._request("POST", "/admin/purge/community", form, schemas.PurgeItemResponse)

    async def purge_post(self, form: forms.PurgePost) -> schemas.PurgeItemResponse:
        return await self._request("POST", "/admin/purge/post", form, schemas.PurgeItemResponse)

    async def purge_comment(self, form: forms.PurgeComment) -> schemas.PurgeItemResponse:
        return await self._request("POST", "/admin/purge/comment", form, schemas.PurgeItemResponse)

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------

    async def create_post(self, form: forms.CreatePost) -> schemas.PostResponse:
        return await self._request("POST", "/post", form, schemas.PostResponse)

    async def edit_post(self, form: forms.EditPost) -> schemas.PostResponse:
        return await self._request("PUT", "/post", form, schemas.PostResponse)

    async def like_post(self, form: forms.CreatePostLike) -> schemas.PostResponse:
        return await self._request("POST", "/post/like", form, schemas.PostResponse)

    async def delete_post(self, form: forms.DeletePost) -> schemas.PostResponse:
        return await self._request("POST", "/post/delete", form, schemas.PostResponse)

    async def remove_post(self, form: forms.RemovePost) -> schemas.PostResponse:
        return await self._request("POST", "/post/remove", form, schemas.PostResponse)

    async def save_post(self, form: forms.SavePost) -> schemas.PostResponse:
        return await self._request("PUT", "/post/save", form, schemas.PostResponse)

    async def lock_post(self, form: forms.LockPost) -> schemas.PostResponse:
        return await self._request("POST", "/post/lock", form, schemas.PostResponse)

    async def feature_post(self, form: forms.FeaturePost) -> schemas.PostResponse:
        return await self._request("POST", "/post/feature", form, schemas.PostResponse)

    async def create_post_report(self, form: forms.CreatePostReport) -> schemas.PostReportResponse:
        return await self._request("POST", "/post/report", form, schemas.PostReportResponse)

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    async def create_comment(self, form: forms.CreateComment) -> schemas.CommentResponse:
        return await self._request("POST", "/comment", form, schemas.CommentResponse)

    async def edit_comment(self, form: forms.EditComment) -> schemas.CommentResponse:
        return await self._request("PUT", "/comment", form, schemas.CommentResponse)

    async def like_comment(self, form: forms.CreateCommentLike) -> schemas.CommentResponse:
        return await self._request("POST", "/comment/like", form, schemas.CommentResponse)

    async def delete_comment(self, form: forms.DeleteComment) -> schemas.CommentResponse:
        return await self._request("POST", "/comment/delete", form, schemas.CommentResponse)

    async def remove_comment(self, form: forms.RemoveComment) -> schemas.CommentResponse:
        return await self._request("POST", "/comment/remove", form, schemas.CommentResponse)

    async def save_comment(self, form: forms.SaveComment) -> schemas.CommentResponse:
        return await self._request("PUT", "/comment/save", form, schemas.CommentResponse)

    async def distinguish_comment(self, form: forms.DistinguishComment) -> schemas.CommentResponse:
        return await self._request("POST", "/comment/distinguish", form, schemas.CommentResponse)

    async def create_comment_report(
        self, form: forms.CreateCommentReport
    ) -> schemas.CommentReportResponse:
        return await self._request("POST", "/comment/report", form, schemas.CommentReportResponse)

    async def mark_comment_reply_as_read(
        self, form: forms.MarkCommentReplyAsRead
    ) -> schemas.CommentReplyResponse:
        return await self._request(
            "POST", "/comment/mark_as_read", form, schemas.CommentReplyResponse
        )
