"""HTTP client for the Tathya REST API.

Error statuses are mapped back onto the same error classes the server raises,
so callers handle ``NotFoundError`` and friends the same way on both sides.
"""
from typing import Any
from uuid import UUID

import httpx

from tathya.client.session import SessionStore
from tathya.core.errors import (
    NotFoundError,
    TathyaError,
    UnauthenticatedError,
    UnauthorizedError,
    ValidationError,
)
from tathya.domain.thread import LikeTarget
from tathya.schemas.comment import CommentAdded, LikeResponse, PinResponse
from tathya.schemas.feed import FeedPage
from tathya.schemas.post import PostResponse
from tathya.schemas.user import Token, UserResponse

ERRORS_BY_STATUS: dict[int, type[TathyaError]] = {
    400: ValidationError,
    401: UnauthenticatedError,
    403: UnauthorizedError,
    404: NotFoundError,
    422: ValidationError,
}


def error_from_response(response: httpx.Response) -> TathyaError:
    try:
        detail = response.json().get("detail")
    except ValueError:
        detail = None
    if not isinstance(detail, str):
        detail = str(detail) if detail else response.reason_phrase
    error_cls = ERRORS_BY_STATUS.get(response.status_code)
    if error_cls is None:
        return TathyaError(detail, status_code=response.status_code)
    return error_cls(detail)


class TathyaClient:
    """Async API client. ``base_url`` points at the ``/api/v1`` root."""

    def __init__(
        self,
        base_url: str,
        session: SessionStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session
        self._transport = transport
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "TathyaClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                transport=self._transport,
                timeout=httpx.Timeout(self._timeout),
            )
        return self._client

    def _headers(self) -> dict[str, str]:
        token = self.session.access_token if self.session else None
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._ensure_client().request(method, path, headers=self._headers(), **kwargs)
        if response.status_code >= 400:
            raise error_from_response(response)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # Auth

    async def register(self, full_name: str, email: str, password: str) -> Token:
        data = await self._request(
            "POST", "/auth/register", json={"full_name": full_name, "email": email, "password": password}
        )
        return self._remember(Token.model_validate(data))

    async def login(self, email: str, password: str) -> Token:
        data = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        return self._remember(Token.model_validate(data))

    def logout(self) -> None:
        if self.session is not None:
            self.session.clear()

    async def me(self) -> UserResponse:
        return UserResponse.model_validate(await self._request("GET", "/auth/me"))

    def _remember(self, token: Token) -> Token:
        if self.session is not None:
            self.session.save(token)
        return token

    # Posts

    async def list_posts(self, page: int = 1, page_size: int | None = None) -> FeedPage:
        params: dict[str, int] = {"pageNumber": page}
        if page_size is not None:
            params["pageSize"] = page_size
        return FeedPage.model_validate(await self._request("GET", "/posts", params=params))

    async def get_post(self, post_id: UUID) -> PostResponse:
        return PostResponse.model_validate(await self._request("GET", f"/posts/{post_id}"))

    async def create_post(
        self,
        title: str,
        content: str,
        community_id: UUID | None = None,
        is_anonymous: bool = True,
        files: list[tuple[str, bytes, str]] | None = None,
    ) -> PostResponse:
        """``files`` holds ``(filename, data, content_type)`` triples."""
        form = {"title": title, "content": content, "is_anonymous": str(is_anonymous).lower()}
        if community_id is not None:
            form["community_id"] = str(community_id)
        upload = [("attachments", f) for f in files or []]
        data = await self._request("POST", "/posts", data=form, files=upload or None)
        return PostResponse.model_validate(data)

    async def delete_post(self, post_id: UUID) -> None:
        await self._request("DELETE", f"/posts/{post_id}")

    async def toggle_like(self, target: LikeTarget) -> LikeResponse:
        path = f"/posts/{target.post_id}"
        if target.comment_id is not None:
            path += f"/comments/{target.comment_id}"
        if target.reply_id is not None:
            path += f"/replies/{target.reply_id}"
        return LikeResponse.model_validate(await self._request("POST", f"{path}/like"))

    async def add_comment(self, post_id: UUID, content: str, reply_to: UUID | None = None) -> CommentAdded:
        body: dict[str, str] = {"content": content}
        if reply_to is not None:
            body["replyTo"] = str(reply_to)
        return CommentAdded.model_validate(await self._request("POST", f"/posts/{post_id}/comments", json=body))

    async def toggle_pin(self, post_id: UUID, comment_id: UUID) -> PinResponse:
        data = await self._request("POST", f"/posts/{post_id}/comments/{comment_id}/pin")
        return PinResponse.model_validate(data)
