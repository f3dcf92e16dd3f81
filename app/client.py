"""
Async client for the Image Studio API.

The client mirrors what the web front end does: it checks the prompt and the
local session before asking the server to generate anything, allows one
generation at a time, refreshes the image list after every generation and
deletion, and turns every failure into a display-only notification. The
server remains the authority on ownership; the local checks only avoid
pointless requests.
"""

import logging
import mimetypes
import re
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

# Known provider messages that get a friendlier wording
INVALID_CREDENTIALS = "Invalid login credentials"
ALREADY_REGISTERED = "already registered"

FILENAME_PATTERN = re.compile(r'filename="?([^";]+)"?')


@dataclass
class Notification:
    """A transient, dismissable message for the user."""
    title: str
    description: str
    variant: str = "default"  # "default" or "destructive"


@dataclass
class DownloadedImage:
    content: bytes
    content_type: str
    filename: str


class ClientError(Exception):
    """A failed client operation, carrying the notification to show."""

    def __init__(self, description: str, title: str = "Error"):
        super().__init__(description)
        self.notification = Notification(title=title, description=description, variant="destructive")

    @property
    def message(self) -> str:
        return self.notification.description


def friendly_auth_message(message: str) -> str:
    """Substitute wording for the two known auth provider messages."""
    if message == INVALID_CREDENTIALS:
        return "Invalid email or password"
    if ALREADY_REGISTERED in message:
        return "This email is already registered"
    return message


def _error_detail(response: httpx.Response, fallback: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("error")
        if isinstance(detail, str) and detail:
            return detail
        # Pydantic validation errors come back as a list
        if isinstance(detail, list) and detail:
            first = detail[0]
            if isinstance(first, dict) and first.get("msg"):
                return str(first["msg"])
    return fallback


class ImageStudioClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 180.0,
    ):
        self.token = token
        self.images: list[dict[str, Any]] = []
        self._generating = False
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + API_PREFIX,
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "ImageStudioClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def is_generating(self) -> bool:
        return self._generating

    def _auth_headers(self) -> dict[str, str]:
        if not self.token:
            raise ClientError("Please sign in first")
        return {"Authorization": f"Bearer {self.token}"}

    async def _request(self, method: str, url: str, fallback: str, **kwargs) -> httpx.Response:
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Request %s %s failed: %s", method, url, e)
            raise ClientError(fallback) from e

        if response.is_error:
            detail = _error_detail(response, fallback)
            logger.error("Request %s %s returned %s: %s", method, url, response.status_code, detail)
            raise ClientError(detail)
        return response

    # Authentication

    async def sign_up(self, email: str, password: str, full_name: str | None = None) -> dict:
        try:
            response = await self._request(
                "POST",
                "/auth/signup",
                "Sign up failed",
                json={"email": email, "password": password, "full_name": full_name},
            )
        except ClientError as e:
            raise ClientError(friendly_auth_message(e.message)) from e
        return response.json()

    async def sign_in(self, email: str, password: str) -> str:
        try:
            response = await self._request(
                "POST",
                "/auth/login",
                "Sign in failed",
                json={"email": email, "password": password},
            )
        except ClientError as e:
            raise ClientError(friendly_auth_message(e.message)) from e
        self.token = response.json()["access_token"]
        return self.token

    async def sign_out(self) -> None:
        """Discard the local session. The server is told when a token is held."""
        if self.token:
            try:
                await self._http.post("/auth/logout", headers=self._auth_headers())
            except httpx.HTTPError as e:
                logger.warning("Sign out request failed: %s", e)
        self.token = None
        self.images = []

    async def current_session(self) -> dict | None:
        """Return ``{id, email, metadata}`` or None when not signed in."""
        if not self.token:
            return None
        try:
            response = await self._http.get("/auth/session", headers=self._auth_headers())
        except httpx.HTTPError as e:
            logger.error("Session lookup failed: %s", e)
            raise ClientError("Could not load session") from e
        if response.status_code == 401:
            return None
        if response.is_error:
            raise ClientError(_error_detail(response, "Could not load session"))
        return response.json()

    # Images

    async def generate(self, prompt: str, edit_image: dict | str | None = None) -> dict:
        """
        Generate an image, store it, and refresh the image list.

        Args:
            prompt: What to create, or what to change when editing
            edit_image: An image record (or its ID) to use as the edit source

        Returns:
            The stored image record
        """
        if not prompt.strip():
            raise ClientError("Please enter a prompt")
        headers = self._auth_headers()
        if self._generating:
            raise ClientError("An image is already being generated")

        body: dict[str, Any] = {"prompt": prompt}
        if edit_image is not None:
            body["edit_image_id"] = edit_image["id"] if isinstance(edit_image, dict) else edit_image

        self._generating = True
        try:
            response = await self._request(
                "POST", "/images", "Failed to generate image", json=body, headers=headers
            )
        finally:
            self._generating = False

        record = response.json()
        await self.list_images()
        return record

    async def list_images(self) -> list[dict]:
        """Fetch your images, newest first."""
        response = await self._request(
            "GET", "/images", "Failed to load images", headers=self._auth_headers()
        )
        self.images = response.json()
        return self.images

    async def delete_image(self, image_id: str) -> None:
        await self._request(
            "DELETE", f"/images/{image_id}", "Failed to delete image", headers=self._auth_headers()
        )
        await self.list_images()

    async def download_image(self, image_id: str) -> DownloadedImage:
        """Fetch an image's bytes along with the file name the server suggests."""
        response = await self._request(
            "GET",
            f"/images/{image_id}/download",
            "Failed to download image",
            headers=self._auth_headers(),
            follow_redirects=True,
        )
        content_type = response.headers.get("content-type", "").split(";")[0].strip()
        match = FILENAME_PATTERN.search(response.headers.get("content-disposition", ""))
        if match:
            filename = match.group(1)
        else:
            extension = mimetypes.guess_extension(content_type) if content_type else None
            filename = f"ai-image-{image_id}{extension or '.png'}"
        return DownloadedImage(content=response.content, content_type=content_type, filename=filename)
