"""Google Drive (v3 REST) access for storing finished reports."""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from typing import Any, Mapping, Optional
from urllib.parse import urlencode

import requests

from pager_hours.errors import (
    AmbiguousDirectoryError,
    DriveError,
    MissingCredentialsError,
)

AUTH_URL = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
FILES_URL = "https://www.googleapis.com/drive/v3/files"
UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3/files"
REDIRECT_URL = "urn:ietf:wg:oauth:2.0:oob"
SCOPES = (
    "https://www.googleapis.com/auth/drive.file",
    "https://www.googleapis.com/auth/drive",
)

FOLDER_MIME = "application/vnd.google-apps.folder"
SPREADSHEET_MIME = "application/vnd.google-apps.spreadsheet"


@dataclass(frozen=True)
class DriveFile:
    id: str
    title: str
    mime_type: str = ""


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


def _file_from_json(body: Mapping[str, Any]) -> DriveFile:
    return DriveFile(
        id=body["id"], title=body.get("name", ""), mime_type=body.get("mimeType", "")
    )


class DriveClient:
    """
    OAuth'd Drive session. Either a refresh token or a one-off auth code is
    needed; the access token is fetched on first use.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        *,
        refresh_token: str = "",
        code: str = "",
        session: Optional[requests.Session] = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        if not client_secret:
            raise MissingCredentialsError("Need Google Drive client secret to continue")
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token
        self.code = code
        self.timeout_seconds = timeout_seconds
        self._session = session or requests.Session()
        self._access_token: Optional[str] = None
        if not refresh_token and not code:
            raise MissingCredentialsError(
                "You need to either provide a refresh token or an auth code. "
                f"For a new code, visit: {self.auth_code_url()}"
            )

    def auth_code_url(self) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": REDIRECT_URL,
            "response_type": "code",
            "scope": " ".join(SCOPES),
            "access_type": "offline",
        }
        return f"{AUTH_URL}?{urlencode(params)}"

    # ---------- transport ----------

    def _authorize(self) -> str:
        if self._access_token is not None:
            return self._access_token

        form = {"client_id": self.client_id, "client_secret": self.client_secret}
        if self.refresh_token:
            form.update(grant_type="refresh_token", refresh_token=self.refresh_token)
        else:
            form.update(
                grant_type="authorization_code", code=self.code, redirect_uri=REDIRECT_URL
            )
        body = self._request("POST", TOKEN_URL, authorized=False, data=form)
        token = body.get("access_token")
        if not token:
            raise DriveError("Couldn't get token: no access_token in response")
        # a code exchange hands out the refresh token to reuse next time
        self.refresh_token = body.get("refresh_token") or self.refresh_token
        self._access_token = token
        return token

    def _request(
        self, method: str, url: str, *, authorized: bool = True, **kwargs: Any
    ) -> dict:
        headers = dict(kwargs.pop("headers", {}) or {})
        if authorized:
            headers["Authorization"] = f"Bearer {self._authorize()}"
        try:
            resp = self._session.request(
                method, url, headers=headers, timeout=self.timeout_seconds, **kwargs
            )
        except requests.RequestException as exc:
            raise DriveError(f"{method} {url} failed: {exc}") from exc
        if resp.status_code not in (200, 201):
            raise DriveError(f"{method} {url}: status {resp.status_code}")
        try:
            return resp.json()
        except ValueError as exc:
            raise DriveError(f"{method} {url}: couldn't decode response") from exc

    # ---------- files ----------

    def find(self, query: str) -> list[DriveFile]:
        body = self._request(
            "GET",
            FILES_URL,
            params={"q": query, "fields": "files(id,name,mimeType)", "spaces": "drive"},
        )
        return [_file_from_json(f) for f in body.get("files") or []]

    def create_directory(self, name: str, parent: str) -> DriveFile:
        body = self._request(
            "POST",
            FILES_URL,
            json={"name": name, "mimeType": FOLDER_MIME, "parents": [parent]},
        )
        return _file_from_json(body)

    def get_or_create_directory(self, name: str, parent: str) -> DriveFile:
        """Exactly one folder called ``name`` under ``parent``, created when missing."""
        query = (
            f"name = '{_quote(name)}' and '{_quote(parent)}' in parents "
            f"and mimeType = '{FOLDER_MIME}' and trashed = false"
        )
        found = self.find(query)
        if len(found) > 1:
            raise AmbiguousDirectoryError(
                f"More than one directory named {name!r} found in {parent!r}"
            )
        if not found:
            return self.create_directory(name, parent)
        return found[0]

    def upload(
        self,
        payload: bytes,
        parent: str,
        title: str,
        *,
        mime_type: str = "text/csv",
        convert: bool = True,
    ) -> DriveFile:
        metadata: dict[str, Any] = {"name": title, "parents": [parent]}
        if convert:
            metadata["mimeType"] = SPREADSHEET_MIME

        boundary = f"pager-hours-{uuid.uuid4().hex}"
        body = b"".join(
            [
                f"--{boundary}\r\n".encode(),
                b"Content-Type: application/json; charset=UTF-8\r\n\r\n",
                json.dumps(metadata).encode("utf-8"),
                f"\r\n--{boundary}\r\n".encode(),
                f"Content-Type: {mime_type}\r\n\r\n".encode(),
                payload,
                f"\r\n--{boundary}--\r\n".encode(),
            ]
        )
        created = self._request(
            "POST",
            UPLOAD_URL,
            params={"uploadType": "multipart"},
            headers={"Content-Type": f"multipart/related; boundary={boundary}"},
            data=body,
        )
        return _file_from_json(created)
