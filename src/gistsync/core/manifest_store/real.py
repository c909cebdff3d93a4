"""Manifest store backed by a GitHub Gist, using the gh CLI.

Authentication is whatever `gh auth login` set up; no token is handled here.
"""

import json
import logging
from typing import Any

import httpx

from gistsync.core.manifest import (
    ManifestUnavailableError,
    parse_manifest,
    serialize_manifest,
)
from gistsync.core.manifest_store.abc import ManifestStore
from gistsync.core.packages import PackageDefinition
from gistsync.core.subprocess import run_subprocess_with_context

logger = logging.getLogger(__name__)

HTTP_TIMEOUT_SECONDS = 30.0


def _fetch_text(url: str) -> str:
    try:
        response = httpx.get(url, follow_redirects=True, timeout=HTTP_TIMEOUT_SECONDS)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise ManifestUnavailableError(f"Failed to download manifest from {url}: {e}") from e
    return response.text


def _parse_pages(text: str) -> list[Any]:
    """Parse `gh api --paginate` output into one list.

    Depending on the gh release, pages of a JSON array arrive either merged
    into a single array or as consecutive arrays (`[...][...]`).
    """
    decoder = json.JSONDecoder()
    items: list[Any] = []
    position = 0
    text = text.strip()
    while position < len(text):
        page, position = decoder.raw_decode(text, position)
        items.extend(page if isinstance(page, list) else [page])
        while position < len(text) and text[position].isspace():
            position += 1
    return items


class GistManifestStore(ManifestStore):
    """Stores the manifest as one file in a GitHub Gist.

    The Gist is the configured `gist_id` when set. Otherwise it is looked up
    among the user's Gists: the single one containing `file_name` or whose
    description equals `description`.
    """

    def __init__(
        self,
        *,
        file_name: str,
        description: str,
        gist_id: str | None = None,
    ) -> None:
        self._file_name = file_name
        self._description = description
        self._gist_id = gist_id

    def _gh_api(
        self,
        args: list[str],
        operation_context: str,
        *,
        input_text: str | None = None,
        paginated: bool = False,
    ) -> Any:
        try:
            result = run_subprocess_with_context(
                ["gh", "api", *args],
                operation_context=operation_context,
                input_text=input_text,
            )
        except RuntimeError as e:
            raise ManifestUnavailableError(str(e)) from e
        try:
            if paginated:
                return _parse_pages(result.stdout)
            return json.loads(result.stdout) if result.stdout.strip() else None
        except json.JSONDecodeError as e:
            raise ManifestUnavailableError(
                f"Unexpected response while trying to {operation_context}: {e}"
            ) from e

    def _find_gist_id(self) -> str | None:
        if self._gist_id:
            return self._gist_id

        gists = self._gh_api(
            ["gists", "--paginate"], operation_context="list gists", paginated=True
        )
        matches = [
            gist
            for gist in gists
            if self._file_name in (gist.get("files") or {})
            or gist.get("description") == self._description
        ]
        if len(matches) > 1:
            ids = ", ".join(gist["id"] for gist in matches)
            raise ManifestUnavailableError(
                f"Multiple gists match '{self._file_name}' ({ids}). "
                "Use --url to choose one, or set gist_id in the config."
            )
        if not matches:
            logger.debug("No gist found for %s", self._file_name)
            return None
        logger.debug("Using gist %s", matches[0]["id"])
        return matches[0]["id"]

    def _file_content(self, gist: dict[str, Any]) -> str | None:
        files = gist.get("files") or {}
        entry = files.get(self._file_name)
        if entry is None:
            return None
        if entry.get("truncated"):
            return _fetch_text(entry["raw_url"])
        return entry.get("content")

    def get_packages(self) -> list[PackageDefinition]:
        gist_id = self._find_gist_id()
        if gist_id is None:
            return []
        gist = self._gh_api([f"gists/{gist_id}"], operation_context=f"read gist {gist_id}")
        return parse_manifest(self._file_content(gist or {}))

    def save_packages(self, packages: list[PackageDefinition]) -> None:
        content = serialize_manifest(packages)
        # Gists reject empty file content
        payload_files = {self._file_name: {"content": content or "\n"}}

        gist_id = self._find_gist_id()
        if gist_id is None:
            payload = {
                "description": self._description,
                "public": False,
                "files": payload_files,
            }
            created = self._gh_api(
                ["gists", "-X", "POST", "--input", "-"],
                operation_context="create gist",
                input_text=json.dumps(payload),
            )
            self._gist_id = (created or {}).get("id")
            logger.debug("Created gist %s", self._gist_id)
            return

        self._gh_api(
            [f"gists/{gist_id}", "-X", "PATCH", "--input", "-"],
            operation_context=f"update gist {gist_id}",
            input_text=json.dumps({"files": payload_files}),
        )

    def get_packages_from_url(self, url: str) -> list[PackageDefinition]:
        return parse_manifest(_fetch_text(url))
