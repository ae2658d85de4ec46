"""File tools: documents, versions, comments and rendered images.

Tools:
    get_file           -- full document JSON for a file
    get_file_versions  -- version history
    get_file_comments  -- comments on a file
    post_file_comment  -- add a comment to a file
    get_images         -- render nodes to image URLs
"""

from __future__ import annotations

from figma_mcp.session import FigmaSession, get_session
from figma_mcp.tools import register_tool
from figma_mcp.tools.base import BaseTool, ToolCategory, ToolResult

_IMAGE_FORMATS = {"jpg", "png", "svg", "pdf"}


def _get_session() -> FigmaSession:
    return get_session()


# ---------------------------------------------------------------------- #
# get_file
# ---------------------------------------------------------------------- #


@register_tool
class GetFile(BaseTool):
    name = "get_file"
    description = (
        "Get the document JSON of a Figma file.  Optionally pin a version "
        "or limit tree depth."
    )
    category = ToolCategory.FILES

    async def execute(
        self, file_key: str, version: str | None = None, depth: int | None = None
    ) -> ToolResult:
        err = self._require_params({"file_key": file_key}, "file_key")
        if err:
            return err
        return await self._run(
            f"Fetched file {file_key}",
            lambda: _get_session().client.get_file(file_key, version=version, depth=depth),
        )


# ---------------------------------------------------------------------- #
# get_file_versions
# ---------------------------------------------------------------------- #


@register_tool
class GetFileVersions(BaseTool):
    name = "get_file_versions"
    description = "List the version history of a Figma file."
    category = ToolCategory.FILES

    async def execute(self, file_key: str) -> ToolResult:
        err = self._require_params({"file_key": file_key}, "file_key")
        if err:
            return err
        return await self._run(
            f"Fetched versions of {file_key}",
            lambda: _get_session().client.get_file_versions(file_key),
        )


# ---------------------------------------------------------------------- #
# comments
# ---------------------------------------------------------------------- #


@register_tool
class GetFileComments(BaseTool):
    name = "get_file_comments"
    description = "Get all comments left on a Figma file."
    category = ToolCategory.FILES

    async def execute(self, file_key: str) -> ToolResult:
        err = self._require_params({"file_key": file_key}, "file_key")
        if err:
            return err
        return await self._run(
            f"Fetched comments on {file_key}",
            lambda: _get_session().client.get_file_comments(file_key),
        )


@register_tool
class PostFileComment(BaseTool):
    name = "post_file_comment"
    description = (
        "Post a comment on a Figma file.  Pass node_id to pin the comment "
        "to a specific node."
    )
    category = ToolCategory.FILES

    async def execute(
        self, file_key: str, message: str, node_id: str | None = None
    ) -> ToolResult:
        err = self._require_params(
            {"file_key": file_key, "message": message}, "file_key", "message"
        )
        if err:
            return err
        client_meta = {"node_id": node_id} if node_id else None
        return await self._run(
            f"Posted comment on {file_key}",
            lambda: _get_session().client.post_file_comment(
                file_key, message, client_meta=client_meta
            ),
        )


# ---------------------------------------------------------------------- #
# get_images
# ---------------------------------------------------------------------- #


@register_tool
class GetImages(BaseTool):
    name = "get_images"
    description = (
        "Render nodes of a Figma file as images.  node_ids is a comma-"
        "separated list; format is one of jpg, png, svg, pdf."
    )
    category = ToolCategory.FILES

    async def execute(
        self,
        file_key: str,
        node_ids: str,
        scale: float | None = None,
        format: str | None = None,
    ) -> ToolResult:
        err = self._require_params(
            {"file_key": file_key, "node_ids": node_ids}, "file_key", "node_ids"
        )
        if err:
            return err
        if format and format.lower() not in _IMAGE_FORMATS:
            return self._error(
                f"Unsupported image format '{format}'; "
                f"expected one of {', '.join(sorted(_IMAGE_FORMATS))}"
            )
        ids = [i.strip() for i in node_ids.split(",") if i.strip()]
        return await self._run(
            f"Rendered {len(ids)} node(s) from {file_key}",
            lambda: _get_session().client.get_images(
                file_key, ids, scale=scale, format=format.lower() if format else None
            ),
        )
