"""
FastMCP server exposing the workspace short-key registry.

The Linear API client lives outside this package: the host application
injects an async fetcher returning RegistryBuildData via
``set_workspace_fetcher``. ``workspace_metadata`` rebuilds the session
registry from it and returns the TOON lookup tables every other tool's
output refers to.
"""

import sys

from fastmcp import Context, FastMCP
from fastmcp.exceptions import ToolError
from loguru import logger

from .config import Config
from .context import build_registry_context
from .profiles import apply_user_profiles, load_user_profiles
from .registry.formatting import build_lookup_sections
from .registry.models import RegistryBuildData, ShortKeyRegistry
from .registry.store import FetchWorkspaceData, RegistryStore, get_registry_stats
from .toon.encoder import encode_response
from .toon.errors import ToonError
from .toon.models import ToonEncodingOptions, ToonMeta, ToonResponse

SERVER_NAME = "LinearToon"
LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> | <level>{message}</level>"
)

mcp = FastMCP(SERVER_NAME)
registry_store = RegistryStore()

_workspace_fetcher: FetchWorkspaceData | None = None


def set_workspace_fetcher(fetcher: FetchWorkspaceData | None) -> None:
    """Install the async callable that fetches workspace data from Linear."""
    global _workspace_fetcher
    _workspace_fetcher = fetcher


def configure_logging() -> None:
    """Replace loguru's default handler with the server's stderr sink."""
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=Config.LOG_LEVEL)


def _tool_error(error: ToonError) -> ToolError:
    parts = [error.message]
    if error.cause:
        parts.append(f"Cause: {error.cause}")
    if error.hint:
        parts.append(f"Hint: {error.hint}")
    if error.suggestion:
        parts.append(f"Suggestion: {error.suggestion}")
    return ToolError("\n".join(parts))


def _apply_default_team(data: RegistryBuildData) -> None:
    """Set default_team_id from DEFAULT_TEAM (team key or UUID) unless the fetcher did."""
    if data.default_team_id or not Config.DEFAULT_TEAM:
        return
    wanted = Config.DEFAULT_TEAM.lower()
    for team in data.teams or []:
        if team.id == Config.DEFAULT_TEAM or team.key.lower() == wanted:
            data.default_team_id = team.id
            return
    logger.warning(f"DEFAULT_TEAM '{Config.DEFAULT_TEAM}' not found in workspace teams")


async def _fetch_with_profiles() -> RegistryBuildData:
    if _workspace_fetcher is None:
        raise RuntimeError("Workspace fetcher not configured")
    data = await _workspace_fetcher()
    _apply_default_team(data)
    profiles = load_user_profiles()
    data.users = apply_user_profiles(data.users, profiles)
    return data


def _meta_team(registry: ShortKeyRegistry) -> str:
    """DEFAULT_TEAM's key if configured, otherwise the first team's."""
    for team in registry.teams:
        if team.id == registry.default_team_id:
            return team.key
    if registry.teams:
        return registry.teams[0].key or registry.teams[0].name
    return ""


def build_workspace_response(registry: ShortKeyRegistry) -> ToonResponse:
    return ToonResponse(
        meta=ToonMeta(
            fields=["org", "team", "generated"],
            values={
                "org": registry.organization_name or "",
                "team": _meta_team(registry),
                "generated": registry.generated_at,
            },
        ),
        lookups=build_lookup_sections(registry),
    )


@mcp.tool()
async def workspace_metadata(forceRefresh: bool = True, ctx: Context = None) -> str:
    """
    List workspace teams, users, workflow states and projects with short keys.

    Call this first. Other tools reference users as u0, u1..., states as
    s0, s1... (or sqm:s0 for non-default teams) and projects as pr0, pr1...
    The registry is always rebuilt; forceRefresh is accepted for
    compatibility.

    Args:
        forceRefresh: Kept for compatibility; the registry is always rebuilt

    Returns:
        TOON-encoded _meta plus _teams, _users, _states and _projects lookups
    """
    if _workspace_fetcher is None:
        raise ToolError("Workspace fetcher not configured")

    context = build_registry_context(ctx, force_refresh=True)
    if not forceRefresh:
        logger.debug("workspace_metadata always refreshes; ignoring forceRefresh=false")

    try:
        registry = await registry_store.get_or_init_registry(context, _fetch_with_profiles)
    except ToonError as e:
        raise _tool_error(e) from e

    return encode_response(
        get_registry_stats(registry),
        build_workspace_response(registry),
        ToonEncodingOptions(),
    )


def main():
    """Run the server on the configured transport."""
    configure_logging()
    Config.validate()

    if _workspace_fetcher is None:
        logger.warning("No workspace fetcher installed; workspace_metadata will fail")

    logger.info(f"Starting {SERVER_NAME} ({Config.TRANSPORT})...")
    try:
        mcp.run(transport=Config.TRANSPORT)
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    main()
