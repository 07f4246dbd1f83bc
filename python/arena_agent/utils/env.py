"""Helpers for reading agent flags and CI provenance from an environment mapping.

These are only called while settings are being resolved at startup.
"""

from typing import Mapping, Optional


def agent_debug_mode_enabled(environ: Mapping[str, str]) -> bool:
    """Return whether agent debug mode is enabled.

    Checks `AGENT_DEBUG_MODE`.
    """
    flag = environ.get("AGENT_DEBUG_MODE", "false")
    return str(flag).lower() == "true"


def build_repo_url(environ: Mapping[str, str]) -> str:
    """Return the repository URL when running inside GitHub Actions, else ``""``."""
    server = environ.get("GITHUB_SERVER_URL")
    repo = environ.get("GITHUB_REPOSITORY")
    if server and repo:
        return f"{server}/{repo}"
    return ""


def build_workflow_run_url(environ: Mapping[str, str]) -> Optional[str]:
    """Return the Actions run URL, or None outside CI."""
    server = environ.get("GITHUB_SERVER_URL")
    repo = environ.get("GITHUB_REPOSITORY")
    run_id = environ.get("GITHUB_RUN_ID")
    if server and repo and run_id:
        return f"{server}/{repo}/actions/runs/{run_id}"
    return None
