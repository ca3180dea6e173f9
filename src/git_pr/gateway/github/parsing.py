"""Parsing utilities for gh CLI output."""

import json
from typing import Any

from git_pr.gateway.github.types import RemotePullRequest

_GITHUB_PREFIXES = ("https://github.com/", "http://github.com/")


def parse_pr_url(url: str) -> tuple[int, str] | None:
    """Parse a PR URL into its number and resource path.

    Args:
        url: e.g. "https://github.com/owner/repo/pull/123" (trailing path
            segments such as "/files" are ignored)

    Returns:
        (123, "/owner/repo/pull/123"), or None if the URL is not a GitHub PR URL
    """
    url = url.strip()
    path = None
    for prefix in _GITHUB_PREFIXES:
        if url.startswith(prefix):
            path = url[len(prefix) :]
            break
    if path is None:
        return None

    parts = path.split("/")
    if len(parts) < 4 or parts[2] != "pull":
        return None
    if not parts[3].isdigit():
        return None

    owner, repo, number = parts[0], parts[1], int(parts[3])
    return number, f"/{owner}/{repo}/pull/{number}"


def _graphql_data(json_str: str) -> dict[str, Any]:
    payload = json.loads(json_str)
    if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
        raise ValueError("response has no 'data' object")
    return payload["data"]


def parse_assignable_users(json_str: str) -> list[str]:
    """Parse the assignableUsers GraphQL response into a list of logins.

    Raises:
        ValueError: If the response does not have the expected shape
        json.JSONDecodeError: If the response is not JSON
    """
    data = _graphql_data(json_str)
    try:
        nodes = data["repository"]["assignableUsers"]["nodes"]
    except (KeyError, TypeError) as e:
        raise ValueError(f"unexpected assignableUsers response: missing {e}") from e
    return [node["login"] for node in nodes if node and node.get("login")]


def _pr_from_node(node: dict[str, Any]) -> RemotePullRequest:
    return RemotePullRequest(
        id=str(node["id"]),
        title=node["title"],
        number=int(node["number"]),
        resource_path=node["resourcePath"],
        # body is null for PRs created without a description
        body=node.get("body") or "",
    )


def parse_user_open_prs(json_str: str) -> list[RemotePullRequest]:
    """Parse the user pullRequests GraphQL response.

    Raises:
        ValueError: If the response does not have the expected shape
        json.JSONDecodeError: If the response is not JSON
    """
    data = _graphql_data(json_str)
    try:
        edges = data["user"]["pullRequests"]["edges"]
        return [_pr_from_node(edge["node"]) for edge in edges]
    except (KeyError, TypeError) as e:
        raise ValueError(f"unexpected pullRequests response: missing {e}") from e


def parse_pr_view(json_str: str) -> RemotePullRequest:
    """Parse `gh pr view --json id,title,number,body,url` output.

    Raises:
        ValueError: If a field is missing or the URL is not a PR URL
        json.JSONDecodeError: If the response is not JSON
    """
    data = json.loads(json_str)
    try:
        url = data["url"]
        parsed = parse_pr_url(url)
        if parsed is None:
            raise ValueError(f"not a pull request URL: {url}")
        _, resource_path = parsed
        return RemotePullRequest(
            id=str(data["id"]),
            title=data["title"],
            number=int(data["number"]),
            resource_path=resource_path,
            body=data.get("body") or "",
        )
    except (KeyError, TypeError) as e:
        raise ValueError(f"unexpected pr view response: missing {e}") from e
