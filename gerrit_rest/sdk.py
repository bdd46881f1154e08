"""
Gerrit SDK - High-level client with typed operations.

This layer provides a typed interface for common Gerrit operations.
Built on top of the core RESTClient.
"""

import builtins
import os
from typing import Any
from urllib.parse import quote, urlencode

from gerrit_rest.core.auth import CredentialSource
from gerrit_rest.core.client import DEFAULT_REALM, RESTClient
from gerrit_rest.core.errors import ConfigurationError
from gerrit_rest.core.transport import DEFAULT_TIMEOUT, Transport
from gerrit_rest.core.types import AccountInfo, ChangeInfo, GroupInfo, ProjectInfo


def _segment(value: str | int) -> str:
    """Quote a value for use as a single path segment."""
    return quote(str(value), safe="")


def _query(params: dict[str, Any]) -> str:
    """Build a query string, dropping None values."""
    filtered = {k: v for k, v in params.items() if v is not None}
    return f"?{urlencode(filtered, doseq=True)}" if filtered else ""


class GerritClient:
    """
    High-level Gerrit client with typed methods.

    Example:
        client = GerritClient("https://review.example.com")

        project = client.projects.get("myproject")
        group = client.groups.create("newgroup", description="New group", visible_to_all=True)
        for change in client.changes.query("status:open project:myproject"):
            print(change.number, change.subject)

    """

    def __init__(
        self,
        url: str | None = None,
        username: str | None = None,
        password: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        follow_redirects: bool = True,
        realm: str = DEFAULT_REALM,
        credential_source: CredentialSource | None = None,
        transport: Transport | None = None,
    ):
        """
        Initialize the Gerrit client.

        Args:
            url: Gerrit base URL (or GERRIT_URL env var)
            username: HTTP username (or GERRIT_USERNAME env var)
            password: HTTP password (or GERRIT_PASSWORD env var)
            timeout: Request timeout in seconds
            follow_redirects: Follow HTTP redirects
            realm: Basic authentication realm
            credential_source: Consulted when no username/password is configured
            transport: Pre-built transport (timeout and follow_redirects are
                then ignored)

        """
        url = url or os.environ.get("GERRIT_URL")
        if not url:
            raise ConfigurationError("Gerrit URL required. Set GERRIT_URL env var or use --url flag")

        self.rest = RESTClient(
            url,
            username or os.environ.get("GERRIT_USERNAME"),
            password or os.environ.get("GERRIT_PASSWORD"),
            realm=realm,
            credential_source=credential_source,
            transport=transport,
            transport_config={"timeout": timeout, "follow_redirects": follow_redirects},
        )

        # Sub-clients for different resource collections
        self.projects = ProjectOperations(self.rest)
        self.groups = GroupOperations(self.rest)
        self.accounts = AccountOperations(self.rest)
        self.changes = ChangeOperations(self.rest)

    @property
    def url(self) -> str:
        """Get the Gerrit base URL."""
        return self.rest.url

    def version(self) -> str:
        """Get the Gerrit server version."""
        return self.rest.GET("/config/server/version")


# =============================================================================
# Project Operations
# =============================================================================


class ProjectOperations:
    """Operations for managing projects."""

    def __init__(self, rest: RESTClient):
        self._rest = rest

    def get(self, name: str) -> ProjectInfo:
        """
        Get a project by name.

        Args:
            name: The project name

        Returns:
            Project details

        """
        result = self._rest.GET(f"/projects/{_segment(name)}")
        return ProjectInfo.from_dict(result)

    def list(self, prefix: str | None = None, limit: int | None = None) -> builtins.list[ProjectInfo]:
        """
        List projects visible to the caller.

        Args:
            prefix: Only projects whose name starts with this prefix
            limit: Maximum number of results

        Returns:
            Projects sorted by name

        """
        result = self._rest.GET(f"/projects/{_query({'p': prefix, 'n': limit, 'd': ''})}")
        return [ProjectInfo.from_dict(info, name=name) for name, info in sorted((result or {}).items())]

    def create(
        self,
        name: str,
        description: str | None = None,
        parent: str | None = None,
        create_empty_commit: bool = False,
    ) -> ProjectInfo:
        """
        Create a project.

        Args:
            name: The project name
            description: Project description
            parent: Parent project to inherit access rights from
            create_empty_commit: Create an initial empty commit

        Returns:
            The created project

        """
        payload: dict[str, Any] = {}
        if description is not None:
            payload["description"] = description
        if parent is not None:
            payload["parent"] = parent
        if create_empty_commit:
            payload["create_empty_commit"] = True

        result = self._rest.PUT(f"/projects/{_segment(name)}", payload)
        return ProjectInfo.from_dict(result)

    def description(self, name: str) -> str:
        """Get a project's description (empty string when unset)."""
        return self._rest.GET(f"/projects/{_segment(name)}/description") or ""

    def set_description(self, name: str, description: str, commit_message: str | None = None) -> str:
        """
        Set a project's description.

        Returns:
            The new description (empty string when it was removed)

        """
        payload: dict[str, Any] = {"description": description}
        if commit_message:
            payload["commit_message"] = commit_message
        return self._rest.PUT(f"/projects/{_segment(name)}/description", payload) or ""


# =============================================================================
# Group Operations
# =============================================================================


class GroupOperations:
    """Operations for managing groups."""

    def __init__(self, rest: RESTClient):
        self._rest = rest

    def get(self, name: str) -> GroupInfo:
        """Get a group by name or UUID."""
        result = self._rest.GET(f"/groups/{_segment(name)}")
        return GroupInfo.from_dict(result)

    def create(
        self,
        name: str,
        description: str | None = None,
        visible_to_all: bool | None = None,
        owner: str | None = None,
    ) -> GroupInfo:
        """
        Create a group.

        Args:
            name: The group name
            description: Group description
            visible_to_all: Make the group visible to all registered users
            owner: Name or UUID of the owning group

        Returns:
            The created group

        """
        payload: dict[str, Any] = {}
        if description is not None:
            payload["description"] = description
        if visible_to_all is not None:
            payload["visible_to_all"] = visible_to_all
        if owner is not None:
            payload["owner"] = owner

        result = self._rest.PUT(f"/groups/{_segment(name)}", payload)
        return GroupInfo.from_dict(result)

    def members(self, name: str) -> builtins.list[AccountInfo]:
        """List the direct members of a group."""
        result = self._rest.GET(f"/groups/{_segment(name)}/members/")
        return [AccountInfo.from_dict(item) for item in result or []]

    def add_member(self, name: str, account: str | int) -> AccountInfo:
        """
        Add a user to a group.

        The endpoint takes no request body.
        """
        result = self._rest.PUT(f"/groups/{_segment(name)}/members/{_segment(account)}")
        return AccountInfo.from_dict(result)

    def remove_member(self, name: str, account: str | int) -> bool:
        """Remove a user from a group."""
        self._rest.DELETE(f"/groups/{_segment(name)}/members/{_segment(account)}")
        return True


# =============================================================================
# Account Operations
# =============================================================================


class AccountOperations:
    """Operations for reading accounts."""

    def __init__(self, rest: RESTClient):
        self._rest = rest

    def get(self, account: str | int = "self") -> AccountInfo:
        """
        Get an account.

        Args:
            account: Account ID, username, email, or "self"

        Returns:
            Account details

        """
        result = self._rest.GET(f"/accounts/{_segment(account)}")
        return AccountInfo.from_dict(result)


# =============================================================================
# Change Operations
# =============================================================================


class ChangeOperations:
    """Operations for querying and updating changes."""

    def __init__(self, rest: RESTClient):
        self._rest = rest

    def query(self, query: str, limit: int | None = None, start: int | None = None) -> builtins.list[ChangeInfo]:
        """
        Query changes.

        Args:
            query: Gerrit search expression, e.g. "status:open project:foo"
            limit: Maximum number of results
            start: Number of results to skip

        Returns:
            Matching changes; the last one has ``more_changes`` set when
            results were truncated

        """
        result = self._rest.GET(f"/changes/{_query({'q': query, 'n': limit, 'S': start})}")
        return [ChangeInfo.from_dict(item) for item in result or []]

    def get(self, change_id: str | int) -> ChangeInfo:
        """Get a change by number, Change-Id, or triplet."""
        result = self._rest.GET(f"/changes/{_segment(change_id)}")
        return ChangeInfo.from_dict(result)

    def abandon(self, change_id: str | int, message: str | None = None) -> ChangeInfo:
        """Abandon a change, optionally with a message."""
        payload = {"message": message} if message else {}
        result = self._rest.POST(f"/changes/{_segment(change_id)}/abandon", payload)
        return ChangeInfo.from_dict(result)
