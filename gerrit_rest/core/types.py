"""
Core types for Gerrit REST entities.

These dataclasses mirror the JSON entities documented by Gerrit and give
the SDK layer typed results.
"""

from dataclasses import dataclass, field
from typing import Any

# =============================================================================
# Account Types
# =============================================================================


@dataclass
class AccountInfo:
    """A Gerrit user account."""

    account_id: int
    name: str | None = None
    email: str | None = None
    username: str | None = None
    display_name: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AccountInfo":
        """Create from API response dict."""
        return cls(
            account_id=data["_account_id"],
            name=data.get("name"),
            email=data.get("email"),
            username=data.get("username"),
            display_name=data.get("display_name"),
        )


# =============================================================================
# Project Types
# =============================================================================


@dataclass
class ProjectInfo:
    """A Gerrit project (repository)."""

    id: str
    name: str
    parent: str | None = None
    description: str | None = None
    state: str = "ACTIVE"
    web_links: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any], name: str | None = None) -> "ProjectInfo":
        """
        Create from API response dict.

        Project listings key entries by name and omit the ``name`` field,
        so the caller passes it in.
        """
        name = data.get("name") or name or ""
        return cls(
            id=data.get("id") or name,
            name=name,
            parent=data.get("parent"),
            description=data.get("description"),
            state=data.get("state", "ACTIVE"),
            web_links=data.get("web_links", []),
        )


# =============================================================================
# Group Types
# =============================================================================


@dataclass
class GroupInfo:
    """A Gerrit group."""

    id: str
    name: str | None = None
    description: str | None = None
    visible_to_all: bool = False
    group_id: int | None = None
    owner: str | None = None
    owner_id: str | None = None
    created_on: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GroupInfo":
        """Create from API response dict."""
        options = data.get("options") or {}
        return cls(
            id=data["id"],
            name=data.get("name"),
            description=data.get("description"),
            visible_to_all=bool(options.get("visible_to_all", False)),
            group_id=data.get("group_id"),
            owner=data.get("owner"),
            owner_id=data.get("owner_id"),
            created_on=data.get("created_on"),
        )


# =============================================================================
# Change Types
# =============================================================================


@dataclass
class ChangeInfo:
    """A change (code review)."""

    id: str
    project: str
    branch: str
    change_id: str
    subject: str
    status: str
    number: int | None = None
    topic: str | None = None
    created: str | None = None
    updated: str | None = None
    owner: AccountInfo | None = None
    insertions: int = 0
    deletions: int = 0
    more_changes: bool = False

    @property
    def is_open(self) -> bool:
        """Check if the change is still open."""
        return self.status == "NEW"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChangeInfo":
        """Create from API response dict."""
        owner = data.get("owner")
        return cls(
            id=data["id"],
            project=data.get("project", ""),
            branch=data.get("branch", ""),
            change_id=data.get("change_id", ""),
            subject=data.get("subject", ""),
            status=data.get("status", ""),
            number=data.get("_number"),
            topic=data.get("topic"),
            created=data.get("created"),
            updated=data.get("updated"),
            # Owner may be reduced to just the account ID
            owner=AccountInfo.from_dict(owner) if owner else None,
            insertions=data.get("insertions", 0),
            deletions=data.get("deletions", 0),
            more_changes=data.get("_more_changes", False),
        )
