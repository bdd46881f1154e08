"""
Gerrit REST CLI - command-line access to a Gerrit server.

This layer provides the user-facing commands, using the SDK layer for all
operations. It handles:
- Argument parsing
- TTY detection for human vs machine output
- JSON output for piping/automation
- Error reporting with exit codes
"""

import argparse
import json
import logging
import sys
from typing import Any

from gerrit_rest import __version__
from gerrit_rest.core.errors import GerritError, RESTError
from gerrit_rest.sdk import GerritClient

logger = logging.getLogger(__name__)

# =============================================================================
# Output Helpers
# =============================================================================


def is_tty() -> bool:
    """Check if stdout is a TTY (human) or pipe (machine)."""
    return sys.stdout.isatty()


def json_output(data: Any, pretty: bool = False) -> None:
    """Print JSON output."""
    indent = 2 if pretty or is_tty() else None
    print(json.dumps(data, indent=indent, default=str))


def error_output(error: GerritError) -> None:
    """Print error and exit."""
    if isinstance(error, RESTError):
        sys.stderr.write(error.as_text())
    json_output(error.to_dict())
    sys.exit(1)


def success_output(data: Any) -> None:
    """Print success output."""
    json_output(data)


def parse_value(raw: str | None) -> Any:
    """Parse a command-line body value: JSON if possible, else a plain string."""
    if raw == "-":
        raw = sys.stdin.read()
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


# =============================================================================
# CLI Commands
# =============================================================================


def cmd_verb(client: GerritClient, args: argparse.Namespace) -> None:
    """Send a raw REST request."""
    method = getattr(client.rest, args.command.upper())
    if getattr(args, "value", None) is None:
        result = method(args.resource)
    else:
        result = method(args.resource, parse_value(args.value))
    success_output(result)


def cmd_version(client: GerritClient, _args: argparse.Namespace) -> None:
    """Show the server version."""
    success_output({"version": client.version()})


def cmd_projects_get(client: GerritClient, args: argparse.Namespace) -> None:
    """Get a project by name."""
    project = client.projects.get(args.name)
    success_output(
        {
            "id": project.id,
            "name": project.name,
            "parent": project.parent,
            "description": project.description,
            "state": project.state,
        }
    )


def cmd_projects_list(client: GerritClient, args: argparse.Namespace) -> None:
    """List projects."""
    projects = client.projects.list(prefix=args.prefix, limit=args.limit)

    if is_tty():
        if not projects:
            print("No projects found.")
            return
        for p in projects:
            print(f"{p.name:<50}  {(p.description or '')[:60]}")
    else:
        success_output(
            {
                "data": [{"name": p.name, "description": p.description, "state": p.state} for p in projects],
                "total_count": len(projects),
            }
        )


def cmd_projects_create(client: GerritClient, args: argparse.Namespace) -> None:
    """Create a project."""
    project = client.projects.create(
        args.name,
        description=args.description,
        parent=args.parent,
        create_empty_commit=args.empty_commit,
    )
    success_output({"id": project.id, "name": project.name, "message": "Project created"})


def cmd_groups_get(client: GerritClient, args: argparse.Namespace) -> None:
    """Get a group."""
    group = client.groups.get(args.name)
    success_output(
        {
            "id": group.id,
            "name": group.name,
            "description": group.description,
            "visible_to_all": group.visible_to_all,
            "owner": group.owner,
        }
    )


def cmd_groups_create(client: GerritClient, args: argparse.Namespace) -> None:
    """Create a group."""
    group = client.groups.create(
        args.name,
        description=args.description,
        visible_to_all=True if args.visible_to_all else None,
        owner=args.owner,
    )
    success_output({"id": group.id, "name": group.name, "message": "Group created"})


def cmd_groups_members(client: GerritClient, args: argparse.Namespace) -> None:
    """List group members."""
    members = client.groups.members(args.name)
    success_output(
        {"data": [{"account_id": m.account_id, "name": m.name, "email": m.email} for m in members]}
    )


def cmd_accounts_get(client: GerritClient, args: argparse.Namespace) -> None:
    """Get an account."""
    account = client.accounts.get(args.account)
    success_output(
        {
            "account_id": account.account_id,
            "name": account.name,
            "email": account.email,
            "username": account.username,
        }
    )


def cmd_changes_query(client: GerritClient, args: argparse.Namespace) -> None:
    """Query changes."""
    changes = client.changes.query(args.query, limit=args.limit)

    if is_tty():
        if not changes:
            print("No changes found.")
            return
        for c in changes:
            print(f"{c.number or '':>8}  {c.status:<10}  {c.project[:30]:<30}  {c.subject[:60]}")
        if changes[-1].more_changes:
            print("\nMore changes available; raise --limit to see them")
    else:
        success_output(
            {
                "data": [
                    {
                        "number": c.number,
                        "change_id": c.change_id,
                        "project": c.project,
                        "branch": c.branch,
                        "subject": c.subject,
                        "status": c.status,
                    }
                    for c in changes
                ],
                "more_changes": bool(changes and changes[-1].more_changes),
            }
        )


# =============================================================================
# Main CLI
# =============================================================================


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gerrit-rest",
        description="Gerrit REST CLI - Command-line interface for the Gerrit Code Review REST API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Resource paths are sent under /a (authenticated endpoints).

Examples:
  gerrit-rest get /projects/myproject
  gerrit-rest put /groups/newgroup '{"description": "New group", "visible_to_all": true}'
  gerrit-rest changes query "status:open owner:self" | jq '.data[].number'
""",
    )
    parser.add_argument("--url", help="Gerrit base URL (overrides GERRIT_URL)")
    parser.add_argument("--username", "-u", help="HTTP username (overrides GERRIT_USERNAME)")
    parser.add_argument("--password", "-p", help="HTTP password (overrides GERRIT_PASSWORD)")
    parser.add_argument("--timeout", type=float, default=60, help="Request timeout in seconds")
    parser.add_argument("--no-redirects", action="store_true", help="Don't follow HTTP redirects")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log requests to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # ========== Raw verbs ==========
    for verb in ("get", "delete"):
        v = subparsers.add_parser(verb, help=f"Send a {verb.upper()} request")
        v.add_argument("resource", help="Resource path, e.g. /projects/myproject")
        v.set_defaults(func=cmd_verb)

    for verb in ("put", "post"):
        v = subparsers.add_parser(verb, help=f"Send a {verb.upper()} request with a JSON body")
        v.add_argument("resource", help="Resource path, e.g. /groups/newgroup")
        v.add_argument("value", nargs="?", help="Body value (JSON or string, - for stdin; omit for no body)")
        v.set_defaults(func=cmd_verb)

    version = subparsers.add_parser("version", help="Show the server version")
    version.set_defaults(func=cmd_version)

    # ========== Projects ==========
    projects = subparsers.add_parser("projects", help="List and manage projects")
    projects.set_defaults(func=lambda _c, _a: projects.print_help())
    projects_sub = projects.add_subparsers(dest="subcommand")

    p_get = projects_sub.add_parser("get", help="Get project details")
    p_get.add_argument("name", help="Project name")
    p_get.set_defaults(func=cmd_projects_get)

    p_list = projects_sub.add_parser("list", help="List projects")
    p_list.add_argument("--prefix", help="Only projects starting with this prefix")
    p_list.add_argument("--limit", "-l", type=int, help="Max results")
    p_list.set_defaults(func=cmd_projects_list)

    p_create = projects_sub.add_parser("create", help="Create a project")
    p_create.add_argument("name", help="Project name")
    p_create.add_argument("--description", "-d", help="Project description")
    p_create.add_argument("--parent", help="Parent project")
    p_create.add_argument("--empty-commit", action="store_true", help="Create an initial empty commit")
    p_create.set_defaults(func=cmd_projects_create)

    # ========== Groups ==========
    groups = subparsers.add_parser("groups", help="Manage groups")
    groups.set_defaults(func=lambda _c, _a: groups.print_help())
    groups_sub = groups.add_subparsers(dest="subcommand")

    g_get = groups_sub.add_parser("get", help="Get group details")
    g_get.add_argument("name", help="Group name or UUID")
    g_get.set_defaults(func=cmd_groups_get)

    g_create = groups_sub.add_parser("create", help="Create a group")
    g_create.add_argument("name", help="Group name")
    g_create.add_argument("--description", "-d", help="Group description")
    g_create.add_argument("--visible-to-all", action="store_true", help="Visible to all registered users")
    g_create.add_argument("--owner", help="Owning group name or UUID")
    g_create.set_defaults(func=cmd_groups_create)

    g_members = groups_sub.add_parser("members", help="List group members")
    g_members.add_argument("name", help="Group name or UUID")
    g_members.set_defaults(func=cmd_groups_members)

    # ========== Accounts ==========
    accounts = subparsers.add_parser("accounts", help="Read accounts")
    accounts.set_defaults(func=lambda _c, _a: accounts.print_help())
    accounts_sub = accounts.add_subparsers(dest="subcommand")

    a_get = accounts_sub.add_parser("get", help="Get account details")
    a_get.add_argument("account", nargs="?", default="self", help="Account ID, username, or email (default: self)")
    a_get.set_defaults(func=cmd_accounts_get)

    # ========== Changes ==========
    changes = subparsers.add_parser("changes", help="Query changes")
    changes.set_defaults(func=lambda _c, _a: changes.print_help())
    changes_sub = changes.add_subparsers(dest="subcommand")

    c_query = changes_sub.add_parser("query", help="Search changes")
    c_query.add_argument("query", help='Search expression, e.g. "status:open project:foo"')
    c_query.add_argument("--limit", "-l", type=int, help="Max results")
    c_query.set_defaults(func=cmd_changes_query)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        client = GerritClient(
            url=args.url,
            username=args.username,
            password=args.password,
            timeout=args.timeout,
            follow_redirects=not args.no_redirects,
        )
        # Run command (all subparsers have default funcs that print help)
        args.func(client, args)
    except GerritError as e:
        error_output(e)


if __name__ == "__main__":
    main()
