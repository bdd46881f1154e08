"""
Credential sources consulted when a client is built without credentials.
"""

import logging
import netrc
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from gerrit_rest.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


class CredentialSource(Protocol):
    """Resolves (username, password) for a host."""

    def lookup(self, host: str, username: str | None = None) -> tuple[str, str]:
        """Return credentials for ``host`` or raise ConfigurationError."""
        ...


class NetrcCredentials:
    """
    Look credentials up in a netrc file.

    Uses ``~/.netrc`` unless a path is given.
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path else None

    def lookup(self, host: str, username: str | None = None) -> tuple[str, str]:
        try:
            entries = netrc.netrc(str(self.path) if self.path else None)
        except FileNotFoundError as e:
            raise ConfigurationError(f"No netrc file found: {e.filename}") from e
        except (netrc.NetrcParseError, OSError) as e:
            raise ConfigurationError(f"Cannot read netrc file: {e}") from e

        entry = entries.authenticators(host)
        if entry is None:
            raise ConfigurationError(f"No netrc entry for host '{host}'")

        login, _account, password = entry
        if username and login != username:
            raise ConfigurationError(f"netrc entry for host '{host}' is for '{login}', not '{username}'")
        if not login or not password:
            raise ConfigurationError(f"Incomplete netrc entry for host '{host}'")

        logger.debug("Using netrc credentials for %s@%s", login, host)
        return login, password


class StaticCredentials:
    """Credentials resolved up front, keyed by host."""

    def __init__(self, credentials: Mapping[str, tuple[str, str]]):
        self._credentials = dict(credentials)

    def lookup(self, host: str, username: str | None = None) -> tuple[str, str]:
        try:
            login, password = self._credentials[host]
        except KeyError:
            raise ConfigurationError(f"No credentials configured for host '{host}'") from None
        if username and login != username:
            raise ConfigurationError(f"Credentials for host '{host}' are for '{login}', not '{username}'")
        return login, password
