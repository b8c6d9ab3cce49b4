"""Persistent cookie jar stored as JSON lines.

Each line of the jar file holds one cookie record. Only cookies carrying an
explicit ``Expires`` or ``Max-Age`` attribute are written; session cookies
live for a single invocation and are dropped on exit.

Example file contents:

    {"domain": "example.com", "expires": 1767225600.0, "host_only": true, ...}
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
import time
from dataclasses import asdict, dataclass, fields
from email.utils import parsedate_to_datetime
from http.cookies import CookieError, Morsel, SimpleCookie
from pathlib import Path
from typing import Iterable
from urllib.parse import urlsplit

from .models import CookieJarError, Response

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CookieJarEntry:
    """A single stored cookie.

    Attributes:
        name: Cookie name.
        value: Cookie value.
        domain: Cookie domain, lowercase, without a leading dot.
        path: Cookie path.
        expires: Absolute expiration timestamp (None for session cookie).
        max_age: Max-Age as received, in seconds (None if absent).
        secure: Whether cookie requires HTTPS.
        http_only: Whether cookie is HTTP-only.
        host_only: Whether cookie only matches the exact domain.
    """

    name: str
    value: str
    domain: str
    path: str = "/"
    expires: float | None = None
    max_age: int | None = None
    secure: bool = False
    http_only: bool = False
    host_only: bool = True

    @property
    def key(self) -> tuple[str, str, str]:
        """Identity of the cookie within a jar."""
        return (self.domain, self.path, self.name)

    @property
    def is_persistent(self) -> bool:
        """Check if cookie carries expiration metadata."""
        return self.expires is not None or self.max_age is not None

    def is_expired(self, now: float | None = None) -> bool:
        """Check if cookie has expired."""
        if self.expires is None:
            return False
        return (time.time() if now is None else now) >= self.expires

    def matches_domain(self, host: str) -> bool:
        """Check if cookie matches the given host."""
        host = host.lower()
        if host == self.domain:
            return True
        if self.host_only:
            return False
        return host.endswith("." + self.domain)

    def matches_path(self, path: str) -> bool:
        """Check if cookie matches the given request path."""
        if path == self.path or self.path == "/":
            return True
        if not path.startswith(self.path):
            return False
        return self.path.endswith("/") or path[len(self.path)] == "/"

    def to_record(self) -> dict:
        return asdict(self)

    @classmethod
    def from_record(cls, record: dict) -> "CookieJarEntry":
        """Build an entry from a decoded jar line.

        Raises:
            ValueError: If required fields are missing or mistyped.
        """
        if not isinstance(record, dict):
            raise ValueError("record is not an object")
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in record.items() if k in known}
        for required in ("name", "value", "domain"):
            if not isinstance(kwargs.get(required), str):
                raise ValueError(f"missing or invalid field {required!r}")
        if kwargs.get("expires") is not None:
            kwargs["expires"] = float(kwargs["expires"])
        if kwargs.get("max_age") is not None:
            kwargs["max_age"] = int(kwargs["max_age"])
        return cls(**kwargs)


def _default_path(request_path: str) -> str:
    """Compute the default cookie path for a request path (RFC 6265 5.1.4)."""
    if not request_path.startswith("/"):
        return "/"
    directory = request_path.rsplit("/", 1)[0]
    return directory or "/"


def _strip_unknown_attributes(header: str) -> str:
    """Drop attributes SimpleCookie does not know, such as ``Partitioned``.

    SimpleCookie parses nothing when it meets an unknown flag, and an
    unknown ``name=value`` attribute would be read as a second cookie.
    """
    cookie, *attributes = header.split(";")
    kept = [cookie]
    for attribute in attributes:
        name, sep, _ = attribute.strip().partition("=")
        name = name.strip().lower()
        if sep and name in Morsel._reserved:
            kept.append(attribute)
        elif not sep and name in Morsel._flags:
            kept.append(attribute)
        elif attribute.strip():
            logger.debug("Dropping unknown cookie attribute %r", attribute.strip())
    return ";".join(kept)


def parse_set_cookie(
    header: str,
    request_url: str,
    now: float | None = None,
) -> CookieJarEntry | None:
    """Parse one Set-Cookie header value.

    Args:
        header: Raw Set-Cookie value.
        request_url: URL the response was received for.
        now: Receipt time used to resolve Max-Age.

    Returns:
        The parsed entry, or None if the header cannot be parsed.
    """
    parsed = SimpleCookie()
    try:
        parsed.load(_strip_unknown_attributes(header))
    except CookieError:
        logger.warning("Ignoring malformed Set-Cookie header: %s", header)
        return None
    if not parsed:
        logger.warning("Ignoring malformed Set-Cookie header: %s", header)
        return None

    # A Set-Cookie header carries exactly one cookie
    morsel = next(iter(parsed.values()))
    url = urlsplit(request_url)
    host = (url.hostname or "").lower()
    now = time.time() if now is None else now

    domain = morsel["domain"].strip().lstrip(".").lower()
    host_only = not domain
    if host_only:
        domain = host
    elif host != domain and not host.endswith("." + domain):
        logger.warning("Rejecting cookie %s for foreign domain %s", morsel.key, domain)
        return None

    path = morsel["path"].strip()
    if not path.startswith("/"):
        path = _default_path(url.path)

    max_age: int | None = None
    expires: float | None = None
    if morsel["max-age"]:
        try:
            max_age = int(str(morsel["max-age"]).strip())
        except ValueError:
            logger.warning("Ignoring invalid Max-Age on cookie %s", morsel.key)
    if max_age is not None:
        expires = now + max_age if max_age > 0 else 0.0
    elif morsel["expires"]:
        try:
            expires = parsedate_to_datetime(morsel["expires"]).timestamp()
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid Expires on cookie %s", morsel.key)

    return CookieJarEntry(
        name=morsel.key,
        value=morsel.value,
        domain=domain,
        path=path,
        expires=expires,
        max_age=max_age,
        secure=bool(morsel["secure"]),
        http_only=bool(morsel["httponly"]),
        host_only=host_only,
    )


def load(path: str | os.PathLike) -> set[CookieJarEntry]:
    """Load a cookie jar, creating an empty file if it does not exist.

    Expired entries are dropped.

    Raises:
        CookieJarError: If the file cannot be read or a line is not a record.
    """
    jar_path = Path(path)
    if not jar_path.exists():
        try:
            jar_path.parent.mkdir(parents=True, exist_ok=True)
            jar_path.touch()
        except OSError as e:
            raise CookieJarError(str(jar_path), e.strerror or str(e)) from e
        logger.debug("Created empty cookie jar at %s", jar_path)
        return set()

    entries: set[CookieJarEntry] = set()
    now = time.time()
    try:
        with open(jar_path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    entry = CookieJarEntry.from_record(json.loads(line))
                except (ValueError, TypeError) as e:
                    raise CookieJarError(str(jar_path), str(e), line=lineno) from e
                if entry.is_expired(now):
                    continue
                entries.add(entry)
    except OSError as e:
        raise CookieJarError(str(jar_path), e.strerror or str(e)) from e

    logger.debug("Loaded %d cookies from %s", len(entries), jar_path)
    return entries


def merge(
    existing: Iterable[CookieJarEntry],
    response_cookies: Iterable[CookieJarEntry],
    now: float | None = None,
) -> set[CookieJarEntry]:
    """Merge response cookies into an existing set of entries.

    A response cookie replaces the stored entry with the same key. Session
    cookies are not kept, and an already-expired response cookie removes
    the stored entry.
    """
    now = time.time() if now is None else now
    by_key = {entry.key: entry for entry in existing if entry.is_persistent}
    for cookie in response_cookies:
        if cookie.is_expired(now):
            by_key.pop(cookie.key, None)
            continue
        if not cookie.is_persistent:
            continue
        by_key[cookie.key] = cookie
    return set(by_key.values())


def save(path: str | os.PathLike, entries: Iterable[CookieJarEntry]) -> None:
    """Atomically rewrite the jar file with one record per line.

    Raises:
        CookieJarError: If the file cannot be written.
    """
    jar_path = Path(path)
    now = time.time()
    records = sorted(
        (e for e in entries if e.is_persistent and not e.is_expired(now)),
        key=lambda e: e.key,
    )

    try:
        jar_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=jar_path.parent, prefix=f".{jar_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                for entry in records:
                    f.write(json.dumps(entry.to_record(), sort_keys=True))
                    f.write("\n")
            os.replace(tmp_name, jar_path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise
    except OSError as e:
        raise CookieJarError(str(jar_path), e.strerror or str(e)) from e

    logger.debug("Saved %d cookies to %s", len(records), jar_path)


def cookies_for_url(
    entries: Iterable[CookieJarEntry],
    url: str,
    now: float | None = None,
) -> dict[str, str]:
    """Get cookies applicable to URL.

    Returns:
        Dict of cookie name to value, most specific path first.
    """
    parts = urlsplit(url)
    host = (parts.hostname or "").lower()
    path = parts.path or "/"
    is_secure = parts.scheme.lower() == "https"
    now = time.time() if now is None else now

    matching = [
        entry for entry in entries
        if not entry.is_expired(now)
        and entry.matches_domain(host)
        and entry.matches_path(path)
        and (is_secure or not entry.secure)
    ]
    matching.sort(key=lambda e: (-len(e.path), e.name))

    result: dict[str, str] = {}
    for entry in matching:
        result.setdefault(entry.name, entry.value)
    return result


class CookieJar:
    """Cookie jar bound to a file for one invocation.

    Usage:

        jar = CookieJar(path)
        jar.load()
        cookies = jar.attach(url)
        ...
        jar.update(response)
        jar.save()
    """

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)
        self.entries: set[CookieJarEntry] = set()

    def load(self) -> set[CookieJarEntry]:
        self.entries = load(self.path)
        return self.entries

    def attach(self, url: str) -> dict[str, str]:
        """Cookies to send with a request to ``url``."""
        return cookies_for_url(self.entries, url)

    def update(self, response: Response) -> list[CookieJarEntry]:
        """Merge every Set-Cookie of a response and its redirects into the jar.

        Returns:
            The cookies parsed from the response, persistent or not.
        """
        request_url = response.request.url if response.request else response.url
        received = []
        for hop in [*response.history, response]:
            for header in hop.set_cookies:
                entry = parse_set_cookie(header, hop.url or request_url)
                if entry is not None:
                    received.append(entry)
        self.entries = merge(self.entries, received)
        return received

    def save(self) -> None:
        save(self.path, self.entries)

    def __len__(self) -> int:
        return len(self.entries)
