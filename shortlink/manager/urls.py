"""
URL parsing and composition helpers for shortlink.

`parse_absolute_url` is the only gate between user input and the store:
anything it returns is a canonical absolute URL, anything it rejects
raises ValidationError and is never persisted.

`join_short_url` composes the public short link from the configured base
URL. Its failures come from service configuration, so they raise
ConfigurationError rather than ValidationError.
"""

import re
from typing import Optional
from urllib.parse import SplitResult, quote, urljoin, urlsplit, urlunsplit

from shortlink.errors import ConfigurationError, ValidationError

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*$")
_SCHEME_PREFIX_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]*):")
_FORBIDDEN_HOST_CHARS = re.compile(r"[\s<>\"`{}|\\^%]")
_STRIP_CHARS = "".join(chr(i) for i in range(0x21))
_TAB_OR_NEWLINE = re.compile(r"[\t\n\r]")

DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443, "ftp": 21}
# Schemes whose empty path is normalised to "/".
SPECIAL_SCHEMES = frozenset(DEFAULT_PORTS)

_PATH_SAFE = "/%:@!$&'()*+,;=-._~"
_QUERY_SAFE = _PATH_SAFE + "?"


def _canonical_host(hostname: str) -> str:
    if _FORBIDDEN_HOST_CHARS.search(hostname):
        raise ValidationError(f"illegal character in host {hostname!r}")
    if ":" in hostname:
        # IPv6 literal; urlsplit has already stripped the brackets.
        return f"[{hostname}]"
    if not hostname.isascii():
        try:
            hostname = hostname.encode("idna").decode("ascii")
        except UnicodeError as exc:
            raise ValidationError(f"cannot IDNA-encode host {hostname!r}") from exc
    return hostname


def _backslashes_to_slashes(candidate: str) -> str:
    """Browsers read "\\" as "/" before the query in special URLs; store what they would open."""
    match = _SCHEME_PREFIX_RE.match(candidate)
    if not match or match.group(1).lower() not in SPECIAL_SCHEMES:
        return candidate
    end = len(candidate)
    for marker in ("?", "#"):
        pos = candidate.find(marker)
        if pos != -1:
            end = min(end, pos)
    return candidate[:end].replace("\\", "/") + candidate[end:]


def _split(raw: str) -> SplitResult:
    try:
        return urlsplit(raw)
    except ValueError as exc:
        raise ValidationError(f"unparsable url: {exc}") from exc


def parse_absolute_url(raw: Optional[str]) -> str:
    """
    Validate `raw` as an absolute URL and return its canonical string form.

    Rules:
        - surrounding whitespace/control characters are ignored, embedded tabs and newlines dropped
        - in http(s)/ws(s)/ftp URLs a backslash before the query reads as "/"
        - a backslash left in the authority of any other scheme is rejected
        - a scheme matching the RFC 3986 grammar and a non-empty host are required
        - scheme and host are lower-cased, a default port is removed
        - http(s)/ws(s)/ftp URLs with an empty path get "/"
        - non-ASCII and unsafe characters in path, query and fragment are percent-encoded

    Raises:
        ValidationError: on any of the failures above. The message is for logs only.
    """
    if raw is None:
        raise ValidationError("url is missing")

    candidate = _TAB_OR_NEWLINE.sub("", raw.strip(_STRIP_CHARS))
    if not candidate:
        raise ValidationError("url is empty")

    parts = _split(_backslashes_to_slashes(candidate))
    if not parts.scheme or not _SCHEME_RE.match(parts.scheme):
        raise ValidationError("url has no scheme")
    if not parts.netloc or not parts.hostname:
        raise ValidationError("url has no host")
    if "\\" in parts.netloc:
        raise ValidationError(f"backslash in authority {parts.netloc!r}")

    try:
        port = parts.port
    except ValueError as exc:
        raise ValidationError(f"bad port: {exc}") from exc

    scheme = parts.scheme.lower()
    netloc = _canonical_host(parts.hostname)
    if port is not None and DEFAULT_PORTS.get(scheme) != port:
        netloc = f"{netloc}:{port}"

    userinfo, sep, _ = parts.netloc.rpartition("@")
    if sep:
        netloc = f"{quote(userinfo, safe=':%!$&()*+,;=-._~')}@{netloc}"

    path = parts.path
    if not path and scheme in SPECIAL_SCHEMES:
        path = "/"

    return urlunsplit((
        scheme,
        netloc,
        quote(path, safe=_PATH_SAFE),
        quote(parts.query, safe=_QUERY_SAFE),
        quote(parts.fragment, safe=_QUERY_SAFE),
    ))


def join_short_url(url_base: Optional[str], link_id: str) -> str:
    """
    Join the configured base URL with `link_id` using standard URL
    reference resolution ("http://h/app/" + id -> "http://h/app/id",
    "http://h/app" + id -> "http://h/id"). Without a base the bare id is
    returned, giving a relative link.

    Raises:
        ConfigurationError: if the base URL is not an absolute URL.
    """
    if not url_base:
        return link_id
    try:
        base = urlsplit(url_base)
    except ValueError as exc:
        raise ConfigurationError(f"malformed SHORTLINK_URL_BASE {url_base!r}") from exc
    if not base.scheme or not base.netloc:
        raise ConfigurationError(f"SHORTLINK_URL_BASE must be absolute, got {url_base!r}")
    return urljoin(url_base, link_id)
