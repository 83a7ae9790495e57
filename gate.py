"""Admin access gate.

Decides, per request, whether a path under the admin prefix may proceed or
must be bounced back to the site root. The decision is a pure function of the
path, the query parameters and the configured secret.
"""
import hmac
from dataclasses import dataclass
from urllib.parse import urlencode


def normalize_prefix(prefix):
    """Leading slash, no trailing slash; blank falls back to /admin."""
    prefix = (prefix or "").strip().rstrip("/")
    if not prefix:
        return "/admin"
    if not prefix.startswith("/"):
        prefix = "/" + prefix
    return prefix


@dataclass(frozen=True)
class GateConfig:
    secret: str = ""
    prefix: str = "/admin"
    param: str = "key"
    redirect_to: str = "/"

    def __post_init__(self):
        object.__setattr__(self, "prefix", normalize_prefix(self.prefix))


@dataclass(frozen=True)
class Forward:
    """Let the request through unchanged."""


@dataclass(frozen=True)
class RedirectTo:
    location: str


FORWARD = Forward()


def is_protected(path, config):
    """True for the prefix itself and anything beneath it."""
    prefix = config.prefix
    return path == prefix or path.startswith(prefix + "/")


def key_matches(supplied, secret):
    # empty on either side never matches, so an unset secret locks everyone out
    if not supplied or not secret:
        return False
    return hmac.compare_digest(supplied.encode("utf-8"), secret.encode("utf-8"))


def decide(path, query, config):
    if not is_protected(path, config):
        return FORWARD

    if key_matches(query.get(config.param), config.secret):
        return FORWARD
    return RedirectTo(config.redirect_to)


def admin_url(path, key, config, **params):
    """Build an admin link that keeps the key in the query string."""
    query = {config.param: key}
    query.update(params)
    return f"{path}?{urlencode(query)}"
