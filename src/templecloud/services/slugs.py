"""Slug normalization and subdomain extraction."""

import re

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUNS = re.compile(r"-{2,}")

# A DNS label holds at most 63 octets
MAX_SLUG_LENGTH = 63


def sanitize_slug(value: str | None) -> str:
    """Normalize arbitrary input into a DNS-label-safe slug.

    The steps run in a fixed order: trim, lowercase, turn inner whitespace
    into hyphens, drop everything outside ``[a-z0-9-]``, collapse hyphen
    runs, then strip edge hyphens. The result may be empty; callers must
    treat ``""`` as invalid.

    >>> sanitize_slug("Tian-Tan!! Temple")
    'tian-tan-temple'
    >>> sanitize_slug("---abc---")
    'abc'
    """
    if not value:
        return ""
    slug = value.strip().lower()
    slug = _WHITESPACE.sub("-", slug)
    slug = _DISALLOWED.sub("", slug)
    slug = _HYPHEN_RUNS.sub("-", slug)
    return slug.strip("-")


def extract_subdomain(host: str | None, root_domain: str) -> str | None:
    """Return the tenant label of ``host`` under ``root_domain``, if any.

    Handles ``<slug>.<root_domain>`` (with or without a port) and the
    ``<slug>.localhost`` development form. Only a single label is accepted;
    ``www`` and the bare root domain are not tenants.
    """
    if not host:
        return None

    hostname = host.strip().lower().split(":", 1)[0].rstrip(".")
    root = root_domain.strip().lower().split(":", 1)[0].rstrip(".")

    label = None
    if root and hostname.endswith("." + root):
        label = hostname[: -(len(root) + 1)]
    elif hostname.endswith(".localhost"):
        label = hostname[: -len(".localhost")]

    if not label or "." in label or label == "www":
        return None
    return label
