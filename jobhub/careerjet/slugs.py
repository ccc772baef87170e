from __future__ import annotations

import hashlib
import re
import unicodedata

PLACEHOLDER_SLUG = "job-opening"
HASH_LENGTH = 10

# ASCII word characters, but any Unicode whitespace counts as a separator
_STRIP_RE = re.compile(r"[^A-Za-z0-9_\s-]")
_SEPARATOR_RE = re.compile(r"[\s_-]+")
_EDGE_HYPHENS_RE = re.compile(r"^-+|-+$")


def slugify(text: str) -> str: # lowercase, ASCII-folded, hyphen separated
    value = unicodedata.normalize("NFKD", text.lower())
    value = _STRIP_RE.sub("", value).strip()
    value = _SEPARATOR_RE.sub("-", value)
    return _EDGE_HYPHENS_RE.sub("", value)


def url_hash(url: str) -> str:
    return hashlib.sha256(url.encode("utf-8")).hexdigest()[:HASH_LENGTH]


def make_job_slug(title: str, url: str) -> str:
    base = slugify(title) or PLACEHOLDER_SLUG
    return f"{base}-{url_hash(url)}"


def extract_hash_from_slug(slug: str) -> str:
    return slug.rsplit("-", 1)[-1]


def keywords_from_slug(slug: str) -> str: # best-effort search terms from the title part of a slug
    words = slug.split("-")[:-1]
    return " ".join(w for w in words if w)
