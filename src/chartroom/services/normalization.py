"""Canonical forms for artist names and chart entry slugs."""

from __future__ import annotations

import re
import unicodedata

from chartroom.models.group import CHART_TYPE_ARTISTS

_WHITESPACE_RE = re.compile(r"[\s_]+")
_DISALLOWED_RE = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUN_RE = re.compile(r"-+")


def normalize_artist_name(name: str) -> str:
    """Return the lookup key for an artist name (lowercased and trimmed).

    The same key is used when images are stored and when they are looked up,
    so "  Drake ", "DRAKE" and "drake" share one image pool.
    """
    return name.lower().strip()


def strip_accents(value: str) -> str:
    """Remove combining marks, turning "é" into "e" and "ñ" into "n"."""
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def generate_slug(entry_key: str, chart_type: str) -> str:
    """Build a URL-friendly slug from a chart entry key.

    Artist keys are plain names; track and album keys are ``name|artist``
    and have the pipe turned into a hyphen.
    """
    slug = strip_accents(entry_key.strip().lower())
    if chart_type != CHART_TYPE_ARTISTS:
        slug = slug.replace("|", "-")
    slug = _WHITESPACE_RE.sub("-", slug)
    slug = _DISALLOWED_RE.sub("", slug)
    slug = _HYPHEN_RUN_RE.sub("-", slug)
    return slug.strip("-")


def artist_name_from_slug(slug: str) -> str:
    """Best-effort artist key for a slug that no chart entry claims."""
    return normalize_artist_name(slug.replace("-", " "))
