"""
URL classification: split a URL into protocol, subdomain, domain, TLD and path.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

# Anchoring comes from re.fullmatch ($ would also accept a trailing newline)
URL_PATTERN = re.compile(
    r"(https?://)?"  # protocol
    r"([a-zA-Z0-9-]+\.)?"  # subdomain
    r"([a-zA-Z0-9-]+)"  # domain
    r"(\.[a-zA-Z]{2,}(?:\.[a-zA-Z]{2,})*)"  # TLD, may be multi-label (.co.za)
    r"(/[a-zA-Z0-9/._-]*)?"  # path
)

LABEL_PATTERN = re.compile(r"[a-zA-Z0-9-]+")

FIELD_NAMES: Tuple[str, ...] = ("Url", "Protocol", "Subdomain", "Domain", "TLD", "Path")


class URLParseError(ValueError):
    """Raised when a URL does not match the site-map grammar in strict mode."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Failed to parse URL: {url}")
        self.url = url


@dataclass(frozen=True, slots=True)
class URLRecord:
    """A classified URL. Only ``url`` is set when classification failed."""
    url: str
    protocol: str = ""
    subdomain: str = ""
    domain: str = ""
    tld: str = ""
    path: str = ""

    def as_row(self) -> Tuple[str, ...]:
        """Field values in output column order."""
        return (self.url, self.protocol, self.subdomain, self.domain, self.tld, self.path)

    def as_dict(self) -> Dict[str, str]:
        """Map output field names to values, in output order."""
        return dict(zip(FIELD_NAMES, self.as_row()))

    def describe(self) -> str:
        """One-line summary of the parsed fields."""
        return (
            f"Parsed URL: [Protocol: {self.protocol} | Subdomain: {self.subdomain} | "
            f"Domain: {self.domain} | TLD: {self.tld} | Path: {self.path}]"
        )


def _split_on_suffix(host: str, suffix: str) -> Optional[Tuple[str, str]]:
    """
    Split ``host`` into (subdomain, domain) in front of a known suffix.

    Returns None when the host does not end with the suffix or the labels in
    front of it do not fit the one-label subdomain and domain of the grammar.
    """
    if not suffix.startswith("."):
        suffix = "." + suffix
    if len(host) <= len(suffix) or not host.lower().endswith(suffix.lower()):
        return None

    labels = host[: -len(suffix)].split(".")
    if len(labels) > 2 or not all(LABEL_PATTERN.fullmatch(label) for label in labels):
        return None
    if len(labels) == 1:
        return "", labels[0]
    return labels[0] + ".", labels[1]


def classify(raw: str, strict: bool = False, suffix: Optional[str] = None) -> URLRecord:
    """
    Classify ``raw`` against the site-map URL grammar.

    Args:
        raw: The URL string. It is stored unchanged in ``URLRecord.url``.
        strict: Raise URLParseError on mismatch instead of returning a
                record with empty structured fields.
        suffix: Optional public suffix known to apply to this crawl (the
                seed's TLD). Greedy matching reads ``example.co.za`` as
                domain ``co`` plus TLD ``.za``; with ``suffix=".co.za"`` the
                host is re-split so the suffix is the TLD.

    Returns:
        The classified URLRecord.
    """
    match = URL_PATTERN.fullmatch(raw)
    if match is None:
        if strict:
            raise URLParseError(raw)
        return URLRecord(url=raw)

    protocol, subdomain, domain, tld, path = (group or "" for group in match.groups())

    if suffix:
        host = subdomain + domain + tld
        split = _split_on_suffix(host, suffix)
        if split is not None:
            subdomain, domain = split
            tld = host[len(subdomain) + len(domain):]

    return URLRecord(
        url=raw,
        protocol=protocol[: -len("://")] if protocol else "http",
        subdomain=subdomain,
        domain=domain,
        tld=tld,
        path=path,
    )
