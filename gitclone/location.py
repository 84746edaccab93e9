"""Parse git repository locations into an (organization, repository) identity.

Two transport shapes are recognized:

- SSH: ``user@host:org/repo[.git]``
- HTTP(S): ``http(s)://host/org/repo[.git]``

Anything else (bare filesystem paths in particular) is rejected with a
:class:`ParseDiagnostic` describing what was found and what was expected.
"""

from __future__ import annotations

import logging

from rich.console import Console

from gitclone.errors import LocationParseError
from gitclone.models.location import LocationFormat, ParseDiagnostic, RepositoryIdentity

logger = logging.getLogger(__name__)

console = Console(highlight=False, emoji=False)

ORG_REPO_SHAPE = "org/repo or org/repo.git"
GIT_SUFFIX = ".git"


def parse_location(location: str, *, report: bool = True) -> RepositoryIdentity | ParseDiagnostic:
    """Parse a repository location string.

    Returns the identity on success. On failure the diagnostic is returned
    and, unless ``report`` is false, printed to standard output first.
    """
    result = _parse(location)
    if isinstance(result, ParseDiagnostic):
        logger.debug(f"Rejected location {location!r}: {result.reason}")
        if report:
            report_diagnostic(result)
    return result


def require_identity(location: str, *, report: bool = True) -> RepositoryIdentity:
    """Parse a location string, raising LocationParseError on failure."""
    result = parse_location(location, report=report)
    if isinstance(result, ParseDiagnostic):
        raise LocationParseError(result)
    return result


def report_diagnostic(diagnostic: ParseDiagnostic) -> None:
    """Print a diagnostic to standard output."""
    console.print(diagnostic.render(), markup=False, soft_wrap=True)


def _parse(location: str) -> RepositoryIdentity | ParseDiagnostic:
    if "@" not in location and "://" not in location:
        return ParseDiagnostic(
            reason="no recognized git URL format",
            original_input=location,
            detected_format=LocationFormat.UNKNOWN.value,
            expected_shape="git@host:org/repo OR https://host/org/repo",
        )

    if "@" in location:
        return _parse_ssh(location)

    if location.startswith(("http://", "https://")):
        return _parse_http(location)

    return ParseDiagnostic(
        reason="URL doesn't start with a recognized protocol",
        original_input=location,
        expected_shape="git@... OR http://... OR https://...",
    )


def _parse_ssh(location: str) -> RepositoryIdentity | ParseDiagnostic:
    detected = LocationFormat.SSH.value

    # Last colon, not the first: org/repo paths never contain one.
    colon = location.rfind(":")
    if colon == -1:
        return ParseDiagnostic(
            reason="SSH format missing colon separator",
            original_input=location,
            detected_format=detected,
            offending_fragment=location.split("@", 1)[1],
            expected_shape="git@host:org/repo",
        )

    path = location[colon + 1 :]
    if "/" not in path:
        return ParseDiagnostic(
            reason="path missing org/repo separator",
            original_input=location,
            detected_format=detected,
            offending_fragment=path,
            expected_shape=ORG_REPO_SHAPE,
        )

    return _split_path(location, path, detected)


def _parse_http(location: str) -> RepositoryIdentity | ParseDiagnostic:
    scheme = LocationFormat.HTTPS if location.startswith("https://") else LocationFormat.HTTP
    after_scheme = location.split("://", 1)[1]

    slash = after_scheme.find("/")
    if slash == -1:
        return ParseDiagnostic(
            reason="missing path after hostname",
            original_input=location,
            detected_format=scheme.value,
            offending_fragment=after_scheme,
            expected_shape="host/org/repo",
        )

    path = after_scheme[slash + 1 :]
    if "/" not in path:
        return ParseDiagnostic(
            reason="path missing org/repo separator",
            original_input=location,
            detected_format=scheme.value,
            offending_fragment=path,
            expected_shape=ORG_REPO_SHAPE,
        )

    return _split_path(location, path, scheme.value)


def _split_path(location: str, path: str, detected: str) -> RepositoryIdentity | ParseDiagnostic:
    organization, repository = path.split("/", 1)
    if repository.endswith(GIT_SUFFIX):
        repository = repository[: -len(GIT_SUFFIX)]

    parts = [organization, *repository.split("/")]
    if not organization or not repository or any(p in (".", "..") for p in parts):
        return ParseDiagnostic(
            reason="failed to parse org/repo from path",
            original_input=location,
            detected_format=detected,
            offending_fragment=path,
            expected_shape=ORG_REPO_SHAPE,
        )

    return RepositoryIdentity(organization=organization, repository=repository)
