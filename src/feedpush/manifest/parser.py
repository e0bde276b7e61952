"""
feedpush.manifest.parser - Build Manifest Parsing
===================================================

Turns a build manifest file into a BuildManifest (identity + artifacts).

Supported Formats:
    XML asset manifest (``.xml``)::

        <Build Name="https://github.com/contoso/sdk" Commit="6f1c2e..."
               BuildId="20240101.3" Branch="refs/heads/main">
          <Package Id="Contoso.Sdk" Version="1.2.3" />
          <Blob Id="sdk/1.2.3/contoso-sdk.zip" />
        </Build>

    YAML or JSON document (``.yaml``, ``.yml``, ``.json``)::

        identity:
          repo_url: https://github.com/contoso/sdk
          commit_sha: 6f1c2e...
          build_id: 20240101.3
        packages:
          - {id: Contoso.Sdk, version: 1.2.3}
        blobs:
          - {id: sdk/1.2.3/contoso-sdk.zip}

Artifact uniqueness keys are enforced: a package (id, version) or blob id
listed twice makes the manifest invalid.

Two entry points:
    parse_manifest(path)            → raises ManifestError
    load_manifest(path, error_log)  → records the failure, returns None
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Optional, Union

import structlog
import yaml
from pydantic import ValidationError

from feedpush.core.error_log import RunErrorLog
from feedpush.core.exceptions import ManifestError
from feedpush.core.models import (
    BlobArtifact,
    BuildIdentity,
    BuildManifest,
    PackageArtifact,
)


logger = structlog.get_logger()

XML_SUFFIXES = {".xml"}
DOCUMENT_SUFFIXES = {".yaml", ".yml", ".json"}


# =============================================================================
# Public API
# =============================================================================
def parse_manifest(path: Union[str, Path]) -> BuildManifest:
    """Parse a manifest file into a BuildManifest.

    The format is chosen from the file suffix; unknown suffixes are sniffed
    (a leading ``<`` means XML).

    Args:
        path: Path to the manifest file.

    Returns:
        The parsed BuildManifest.

    Raises:
        ManifestError: If the file is missing, unreadable, malformed, or
            lists the same artifact twice.
    """
    manifest_path = Path(path)
    if not manifest_path.is_file():
        raise ManifestError(
            message=f"Problem reading asset manifest path from {manifest_path}",
            manifest_path=str(manifest_path),
            error_code="MANIFEST_NOT_FOUND",
        )

    try:
        text = manifest_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(
            message=f"Could not read manifest {manifest_path}: {e}",
            manifest_path=str(manifest_path),
            error_code="MANIFEST_UNREADABLE",
        ) from e

    suffix = manifest_path.suffix.lower()
    if suffix in XML_SUFFIXES or (
        suffix not in DOCUMENT_SUFFIXES and text.lstrip().startswith("<")
    ):
        manifest = _parse_xml(text, str(manifest_path))
    else:
        manifest = _parse_document(text, str(manifest_path))

    _check_unique(manifest, str(manifest_path))

    logger.info(
        "manifest_parsed",
        manifest_path=str(manifest_path),
        build_id=manifest.identity.build_id,
        packages=len(manifest.packages),
        blobs=len(manifest.blobs),
    )
    return manifest


def load_manifest(
    path: Union[str, Path],
    error_log: RunErrorLog,
) -> Optional[BuildManifest]:
    """Parse a manifest, reporting failures through the run error log.

    Returns:
        The BuildManifest, or None if parsing failed (the reason is recorded
        in ``error_log``).
    """
    try:
        return parse_manifest(path)
    except ManifestError as e:
        error_log.record_exception(e)
        return None


# =============================================================================
# XML Format
# =============================================================================
def _parse_xml(text: str, manifest_path: str) -> BuildManifest:
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise ManifestError(
            message=f"Manifest {manifest_path} is not well-formed XML: {e}",
            manifest_path=manifest_path,
            error_code="MALFORMED_MANIFEST",
        ) from e

    if root.tag != "Build":
        raise ManifestError(
            message=f"Expected a <Build> root element, found <{root.tag}>",
            manifest_path=manifest_path,
            error_code="MALFORMED_MANIFEST",
        )

    identity = BuildIdentity(
        repo_url=_require_attr(root, "Name", manifest_path),
        commit_sha=_require_attr(root, "Commit", manifest_path),
        build_id=_require_attr(root, "BuildId", manifest_path),
        branch=root.get("Branch"),
        build_number=root.get("AzureDevOpsBuildNumber"),
    )

    packages = [
        PackageArtifact(
            id=_require_attr(element, "Id", manifest_path),
            version=_require_attr(element, "Version", manifest_path),
        )
        for element in root.iter("Package")
    ]
    blobs = [
        BlobArtifact(id=_require_attr(element, "Id", manifest_path))
        for element in root.iter("Blob")
    ]

    return BuildManifest(identity=identity, packages=packages, blobs=blobs)


def _require_attr(element: ET.Element, name: str, manifest_path: str) -> str:
    value = element.get(name)
    if value is None or not value.strip():
        raise ManifestError(
            message=f"<{element.tag}> element is missing the '{name}' attribute",
            manifest_path=manifest_path,
            error_code="MISSING_ATTRIBUTE",
            details={"element": element.tag, "attribute": name},
        )
    return value.strip()


# =============================================================================
# YAML / JSON Format
# =============================================================================
def _parse_document(text: str, manifest_path: str) -> BuildManifest:
    try:
        data: Any = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ManifestError(
            message=f"Manifest {manifest_path} could not be parsed: {e}",
            manifest_path=manifest_path,
            error_code="MALFORMED_MANIFEST",
        ) from e

    if not isinstance(data, dict):
        raise ManifestError(
            message=f"Manifest {manifest_path} must be a mapping at the top level",
            manifest_path=manifest_path,
            error_code="MALFORMED_MANIFEST",
        )

    # YAML happily reads numeric-looking ids as ints
    identity = data.get("identity")
    if isinstance(identity, dict):
        data["identity"] = {
            key: str(value) if value is not None else None
            for key, value in identity.items()
        }
    for section in ("packages", "blobs"):
        items = data.get(section)
        if isinstance(items, list):
            data[section] = [
                {key: str(value) for key, value in item.items()}
                if isinstance(item, dict) else item
                for item in items
            ]

    try:
        return BuildManifest.model_validate(data)
    except ValidationError as e:
        raise ManifestError(
            message=f"Manifest {manifest_path} is invalid: {e.error_count()} validation error(s)",
            manifest_path=manifest_path,
            error_code="INVALID_MANIFEST",
            details={"errors": e.errors(include_url=False)},
        ) from e


# =============================================================================
# Validation
# =============================================================================
def _check_unique(manifest: BuildManifest, manifest_path: str) -> None:
    for artifacts in (manifest.packages, manifest.blobs):
        seen: set[Any] = set()
        for artifact in artifacts:
            if artifact.key in seen:
                raise ManifestError(
                    message=f"Artifact {artifact.display_name} is listed more than once",
                    manifest_path=manifest_path,
                    error_code="DUPLICATE_ARTIFACT",
                    details={"artifact": artifact.display_name},
                )
            seen.add(artifact.key)
