"""
feedpush.publishing.layout - Per-Variant Artifact Addressing
==============================================================

An ArtifactLayout tells the FeedPublisher, for one artifact variant, where
the local file is and where it goes in the feed. It is the only place the
two variants differ; concurrency and idempotency are shared.

    Variant   Local file                         Remote address
    -------   --------------------------------   ---------------------------------------------
    Package   <base>/<Id>.<Version>.nupkg         flatcontainer/<id>/<version>/<id>.<version>.nupkg
    Blob      <base>/<basename(Id)>               assets/<Id>

Package addresses are lower-cased, as package feeds are case-insensitive.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from feedpush.core.enums import ArtifactKind
from feedpush.core.models import ArtifactRef, BlobArtifact, PackageArtifact


ASSETS_VIRTUAL_DIR = "assets/"
FLAT_CONTAINER_DIR = "flatcontainer/"


class ArtifactLayout(ABC):
    """Maps artifacts of one variant to local paths and remote addresses."""

    kind: ArtifactKind

    def __init__(self, base_path: Union[str, Path]) -> None:
        self._base_path = Path(base_path)

    @property
    def base_path(self) -> Path:
        return self._base_path

    @abstractmethod
    def local_path(self, artifact: ArtifactRef) -> Path:
        ...

    @abstractmethod
    def remote_address(self, artifact: ArtifactRef) -> str:
        ...


class PackageLayout(ArtifactLayout):
    """Layout of ``.nupkg`` packages in the feed's flat container."""

    kind = ArtifactKind.PACKAGE

    def local_path(self, artifact: PackageArtifact) -> Path:
        return self._base_path / f"{artifact.id}.{artifact.version}.nupkg"

    def remote_address(self, artifact: PackageArtifact) -> str:
        package_id = artifact.id.lower()
        version = artifact.version.lower()
        return f"{FLAT_CONTAINER_DIR}{package_id}/{version}/{package_id}.{version}.nupkg"


class BlobLayout(ArtifactLayout):
    """Layout of loose blobs under the feed's assets directory."""

    kind = ArtifactKind.BLOB

    def local_path(self, artifact: BlobArtifact) -> Path:
        file_name = _posix_id(artifact).rsplit("/", 1)[-1]
        return self._base_path / file_name

    def remote_address(self, artifact: BlobArtifact) -> str:
        return f"{ASSETS_VIRTUAL_DIR}{_posix_id(artifact).lstrip('/')}"


def _posix_id(artifact: BlobArtifact) -> str:
    # Manifests produced on Windows may use backslashes
    return artifact.id.replace("\\", "/")
