"""Manifest storage subpackage."""

from gistsync.core.manifest_store.abc import ManifestStore
from gistsync.core.manifest_store.dry_run import DryRunManifestStore
from gistsync.core.manifest_store.real import GistManifestStore

__all__ = ["ManifestStore", "GistManifestStore", "DryRunManifestStore"]
