"""Reconciliation of the package manifest against this machine.

A sync run reads the manifest and the local inventory once, then applies
three ordered passes, one package at a time:

1. Tombstones: uninstall entries marked `uninstall: true` that are installed.
2. Installs: install entries that are missing, then apply their pin.
3. Pins: bring the pin state of already-installed entries in line with the
   manifest (add, move or remove pins).

Each package is processed independently. A failure is recorded in the
SyncResult and the run moves on to the next package. Pin changes are best
effort and never mark a package as failed.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from gistsync.core.arguments import (
    build_install_args,
    build_pin_add_args,
    build_pin_remove_args,
    build_uninstall_args,
)
from gistsync.core.inventory.abc import PackageInventory
from gistsync.core.inventory.parsing import id_matches
from gistsync.core.manifest import ManifestUnavailableError, parse_manifest
from gistsync.core.manifest_store.abc import ManifestStore
from gistsync.core.packages import (
    LocalPackage,
    PackageDefinition,
    PinRecord,
    UninstallOptions,
    normalize_id,
)
from gistsync.core.sync_result import PinAction, PinOutcome, SyncResult, SyncResultBuilder
from gistsync.core.user_feedback import UserFeedback
from gistsync.core.winget.abc import WinGet
from gistsync.core.winget.types import INVOCATION_ERROR_EXIT_CODE, NOOP_SUCCESS_EXIT_CODES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManifestSource:
    """Where a sync run reads its manifest from.

    An explicit file wins over an explicit URL; with neither, the default
    Gist of the manifest store is used.
    """

    file_path: Path | None = None
    url: str | None = None


def load_manifest(source: ManifestSource, store: ManifestStore) -> list[PackageDefinition]:
    """Read the manifest for a run.

    Raises:
        ManifestUnavailableError: If the file, URL or Gist cannot be read
        ManifestParseError: If the document is malformed
    """
    if source.file_path is not None:
        if not source.file_path.is_file():
            raise ManifestUnavailableError(f"File not found: {source.file_path}")
        logger.debug("Reading manifest from %s", source.file_path)
        try:
            text = source.file_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ManifestUnavailableError(f"Failed to read {source.file_path}: {e}") from e
        return parse_manifest(text)

    if source.url:
        logger.debug("Reading manifest from %s", source.url)
        return store.get_packages_from_url(source.url)

    return store.get_packages()


@dataclass(frozen=True)
class _LocalState:
    installed: dict[str, LocalPackage]
    pins: dict[str, PinRecord]

    def is_installed(self, package_id: str) -> bool:
        if normalize_id(package_id) in self.installed:
            return True
        # winget truncates long ids in its tables
        return any(id_matches(p.id, package_id) for p in self.installed.values())

    def pin_for(self, package_id: str) -> PinRecord | None:
        found = self.pins.get(normalize_id(package_id))
        if found is None:
            found = next((p for p in self.pins.values() if id_matches(p.id, package_id)), None)
        return found


class _Cancelled(Exception):
    pass


class ReconciliationEngine:
    """Converges this machine onto the package manifest."""

    def __init__(
        self,
        winget: WinGet,
        inventory: PackageInventory,
        manifest_store: ManifestStore,
        feedback: UserFeedback,
        *,
        refresh_inventory_before_pins: bool = True,
        should_cancel: Callable[[], bool] | None = None,
    ) -> None:
        self._winget = winget
        self._inventory = inventory
        self._manifest_store = manifest_store
        self._feedback = feedback
        self._refresh_inventory_before_pins = refresh_inventory_before_pins
        self._should_cancel = should_cancel

    def sync(self, source: ManifestSource | None = None) -> SyncResult:
        """Run one reconciliation.

        Manifest and inventory read errors propagate before anything is
        changed. After that, errors are recorded per package in the result.
        """
        packages = load_manifest(source or ManifestSource(), self._manifest_store)
        logger.debug("Manifest has %d package(s)", len(packages))

        state = self._read_local_state()
        result = SyncResultBuilder()

        try:
            self._uninstall_tombstones(packages, state, result)
            self._install_missing(packages, state, result)

            if self._refresh_inventory_before_pins:
                state = self._refresh_local_state(state)
            self._reconcile_pins(packages, state, result)
        except _Cancelled:
            self._feedback.warning("[sync] Cancelled; remaining packages were skipped")
            result.cancelled = True

        return result.build()

    def _read_local_state(self) -> _LocalState:
        installed = {normalize_id(p.id): p for p in self._inventory.list_installed()}
        pins = {normalize_id(p.id): p for p in self._inventory.list_pins()}
        logger.debug("%d package(s) installed, %d pinned", len(installed), len(pins))
        return _LocalState(installed=installed, pins=pins)

    def _refresh_local_state(self, previous: _LocalState) -> _LocalState:
        try:
            return self._read_local_state()
        except Exception as e:
            self._feedback.warning(
                f"[sync] Could not refresh installed packages, using earlier snapshot: {e}"
            )
            return previous

    def _check_cancelled(self) -> None:
        if self._should_cancel is not None and self._should_cancel():
            raise _Cancelled()

    # Pass 1

    def _uninstall_tombstones(
        self,
        packages: list[PackageDefinition],
        state: _LocalState,
        result: SyncResultBuilder,
    ) -> None:
        for package in packages:
            if not package.uninstall or not state.is_installed(package.id):
                continue
            self._check_cancelled()

            self._feedback.info(f"[sync] Uninstalling {package.id}...")
            try:
                outcome = self._winget.run(build_uninstall_args(UninstallOptions(id=package.id)))
            except Exception as e:
                self._record_error(result, package, "uninstall", e)
                continue

            if outcome.exit_code != 0:
                self._record_exit_code(result, package, "uninstall", outcome.exit_code)
                continue

            result.uninstalled.append(package)
            if state.pin_for(package.id) is not None:
                self._feedback.info(f"[sync] Removing pin for {package.id}...")
                result.pin_outcomes.append(self._try_pin_remove(package.id))

    # Pass 2

    def _install_missing(
        self,
        packages: list[PackageDefinition],
        state: _LocalState,
        result: SyncResultBuilder,
    ) -> None:
        for package in packages:
            if package.uninstall or state.is_installed(package.id):
                continue
            self._check_cancelled()

            self._feedback.info(f"[sync] Installing {package.id}...")
            try:
                outcome = self._winget.run(build_install_args(package))
                installed = self._install_succeeded(package, outcome.exit_code)
            except Exception as e:
                self._record_error(result, package, "install", e)
                continue

            if not installed:
                self._record_exit_code(result, package, "install", outcome.exit_code)
                continue

            result.installed.append(package)
            if package.pin:
                self._feedback.info(f"[sync] Pinning {package.id} to {package.pin}...")
                result.pin_outcomes.append(
                    self._try_pin_add(package.id, package.pin, package.pin_type, force=False)
                )

    def _install_succeeded(self, package: PackageDefinition, exit_code: int) -> bool:
        if exit_code == 0:
            return True
        if exit_code in NOOP_SUCCESS_EXIT_CODES:
            logger.debug("%s: exit code %d means nothing to apply", package.id, exit_code)
            return True
        # winget sometimes exits non-zero even though the package is now present
        if self._inventory.find_by_id(package.id) is not None:
            logger.debug("%s: exit code %d but package is installed", package.id, exit_code)
            return True
        return False

    # Pass 3

    def _reconcile_pins(
        self,
        packages: list[PackageDefinition],
        state: _LocalState,
        result: SyncResultBuilder,
    ) -> None:
        handled = {normalize_id(p.id) for p in result.installed}
        handled.update(normalize_id(p.id) for p in result.failed)

        for package in packages:
            if package.uninstall or normalize_id(package.id) in handled:
                continue
            if not state.is_installed(package.id):
                continue

            local_pin = state.pin_for(package.id)
            if package.pin:
                if local_pin is not None and local_pin.pinned_version == package.pin:
                    result.pin_outcomes.append(
                        PinOutcome(package_id=package.id, action="add", status="skipped")
                    )
                    continue
                self._check_cancelled()
                self._feedback.info(f"[sync] Pinning {package.id} to {package.pin}...")
                outcome = self._try_pin_add(package.id, package.pin, package.pin_type, force=True)
                result.pin_outcomes.append(outcome)
                if outcome.status == "applied":
                    result.pin_updated.append(package)
            elif local_pin is not None:
                self._check_cancelled()
                self._feedback.info(f"[sync] Removing pin for {package.id}...")
                outcome = self._try_pin_remove(package.id)
                result.pin_outcomes.append(outcome)
                if outcome.status == "applied":
                    result.pin_removed.append(package)

    # Pin side effects

    def _try_pin_add(
        self, package_id: str, version: str, pin_type: str | None, *, force: bool
    ) -> PinOutcome:
        args = build_pin_add_args(package_id, version, pin_type, force=force)
        return self._try_pin(package_id, "add", args)

    def _try_pin_remove(self, package_id: str) -> PinOutcome:
        return self._try_pin(package_id, "remove", build_pin_remove_args(package_id))

    def _try_pin(self, package_id: str, action: PinAction, args: list[str]) -> PinOutcome:
        try:
            outcome = self._winget.run(args)
        except Exception as e:
            logger.warning("Failed to %s pin for %s: %s", action, package_id, e)
            self._feedback.warning(f"[sync] Failed to {action} pin for {package_id}: {e}")
            return PinOutcome(
                package_id=package_id,
                action=action,
                status="failed",
                exit_code=INVOCATION_ERROR_EXIT_CODE,
                message=str(e),
            )

        if outcome.exit_code != 0:
            logger.warning(
                "Failed to %s pin for %s: exit code %d", action, package_id, outcome.exit_code
            )
            self._feedback.warning(
                f"[sync] Failed to {action} pin for {package_id}: exit code {outcome.exit_code}"
            )
            return PinOutcome(
                package_id=package_id,
                action=action,
                status="failed",
                exit_code=outcome.exit_code,
                message=outcome.stderr.strip() or None,
            )
        return PinOutcome(package_id=package_id, action=action, status="applied", exit_code=0)

    # Failures

    def _record_exit_code(
        self, result: SyncResultBuilder, package: PackageDefinition, verb: str, exit_code: int
    ) -> None:
        detail = f"Failed to {verb} {package.id}: exit code {exit_code}"
        self._feedback.error(f"[sync] {detail}")
        result.fail(package, exit_code, detail)

    def _record_error(
        self, result: SyncResultBuilder, package: PackageDefinition, verb: str, error: Exception
    ) -> None:
        logger.debug("%s of %s raised", verb, package.id, exc_info=error)
        detail = f"Failed to {verb} {package.id}: {error}"
        self._feedback.error(f"[sync] {detail}")
        result.fail(package, INVOCATION_ERROR_EXIT_CODE, detail)
