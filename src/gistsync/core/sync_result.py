"""Outcome of one reconciliation run."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal

from gistsync.core.packages import PackageDefinition

PinAction = Literal["add", "remove"]
PinStatus = Literal["applied", "skipped", "failed"]


@dataclass(frozen=True)
class PinOutcome:
    """Result of one pin side effect.

    Pin changes are best effort: a failed pin never marks the package as
    failed, it is only recorded here.
    """

    package_id: str
    action: PinAction
    status: PinStatus
    exit_code: int | None = None
    message: str | None = None


@dataclass(frozen=True)
class SyncResult:
    """Immutable aggregate of everything a sync run did.

    A package appears in at most one of installed, uninstalled and failed.
    pin_updated and pin_removed are independent of those three.
    """

    installed: tuple[PackageDefinition, ...] = ()
    uninstalled: tuple[PackageDefinition, ...] = ()
    pin_updated: tuple[PackageDefinition, ...] = ()
    pin_removed: tuple[PackageDefinition, ...] = ()
    failed: Mapping[PackageDefinition, int] = field(
        default_factory=lambda: MappingProxyType({})
    )
    failure_details: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    pin_outcomes: tuple[PinOutcome, ...] = ()
    cancelled: bool = False

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def changed(self) -> bool:
        """Whether the run changed anything on this machine."""
        return bool(
            self.installed
            or self.uninstalled
            or self.pin_updated
            or self.pin_removed
            or any(outcome.status == "applied" for outcome in self.pin_outcomes)
        )


class SyncResultBuilder:
    """Mutable accumulator used by the engine while a run is in progress."""

    def __init__(self) -> None:
        self.installed: list[PackageDefinition] = []
        self.uninstalled: list[PackageDefinition] = []
        self.pin_updated: list[PackageDefinition] = []
        self.pin_removed: list[PackageDefinition] = []
        self.failed: dict[PackageDefinition, int] = {}
        self.failure_details: dict[str, str] = {}
        self.pin_outcomes: list[PinOutcome] = []
        self.cancelled = False

    def fail(self, package: PackageDefinition, code: int, detail: str) -> None:
        self.failed[package] = code
        self.failure_details[package.id] = detail

    def build(self) -> SyncResult:
        return SyncResult(
            installed=tuple(self.installed),
            uninstalled=tuple(self.uninstalled),
            pin_updated=tuple(self.pin_updated),
            pin_removed=tuple(self.pin_removed),
            failed=MappingProxyType(dict(self.failed)),
            failure_details=MappingProxyType(dict(self.failure_details)),
            pin_outcomes=tuple(self.pin_outcomes),
            cancelled=self.cancelled,
        )
