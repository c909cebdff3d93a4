"""Fake package inventory for testing.

FakePackageInventory is an in-memory implementation that accepts
pre-configured state in its constructor. FakeWinGet updates it when it
simulates installs, uninstalls and pin changes, so a test observes the same
state transitions the engine would see on a real machine.
"""

from gistsync.core.inventory.abc import PackageInventory
from gistsync.core.packages import LocalPackage, PinRecord, normalize_id


class FakePackageInventory(PackageInventory):
    """In-memory fake implementation of PackageInventory."""

    def __init__(
        self,
        *,
        packages: list[LocalPackage] | None = None,
        pins: list[PinRecord] | None = None,
        lookup_error: Exception | None = None,
    ) -> None:
        """Create FakePackageInventory with pre-configured state.

        Args:
            packages: Installed packages
            pins: Configured pins
            lookup_error: Raised from find_by_id() when set
        """
        self._packages = {normalize_id(p.id): p for p in packages or []}
        self._pins = {normalize_id(p.id): p for p in pins or []}
        self._lookup_error = lookup_error
        self._find_by_id_calls: list[str] = []
        self._list_installed_calls = 0
        self._list_pins_calls = 0

    @property
    def find_by_id_calls(self) -> list[str]:
        """Ids passed to find_by_id(), in call order."""
        return self._find_by_id_calls

    @property
    def list_installed_calls(self) -> int:
        return self._list_installed_calls

    @property
    def list_pins_calls(self) -> int:
        return self._list_pins_calls

    def find_by_id(self, package_id: str) -> LocalPackage | None:
        self._find_by_id_calls.append(package_id)
        if self._lookup_error is not None:
            raise self._lookup_error
        return self._packages.get(normalize_id(package_id))

    def list_installed(self) -> list[LocalPackage]:
        self._list_installed_calls += 1
        return list(self._packages.values())

    def list_pins(self) -> list[PinRecord]:
        self._list_pins_calls += 1
        return list(self._pins.values())

    # State access and mutation hooks used by FakeWinGet (not tracked as calls)

    def installed_package(self, package_id: str) -> LocalPackage | None:
        return self._packages.get(normalize_id(package_id))

    def pin_for(self, package_id: str) -> PinRecord | None:
        return self._pins.get(normalize_id(package_id))

    def add_package(self, package: LocalPackage) -> None:
        self._packages[normalize_id(package.id)] = package

    def remove_package(self, package_id: str) -> None:
        self._packages.pop(normalize_id(package_id), None)

    def set_pin(self, pin: PinRecord) -> None:
        self._pins[normalize_id(pin.id)] = pin

    def remove_pin(self, package_id: str) -> None:
        self._pins.pop(normalize_id(package_id), None)
