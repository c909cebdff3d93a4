"""Fake winget invocations for testing.

FakeWinGet records every argument list it receives and simulates the effect
of successful operations on an optional FakePackageInventory. Outcomes are
configured per operation and package id in the constructor.
"""

from gistsync.core.inventory.fake import FakePackageInventory
from gistsync.core.packages import LocalPackage, PinRecord, normalize_id
from gistsync.core.winget.abc import WinGet
from gistsync.core.winget.types import WinGetResult

Operation = tuple[str, str]


def _flag_value(args: list[str], flag: str) -> str | None:
    if flag in args:
        index = args.index(flag)
        if index + 1 < len(args):
            return args[index + 1]
    return None


def operation_of(args: list[str]) -> Operation:
    """Return (verb, package id) for a winget argument list.

    The verb is "install", "uninstall", "upgrade", "pin add" or "pin remove".
    """
    verb = args[0]
    if verb == "pin" and len(args) > 1:
        verb = f"pin {args[1]}"
    return verb, _flag_value(args, "--id") or ""


class FakeWinGet(WinGet):
    """In-memory fake implementation of WinGet.

    Examples:
        # Install of Git.Git fails with exit code 1603
        >>> winget = FakeWinGet(exit_codes={("install", "Git.Git"): 1603})

        # Launching winget fails for the uninstall of Foo
        >>> winget = FakeWinGet(errors={("uninstall", "Foo"): OSError("boom")})

        # Install reports failure but the package ends up installed anyway
        >>> winget = FakeWinGet(
        ...     inventory=inventory,
        ...     exit_codes={("install", "Foo"): 1},
        ...     apply_on_failure={("install", "Foo")},
        ... )
    """

    def __init__(
        self,
        *,
        inventory: FakePackageInventory | None = None,
        exit_codes: dict[Operation, int] | None = None,
        errors: dict[Operation, Exception] | None = None,
        apply_on_failure: set[Operation] | None = None,
        default_version: str = "1.0.0",
    ) -> None:
        """Create FakeWinGet with pre-configured outcomes.

        Args:
            inventory: Inventory updated when an operation takes effect
            exit_codes: Exit code per (verb, id); unlisted operations return 0
            errors: Exception raised per (verb, id)
            apply_on_failure: Operations that take effect despite a non-zero exit
            default_version: Version recorded for installs without --version
        """
        self._inventory = inventory
        self._exit_codes = {self._key(op): code for op, code in (exit_codes or {}).items()}
        self._errors = {self._key(op): err for op, err in (errors or {}).items()}
        self._apply_on_failure = {self._key(op) for op in apply_on_failure or set()}
        self._default_version = default_version
        self._calls: list[list[str]] = []

    @staticmethod
    def _key(operation: Operation) -> Operation:
        verb, package_id = operation
        return verb, normalize_id(package_id)

    @property
    def calls(self) -> list[list[str]]:
        """Argument lists received by run(), in call order."""
        return self._calls

    @property
    def operations(self) -> list[Operation]:
        """(verb, package id) of every call, in call order."""
        return [operation_of(args) for args in self._calls]

    def run(self, args: list[str]) -> WinGetResult:
        self._calls.append(list(args))
        operation = operation_of(args)
        key = self._key(operation)

        error = self._errors.get(key)
        if error is not None:
            raise error

        exit_code = self._exit_codes.get(key, 0)
        if exit_code == 0 or key in self._apply_on_failure:
            self._apply(operation, args)
        return WinGetResult(exit_code=exit_code, stdout="", stderr="")

    def _apply(self, operation: Operation, args: list[str]) -> None:
        if self._inventory is None:
            return
        verb, package_id = operation
        version = _flag_value(args, "--version")

        if verb == "install":
            self._inventory.add_package(
                LocalPackage(
                    id=package_id,
                    name=package_id,
                    version=version or self._default_version,
                )
            )
        elif verb == "upgrade":
            current = self._inventory.installed_package(package_id)
            if current is not None:
                new_version = version or current.available_version or current.version
                self._inventory.add_package(
                    LocalPackage(
                        id=current.id,
                        name=current.name,
                        version=new_version,
                        available_version=None,
                        source=current.source,
                    )
                )
        elif verb == "uninstall":
            self._inventory.remove_package(package_id)
        elif verb == "pin add":
            if "--blocking" in args:
                pin_type = "Blocking"
            elif "--gating" in args:
                pin_type = "Gating"
            else:
                pin_type = "Pinning"
            self._inventory.set_pin(
                PinRecord(id=package_id, pin_type=pin_type, pinned_version=version)
            )
        elif verb == "pin remove":
            self._inventory.remove_pin(package_id)
