"""Local package state subpackage (installed packages and pins)."""

from gistsync.core.inventory.abc import PackageInventory
from gistsync.core.inventory.real import WinGetPackageInventory

__all__ = ["PackageInventory", "WinGetPackageInventory"]
