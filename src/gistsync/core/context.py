"""Application context with dependency injection."""

from dataclasses import dataclass, replace

from gistsync.core.global_config import GlobalConfig, load_global_config
from gistsync.core.inventory.abc import PackageInventory
from gistsync.core.inventory.real import WinGetPackageInventory
from gistsync.core.manifest_store.abc import ManifestStore
from gistsync.core.manifest_store.dry_run import DryRunManifestStore
from gistsync.core.manifest_store.real import GistManifestStore
from gistsync.core.reconcile import ReconciliationEngine
from gistsync.core.user_feedback import InteractiveFeedback, QuietFeedback, UserFeedback
from gistsync.core.winget.abc import WinGet
from gistsync.core.winget.dry_run import DryRunWinGet
from gistsync.core.winget.real import RealWinGet


@dataclass(frozen=True)
class GistSyncContext:
    """Immutable context holding all dependencies for gistsync operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    winget: WinGet
    inventory: PackageInventory
    manifest_store: ManifestStore
    feedback: UserFeedback
    global_config: GlobalConfig
    dry_run: bool

    def engine(self) -> ReconciliationEngine:
        return ReconciliationEngine(
            self.winget,
            self.inventory,
            self.manifest_store,
            self.feedback,
            refresh_inventory_before_pins=self.global_config.refresh_inventory_before_pins,
        )

    def as_dry_run(self) -> "GistSyncContext":
        """Return a copy whose winget mutations and manifest writes are only printed."""
        if self.dry_run:
            return self
        return replace(
            self,
            winget=DryRunWinGet(),
            manifest_store=DryRunManifestStore(self.manifest_store),
            dry_run=True,
        )

    @staticmethod
    def for_test(
        winget: WinGet | None = None,
        inventory: PackageInventory | None = None,
        manifest_store: ManifestStore | None = None,
        feedback: UserFeedback | None = None,
        global_config: GlobalConfig | None = None,
        dry_run: bool = False,
    ) -> "GistSyncContext":
        """Create test context with optional pre-configured implementations.

        Unset dependencies become empty fakes. When no winget is given, the
        FakeWinGet is wired to the inventory so installs become visible.

        Example:
            >>> inventory = FakePackageInventory(packages=[LocalPackage("Git.Git", "Git", "2.0")])
            >>> store = FakeManifestStore(packages=[PackageDefinition(id="Git.Git")])
            >>> ctx = GistSyncContext.for_test(inventory=inventory, manifest_store=store)
        """
        from tests.fakes.user_feedback import FakeUserFeedback

        from gistsync.core.inventory.fake import FakePackageInventory
        from gistsync.core.manifest_store.fake import FakeManifestStore
        from gistsync.core.winget.fake import FakeWinGet

        if inventory is None:
            inventory = FakePackageInventory()

        if winget is None:
            winget = FakeWinGet(
                inventory=inventory if isinstance(inventory, FakePackageInventory) else None
            )

        if manifest_store is None:
            manifest_store = FakeManifestStore()

        if feedback is None:
            feedback = FakeUserFeedback()

        if global_config is None:
            global_config = GlobalConfig()

        ctx = GistSyncContext(
            winget=winget,
            inventory=inventory,
            manifest_store=manifest_store,
            feedback=feedback,
            global_config=global_config,
            dry_run=False,
        )
        # Apply dry-run wrappers if needed (matching production behavior)
        return ctx.as_dry_run() if dry_run else ctx


def create_context(
    *, dry_run: bool, quiet: bool = False, global_config: GlobalConfig | None = None
) -> GistSyncContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.

    Args:
        dry_run: If True, winget mutations and manifest writes are printed
                 instead of executed. Reads still hit the real machine and Gist.
        quiet: If True, use QuietFeedback to suppress progress output
        global_config: Loaded config; read from ~/.gistsync/config.toml if None

    Returns:
        GistSyncContext with real implementations
    """
    if global_config is None:
        global_config = load_global_config()

    winget: WinGet = RealWinGet(global_config.winget_path)
    inventory = WinGetPackageInventory(global_config.winget_path)
    manifest_store: ManifestStore = GistManifestStore(
        file_name=global_config.gist_file_name,
        description=global_config.gist_description,
        gist_id=global_config.gist_id,
    )
    feedback: UserFeedback = QuietFeedback() if quiet else InteractiveFeedback()

    ctx = GistSyncContext(
        winget=winget,
        inventory=inventory,
        manifest_store=manifest_store,
        feedback=feedback,
        global_config=global_config,
        dry_run=False,
    )
    return ctx.as_dry_run() if dry_run else ctx
