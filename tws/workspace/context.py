"""Per-invocation application context.

Bundles settings and the backend so CLI commands share one wiring point.
Tests construct it directly with an in-memory backend and pass it to the
CLI as ``obj``.
"""

from __future__ import annotations

from pathlib import Path

from tws.workspace.backend.base import WorkspaceBackend
from tws.workspace.live import read_live, read_live_or_empty
from tws.workspace.models.workspace import LiveState, WorkspaceConfig
from tws.workspace.parser import load_config
from tws.workspace.reconciler import CreationClock, Reconciler, ReconcileResult
from tws.workspace.settings import TwsSettings


class WorkspaceApp:
    def __init__(
        self,
        settings: TwsSettings,
        backend: WorkspaceBackend,
        *,
        clock: CreationClock | None = None,
        home: str | Path | None = None,
    ) -> None:
        self.settings = settings
        self.backend = backend
        self.clock = clock
        self.home = home

    @property
    def config_path(self) -> Path:
        return self.settings.config_path

    def load_config(self) -> WorkspaceConfig:
        return load_config(self.config_path, strict=self.settings.strict)

    def read_live(self) -> LiveState:
        return read_live(self.backend)

    def read_live_or_empty(self) -> LiveState:
        return read_live_or_empty(self.backend)

    def create(self, config: WorkspaceConfig) -> ReconcileResult:
        reconciler = Reconciler(
            self.backend,
            clock=self.clock,
            wait_for_tick=self.settings.wait_for_tick,
            home=self.home,
        )
        return reconciler.create(config)
