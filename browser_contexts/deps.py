"""Service wiring for CLI commands.

One ``AppContext`` is built per invocation from settings and handed to every
command through ``click``'s context object.  Services are created lazily so
that commands which only touch the config file never enumerate processes.

Usage in commands::

    @main.command()
    @pass_app
    def thing(app: AppContext) -> None:
        config = app.store.load()
        ...

Tests construct an ``AppContext`` with fakes and pass it as ``obj=`` to
``CliRunner.invoke``.
"""

from __future__ import annotations

from functools import cached_property

import click

from browser_contexts.execution.launcher import SessionLauncher
from browser_contexts.execution.prober import LivenessProber
from browser_contexts.settings import BrowserContextsSettings
from browser_contexts.store.config import ConfigStore
from browser_contexts.sync.git import GitClient


class AppContext:
    def __init__(
        self,
        settings: BrowserContextsSettings,
        *,
        store: ConfigStore | None = None,
        prober: LivenessProber | None = None,
        launcher: SessionLauncher | None = None,
        git: GitClient | None = None,
    ) -> None:
        self.settings = settings
        self.store = store or ConfigStore(settings.config_path, settings.default_data_dir)
        if prober is not None:
            self.__dict__["prober"] = prober
        if launcher is not None:
            self.__dict__["launcher"] = launcher
        if git is not None:
            self.__dict__["git"] = git

    @cached_property
    def prober(self) -> LivenessProber:
        return LivenessProber(self.settings)

    @cached_property
    def launcher(self) -> SessionLauncher:
        return SessionLauncher(self.settings, self.prober)

    @cached_property
    def git(self) -> GitClient:
        return GitClient(self.settings.git_command)


pass_app = click.make_pass_decorator(AppContext)
