"""Shared pytest fixtures and sample sources for specreg tests."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from specreg.config.logging import LOAD_LOGGERS
from specreg.config.models import PluginsConfig
from specreg.config.settings import SpecregSettings
from specreg.infrastructure.memory import InMemoryBackend
from specreg.infrastructure.workspace import Workspace
from specreg.loaders.loader import Loader

# ---------------------------------------------------------------------------
# Sample sources
# ---------------------------------------------------------------------------

BASE_TYPEKIT = """\
types:
  - {name: /int32_t, category: numeric, size: 4}
  - {name: /base/Time, category: compound, fields: [{name: usec, type: /int32_t}]}
  - {name: /base/Internal, category: compound, fields: [{name: x, type: /int32_t}]}
  - {name: /base/Samples, category: array, element: /int32_t, length: 4}
  - {name: /base/Angle, category: opaque}
  - {name: /base/AngleM, category: compound, fields: [{name: rad, type: /int32_t}]}
  - name: "/std/vector</int32_t>"
    category: container
    container: /std/vector
    element: /int32_t
opaques:
  - {type: /base/Angle, intermediate: /base/AngleM, generated: true}
"""

BASE_TYPELIST = """\
# exported to interfaces unless flagged 0
/int32_t 1
/base/Time 1
/base/Internal 0
/base/Samples 1
/base/Angle 1
/base/AngleM 1
/std/vector</int32_t> 1
"""

EXTRA_TYPEKIT = """\
types:
  - {name: /int32_t, category: numeric, size: 4}
  - {name: /base/Time, category: compound, fields: [{name: usec, type: /int32_t}]}
  - {name: /extra/Hidden, category: compound, fields: [{name: x, type: /int32_t}]}
"""

EXTRA_TYPELIST = """\
/int32_t 1
/base/Time 0
/extra/Hidden 0
"""

CLASH_TYPEKIT = """\
types:
  - {name: /base/Time, category: numeric, size: 8}
"""

CLASH_TYPELIST = "/base/Time 1\n"

BASE_PROJECT = """\
name: base
import_types_from: [base]
tasks:
  - name: Task
    ports:
      - {name: time, direction: output, type: /base/Time}
"""

DEMO_PROJECT = """\
name: demo
using_task_library: [base]
import_types_from: [base]
tasks:
  - name: Controller
    subclasses: base::Task
    ports:
      - {name: cmd, direction: input, type: /base/Time}
      - {name: samples, direction: input, type: "/std/vector</int32_t>"}
deployments:
  - name: demo_deployment
    tasks:
      - {name: ctrl, model: Controller}
      - {name: logger, model: base::Task}
"""

OTHER_PROJECT = """\
name: other
using_task_library: [base]
deployments:
  - name: other_deployment
    tasks:
      - {name: ctrl, model: base::Task}
"""


# ---------------------------------------------------------------------------
# Backends and loaders
# ---------------------------------------------------------------------------


class CountingBackend(InMemoryBackend):
    """In-memory backend that counts how often each source is fetched."""

    def __init__(self) -> None:
        super().__init__()
        self.project_fetches: Counter[str] = Counter()
        self.typekit_fetches: Counter[str] = Counter()

    def fetch_project_text(self, name: str) -> tuple[str, str | None]:
        self.project_fetches[name] += 1
        return super().fetch_project_text(name)

    def fetch_typekit_data(self, name: str) -> tuple[str, str]:
        self.typekit_fetches[name] += 1
        return super().fetch_typekit_data(name)


@pytest.fixture
def backend() -> CountingBackend:
    """Backend holding the base/extra/clash typekits and base/demo/other projects."""
    b = CountingBackend()
    b.add_typekit("base", BASE_TYPEKIT, BASE_TYPELIST)
    b.add_typekit("extra", EXTRA_TYPEKIT, EXTRA_TYPELIST)
    b.add_typekit("clash", CLASH_TYPEKIT, CLASH_TYPELIST)
    b.add_project("base", BASE_PROJECT, "base.project.yml")
    b.add_project("demo", DEMO_PROJECT, "demo.project.yml")
    b.add_project("other", OTHER_PROJECT, "other.project.yml")
    return b


@pytest.fixture
def loader(backend: CountingBackend) -> Loader:
    return Loader(backend)


@pytest.fixture
def dummy_loader(backend: CountingBackend) -> Loader:
    """Loader that creates null placeholders for unknown types."""
    return Loader(backend, define_dummy_types=True)


@pytest.fixture
def workspace(tmp_path: Path, backend: CountingBackend) -> Workspace:
    """Workspace over the in-memory sample backend, plugins disabled."""
    settings = SpecregSettings.from_cli(
        root=tmp_path,
        plugins=PluginsConfig(enabled=False),
    )
    return Workspace(settings, backend=backend)


# ---------------------------------------------------------------------------
# Files on disk
# ---------------------------------------------------------------------------


def write_sources(directory: Path) -> Path:
    """Write the base typekit and the base/demo/other projects under *directory*."""
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "base.typekit.yml").write_text(BASE_TYPEKIT, encoding="utf-8")
    (directory / "base.typelist").write_text(BASE_TYPELIST, encoding="utf-8")
    (directory / "base.project.yml").write_text(BASE_PROJECT, encoding="utf-8")
    (directory / "demo.project.yml").write_text(DEMO_PROJECT, encoding="utf-8")
    (directory / "other.project.yml").write_text(OTHER_PROJECT, encoding="utf-8")
    return directory


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """Directory with the sample sources written as files."""
    return write_sources(tmp_path / "models")


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def _isolated_workspace(
    tmp_path: Path,
    source_dir: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Change CWD to a temp directory holding specreg.toml and the sample sources.

    Use via ``@pytest.mark.usefixtures("_isolated_workspace")`` on command
    test classes.
    """
    (tmp_path / "specreg.toml").write_text(
        '[paths]\nsearch = ["models"]\n\n[plugins]\nenabled = false\n',
        encoding="utf-8",
    )
    monkeypatch.delenv("SPECREG_CONFIG", raising=False)
    monkeypatch.delenv("SPECREG_PATH", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Generator[None]:
    """Undo the handlers and levels ``configure_logging`` sets during CLI tests."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    levels = {name: logging.getLogger(name).level for name in ["", "specreg", *LOAD_LOGGERS]}
    yield
    root.handlers = handlers
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)
