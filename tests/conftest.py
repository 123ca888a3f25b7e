from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
import textwrap

import pytest

from texbake.adapters.latex.artifacts import ArtifactRegistry
from texbake.core.config import CompilerConfig


SUCCEEDING_COMPILER = """\
#!/bin/sh
# args: -output-directory <dir> <base>
base="$3"
cp "$base" "$base.pdf"
: > "$base.aux"
: > "$base.log"
: > "$base.out"
echo "This is stub-pdfTeX"
echo "Output written on $base.pdf"
"""

FAILING_COMPILER = """\
#!/bin/sh
base="$3"
: > "$base.aux"
printf '%s\\n' 'This is stub-pdfTeX' > "$base.log"
printf '%s\\n' '! Undefined control sequence.' 'l.3 \\foo' 'No pages of output.'
exit 1
"""

QUIRKY_LOG_COMPILER = """\
#!/bin/sh
base="$3"
printf '%s\\n' 'diagnostic from the dotless log' > "${base}log"
echo "process output"
exit 1
"""

SILENT_SUCCESS_COMPILER = """\
#!/bin/sh
exit 0
"""

SLOW_COMPILER = """\
#!/bin/sh
exec sleep 5
"""


@pytest.fixture
def make_compiler(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write an executable stub compiler and return its path."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()

    def _make(body: str, name: str = "stub-latex") -> Path:
        script = bin_dir / name
        script.write_text(textwrap.dedent(body), encoding="utf-8")
        script.chmod(0o755)
        return script

    return _make


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "work"
    directory.mkdir()
    return directory


@pytest.fixture
def registry() -> ArtifactRegistry:
    return ArtifactRegistry()


STUBS = {
    "success": SUCCEEDING_COMPILER,
    "failure": FAILING_COMPILER,
    "quirky-log": QUIRKY_LOG_COMPILER,
    "silent": SILENT_SUCCESS_COMPILER,
    "slow": SLOW_COMPILER,
}


@pytest.fixture
def config_for(
    work_dir: Path, make_compiler: Callable[[str, str], Path]
) -> Callable[..., CompilerConfig]:
    """Return a factory building configs that point at a named stub compiler."""

    def _config(stub: str = "success", **extra: object) -> CompilerConfig:
        compiler = make_compiler(STUBS[stub])
        return CompilerConfig(bin_path=str(compiler), temp_path=work_dir, **extra)

    return _config
