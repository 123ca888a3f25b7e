"""Nox sessions for texbake."""

import nox


PYPROJECT = nox.project.load_toml("pyproject.toml")
PYTHON_VERSIONS = nox.project.python_versions(PYPROJECT, max_version="3.14")
nox.options.default_venv_backend = "uv"


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run pytest across all supported Python versions."""
    session.install(".[test]")
    session.run("pytest", *session.posargs)


@nox.session(python="3.14")
def coverage(session: nox.Session) -> None:
    """Run tests with coverage reporting once."""
    session.install(".[test]")
    session.run(
        "pytest",
        "--cov=texbake",
        "--cov-report=term-missing",
        *session.posargs,
    )
