import base64
from collections.abc import Callable
from pathlib import Path
import sys

import pytest

from texbake.adapters.latex.artifacts import ArtifactRegistry
from texbake.adapters.latex.pipeline import CompilationPipeline
from texbake.api.document import DRY_RUN_SOURCE, Document
from texbake.api.views import RawTex, ViewRenderer
from texbake.core.config import CompilerConfig
from texbake.core.diagnostics import PDF_FAILED, PDF_GENERATED, RecordingSink
from texbake.core.exceptions import CompilationError, InvalidContentType, ViewNotFoundError


pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="stub compilers are sh scripts")

SOURCE = "\\documentclass{article}\\begin{document}Hi\\end{document}"


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def make_document(
    config_for: Callable[..., CompilerConfig],
    sink: RecordingSink,
    registry: ArtifactRegistry,
    tmp_path: Path,
) -> Callable[..., Document]:
    views_root = tmp_path / "views"
    views_root.mkdir()
    (views_root / "invoice.tex").write_text("Invoice \\VAR{number}", encoding="utf-8")

    def _make(view: str | RawTex | None = RawTex(SOURCE), stub: str = "success") -> Document:
        config = config_for(stub, views_path=views_root)
        pipeline = CompilationPipeline(config, sink=sink, registry=registry)
        return Document(view, {"user": 1}, config=config, sink=sink, pipeline=pipeline)

    return _make


def test_render_view_with_data(make_document: Callable[..., Document]) -> None:
    document = make_document("invoice").with_data({"number": 42})
    assert document.render() == "Invoice 42"
    assert not document.is_raw


def test_render_raw(make_document: Callable[..., Document]) -> None:
    document = make_document()
    assert document.is_raw
    assert document.render() == SOURCE


def test_missing_view_aborts_before_file_io(
    make_document: Callable[..., Document], work_dir: Path
) -> None:
    document = make_document("nope")
    with pytest.raises(ViewNotFoundError):
        document.download()
    assert list(work_dir.iterdir()) == []


def test_set_name_keeps_basename(make_document: Callable[..., Document]) -> None:
    document = make_document().set_name("/some/dir/report.pdf")
    assert document.name == "report.pdf"


def test_save_pdf_moves_artifact(
    make_document: Callable[..., Document], sink: RecordingSink, work_dir: Path, tmp_path: Path
) -> None:
    destination = tmp_path / "out" / "report.pdf"
    destination.parent.mkdir()

    assert make_document().save_pdf(destination) is True

    assert destination.read_text(encoding="utf-8") == SOURCE
    assert list(work_dir.iterdir()) == []
    assert sink.named(PDF_GENERATED) == [
        {"artifact": str(destination), "mode": "savepdf", "metadata": {"user": 1}}
    ]


def test_download_delivery(
    make_document: Callable[..., Document], sink: RecordingSink
) -> None:
    with make_document().download("report.pdf") as delivery:
        assert delivery.path.exists()
        assert delivery.file_name == "report.pdf"
        assert delivery.headers == {
            "Content-Type": "application/pdf",
            "Content-Disposition": 'attachment; filename="report.pdf"',
        }
        assert delivery.read_bytes() == SOURCE.encode("utf-8")
    assert not delivery.path.exists()
    assert sink.named(PDF_GENERATED)[0]["mode"] == "download"


def test_download_defaults_to_artifact_name(make_document: Callable[..., Document]) -> None:
    delivery = make_document().download()
    try:
        assert delivery.file_name == delivery.path.name
        assert delivery.file_name.endswith(".pdf")
    finally:
        delivery.release()


def test_inline_delivery(make_document: Callable[..., Document], sink: RecordingSink) -> None:
    with make_document().inline("view.pdf") as delivery:
        assert delivery.headers["Content-Disposition"] == 'inline; filename="view.pdf"'
    assert sink.named(PDF_GENERATED)[0]["mode"] == "inline"


def test_content_raw(
    make_document: Callable[..., Document], sink: RecordingSink, work_dir: Path
) -> None:
    assert make_document().content("raw") == SOURCE.encode("utf-8")
    assert list(work_dir.iterdir()) == []
    assert sink.named(PDF_GENERATED)[0]["mode"] == "content"


def test_content_base64(make_document: Callable[..., Document]) -> None:
    payload = make_document().content("base64")
    assert isinstance(payload, str)
    assert payload.endswith("\r\n")
    assert base64.b64decode(payload.replace("\r\n", "")) == SOURCE.encode("utf-8")


def test_content_wrong_type(
    make_document: Callable[..., Document], sink: RecordingSink, work_dir: Path
) -> None:
    response = make_document().content("pdf")

    assert isinstance(response, InvalidContentType)
    assert response.status == 400
    assert response.to_dict() == {"message": "Wrong type set. Use raw or base64."}
    assert list(work_dir.iterdir()) == []
    assert sink.events == [
        (
            PDF_FAILED,
            {"file_name": "", "mode": "content", "reason": "Wrong type set", "metadata": {"user": 1}},
        )
    ]


def test_content_without_output_raises_compilation_error(
    make_document: Callable[..., Document], sink: RecordingSink, work_dir: Path
) -> None:
    with pytest.raises(CompilationError, match="could not be read"):
        make_document(stub="silent").content("raw")
    assert [name for name, _ in sink.events] == [PDF_FAILED]
    assert sink.named(PDF_FAILED)[0]["mode"] == "content"
    assert sink.named(PDF_FAILED)[0]["reason"] == "output unreadable"
    assert list(work_dir.iterdir()) == []

def test_compilation_failure_propagates(
    make_document: Callable[..., Document], sink: RecordingSink
) -> None:
    with pytest.raises(CompilationError):
        make_document(stub="failure").download()
    assert [name for name, _ in sink.events] == [PDF_FAILED]


def test_dry_run(make_document: Callable[..., Document]) -> None:
    document = make_document("invoice")
    with document.dry_run() as delivery:
        assert delivery.file_name == "dryrun.pdf"
        assert delivery.read_bytes() == DRY_RUN_SOURCE.read_bytes()
    assert document.is_raw


def test_convert_html_to_latex(make_document: Callable[..., Document]) -> None:
    document = make_document()
    assert document.convert_html_to_latex("<h2>Intro</h2>") == "\\subsection{Intro}"
    assert (
        document.convert_html_to_latex("<b>x</b>", [{"tag": "b", "replace": "\\bf $1"}])
        == "\\bf x"
    )


def test_default_collaborators_follow_config(tmp_path: Path) -> None:
    config = CompilerConfig(temp_path=tmp_path, views_path=tmp_path)
    document = Document("x", config=config)
    assert isinstance(document.views, ViewRenderer)
    assert document.views.views_path == tmp_path
    assert document.pipeline.config is config
