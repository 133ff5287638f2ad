"""Tests for the diagram-gen command line."""

import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from diagram_gen import cli
from diagram_gen.generator import DrawioGenerator

SERVICE_GO = '''package app

type Gateway struct {
	Next Handler `diagram:"type=gateway,name=Gateway,connectsTo=Orders"`
}

type Orders struct {
	DB *sql.DB `diagram:"type=service,name=Orders,connectsTo=OrdersDB,page=Backend"`
}

type OrdersDB struct {
	ID int `diagram:"type=database,name=OrdersDB,page=Backend"`
}
'''


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    (tmp_path / "app.go").write_text(SERVICE_GO, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _pages(path: Path) -> list[ET.Element]:
    text = path.read_text(encoding="utf-8").split("\n", 1)[1]
    return ET.fromstring(text).findall("diagram")


# ===================================================================
# generate
# ===================================================================

def test_generate_defaults(project: Path, capsys: pytest.CaptureFixture) -> None:
    assert cli.main(["generate", "app.go"]) == 0
    out = capsys.readouterr().out
    assert "Generated architecture diagram (layered layout) with 3 components and 2 connections" in out
    assert "Output written to: diagram.drawio" in out
    pages = _pages(project / "diagram.drawio")
    assert [p.get("name") for p in pages] == ["default", "Backend"]


def test_generate_options(project: Path, capsys: pytest.CaptureFixture) -> None:
    code = cli.main([
        "generate", str(project), "-o", "out/nested/arch.drawio", "-t", "network",
        "--layout", "grid", "--compress",
    ])
    assert code == 0
    assert "network diagram (grid layout)" in capsys.readouterr().out
    written = project / "out" / "nested" / "arch.drawio"
    root = ET.fromstring(written.read_text(encoding="utf-8").split("\n", 1)[1])
    assert root.get("compressed") == "true"


def test_output_under_a_file_fails(project: Path, capsys: pytest.CaptureFixture) -> None:
    (project / "taken").write_text("", encoding="utf-8")
    assert cli.main(["generate", "app.go", "-o", "taken/arch.drawio"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_isometric_flag(project: Path, capsys: pytest.CaptureFixture) -> None:
    assert cli.main(["generate", "app.go", "--layout", "grid", "--isometric"]) == 0
    assert "(isometric layout)" in capsys.readouterr().out


def test_page_filter(project: Path, capsys: pytest.CaptureFixture) -> None:
    assert cli.main(["generate", "app.go", "--page", "Backend"]) == 0
    assert "with 3 components and 2 connections" in capsys.readouterr().out

    assert cli.main(["generate", "app.go", "--page", "Frontend"]) == 0
    assert "with 1 components and 1 connections" in capsys.readouterr().out


def test_shape_default(project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    seen = []

    class RecordingGenerator(DrawioGenerator):
        def generate(self, diagram):
            seen.append(diagram)
            return super().generate(diagram)

    monkeypatch.setattr(cli, "new_generator", lambda layout, compress: RecordingGenerator(layout, compress))
    assert cli.main(["generate", "app.go", "--shape", "iso:server"]) == 0
    assert {c.shape for c in seen[0].components} == {"iso:server"}


def test_config_file_then_flags(project: Path, capsys: pytest.CaptureFixture) -> None:
    (project / ".diagram-gen.yaml").write_text(
        "layout: grid\noutput: from-config.drawio\n", encoding="utf-8"
    )
    assert cli.main(["generate", "app.go"]) == 0
    out = capsys.readouterr().out
    assert "(grid layout)" in out
    assert (project / "from-config.drawio").exists()

    assert cli.main(["generate", "app.go", "--layout", "layered"]) == 0
    assert "(layered layout)" in capsys.readouterr().out


def test_explicit_config(project: Path, capsys: pytest.CaptureFixture) -> None:
    cfg = project / "custom.json"
    cfg.write_text('{"diagram_type": "flowchart"}', encoding="utf-8")
    assert cli.main(["generate", "app.go", "--config", str(cfg)]) == 0
    assert "Generated flowchart diagram" in capsys.readouterr().out


# ===================================================================
# failures
# ===================================================================

def test_no_annotations(project: Path, capsys: pytest.CaptureFixture) -> None:
    (project / "empty.go").write_text("package empty\n", encoding="utf-8")
    assert cli.main(["generate", "empty.go"]) == 1
    assert "Error: no diagram annotations found in empty.go" in capsys.readouterr().err


def test_invalid_diagram(project: Path, capsys: pytest.CaptureFixture) -> None:
    (project / "bad.go").write_text(
        'package bad\n\ntype X struct {\n\tA int `diagram:"type=mainframe,name=X"`\n}\n',
        encoding="utf-8",
    )
    assert cli.main(["generate", "bad.go"]) == 1
    assert "unknown component type: mainframe" in capsys.readouterr().err


def test_missing_input(project: Path, capsys: pytest.CaptureFixture) -> None:
    assert cli.main(["generate", "nowhere.go"]) == 1
    assert "cannot access input path" in capsys.readouterr().err


def test_bad_config(project: Path, capsys: pytest.CaptureFixture) -> None:
    (project / ".diagram-gen.yaml").write_text("speed: 11\n", encoding="utf-8")
    assert cli.main(["generate", "app.go"]) == 1
    assert "unknown key" in capsys.readouterr().err


def test_usage_errors(capsys: pytest.CaptureFixture) -> None:
    assert cli.main([]) == 2
    assert cli.main(["generate"]) == 2
    assert cli.main(["generate", "x.go", "-t", "mindmap"]) == 2
    assert "Error:" in capsys.readouterr().err


def test_version(capsys: pytest.CaptureFixture) -> None:
    assert cli.main(["version"]) == 0
    assert capsys.readouterr().out.strip() == "diagram-gen version 0.1.0"


def test_logging_flags_either_side(project: Path) -> None:
    assert cli.main(["-v", "generate", "app.go"]) == 0
    assert cli.main(["generate", "app.go", "--debug"]) == 0
