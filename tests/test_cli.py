import json

from click.testing import CliRunner

from binder_core.protocol import TAG
from binder_pack.cli import main as appbinder
from binder_splice.cli import main as splice_cli

LAUNCHER = bytes(range(100))
ARCHIVE = TAG + bytes(46)


def test_splice_compose_extract_inspect(tmp_path):
    (tmp_path / "launcher").write_bytes(LAUNCHER)
    (tmp_path / "app.pck").write_bytes(ARCHIVE)
    runner = CliRunner()

    r = runner.invoke(splice_cli, ["compose", str(tmp_path / "launcher"), str(tmp_path / "app.pck"), str(tmp_path / "out")])
    assert r.exit_code == 0, r.output
    assert "= 162 bytes" in r.output

    r = runner.invoke(splice_cli, ["extract", str(tmp_path / "out"), str(tmp_path / "l2"), "--archive", str(tmp_path / "a2")])
    assert r.exit_code == 0, r.output
    assert "Extracted launcher size: 100 bytes" in r.output
    assert (tmp_path / "a2").read_bytes() == ARCHIVE

    r = runner.invoke(splice_cli, ["inspect", str(tmp_path / "out")])
    assert r.exit_code == 0, r.output
    info = json.loads(r.output)
    assert info["boundary"]["archive_size"] == 50


def test_splice_append(tmp_path):
    (tmp_path / "c").write_bytes(b"L" * 10 + (5).to_bytes(8, "little"))
    (tmp_path / "z").write_bytes(b"zip!")
    r = CliRunner().invoke(splice_cli, ["append", str(tmp_path / "c"), str(tmp_path / "z"), str(tmp_path / "out")])
    assert r.exit_code == 0, r.output
    assert "footer 5 -> 9" in r.output


def test_splice_short_file_fails_closed(tmp_path):
    (tmp_path / "tiny").write_bytes(b"abc")
    r = CliRunner().invoke(splice_cli, ["extract", str(tmp_path / "tiny"), str(tmp_path / "l2")])
    assert r.exit_code == 1
    assert "FATAL: E_FOOTER" in r.output


def test_appbinder_no_resources(tmp_path):
    (tmp_path / "game").write_bytes(LAUNCHER)
    r = CliRunner().invoke(appbinder, [str(tmp_path / "game")])
    assert r.exit_code == 0, r.output
    assert "No resource directories specified" in r.output


def test_appbinder_missing_tool(tmp_path, resources):
    (tmp_path / "game").write_bytes(LAUNCHER)
    r = CliRunner().invoke(
        appbinder,
        [str(tmp_path / "game"), str(resources / "script"), "-o", str(tmp_path / "out"), "--tool", str(tmp_path / "nope")],
    )
    assert r.exit_code == 1
    assert "FATAL: E_TOOL" in r.output


def test_appbinder_tool_failure_shows_stderr(tmp_path, resources, failing_tool):
    (tmp_path / "game").write_bytes(LAUNCHER)
    r = CliRunner(env={"APPBINDER_PCK_TOOL": str(failing_tool)}).invoke(
        appbinder, [str(tmp_path / "game"), str(resources / "script"), "-o", str(tmp_path / "out")]
    )
    assert r.exit_code == 1
    assert "boom: bad pck" in r.output
    assert not (tmp_path / "out").exists()


def test_appbinder_bundles(tmp_path, resources, fake_tool):
    (tmp_path / "game").write_bytes(LAUNCHER)
    r = CliRunner().invoke(
        appbinder,
        [str(tmp_path / "game"), str(resources / "script"), str(resources / "sounds"), "-o", str(tmp_path / "out"), "--tool", str(fake_tool)],
    )
    assert r.exit_code == 0, r.output
    assert "PCK file created successfully" in r.output
    assert (tmp_path / "out").read_bytes()[-4:] == TAG
