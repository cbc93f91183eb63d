import os
import sys
from pathlib import Path

import pytest

# Stand-in for godotpcktool: appends one line per staged file to the PCK,
# creating it with the PCK magic when it does not exist yet.
FAKE_TOOL = """#!{python}
import sys
from pathlib import Path

out, _a, _add, root, _rp, prefix = sys.argv[1:7]
out = Path(out)
data = out.read_bytes() if out.exists() else b"GDPC"
for p in sorted(Path(root).rglob("*")):
    if p.is_file():
        data += p.relative_to(prefix).as_posix().encode("utf-8") + b"\\n"
out.write_bytes(data)
"""

FAILING_TOOL = """#!{python}
import sys
sys.stderr.write("boom: bad pck\\n")
sys.exit(3)
"""

GARBLED_TOOL = """#!{python}
import sys
sys.stderr.buffer.write(b"\\xff\\xfe bad pck\\n")
sys.exit(2)
"""


def _write_tool(path: Path, body: str) -> Path:
    path.write_text(body.format(python=sys.executable), encoding="utf-8")
    path.chmod(0o755)
    return path


@pytest.fixture
def fake_tool(tmp_path):
    if os.name == "nt":
        pytest.skip("shebang scripts need a POSIX host")
    return _write_tool(tmp_path / "godotpcktool", FAKE_TOOL)


@pytest.fixture
def failing_tool(tmp_path):
    if os.name == "nt":
        pytest.skip("shebang scripts need a POSIX host")
    return _write_tool(tmp_path / "failing-pcktool", FAILING_TOOL)


@pytest.fixture
def resources(tmp_path):
    base = tmp_path / "res"
    (base / "script" / "sub").mkdir(parents=True)
    (base / "script" / "main.gd").write_text("extends Node\n")
    (base / "script" / "sub" / "util.gd").write_text("func f(): pass\n")
    (base / "sounds").mkdir()
    (base / "sounds" / "hit.ogg").write_bytes(b"OggS" + bytes(32))
    return base


@pytest.fixture
def garbled_tool(tmp_path):
    if os.name == "nt":
        pytest.skip("shebang scripts need a POSIX host")
    return _write_tool(tmp_path / "garbled-pcktool", GARBLED_TOOL)
