import json
import os
from pathlib import Path

import pytest

from notecraft.models import TagNode

SAMPLE_STORE = [
    {"name": "coding", "subtags": ["python", "rust", "go", "bash"]},
    "maths",
    "physics",
    {"name": "reading", "subtags": ["papers", "books", "go"]},
]


@pytest.fixture
def sample_tags() -> list[TagNode]:
    return [
        TagNode("coding", ("python", "rust", "go", "bash")),
        TagNode("maths"),
        TagNode("physics"),
        TagNode("reading", ("papers", "books", "go")),
    ]


@pytest.fixture
def tags_file(tmp_path: Path) -> Path:
    path = tmp_path / "all_tags.json"
    path.write_text(json.dumps(SAMPLE_STORE), encoding="utf-8")
    return path


@pytest.fixture
def fake_pdftotext(tmp_path: Path) -> Path:
    """Stand-in for poppler's pdftotext: prints the page range and file name."""
    script = tmp_path / "bin" / "pdftotext"
    script.parent.mkdir()
    script.write_text(
        "#!/bin/sh\n"
        "# called as: pdftotext -f FIRST -l LAST FILE -\n"
        "printf 'pages %s-%s of %s\\n' \"$2\" \"$4\" \"$(basename \"$5\")\"\n",
        encoding="utf-8",
    )
    os.chmod(script, 0o755)
    return script
