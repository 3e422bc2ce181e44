"""
pytest configuration and fixtures for photoprep tests.

External tools (exiftool, mediainfo, ImageMagick) are replaced by in-memory
fakes so the tests run on any machine.
"""

import io
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

import pytest


@dataclass
class CliResult:
    """Result from running CLI command."""
    exit_code: int
    output: str
    error: str


class FakePropertyReader:
    """Date-taken values keyed by file name."""

    def __init__(self):
        self.dates: Dict[str, str] = {}
        self.calls: List[Path] = []

    def get_property(self, file_path: Path, name: str) -> Optional[str]:
        self.calls.append(file_path)
        if name != "DateTaken":
            return None
        return self.dates.get(file_path.name)


class FakeVideoReader:
    """Encoded-date values keyed by file name."""

    def __init__(self):
        self.dates: Dict[str, str] = {}
        self.calls: List[Path] = []

    def read_encoded_date(self, file_path: Path) -> Optional[str]:
        self.calls.append(file_path)
        return self.dates.get(file_path.name)


class FakeConverter:
    """Writes a small marker file instead of re-encoding."""

    def __init__(self):
        self.failing: Set[str] = set()
        self.calls: List[Tuple[Path, Path]] = []

    def convert(self, input_path: Path, output_path: Path) -> bool:
        assert not output_path.exists(), f"Refusing to overwrite {output_path}"
        self.calls.append((input_path, output_path))
        if input_path.name in self.failing:
            return False
        output_path.write_bytes(b"converted from " + input_path.name.encode())
        return True


@dataclass
class FakeTools:
    properties: FakePropertyReader = field(default_factory=FakePropertyReader)
    videos: FakeVideoReader = field(default_factory=FakeVideoReader)
    converter: FakeConverter = field(default_factory=FakeConverter)


@pytest.fixture
def fake_tools(monkeypatch):
    """Fakes for the external tools, also installed where the pipeline builds them."""
    tools = FakeTools()
    monkeypatch.setattr("photoprep.core.ShellPropertyReader", lambda: tools.properties)
    monkeypatch.setattr("photoprep.core.MediaInfoReader", lambda: tools.videos)
    monkeypatch.setattr("photoprep.core.MagickConverter", lambda: tools.converter)
    return tools


@pytest.fixture
def test_config_path(tmp_path):
    """Test-specific config path."""
    return tmp_path / "config" / "config.yml"


@pytest.fixture
def create_test_files(tmp_path):
    """Helper to create test files with specific properties."""

    def create_files(file_entries: List[dict]) -> Path:
        """Create test files from a list of entries.

        Args:
            file_entries: List of dicts with keys:
                - name: filename, relative to the test directory
                - content: file content (optional)

        Returns:
            Path to directory containing created files
        """
        test_dir = tmp_path / "phone"
        test_dir.mkdir(exist_ok=True)

        for entry in file_entries:
            file_path = test_dir / entry['name']
            file_path.parent.mkdir(parents=True, exist_ok=True)

            content = entry.get('content', f"data of {entry['name']}".encode())
            if isinstance(content, str):
                file_path.write_text(content)
            else:
                file_path.write_bytes(content)

        return test_dir

    return create_files


@pytest.fixture
def snapshot():
    """Helper listing every file below a directory as relative posix paths."""

    def take(directory: Path) -> List[str]:
        return sorted(p.relative_to(directory).as_posix()
                      for p in directory.rglob("*") if p.is_file())

    return take


@pytest.fixture
def cli_runner(monkeypatch):
    """Create a CLI runner that captures output and answers prompts."""

    def run_cli(*args, config_path=None, answer="n"):
        """Run photoprep CLI with given arguments.

        Args:
            *args: Command line arguments
            config_path: Optional config path for test isolation
            answer: Reply given to every confirmation prompt

        Returns:
            CliResult with exit_code, output, and error
        """
        from photoprep.cli import main
        from photoprep.constants import get_console

        stdout = io.StringIO()
        stderr = io.StringIO()

        with monkeypatch.context() as m:
            m.setattr(sys, "stdout", stdout)
            m.setattr(sys, "stderr", stderr)
            m.setattr(sys, "argv", ["photoprep"] + [str(a) for a in args])

            # Avoid hanging on confirmation prompts
            m.setattr(get_console(), "input", lambda prompt="": answer, raising=False)

            try:
                exit_code = main(config_path=config_path)
            except SystemExit as e:
                exit_code = e.code if e.code is not None else 0

        return CliResult(
            exit_code=exit_code,
            output=stdout.getvalue(),
            error=stderr.getvalue()
        )

    return run_cli
