"""Pytest configuration and fixtures for repograph tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Dict, Generator, Union

import pytest


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path_factory, monkeypatch):
    """Point the config file at an empty temp location for every test.

    Keeps a developer's ~/.repograph/config.toml from leaking into results.
    """
    home = tmp_path_factory.mktemp("repograph_home")
    monkeypatch.setattr("repograph.config.BASE_DIR", home)
    monkeypatch.setattr("repograph.config.CONFIG_FILE", home / "config.toml")
    return home


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to sample test project."""
    return Path(__file__).parent / "fixtures" / "sample_project"


@pytest.fixture
def write_tree(temp_dir: Path) -> Callable[[Dict[str, Union[str, bytes]]], Path]:
    """Materialize ``{relative path: content}`` under a fresh directory.

    Returns the root directory. ``bytes`` content is written verbatim.
    """

    def _write(files: Dict[str, Union[str, bytes]]) -> Path:
        root = temp_dir / "repo"
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        return root

    return _write


@pytest.fixture
def nested_python_code() -> str:
    """Python source with nested classes, methods and a closure."""
    return '''"""Sample module for testing."""

def hello(name: str) -> str:
    """Say hello."""
    return f"Hello, {name}!"

class Calculator:
    """Simple calculator."""

    def add(self, a: int, b: int) -> int:
        return a + b

    def multiply(self, a: int, b: int) -> int:
        def step(acc):
            return self.add(acc, a)
        result = 0
        for _ in range(b):
            result = step(result)
        return result

    class Memory:
        def recall(self):
            pass

# trailing comment
'''
