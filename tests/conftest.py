import pytest
import tempfile
import os
import sys
from typing import Dict
import logging

import directory_flattener

# Configure logging for tests - Windows safe
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

# Smallest valid PNG header plus some non-text bytes
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\xff\xfe"


@pytest.fixture(autouse=True)
def offline_token_counter(monkeypatch):
    """tiktoken downloads its encoding on first use; keep tests offline."""
    monkeypatch.setattr(
        directory_flattener, "count_tokens", lambda text: len(text.split())
    )


@pytest.fixture
def temp_project_dir():
    """Create a temporary directory for individual test projects"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def output_dir():
    """Separate directory for generated reports so they never end up in the walk"""
    with tempfile.TemporaryDirectory(prefix="flattener_reports_") as tmpdir:
        yield tmpdir


@pytest.fixture
def sample_python_project():
    """Create a sample Python project structure for testing"""
    with tempfile.TemporaryDirectory() as tmpdir:
        project_structure = {
            "setup.py": """from setuptools import setup, find_packages
setup(
    name="test_project",
    version="0.1.0",
    packages=find_packages(),
)""",
            "requirements.txt": "requests==2.25.1\npytest==6.2.4\n",
            "src/main.py": """from utils import helper_function

def main():
    print(helper_function())

if __name__ == "__main__":
    main()
""",
            "src/utils.py": "def helper_function():\n    return True\n",
            "src/__pycache__/main.cpython-312.pyc": "compiled",
            "tests/test_main.py": "def test_helper_function():\n    assert True\n",
            "README.md": "# Test Project\n\nSample project for the flattener.\n",
            "node_modules/lib/index.js": "module.exports = {};\n",
            ".git/config": "[core]\n\trepositoryformatversion = 0\n",
            ".gitignore": """# Byte-compiled files
__pycache__/

/node_modules/
.venv/
""",
        }

        for path, content in project_structure.items():
            create_file_with_content(tmpdir, path, content)

        yield tmpdir


@pytest.fixture
def mixed_content_project():
    """Create a project mixing text, known-binary and unknown-extension files"""
    with tempfile.TemporaryDirectory() as tmpdir:
        create_file_with_content(tmpdir, "app.py", "print('hello world')\n")
        create_file_with_content(tmpdir, "notes.xyz", "plain utf-8 text: café\n")
        create_file_with_content(tmpdir, "Makefile", "all:\n\techo done\n")
        create_file_with_content(tmpdir, "docs/guide.md", "# Guide\n")

        with open(os.path.join(tmpdir, "logo.png"), "wb") as f:
            f.write(PNG_BYTES)
        with open(os.path.join(tmpdir, "bundle.zip"), "wb") as f:
            f.write(b"PK\x03\x04\x14\x00\x00\x00")
        with open(os.path.join(tmpdir, "blob.xyz"), "wb") as f:
            f.write(b"\xff\xfe\xfa not utf-8 \x80\x81")

        yield tmpdir


def create_file_with_content(
    directory: str, filename: str, content: str, encoding: str = "utf-8"
):
    """Helper to create files with specific content and encoding - Windows safe"""
    filepath = os.path.join(directory, filename.replace("/", os.sep))
    os.makedirs(os.path.dirname(filepath), exist_ok=True)

    if encoding == "binary":
        with open(filepath, "wb") as f:
            f.write(content.encode("utf-8", errors="ignore"))
    else:
        with open(filepath, "w", encoding=encoding, newline="") as f:
            f.write(content)

    return filepath


def read_report(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def validate_markdown_structure(content: str) -> Dict[str, object]:
    """Validate the fenced-block structure of a generated report"""
    lines = content.split("\n")
    fence_lines = [line for line in lines if line.startswith("```")]
    validation_result = {
        "has_title": content.startswith("# "),
        "has_generated_line": "**Generated:**" in content,
        "fence_count": len(fence_lines),
        "balanced_fences": len(fence_lines) % 2 == 0,
        "file_headings": sum(1 for line in lines if line.startswith("### `")),
        "errors": [],
    }

    if not validation_result["has_title"]:
        validation_result["errors"].append("Missing document title")
    if not validation_result["has_generated_line"]:
        validation_result["errors"].append("Missing generated timestamp")
    if not validation_result["balanced_fences"]:
        validation_result["errors"].append("Unbalanced code block markers")

    validation_result["is_valid"] = len(validation_result["errors"]) == 0
    return validation_result


# Windows-compatible test markers
def pytest_configure(config):
    config.addinivalue_line("markers", "critical: marks tests as critical (must pass)")
    config.addinivalue_line(
        "markers", "important: marks tests as important (should pass)"
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
    config.addinivalue_line("markers", "slow: marks tests as slow running")
    config.addinivalue_line("markers", "skip_on_windows: skip test on Windows")


def pytest_runtest_setup(item):
    """Skip certain tests on Windows"""
    if "skip_on_windows" in [marker.name for marker in item.iter_markers()]:
        if sys.platform.startswith("win"):
            pytest.skip("Skipped on Windows")
