#!/usr/bin/env python3
"""
Run black over the arena-lru sources (settings come from pyproject.toml).

Usage:
    ./scripts/format_python.py          # reformat in place
    ./scripts/format_python.py --check  # only report, non-zero exit if changes are needed
"""

import subprocess
import sys
from pathlib import Path

SOURCE_PATHS = ["arena_lru", "tests", "scripts", "main.py", "conftest.py"]
SKIP_PARTS = {"venv", ".venv", "__pycache__", "build"}


def find_python_files(project_root: Path) -> list[Path]:
    """Collect Python files below the source paths, skipping virtualenvs and caches."""
    python_files = []
    for source in SOURCE_PATHS:
        path = project_root / source
        if path.is_file():
            python_files.append(path)
            continue
        for file_path in sorted(path.rglob("*.py")):
            if SKIP_PARTS.intersection(file_path.parts):
                continue
            python_files.append(file_path)
    return python_files


def run_black(project_root: Path, file_paths: list[Path], check: bool) -> bool:
    """Run black on the given files, return True on success."""
    if not file_paths:
        print("No Python files found to format.")
        return True

    cmd = ["black"]
    if check:
        cmd.append("--check")
    cmd += [str(f) for f in file_paths]

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, cwd=project_root)
    except FileNotFoundError:
        print("Error: black not found. Please install it using 'pip install -e .[dev]'.")
        return False

    if result.returncode == 0:
        action = "Checked" if check else "Formatted"
        print(f"{action} {len(file_paths)} file(s).")
        return True

    print("black reported problems:")
    print(result.stderr)
    return False


def main():
    project_root = Path(__file__).parent.parent
    check = "--check" in sys.argv[1:]

    python_files = find_python_files(project_root)
    print(f"Found {len(python_files)} Python file(s) in {project_root}.")

    return 0 if run_black(project_root, python_files, check) else 1


if __name__ == "__main__":
    sys.exit(main())
