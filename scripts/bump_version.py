#!/usr/bin/env python3
"""Bump the v4signer version in pyproject.toml and the package __init__."""
import os
import re
import sys
from pathlib import Path
from typing import Optional, Tuple

PYPROJECT = Path('pyproject.toml')
PACKAGE_INIT = Path('v4signer') / '__init__.py'

_PYPROJECT_VERSION = re.compile(r'^version = "([^"]+)"', re.MULTILINE)
_INIT_VERSION = re.compile(r'^__version__ = "([^"]+)"', re.MULTILINE)

BUMP_TYPES = ('major', 'minor', 'patch')


def bump_version(current: str, bump_type: str) -> str:
    if bump_type not in BUMP_TYPES:
        raise ValueError(f"Invalid bump type: {bump_type}")
    major, minor, patch = map(int, current.split('.'))
    if bump_type == 'major':
        return f"{major + 1}.0.0"
    if bump_type == 'minor':
        return f"{major}.{minor + 1}.0"
    return f"{major}.{minor}.{patch + 1}"


def _rewrite(path: Path, pattern: 're.Pattern[str]', new_version: str) -> Optional[str]:
    content = path.read_text()
    match = pattern.search(content)
    if not match:
        return None
    start, end = match.span(1)
    path.write_text(content[:start] + new_version + content[end:])
    return match.group(1)


def bump_files(root: Path, bump_type: str) -> Tuple[str, str]:
    """Rewrite both version strings under ``root``; returns (old, new)."""
    pyproject = root / PYPROJECT
    match = _PYPROJECT_VERSION.search(pyproject.read_text())
    if not match:
        raise ValueError(f"Could not find version in {PYPROJECT}")
    current_version = match.group(1)
    new_version = bump_version(current_version, bump_type)

    _rewrite(pyproject, _PYPROJECT_VERSION, new_version)
    if _rewrite(root / PACKAGE_INIT, _INIT_VERSION, new_version) is None:
        raise ValueError(f"Could not find __version__ in {PACKAGE_INIT}")
    return current_version, new_version


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1 or args[0] not in BUMP_TYPES:
        print("Usage: bump_version.py <major|minor|patch>", file=sys.stderr)
        return 1

    try:
        current_version, new_version = bump_files(Path.cwd(), args[0])
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    github_output = os.environ.get('GITHUB_OUTPUT')
    if github_output:
        with open(github_output, 'a') as f:
            f.write(f"current_version={current_version}\n")
            f.write(f"new_version={new_version}\n")
    else:
        print(f"Bumped version: {current_version} -> {new_version}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
