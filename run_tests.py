#!/usr/bin/env python
"""Run the pubcli test suite with pytest; extra arguments are passed through."""

import os
import subprocess
import sys
from pathlib import Path


def main():
    """Run pytest over the pubcli test suite."""
    project_root = Path(__file__).parent
    os.chdir(project_root)

    cmd = [sys.executable, "-m", "pytest", "tests/", "-v", "--tb=short", "--color=yes", *sys.argv[1:]]

    print(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd)

    return result.returncode


if __name__ == "__main__":
    sys.exit(main())
