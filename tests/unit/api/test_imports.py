"""Each API module must import cleanly in a fresh interpreter."""

import os
import subprocess
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[3]


@pytest.mark.parametrize(
    "module",
    [
        "api.dependencies.auth",
        "api.v1.dependencies",
        "api.v1.routes.submissions",
        "api.v1.routes.users",
        "main",
    ],
)
def test_module_imports_first(module: str) -> None:
    env = {
        **os.environ,
        "PYTHONPATH": os.pathsep.join([str(ROOT / "src"), str(ROOT)]),
        "RATE_LIMIT_ENABLED": "false",
    }

    result = subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        cwd=ROOT,
        env=env,
        capture_output=True,
        text=True,
        timeout=60,
    )

    assert result.returncode == 0, result.stderr
