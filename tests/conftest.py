import io
import os
import sys

import pytest

# Ensure tests can import top-level modules when pytest changes CWD.
REPO_ROOT = os.path.dirname(os.path.dirname(__file__))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)


@pytest.fixture
def run():
    """Run source text through the full pipeline.

    Returns (exit_code, stdout_lines, stderr_lines).
    """
    from main import run_source

    def _run(text: str, **kwargs):
        out = io.StringIO()
        err = io.StringIO()
        code = run_source(text, output=out, err=err, **kwargs)
        return code, out.getvalue().splitlines(), err.getvalue().splitlines()

    return _run
