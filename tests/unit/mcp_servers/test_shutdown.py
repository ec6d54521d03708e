"""Process-level shutdown: SIGTERM while the host still holds stdin open."""

from __future__ import annotations

import os
import signal
import subprocess
import sys
from pathlib import Path

import pytest

SRC = Path(__file__).resolve().parents[3] / "src"

SERVE_WITH_MEMORY_STORE = """
import sys
from unittest.mock import patch

from kvgate.mcp_servers import redis_server
from kvgate.persistence.memory_backend import MemoryKeyValueStore

with patch.object(redis_server, "create_store", return_value=MemoryKeyValueStore()):
    sys.exit(redis_server.main([]))
"""


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals only")
def test_sigterm_exits_0_with_stdin_open():
    env = {**os.environ, "PYTHONPATH": os.pathsep.join([str(SRC), os.environ.get("PYTHONPATH", "")])}
    proc = subprocess.Popen(
        [sys.executable, "-c", SERVE_WITH_MEMORY_STORE],
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env=env,
        text=True,
    )
    try:
        seen = []
        for line in proc.stderr:
            seen.append(line)
            if "running on stdio" in line:
                break
        assert any("running on stdio" in line for line in seen), "".join(seen)

        proc.send_signal(signal.SIGTERM)
        assert proc.wait(timeout=10) == 0
        assert "Received SIGTERM" in proc.stderr.read()
    finally:
        if proc.poll() is None:
            proc.kill()
            proc.wait()
        proc.stdin.close()
