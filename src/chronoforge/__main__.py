# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""Entry point for: python -m chronoforge"""

import os
import sys


def _ensure_hash_seed() -> None:
    """Re-exec with PYTHONHASHSEED=0 when a --seed argument is present.

    String hashing is randomised per process by default, so any set of names
    iterates in a different order from run to run.  Pinning the hash seed
    before the interpreter starts keeps two runs with the same --seed
    byte-identical, which the batch experiments rely on.

    Uses subprocess.run() rather than os.execve() so that stdout/stderr are
    inherited correctly on Windows.
    """
    if "--seed" not in sys.argv:
        return
    if os.environ.get("PYTHONHASHSEED") == "0":
        return  # already in a deterministic-hash process
    import subprocess
    env = dict(os.environ, PYTHONHASHSEED="0")
    pkg = __package__ or "chronoforge"
    result = subprocess.run([sys.executable, "-m", pkg] + sys.argv[1:], env=env)
    sys.exit(result.returncode)


_ensure_hash_seed()

from .sim import run  # noqa: E402 - import must come after re-exec guard

if __name__ == "__main__":
    run()
