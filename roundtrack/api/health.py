import platform
import time
from typing import Any, Dict

from roundtrack import __version__
from roundtrack.metrics import BUILD_VERSION, GIT_SHA


async def health() -> Dict[str, Any]:
    return {
        "status": "ok",
        "version": BUILD_VERSION,
        "package": __version__,
        "git": GIT_SHA,
        "ts": time.time(),
        "runtime": {
            "python": platform.python_version(),
        },
    }
