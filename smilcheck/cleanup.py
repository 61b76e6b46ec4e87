import os
import shutil
from typing import Optional


def cleanup_extraction_dir(path: Optional[str]) -> Optional[BaseException]:
    if not path:
        return None

    try:
        if os.path.exists(path):
            shutil.rmtree(path)
    except FileNotFoundError:
        return None
    except BaseException as exc:  # pragma: no cover - asserted via main() behavior
        return exc
    return None
