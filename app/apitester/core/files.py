"""Marker files used to check how volumes are mounted.

Writing a file through one replica and listing it through another shows
whether a directory is shared (persistent volume) or private to the pod.
"""

import random
import string
from pathlib import Path
from typing import Union

from app.apitester.core.logging_config import get_logger

logger = get_logger(__name__)

NAME_LENGTH = 10


def random_file_name() -> str:
    """Return a random ``<10 lowercase letters>.txt`` name."""
    stem = "".join(random.choices(string.ascii_lowercase, k=NAME_LENGTH))
    return f"{stem}.txt"


def list_files(path: Union[str, Path]) -> str:
    """Render the entries of ``path`` as space-terminated names.

    Names come in reverse alphabetical order. An unreadable or missing
    directory renders as an empty string.
    """
    try:
        names = sorted(entry.name for entry in Path(path).iterdir())
    except OSError as e:
        logger.warning("Cannot list directory", path=str(path), error=str(e))
        return ""
    return "".join(f"{name} " for name in reversed(names))


def create_file(path: Union[str, Path]) -> str:
    """Create an empty randomly named file under ``path`` and list the directory.

    The directory is created when missing. Failures are logged and the
    listing is still returned.
    """
    directory = Path(path)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / random_file_name()
        target.touch(exist_ok=False)
    except FileExistsError:
        logger.warning("File already exists", path=str(directory))
    except OSError as e:
        logger.error("Cannot create file", path=str(directory), error=str(e))
    else:
        logger.info("File created", file=str(target))
    return list_files(directory)
