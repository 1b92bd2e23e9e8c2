"""Recipient domain allow-list backed by a flat text file."""

from pathlib import Path
from typing import List, Union

import structlog

from ..core.exceptions import FileReadError

logger = structlog.get_logger(__name__)


class DomainAllowList:
    """Newline-separated list of permitted domains.

    The file is re-read on every call and its contents are not validated.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def read(self) -> str:
        """Return the raw file contents.

        Raises:
            FileReadError: If the file cannot be read
        """
        try:
            contents = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read domain allow-list", path=str(self.path), error=str(e))
            raise FileReadError(str(e), path=str(self.path)) from e

        logger.debug("Domain allow-list read", path=str(self.path), size=len(contents))
        return contents

    def is_allowed(self, domain: str) -> bool:
        """Whether ``domain`` occurs anywhere in the file.

        This is a substring test on the whole file, so ``example.com`` is
        accepted when only ``notexample.com`` is listed.
        """
        return domain in self.read()

    def list_domains(self) -> List[str]:
        """Entries split on newline, empty entries dropped, order preserved."""
        return [domain for domain in self.read().split("\n") if domain != ""]
