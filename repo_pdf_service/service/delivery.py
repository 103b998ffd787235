"""Per-request artifact directories and chunked PDF delivery."""

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Iterator, Optional

from repo_pdf_service.core.constants import STREAM_CHUNK_SIZE, TEMP_DIR_PREFIX
from repo_pdf_service.core.exceptions import DeliveryError

logger = logging.getLogger(__name__)


class ArtifactScope:
    """
    Temporary directory owning everything produced for one request.

    ``cleanup()`` is idempotent, so it can be called from the streaming
    generator, from a background task and from error paths alike.

    Example:
        >>> scope = ArtifactScope()
        >>> pdf = converter.generate(repo, options, scope.path)
        >>> chunks = scope.stream(pdf)
    """

    def __init__(self, parent: Optional[Path] = None):
        """
        Create the directory.

        Args:
            parent: Directory to create it in (system temp dir if None)

        Raises:
            DeliveryError: If the directory cannot be created
        """
        try:
            if parent is not None:
                parent.mkdir(parents=True, exist_ok=True)
            self.path = Path(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX, dir=parent))
        except OSError as e:
            raise DeliveryError("Failed to create temporary directory", str(e))
        self._removed = False
        logger.debug(f"Created artifact directory: {self.path}")

    @property
    def removed(self) -> bool:
        return self._removed

    def cleanup(self) -> None:
        """Remove the directory and everything in it."""
        if self._removed:
            return
        self._removed = True
        try:
            shutil.rmtree(self.path)
            logger.debug(f"Removed artifact directory: {self.path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to remove artifact directory {self.path}: {e}")

    def stream(self, file_path: Path, chunk_size: int = STREAM_CHUNK_SIZE) -> Iterator[bytes]:
        """
        Yield the file in chunks, removing the directory once iteration ends.

        Cleanup runs on exhaustion, on read errors and when the consumer
        closes the generator early (client disconnect).
        """
        try:
            with open(file_path, "rb") as f:
                while True:
                    chunk = f.read(chunk_size)
                    if not chunk:
                        break
                    yield chunk
        except OSError as e:
            logger.error(f"Error sending file {file_path.name}: {e}")
            raise DeliveryError(f"Failed to send {file_path.name}", str(e))
        finally:
            self.cleanup()
