"""Run the external code formatter over rewritten files."""

from __future__ import annotations

import concurrent.futures
from pathlib import Path
import subprocess
from typing import Iterable, Sequence

from tsimports.core.config import FormatterSettings
from tsimports.core.logging import get_logger
from tsimports.errors import FormatterError

__all__ = ["Formatter"]

logger = get_logger(__name__)


class Formatter:
    """Invoke the configured formatter command on single files.

    The command runs in the file's directory with the file's basename as its
    last argument, the way ``npx prettier --write`` expects.
    """

    def __init__(self, settings: FormatterSettings | None = None) -> None:
        self._settings = settings or FormatterSettings()

    @property
    def command(self) -> tuple[str, ...]:
        return tuple(self._settings.command)

    def __call__(self, path: Path) -> None:
        self.format_file(path)

    def format_file(self, path: Path) -> None:
        """Format ``path`` in place.

        Raises:
            FormatterError: If the command cannot start or exits non-zero.
        """

        path = Path(path)
        argv = [*self._settings.command, path.name]
        try:
            completed = subprocess.run(
                argv,
                cwd=path.parent,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise FormatterError(
                f"Cannot run {' '.join(argv)} for {path}: {exc}"
            ) from exc
        if completed.returncode != 0:
            raise FormatterError(
                f"Formatter failed for {path} (exit {completed.returncode}): "
                f"{completed.stderr.strip()}"
            )
        logger.debug("file-formatted", path=str(path))

    def format_files(self, paths: Iterable[Path]) -> list[Path]:
        """Format every existing file in ``paths`` with bounded concurrency.

        Files deleted by an earlier step are skipped. Every submitted file is
        waited for before the first failure is raised.

        Returns:
            The files that were formatted.

        Raises:
            FormatterError: If any invocation failed.
        """

        targets: Sequence[Path] = [
            Path(path) for path in dict.fromkeys(paths) if Path(path).exists()
        ]
        if not targets:
            return []

        errors: list[FormatterError] = []
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self._settings.max_concurrency,
            thread_name_prefix="formatter",
        ) as executor:
            future_map: dict[concurrent.futures.Future[None], Path] = {
                executor.submit(self.format_file, path): path
                for path in targets
            }
            for future in concurrent.futures.as_completed(future_map):
                try:
                    future.result()
                except FormatterError as exc:
                    logger.error(
                        "formatter-failed",
                        path=str(future_map[future]),
                        error=str(exc),
                    )
                    errors.append(exc)

        if errors:
            raise errors[0]
        logger.info("files-formatted", count=len(targets))
        return list(targets)
