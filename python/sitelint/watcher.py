# SPDX-License-Identifier: AGPL-3.0-only OR LicenseRef-Fullbleed-Commercial
import sys
import time
from pathlib import Path
from typing import Callable, Optional

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer


class LintEventHandler(FileSystemEventHandler):
    def __init__(
        self,
        run_lint: Callable[[], object],
        delay: float = 0.5,
        clock=time.monotonic,
        root: Optional[Path] = None,
    ):
        self.run_lint = run_lint
        self.delay = delay
        self.clock = clock
        self.root = Path(root).resolve() if root is not None else None
        self.last_run = None

    def _is_page(self, raw) -> bool:
        if not raw:
            return False
        path = Path(str(raw))
        parts = path.parts[-1:]
        if self.root is not None:
            try:
                parts = path.resolve().relative_to(self.root).parts
            except ValueError:
                pass
        # Editor swap files and dot-directories
        if any(part.startswith(".") for part in parts):
            return False
        return path.name.endswith((".html", ".htm"))

    def _relevant(self, event) -> bool:
        if event.is_directory:
            return False
        if self._is_page(event.src_path):
            return True
        # Atomic saves rename a temp file onto the page
        return event.event_type == "moved" and self._is_page(getattr(event, "dest_path", ""))

    def on_any_event(self, event):
        if event.event_type not in ("created", "modified", "moved", "deleted"):
            return
        if not self._relevant(event):
            return

        # Debounce
        now = self.clock()
        if self.last_run is not None and now - self.last_run < self.delay:
            return

        changed = getattr(event, "dest_path", "") or event.src_path
        sys.stderr.write(f"[watch] Change detected in {changed}...\n")
        try:
            self.run_lint()
        except Exception as e:
            sys.stderr.write(f"[error] Lint failed: {e}\n")

        self.last_run = self.clock()


def watch(root: Path, run_lint: Callable[[], object], delay: float = 0.5) -> None:
    """Run ``run_lint`` once, then again whenever HTML under ``root`` changes."""
    sys.stderr.write(f"[watch] Watching {root} for changes...\n")

    # Initial run
    try:
        run_lint()
    except Exception as e:
        sys.stderr.write(f"[error] Initial lint failed: {e}\n")

    event_handler = LintEventHandler(run_lint, delay=delay, root=root)
    observer = Observer()
    observer.schedule(event_handler, str(root), recursive=True)
    observer.start()

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        observer.stop()
    observer.join()
