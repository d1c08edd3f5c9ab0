import os
import shlex
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import TextIO

from diff_submitter.core.application.ports.user_interaction_port import UserInteractionPort

DEFAULT_EDITOR = "vi"


class ConsoleUserInteraction(UserInteractionPort):
    """Terminal prompts plus an external editor for message round-trips.

    A closed stdin counts as declining every confirmation.
    """

    def __init__(
        self,
        editor: str | None = None,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self._editor = editor or os.environ.get("VISUAL") or os.environ.get("EDITOR") or DEFAULT_EDITOR
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stderr

    def confirm(self, prompt: str, default: bool = False) -> bool:
        suffix = "[Y/n]" if default else "[y/N]"
        answer = self._read_line(f"{prompt} {suffix} ")
        if answer is None:
            return False
        answer = answer.strip().lower()
        if not answer:
            return default
        return answer in ("y", "yes")

    def prompt(self, question: str) -> str:
        answer = self._read_line(f"{question} ")
        return (answer or "").strip()

    def notify(self, text: str) -> None:
        self._stdout.write(text.rstrip("\n") + "\n\n")
        self._stdout.flush()

    def edit(self, text: str, name: str) -> str:
        with tempfile.TemporaryDirectory(prefix="diff-submitter-") as scratch:
            path = Path(scratch) / name
            path.write_text(text, encoding="utf-8")
            completed = subprocess.run([*shlex.split(self._editor), str(path)], check=False)
            if completed.returncode != 0:
                raise RuntimeError(f"Editor '{self._editor}' exited with status {completed.returncode}")
            return path.read_text(encoding="utf-8")

    def _read_line(self, prompt: str) -> str | None:
        self._stdout.write(prompt)
        self._stdout.flush()
        line = self._stdin.readline()
        if not line:
            return None
        return line.rstrip("\n")
