import io
import sys

import pytest

from diff_submitter.infrastructure.tools.interaction.console_user_interaction import ConsoleUserInteraction


def _console(answers: str = "", editor: str | None = "true") -> tuple[ConsoleUserInteraction, io.StringIO]:
    out = io.StringIO()
    return ConsoleUserInteraction(editor=editor, stdin=io.StringIO(answers), stdout=out), out


class TestConfirm:
    @pytest.mark.parametrize(("answer", "expected"), [("y\n", True), ("YES\n", True), ("n\n", False), ("x\n", False)])
    def test_answers(self, answer, expected):
        console, out = _console(answer)

        assert console.confirm("Continue?") is expected
        assert out.getvalue() == "Continue? [y/N] "

    def test_empty_answer_uses_default(self):
        console, out = _console("\n")

        assert console.confirm("Continue?", default=True) is True
        assert out.getvalue() == "Continue? [Y/n] "

    def test_closed_stdin_declines(self):
        console, _ = _console("")

        assert console.confirm("Continue?", default=True) is False


class TestPromptAndNotify:
    def test_prompt_strips_answer(self):
        console, _ = _console("  Rebased on main  \n")

        assert console.prompt("Update note:") == "Rebased on main"

    def test_notify_separates_blocks(self):
        console, out = _console()

        console.notify("You have untracked files.\n")

        assert out.getvalue() == "You have untracked files.\n\n"


class TestEdit:
    def test_editor_changes_are_returned(self):
        script = "import sys; open(sys.argv[1], 'a', encoding='utf-8').write('Edited')"
        console, _ = _console(editor=f'{sys.executable} -c "{script}"')

        assert console.edit("Title\n", name="differential-message") == "Title\nEdited"

    def test_failing_editor_raises(self):
        console, _ = _console(editor=f'{sys.executable} -c "raise SystemExit(1)"')

        with pytest.raises(RuntimeError, match="exited with status 1"):
            console.edit("Title\n", name="differential-message")

    def test_editor_falls_back_to_environment(self, monkeypatch):
        monkeypatch.delenv("VISUAL", raising=False)
        monkeypatch.setenv("EDITOR", "nano")

        console = ConsoleUserInteraction(stdin=io.StringIO(), stdout=io.StringIO())

        assert console._editor == "nano"
