"""Frame composition: exact geometry, panel bodies, prompts and messages."""

from __future__ import annotations

import unittest

from gitu.git.models import (
    Branch,
    Commit,
    CommitDiff,
    Decoration,
    FileDiff,
    FileStatus,
    SearchFilter,
    StashEntry,
    StatusFile,
)
from gitu.render import build_screen, diff_stat, footer_hint, input_prompt, render_commit_row
from gitu.render.ansi import display_width, strip_ansi
from gitu.render.theme import NO_COLOR_THEME
from gitu.runtime.state import (
    AppState,
    BranchNameInputMode,
    CommitMessageInputMode,
    MessageType,
    Panel,
    SearchMode,
    TreeViewMode,
)


def _state() -> AppState:
    commits = [
        Commit(graph="* ", hash="abc1234", message="Add parser", decorations=[Decoration.head(), Decoration.branch("main")]),
        Commit(graph="* ", hash="def5678", message="Initial commit", decorations=[Decoration.tag("v1.0")]),
    ]
    return AppState.initial(
        commits,
        status_files=[
            StatusFile("staged.py", FileStatus.ADDED, staged=True),
            StatusFile("new.py", FileStatus.RENAMED, staged=False, original_path="old.py"),
        ],
        stashes=[StashEntry(0, "main", "wip on parser")],
        branches=[
            Branch("main", True, False, "abc1234", "Add parser"),
            Branch("origin/main", False, True, "abc1234"),
        ],
    )


def _plain(lines: list[str]) -> str:
    return "\n".join(strip_ansi(line) for line in lines)


class BuildScreenGeometryTests(unittest.TestCase):
    def assert_geometry(self, lines: list[str], width: int, height: int) -> None:
        self.assertEqual(len(lines), height)
        for line in lines:
            self.assertEqual(display_width(line), width, repr(line))

    def test_every_panel_fills_the_terminal(self) -> None:
        state = _state()
        for panel in Panel:
            for width, height in ((80, 24), (33, 7), (200, 50)):
                with self.subTest(panel=panel, width=width, height=height):
                    state.panel = panel
                    self.assert_geometry(build_screen(state, width, height), width, height)

    def test_diff_layouts_fill_the_terminal(self) -> None:
        state = _state()
        state.panel = Panel.LOG
        state.current_diff = CommitDiff([FileDiff("a.py", "@@ -1 +1 @@\n-old\tvalue\n+new 漢字\n")])
        state.file_selected = 0
        state.show_diff = True
        self.assert_geometry(build_screen(state, 90, 20), 90, 20)

        state.show_diff = False
        state.mode = TreeViewMode(file_selected=True)
        self.assert_geometry(build_screen(state, 90, 20), 90, 20)

    def test_tiny_terminal(self) -> None:
        lines = build_screen(_state(), 1, 1)
        self.assertEqual(len(lines), 1)

    def test_help_overlay_replaces_panels(self) -> None:
        state = _state()
        state.help_visible = True

        lines = build_screen(state, 80, 40)

        self.assert_geometry(lines, 80, 40)
        text = _plain(lines)
        self.assertIn("Keybindings", text)
        self.assertNotIn("[1] Status", text)


class BuildScreenContentTests(unittest.TestCase):
    def test_status_panel_groups_entries(self) -> None:
        text = _plain(build_screen(_state(), 100, 20, no_color=True))

        self.assertIn("[1] Status | [2] Log | [3] Stash | [4] Branches", text)
        self.assertIn("Staged Changes:", text)
        self.assertIn(">> [A] staged.py", text)
        self.assertIn("Unstaged Changes:", text)
        self.assertIn("[R] old.py -> new.py", text)

    def test_clean_working_tree(self) -> None:
        state = _state()
        state.status_files = []
        state.status_selected = None

        text = _plain(build_screen(state, 100, 20))

        self.assertIn("Nothing to commit, working tree clean", text)

    def test_no_color_has_no_escapes(self) -> None:
        state = _state()
        state.set_status("Staged staged.py", MessageType.SUCCESS)
        for panel in Panel:
            state.panel = panel
            for line in build_screen(state, 80, 24, no_color=True):
                self.assertNotIn("\x1b", line)

    def test_log_panel_title_and_rows(self) -> None:
        state = _state()
        state.panel = Panel.LOG
        state.active_filter = SearchFilter.message("parser")

        text = _plain(build_screen(state, 120, 20, no_color=True))

        self.assertIn("Git Log (2 commits) [grep: parser]", text)
        self.assertIn("* abc1234 HEAD [main] Add parser", text)
        self.assertIn("(v1.0) Initial commit", text)

    def test_status_message_is_the_first_row(self) -> None:
        state = _state()
        state.set_status("Error: git push failed", MessageType.ERROR)

        lines = build_screen(state, 80, 24)

        self.assertIn("Error: git push failed", strip_ansi(lines[0]))
        self.assertIn("[1] Status", strip_ansi(lines[1]))

    def test_input_prompt_rows_sit_above_footer(self) -> None:
        state = _state()
        state.mode = CommitMessageInputMode(buffer="Fix bug")

        lines = [strip_ansi(line) for line in build_screen(state, 100, 20)]

        self.assertTrue(lines[-3].startswith("Commit Message"))
        self.assertTrue(lines[-2].startswith("> Fix bug"))

    def test_empty_input_shows_placeholder(self) -> None:
        state = _state()
        state.panel = Panel.LOG
        state.mode = SearchMode()

        lines = [strip_ansi(line) for line in build_screen(state, 100, 20)]

        self.assertTrue(lines[-2].startswith("> Type to search commits..."))

    def test_stash_and_branches_rows(self) -> None:
        state = _state()
        state.panel = Panel.STASH
        self.assertIn("stash@{0} on main: wip on parser", _plain(build_screen(state, 100, 20)))

        state.panel = Panel.BRANCHES
        text = _plain(build_screen(state, 100, 20))
        self.assertIn("Local Branches:", text)
        self.assertIn(">> * main abc1234 Add parser", text)
        self.assertIn("Remote Branches:", text)
        self.assertIn("origin/main abc1234", text)

    def test_tree_view_lists_changed_files(self) -> None:
        state = _state()
        state.panel = Panel.LOG
        state.current_diff = CommitDiff([FileDiff("a.py", "--- a/a.py\n+++ b/a.py\n-x\n+y\n+z\n")])
        state.file_selected = 0
        state.mode = TreeViewMode()

        text = _plain(build_screen(state, 120, 20, no_color=True))

        self.assertIn("Files Changed (1)", text)
        self.assertIn("+2 -1 a.py", text)


class ChromeHelperTests(unittest.TestCase):
    def test_input_prompt_titles(self) -> None:
        state = _state()
        self.assertIsNone(input_prompt(state))

        state.mode = SearchMode(buffer="@bob")
        self.assertEqual(input_prompt(state)[0], "Author Search")
        state.mode = BranchNameInputMode(commit_hash="abc1234def")
        self.assertEqual(input_prompt(state)[0], "Create Branch at abc1234")
        state.mode = CommitMessageInputMode(amend=True)
        self.assertEqual(input_prompt(state)[0], "Amend Commit Message")

    def test_footer_hint_follows_view(self) -> None:
        state = _state()
        state.panel = Panel.LOG
        self.assertIn("Tree view", footer_hint(state))
        state.mode = TreeViewMode(file_selected=True)
        self.assertIn("Back to file list", footer_hint(state))

    def test_diff_stat_ignores_file_headers(self) -> None:
        self.assertEqual(diff_stat(FileDiff("a", "--- a/a\n+++ b/a\n+x\n-y\n-z\n")), (1, 2))

    def test_commit_row_without_decorations(self) -> None:
        row = render_commit_row(Commit(graph="| * ", hash="abc1234", message="msg"), NO_COLOR_THEME)
        self.assertEqual(row, "| * abc1234 msg")


if __name__ == "__main__":
    unittest.main()
