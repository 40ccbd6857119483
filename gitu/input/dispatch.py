"""Mode dispatcher: routes one key token to exactly one state transition.

Precedence, outermost first: the help overlay, the active text-input mode,
tree view, then normal mode (global keys before the current panel's keys).
"""

from __future__ import annotations

from ..runtime import modes
from ..runtime.actions import GitActions
from ..runtime.state import InputMode, Panel, TreeViewMode
from .key_registry import KeyComboRegistry
from .panels import DOWN_KEYS, UP_KEYS, panel_bindings

HELP_DISMISS_KEYS = frozenset({"?", "ESC"})
PANEL_KEYS = {
    "1": Panel.STATUS,
    "2": Panel.LOG,
    "3": Panel.STASH,
    "4": Panel.BRANCHES,
}


def _is_text_key(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


class ModeDispatcher:
    """Key routing bound to one ``GitActions`` instance."""

    def __init__(self, actions: GitActions) -> None:
        self.actions = actions
        self.state = actions.state
        self._panels = panel_bindings(actions)
        self._global = self._build_global_bindings()
        self._tree_view = self._build_tree_view_bindings()

    def _build_global_bindings(self) -> KeyComboRegistry:
        actions = self.actions
        registry = (
            KeyComboRegistry()
            .bind(("q",), actions.quit)
            .bind(("?",), actions.toggle_help)
            .bind(("ESC",), actions.escape)
            .bind(("R",), actions.refresh_all)
        )
        for key, panel in PANEL_KEYS.items():
            registry.bind((key,), lambda panel=panel: actions.switch_panel(panel))
        registry.bind(("CTRL_C",), self._force_quit)
        return registry

    def _force_quit(self) -> None:
        self.state.should_quit = True

    def _build_tree_view_bindings(self) -> KeyComboRegistry:
        actions = self.actions
        state = self.state

        def file_selected() -> bool:
            mode = state.mode
            return isinstance(mode, TreeViewMode) and mode.file_selected

        def move_down() -> None:
            if file_selected():
                actions.scroll_diff_down()
            else:
                actions.next_file()

        def move_up() -> None:
            if file_selected():
                actions.scroll_diff_up()
            else:
                actions.previous_file()

        def page_down() -> None:
            if file_selected():
                actions.scroll_diff_down(page=True)

        def page_up() -> None:
            if file_selected():
                actions.scroll_diff_up(page=True)

        return (
            KeyComboRegistry()
            .bind(("q", "t"), actions.toggle_tree_view)
            .bind(("?",), actions.toggle_help)
            .bind(("ESC",), actions.exit_tree_view)
            .bind(("ENTER",), actions.select_tree_file)
            .bind(("PAGE_DOWN",), page_down)
            .bind(("PAGE_UP",), page_up)
            .bind(DOWN_KEYS, move_down)
            .bind(UP_KEYS, move_up)
            .bind(("CTRL_C",), self._force_quit)
        )

    def _handle_help_key(self, key: str) -> None:
        if key in HELP_DISMISS_KEYS:
            self.state.help_visible = False

    def _handle_input_key(self, key: str) -> None:
        actions = self.actions
        if key == "ESC":
            actions.cancel_input()
        elif key == "ENTER":
            actions.confirm_input()
        elif key == "BACKSPACE":
            modes.delete_char(self.state)
        elif _is_text_key(key):
            modes.append_char(self.state, key)

    def handle_key(self, key: str) -> bool:
        """Apply ``key`` to the state and return ``True`` when the app should quit."""
        state = self.state
        if state.help_visible:
            self._handle_help_key(key)
        elif isinstance(state.mode, InputMode):
            self._handle_input_key(key)
        elif isinstance(state.mode, TreeViewMode):
            self._tree_view.dispatch(key)
        elif self._global.dispatch(key) is None:
            self._panels[state.panel].dispatch(key)
        return state.should_quit


def handle_key(key: str, actions: GitActions) -> bool:
    """One-shot dispatch helper for callers without a long-lived dispatcher."""
    return ModeDispatcher(actions).handle_key(key)
