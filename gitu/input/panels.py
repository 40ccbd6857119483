"""Normal-mode key bindings for each panel."""

from __future__ import annotations

from ..runtime.actions import GitActions
from ..runtime.state import Panel
from .key_registry import KeyComboRegistry

DOWN_KEYS = ("DOWN", "j")
UP_KEYS = ("UP", "k")


def status_panel_bindings(actions: GitActions) -> KeyComboRegistry:
    state = actions.state

    def move_down() -> None:
        if state.status_show_diff:
            actions.scroll_status_diff_down()
        else:
            actions.next_status_file()

    def move_up() -> None:
        if state.status_show_diff:
            actions.scroll_status_diff_up()
        else:
            actions.previous_status_file()

    def page_down() -> None:
        if state.status_show_diff:
            actions.scroll_status_diff_down(page=True)

    def page_up() -> None:
        if state.status_show_diff:
            actions.scroll_status_diff_up(page=True)

    return (
        KeyComboRegistry()
        .bind((" ",), actions.toggle_stage)
        .bind(("a",), actions.stage_all)
        .bind(("u",), actions.unstage_all)
        .bind(("c",), actions.enter_commit_message)
        .bind(("A",), actions.enter_amend)
        .bind(("x",), actions.discard_selected_file)
        .bind(("s",), actions.enter_stash_input)
        .bind(("ENTER",), actions.toggle_status_diff)
        .bind(("PAGE_DOWN",), page_down)
        .bind(("PAGE_UP",), page_up)
        .bind(DOWN_KEYS, move_down)
        .bind(UP_KEYS, move_up)
    )


def log_panel_bindings(actions: GitActions) -> KeyComboRegistry:
    state = actions.state

    def move_down() -> None:
        if state.show_diff:
            actions.scroll_diff_down()
        else:
            actions.next_commit()

    def move_up() -> None:
        if state.show_diff:
            actions.scroll_diff_up()
        else:
            actions.previous_commit()

    def next_file() -> None:
        if state.show_diff:
            actions.next_file()

    def previous_file() -> None:
        if state.show_diff:
            actions.previous_file()

    def page_down() -> None:
        if state.show_diff:
            actions.scroll_diff_down(page=True)

    def page_up() -> None:
        if state.show_diff:
            actions.scroll_diff_up(page=True)

    return (
        KeyComboRegistry()
        .bind(("ENTER",), actions.toggle_diff)
        .bind(("t",), actions.toggle_tree_view)
        .bind(("/",), actions.enter_search)
        .bind(("y",), actions.copy_commit_hash)
        .bind(("c",), actions.checkout_selected_commit)
        .bind(("b",), actions.enter_branch_input)
        .bind(("p",), actions.cherry_pick_selected)
        .bind(("r",), actions.revert_selected)
        .bind(("f",), actions.fetch)
        .bind(("P",), actions.push)
        .bind(("U",), actions.pull)
        .bind(("PAGE_DOWN",), page_down)
        .bind(("PAGE_UP",), page_up)
        .bind(DOWN_KEYS, move_down)
        .bind(UP_KEYS, move_up)
        .bind(("RIGHT", "l"), next_file)
        .bind(("LEFT", "h"), previous_file)
    )


def stash_panel_bindings(actions: GitActions) -> KeyComboRegistry:
    return (
        KeyComboRegistry()
        .bind(("a",), actions.apply_selected_stash)
        .bind(("p",), actions.pop_selected_stash)
        .bind(("d",), actions.drop_selected_stash)
        .bind(DOWN_KEYS, actions.next_stash)
        .bind(UP_KEYS, actions.previous_stash)
    )


def branches_panel_bindings(actions: GitActions) -> KeyComboRegistry:
    return (
        KeyComboRegistry()
        .bind(("ENTER",), actions.switch_to_selected_branch)
        .bind(("d",), actions.delete_selected_branch)
        .bind(("n",), actions.enter_new_branch_input)
        .bind(("m",), actions.merge_selected_branch)
        .bind(DOWN_KEYS, actions.next_branch)
        .bind(UP_KEYS, actions.previous_branch)
    )


def panel_bindings(actions: GitActions) -> dict[Panel, KeyComboRegistry]:
    return {
        Panel.STATUS: status_panel_bindings(actions),
        Panel.LOG: log_panel_bindings(actions),
        Panel.STASH: stash_panel_bindings(actions),
        Panel.BRANCHES: branches_panel_bindings(actions),
    }
