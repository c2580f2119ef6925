"""Keyboard event handling: turns keystrokes into session commands.

Two modes:
    - menu: cursor movement and menu activation
    - search: free-text tag entry (every printable key is text, including "q")
"""

from typing import Optional

from blessed.keyboard import Keystroke

from cherry_radio.domain.session.commands import (
    Command,
    Quit,
    RefreshStations,
    Search,
    SwitchToDefault,
    TogglePlay,
)

from .state import (
    UIState,
    append_input_char,
    cancel_search,
    delete_input_char,
    move_cursor,
    selected_item,
    start_search,
)


def parse_key(key: Keystroke) -> dict:
    """
    Parse keystroke into event dictionary.

    Args:
        key: blessed Keystroke

    Returns:
        Event dictionary describing the key press
    """
    event = {
        "type": "unknown",
        "key": key,
        "name": key.name if hasattr(key, "name") else None,
        "char": str(key) if key and key.isprintable() else None,
    }

    if key.name == "KEY_ENTER" or key in ("\n", "\r"):
        event["type"] = "enter"
    elif key.name == "KEY_ESCAPE" or key == "\x1b":
        event["type"] = "escape"
    elif key.name == "KEY_BACKSPACE" or key == "\x7f":
        event["type"] = "backspace"
    elif key.name == "KEY_UP" or key == "\x10":  # Ctrl+P
        event["type"] = "arrow_up"
    elif key.name == "KEY_DOWN" or key == "\x0e":  # Ctrl+N
        event["type"] = "arrow_down"
    elif key == "\x03":  # Ctrl+C
        event["type"] = "ctrl_c"
    elif key and key.isprintable():
        event["type"] = "char"

    return event


def _activate(state: UIState) -> tuple[UIState, Optional[Command]]:
    """Run the menu entry under the cursor."""
    match selected_item(state):
        case "play":
            return state, TogglePlay()
        case "search":
            return start_search(state), None
        case "default":
            return state, SwitchToDefault()
        case "refresh":
            return state, RefreshStations()
        case "exit":
            return state, Quit()
    return state, None


def _handle_search_key(state: UIState, event: dict) -> tuple[UIState, Optional[Command]]:
    if event["type"] == "enter":
        tag = state.input_text
        return cancel_search(state), Search(tag=tag)
    if event["type"] == "escape":
        return cancel_search(state), None
    if event["type"] == "backspace":
        return delete_input_char(state), None
    if event["type"] == "char":
        return append_input_char(state, event["char"]), None
    return state, None


def _handle_menu_key(state: UIState, event: dict) -> tuple[UIState, Optional[Command]]:
    if event["type"] == "arrow_up":
        return move_cursor(state, -1), None
    if event["type"] == "arrow_down":
        return move_cursor(state, 1), None
    if event["type"] == "enter":
        return _activate(state)

    if event["type"] == "char":
        match event["char"]:
            case "k":
                return move_cursor(state, -1), None
            case "j":
                return move_cursor(state, 1), None
            case " ":
                return _activate(state)
            case "/":
                return start_search(state), None
            case "q":
                return state, Quit()

    return state, None


def handle_key(state: UIState, key: Keystroke) -> tuple[UIState, Optional[Command]]:
    """
    Handle keyboard input and return updated state plus an optional command.

    Args:
        state: Current UI state
        key: Keystroke from blessed

    Returns:
        Tuple of (updated_state, command or None)
    """
    event = parse_key(key)

    if event["type"] == "ctrl_c":
        return state, Quit()

    if state.searching:
        return _handle_search_key(state, event)
    return _handle_menu_key(state, event)
