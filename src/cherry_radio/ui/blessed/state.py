"""UI state management - immutable state updates."""

from dataclasses import dataclass, replace

# Menu entries: (id, label). The "play" label flips to "Pause" while playing.
MENU_ITEMS: tuple[tuple[str, str], ...] = (
    ("play", "Play"),
    ("search", "Search"),
    ("default", "Default station"),
    ("refresh", "Refresh stations"),
    ("exit", "Exit"),
)

# Longest tag the search prompt accepts
SEARCH_CHAR_LIMIT = 156


@dataclass(frozen=True)
class UIState:
    """UI-only state. Session data lives in SessionSnapshot."""

    cursor: int = 0
    searching: bool = False
    input_text: str = ""
    busy: bool = False  # A blocking session command is running


def selected_item(state: UIState) -> str:
    """Id of the menu entry under the cursor."""
    return MENU_ITEMS[state.cursor][0]


def move_cursor(state: UIState, delta: int) -> UIState:
    """Move the menu cursor, clamped to the menu bounds."""
    cursor = max(0, min(len(MENU_ITEMS) - 1, state.cursor + delta))
    return replace(state, cursor=cursor)


def start_search(state: UIState) -> UIState:
    """Open the search prompt with an empty tag."""
    return replace(state, searching=True, input_text="")


def cancel_search(state: UIState) -> UIState:
    """Close the search prompt and discard the typed tag."""
    return replace(state, searching=False, input_text="")


def append_input_char(state: UIState, char: str) -> UIState:
    """Append a character to the search tag."""
    if len(state.input_text) >= SEARCH_CHAR_LIMIT:
        return state
    return replace(state, input_text=state.input_text + char)


def delete_input_char(state: UIState) -> UIState:
    """Remove the last character of the search tag."""
    return replace(state, input_text=state.input_text[:-1])


def set_busy(state: UIState, busy: bool) -> UIState:
    """Mark a blocking command as running."""
    return replace(state, busy=busy)
