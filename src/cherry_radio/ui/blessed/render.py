"""Screen rendering for the blessed UI."""

import sys

from blessed import Terminal

from cherry_radio.domain.session.state import SessionSnapshot

from .state import MENU_ITEMS, UIState

HEADER = "♪ CHERRY RADIO ♪"


def write_at(
    term: Terminal, x: int, y: int, content: str, *, clear: bool = True
) -> None:
    """Write content at position, clearing the rest of the line by default.

    Args:
        term: Blessed terminal instance
        x: Column position (0-indexed)
        y: Row position (0-indexed)
        content: Text to write (can include terminal formatting)
        clear: Whether to clear to end of line (default True)
    """
    if clear:
        sys.stdout.write(term.move_xy(x, y) + term.clear_eol + content)
    else:
        sys.stdout.write(term.move_xy(x, y) + content)


def build_lines(term: Terminal, ui_state: UIState, snapshot: SessionSnapshot) -> list[str]:
    """Compose the screen as a list of (formatted) lines."""
    lines = [term.bold_magenta(HEADER), ""]

    for index, (item_id, label) in enumerate(MENU_ITEMS):
        if item_id == "play" and snapshot.is_playing:
            label = "Pause"
        if index == ui_state.cursor:
            lines.append(term.bold(f"> {label}"))
        else:
            lines.append(f"  {label}")

    lines.append("")
    station = snapshot.current_station
    if snapshot.is_playing and station is not None:
        lines.append(term.bold_green(f"Now Playing: {station.name}"))
        if snapshot.song_title:
            lines.append(f"Song: {snapshot.song_title}")
    elif station is not None:
        lines.append(f"Station: {station.name}")

    if ui_state.busy:
        lines.append(term.yellow("Working..."))

    if snapshot.last_error:
        lines.append(term.red(f"Error: {snapshot.last_error}"))

    lines.append("")
    lines.append(term.dim("Press Exit or q to quit."))

    if ui_state.searching:
        lines.append("")
        lines.append(
            f"Search tag (rock / metal / pop / space / jungle): {ui_state.input_text}▏"
        )

    return lines


def render(term: Terminal, ui_state: UIState, snapshot: SessionSnapshot) -> None:
    """Draw the full screen."""
    lines = build_lines(term, ui_state, snapshot)
    for y, line in enumerate(lines):
        write_at(term, 0, y, line)
    sys.stdout.write(term.move_xy(0, len(lines)) + term.clear_eos)
    sys.stdout.flush()
