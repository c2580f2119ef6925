"""Main event loop and entry point for blessed UI."""

from blessed import Terminal
from loguru import logger

from cherry_radio.core.config import UIConfig
from cherry_radio.core.output import clear_blessed_mode, set_blessed_mode
from cherry_radio.domain.session.commands import Quit
from cherry_radio.domain.session.engine import StreamSession

from .keyboard import handle_key
from .render import render
from .state import UIState, set_busy


def run_interactive_ui(session: StreamSession, ui_config: UIConfig) -> None:
    """
    Run the interactive UI until the user quits.

    The session is always shut down on exit, including on Ctrl+C.

    Args:
        session: Stream session driven by the UI
        ui_config: UI settings (colors, refresh rate)
    """
    term = Terminal() if ui_config.use_colors else Terminal(force_styling=None)

    set_blessed_mode()
    try:
        with term.fullscreen(), term.cbreak(), term.hidden_cursor():
            try:
                main_loop(term, session, ui_config)
            except KeyboardInterrupt:
                logger.info("Ctrl+C detected - cleaning up")
    finally:
        if not session.closed:
            session.dispatch(Quit())
        clear_blessed_mode()


def main_loop(term: Terminal, session: StreamSession, ui_config: UIConfig) -> None:
    """
    Render the session snapshot and feed keystrokes to the session.

    Redraws only when the UI state, the snapshot or the terminal size changed.
    """
    ui_state = UIState()
    frame_timeout = 1.0 / max(ui_config.refresh_rate, 1)
    last_frame = None

    while not session.closed:
        snapshot = session.snapshot()
        frame = (ui_state, snapshot, term.width, term.height)
        if frame != last_frame:
            render(term, ui_state, snapshot)
            last_frame = frame

        key = term.inkey(timeout=frame_timeout)
        if not key:
            continue

        ui_state, command = handle_key(ui_state, key)
        if command is None:
            continue

        # Opening a stream blocks; show that before dispatching
        render(term, set_busy(ui_state, True), snapshot)
        logger.debug(f"Dispatching {command!r}")
        session.dispatch(command)
        last_frame = None
