"""
cli_interactive.py - Interactive Sorting Loop

Render -> read command -> apply -> repeat, until Finish, Quit or Cancel
"""

import logging
import time
from enum import Enum
from typing import Callable, Optional

from ..core import (
    Command, CommandType, OrderState, RegenerationEngine, RegenerationError,
    SorterOptions, SortKey, SortDirection, apply_sort, render_frame, render_direction_prompt,
)
from ..core.ports import Terminal

logger = logging.getLogger(__name__)


class SessionOutcome(Enum):
    FINISHED = "finished"       # Regenerated (or previewed)
    QUIT = "quit"               # Q pressed
    CANCELLED = "cancelled"     # ESC with nothing held
    FAILED = "failed"           # Regeneration aborted


def progress_printer(terminal: Terminal) -> Callable[[int, int, str], None]:
    """Progress callback printing one line per processed file"""
    def progress_callback(current: int, total: int, msg: str):
        terminal.print(f"  [{current}/{total}] {msg}")
    return progress_callback


class SortingSession:
    """One interactive sorting run over an OrderState"""

    def __init__(
        self,
        state: OrderState,
        terminal: Terminal,
        controller,
        engine: RegenerationEngine,
        options: Optional[SorterOptions] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.state = state
        self.terminal = terminal
        self.controller = controller
        self.engine = engine
        self.options = options or SorterOptions()
        self.sleep = sleep
        self.outcome: Optional[SessionOutcome] = None

    def _pause(self, seconds: float) -> None:
        if seconds > 0:
            self.sleep(seconds)

    def flash(self, message: str) -> None:
        """Show a transient message long enough to be read before the next redraw"""
        self.terminal.print(message)
        self._pause(self.options.message_delay)

    def render(self) -> None:
        self.terminal.clear_screen()
        self.terminal.print(render_frame(
            self.state,
            raw_mode=self.controller.raw_mode,
            name_width=self.options.name_width,
        ))

    def run(self) -> SessionOutcome:
        """Run the loop until a terminating command"""
        if self.state.is_empty:
            self.terminal.print("No migration files to sort")
            return SessionOutcome.QUIT

        self.terminal.print("Starting Interactive File Sorting")
        while self.outcome is None:
            self.render()
            command = self.controller.read_command()
            self.handle(command)
            if self.outcome is None:
                self._pause(self.options.idle_delay)

        logger.info("Sorting session ended: %s", self.outcome.value)
        return self.outcome

    def handle(self, command: Command) -> Optional[SessionOutcome]:
        """
        Apply one command to the state

        Returns:
            The session outcome once the command ends the loop, else None
        """
        logger.debug("Command %s", command.type.value)
        command_type = command.type

        if command_type == CommandType.MOVE_UP:
            self.state.move_cursor(-1)

        elif command_type == CommandType.MOVE_DOWN:
            self.state.move_cursor(1)

        elif command_type == CommandType.TOGGLE_GRAB:
            self._grab_or_drop()

        elif command_type == CommandType.FINISH:
            if self.state.is_holding:
                self.state.cancel_grab()
                self.flash("Grab cancelled")
            else:
                self._finish()

        elif command_type == CommandType.CANCEL_OR_RELEASE:
            if self.state.is_holding:
                self.state.cancel_grab()
                self.flash("Grab cancelled")
            else:
                self.terminal.print("Sorting cancelled!")
                self.outcome = SessionOutcome.CANCELLED

        elif command_type == CommandType.QUIT:
            self.terminal.print("Goodbye!")
            self.outcome = SessionOutcome.QUIT

        elif command_type == CommandType.RESET:
            self.state.reset()
            self.flash("Order reset to original!")

        elif command.is_sort:
            direction = command.direction or self.prompt_direction(command.sort_key)
            self.flash(apply_sort(self.state, command.sort_key, direction))

        # UNRECOGNIZED keys are ignored

        return self.outcome

    def prompt_direction(self, sort_by: SortKey) -> SortDirection:
        self.terminal.clear_screen()
        self.terminal.print(render_direction_prompt(sort_by, raw_mode=self.controller.raw_mode))
        return self.controller.read_direction()

    def _grab_or_drop(self) -> None:
        moved = self.state.grab()
        if moved is None:
            self.flash(f"Grabbed: {self.state.held_entry.name}")
        else:
            from_index, to_index = moved
            self.flash(f"File moved from position {from_index + 1} to position {to_index + 1}!")

    def _finish(self) -> None:
        self.terminal.print("Sorting completed!")
        self.terminal.print()
        self.terminal.print("Regenerating migration files with new order...")

        try:
            result = self.engine.finalize(self.state.sequence)
        except RegenerationError as e:
            logger.error("Regeneration failed: %s", e)
            self.terminal.print(e.report())
            self.outcome = SessionOutcome.FAILED
            return

        self.terminal.print(result.summary())
        if result.cancelled:
            # Back to sorting, nothing was changed
            self._pause(self.options.message_delay)
            return

        self.outcome = SessionOutcome.FINISHED
