"""Terminal drawing surface: cbreak mode, frame output and key polling"""

import logging
import os
import select
import shutil
import sys
import termios
import tty
from io import StringIO

from livescope.models import Dimensions, StartupError

logger = logging.getLogger(__name__)

RESET = '\033[0m'
HIDE_CURSOR = '\033[?25l'
SHOW_CURSOR = '\033[?25h'
ALT_SCREEN_ON = '\033[?1049h'
ALT_SCREEN_OFF = '\033[?1049l'
CLEAR = '\033[2J\033[H'


def move_to(row, col):
    return f'\033[{row + 1};{col + 1}H'


def fg(color):
    r, g, b = color
    return f'\033[38;2;{r};{g};{b}m'


def encode_frame(frame):
    """Encode a whole frame as one escape-sequence string"""
    output = StringIO()
    for y, row in enumerate(frame.cells):
        output.write(move_to(y, 0))
        current_color = None
        for cell in row:
            if cell.color != current_color:
                output.write(fg(cell.color))
                current_color = cell.color
            output.write(cell.glyph)
    output.write(RESET)
    return output.getvalue()


class TerminalSurface:
    """
    Context manager owning the terminal for the lifetime of a run.

    Entering saves the termios settings, switches stdin to cbreak mode, moves
    to the alternate screen and hides the cursor. Exiting undoes all of it,
    including when the body raised.
    """

    def __init__(self, stdin=None, stdout=None):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self._old_settings = None

    def __enter__(self):
        if not self.stdin.isatty():
            raise StartupError("stdin is not a terminal")
        fd = self.stdin.fileno()
        try:
            self._old_settings = termios.tcgetattr(fd)
        except termios.error as e:
            raise StartupError(f"cannot read terminal settings: {e}") from e
        try:
            tty.setcbreak(fd)
        except termios.error as e:
            self._old_settings = None
            raise StartupError(f"cannot enter raw mode: {e}") from e
        try:
            self.stdout.write(ALT_SCREEN_ON + HIDE_CURSOR + CLEAR)
            self.stdout.flush()
        except Exception:
            self.restore()
            raise
        logger.debug("Terminal acquired")
        return self

    def __exit__(self, exc_type, exc, tb):
        self.restore()
        return False

    def restore(self):
        if self._old_settings is None:
            return
        try:
            self.stdout.write(RESET + SHOW_CURSOR + ALT_SCREEN_OFF)
            self.stdout.flush()
        finally:
            termios.tcsetattr(self.stdin.fileno(), termios.TCSADRAIN, self._old_settings)
            self._old_settings = None
            logger.debug("Terminal restored")

    def size(self):
        size = shutil.get_terminal_size()
        return Dimensions(cols=max(size.columns, 1), rows=max(size.lines, 1))

    def draw(self, frame):
        self.stdout.write(encode_frame(frame))
        self.stdout.flush()

    def poll_key(self):
        """Return one pending key, or None without blocking"""
        if select.select([self.stdin], [], [], 0)[0]:
            data = os.read(self.stdin.fileno(), 1)
            return data.decode(errors='ignore') or None
        return None
