"""One-shot detection of the host terminal's color palette.

The terminal is asked for its 16 ANSI colors (OSC 4), default foreground
(OSC 10) and default background (OSC 11). A primary device attributes request
(DA1) goes last: every terminal answers it, so its reply marks the end of the
color replies even when the terminal ignores the OSC queries.
"""

from __future__ import annotations

import os
import re
import select
import sys
import time
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass, field

from fizzterm.logger import get_logger
from fizzterm.palette import PALETTE, PALETTE_SIZE, Palette, PaletteCell

logger = get_logger(__name__)

DEFAULT_TIMEOUT_MS = 1000
DISABLE_ENV_VAR = "FIZZTERM_NO_DETECT"
# Extra wait past the read deadline for the worker to restore the terminal mode
RESTORE_GRACE_S = 0.1

_OSC_REPLY_PATTERN = re.compile(r"\x1b\](4;(\d+)|10|11);([^\x07\x1b]*)(?:\x07|\x1b\\)")
_DA1_REPLY_PATTERN = re.compile(r"\x1b\[\?[\d;]*c")
_READ_CHUNK = 1024


@dataclass
class TerminalColors:
    """Colors reported by the terminal. Any field may be missing."""

    slots: dict[int, str] = field(default_factory=dict)
    foreground: str | None = None
    background: str | None = None

    @property
    def empty(self) -> bool:
        """Whether the terminal answered none of the color queries."""
        return not self.slots and self.foreground is None and self.background is None

    def to_palette(self) -> Palette:
        """Build a complete palette, using defaults for unanswered slots."""
        return Palette.from_response(self.slots, self.foreground, self.background)


def build_query() -> str:
    """Build the escape sequence that asks the terminal for its colors.

    Returns:
        OSC 4 queries for every slot, OSC 10/11, then DA1.
    """
    parts = [f"\x1b]4;{index};?\x07" for index in range(PALETTE_SIZE)]
    parts.append("\x1b]10;?\x07")
    parts.append("\x1b]11;?\x07")
    parts.append("\x1b[c")
    return "".join(parts)


def parse_replies(data: str) -> TerminalColors:
    """Parse the terminal's replies to :func:`build_query`.

    Args:
        data: Raw bytes read back from the terminal, decoded.

    Returns:
        The reported colors. Unparseable replies are ignored.
    """
    colors = TerminalColors()
    for match in _OSC_REPLY_PATTERN.finditer(data):
        selector, slot, value = match.groups()
        if slot is not None:
            index = int(slot)
            if 0 <= index < PALETTE_SIZE:
                colors.slots[index] = value
        elif selector == "10":
            colors.foreground = value
        else:
            colors.background = value
    return colors


def _read_until_sentinel(fd: int, deadline: float) -> str:
    """Read from the terminal until the DA1 reply arrives or time runs out."""
    buffer = b""
    while True:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            logger.debug("Terminal did not finish answering before the deadline")
            break
        readable, _, _ = select.select([fd], [], [], remaining)
        if not readable:
            continue
        chunk = os.read(fd, _READ_CHUNK)
        if not chunk:
            break
        buffer += chunk
        if _DA1_REPLY_PATTERN.search(buffer.decode("latin-1")):
            break
    return buffer.decode("latin-1")


def query_terminal_palette(deadline: float) -> TerminalColors | None:
    """Ask the controlling terminal for its colors.

    Stops reading at ``deadline`` and restores the terminal mode before
    returning.

    Args:
        deadline: ``time.monotonic()`` value after which no more replies are read.

    Returns:
        The reported colors, or None if there is no usable terminal or it
        answered none of the color queries.
    """
    try:
        import termios
        import tty
    except ImportError:
        logger.debug("termios unavailable, skipping palette query")
        return None

    try:
        fd = os.open("/dev/tty", os.O_RDWR | os.O_NOCTTY)
    except OSError as exc:
        logger.debug(f"No controlling terminal: {exc}")
        return None

    try:
        old_settings = termios.tcgetattr(fd)
        try:
            tty.setcbreak(fd)
            os.write(fd, build_query().encode("ascii"))
            data = _read_until_sentinel(fd, deadline)
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
    except (OSError, termios.error) as exc:
        logger.debug(f"Palette query failed: {exc}")
        return None
    finally:
        os.close(fd)

    colors = parse_replies(data)
    if colors.empty:
        logger.debug("Terminal did not report any colors")
        return None
    return colors


def detection_disabled() -> bool:
    """Check whether detection should be skipped for this process.

    Returns:
        True when ``FIZZTERM_NO_DETECT`` is set or stdout is not a terminal.
    """
    if os.environ.get(DISABLE_ENV_VAR):
        return True
    return not sys.stdout.isatty()


def _discard_late_result(future: Future[TerminalColors | None]) -> None:
    if future.cancelled() or future.exception() is not None:
        return
    logger.debug("Palette reply arrived after the timeout, ignoring it")


def attempt_detect(
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    *,
    query: Callable[[float], TerminalColors | None] = query_terminal_palette,
    cell: PaletteCell = PALETTE,
) -> bool:
    """Detect the terminal palette once and install it.

    Never raises. On failure or timeout the fallback palette stays in place.
    Only the first completed attempt may write the cell; calling this again
    after that is a no-op that reports the earlier outcome.

    Args:
        timeout_ms: Time allowed for the whole round-trip, in milliseconds.
        query: Function performing the terminal exchange, given the absolute
            ``time.monotonic()`` deadline for reading replies.
        cell: Palette cell to update.

    Returns:
        True if a detected palette is installed.
    """
    if cell.settled:
        logger.debug("Palette detection already ran")
        return cell.detected

    deadline = time.monotonic() + timeout_ms / 1000
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="palette")
    future = executor.submit(query, deadline)
    try:
        # The worker stops reading at the deadline; the grace covers restoring the tty mode
        colors = future.result(timeout=max(0.0, deadline - time.monotonic()) + RESTORE_GRACE_S)
    except FuturesTimeoutError:
        logger.warning(f"Palette detection timed out after {timeout_ms}ms, using fallback colors")
        cell.settle(None)
        future.add_done_callback(_discard_late_result)
        return False
    except Exception:
        logger.exception("Palette detection failed, using fallback colors")
        cell.settle(None)
        return False
    finally:
        executor.shutdown(wait=False)

    if colors is None:
        logger.info("Terminal palette unavailable, using fallback colors")
        cell.settle(None)
        return False

    installed = cell.settle(colors.to_palette())
    if installed:
        logger.info(f"Detected terminal palette (background {cell.value.background})")
    return installed
