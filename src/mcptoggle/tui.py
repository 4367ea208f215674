#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Interactive full-screen list for toggling servers.

Raw input bytes go through KeyDecoder, a small state machine
(idle -> ESC seen -> CSI seen -> arrow), so the loop itself never looks at bytes.
Screens are drawn with rich.
"""
import os
import sys
import termios
import tty
from typing import Callable, Iterable, List, Optional, Sequence

from rich.console import Console, Group
from rich.text import Text

from .registry import ServerEntry, ServerRegistry

UP = "up"
DOWN = "down"
TOGGLE = "toggle"
QUIT = "quit"

_IDLE, _ESC, _CSI = range(3)
_ARROWS = {ord("A"): UP, ord("B"): DOWN}


class KeyDecoder:
    def __init__(self):
        self.state = _IDLE

    def feed(self, data: bytes) -> List[str]:
        events = []
        for b in data:
            ev = self._step(b)
            if ev:
                events.append(ev)
        return events

    def _step(self, b: int) -> Optional[str]:
        if self.state == _ESC:
            if b in (ord("["), ord("O")):
                self.state = _CSI
                return None
            # lone ESC: the byte is an ordinary key
            self.state = _IDLE
        elif self.state == _CSI:
            # 파라미터 바이트(숫자, ;)는 건너뛰고 최종 바이트에서 확정
            if 0x30 <= b <= 0x3F:
                return None
            self.state = _IDLE
            return _ARROWS.get(b)

        if b == 0x1B:
            self.state = _ESC
            return None
        if b in (ord("q"), ord("Q"), 0x03):
            return QUIT
        if b == ord(" "):
            return TOGGLE
        return None


def render(title: str, items: Sequence[ServerEntry], selected: int, paths: Iterable) -> Group:
    lines = [Text(""), Text(f"  {title}", style="bold"), Text("")]
    if not items:
        lines.append(Text("  No MCP servers found in:"))
        lines.extend(Text(f"  {p}") for p in paths)
        lines.append(Text(""))
        return Group(*lines)

    for i, it in enumerate(items):
        prefix = "▶ " if i == selected else "  "
        mark = Text("✓", style="green") if it.enabled else Text("✗", style="red")
        line = Text.assemble(prefix, mark, f" {it.name}")
        if i == selected:
            line.stylize("reverse")
        lines.append(Text.assemble("  ", line))
    lines.append(Text(""))
    lines.append(Text("  ↑/↓: Navigate  SPACE: Toggle  Q: Quit", style="dim"))
    return Group(*lines)


class ListView:
    """Selection state plus the registry calls behind each key."""

    def __init__(self, registry: ServerRegistry, draw: Callable[[Group], None]):
        self.registry = registry
        self.draw = draw
        self.selected = 0
        self.items: List[ServerEntry] = []

    @property
    def title(self) -> str:
        return f"{self.registry.target.label} MCP Toggle"

    def refresh(self) -> None:
        self.items = self.registry.list_servers()
        self.selected = max(0, min(self.selected, len(self.items) - 1))
        self.draw(render(self.title, self.items, self.selected, self.registry.paths()))

    def handle(self, event: str) -> bool:
        """Apply one key event; return False once the user asked to quit."""
        if event == QUIT:
            return False
        if event == UP:
            self.selected = max(0, self.selected - 1)
        elif event == DOWN:
            self.selected = min(len(self.items) - 1, self.selected + 1)
        elif event == TOGGLE:
            if not self.items:
                return True
            self.registry.toggle(self.items[self.selected].name)
        self.refresh()
        return True


def run_loop(view: ListView, read: Callable[[], bytes]) -> None:
    decoder = KeyDecoder()
    view.refresh()
    while True:
        data = read()
        if not data:
            return
        for event in decoder.feed(data):
            if not view.handle(event):
                return


def run_interactive(registry: ServerRegistry, stdin=None, console: Optional[Console] = None) -> None:
    stdin = stdin or sys.stdin
    console = console or Console()
    fd = stdin.fileno()

    def draw(screen: Group) -> None:
        console.clear()
        console.print(screen, highlight=False)

    view = ListView(registry, draw)
    saved = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd)
        run_loop(view, lambda: os.read(fd, 32))
    except KeyboardInterrupt:
        pass
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)
    console.print()
