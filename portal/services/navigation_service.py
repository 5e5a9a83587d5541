"""
Navigation Service

NavigationStack  - ordered history of visited views (last = current)
KeyboardDispatcher - global key listener registry
ViewRouter       - owns the stack while someone is signed in, wires the
                   back shortcut, and resolves the view to render

The back-shortcut handler is a bound method of the router, so it reads the
router's live stack every time a key event arrives rather than a copy taken
when it was registered.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from portal.core.errors import NotAuthenticatedError
from portal.schemas.schemas import Identity, SessionState, ViewResponse
from portal.services.views import resolve_view

logger = logging.getLogger(__name__)


# ============================================================
# NAVIGATION STACK
# ============================================================

class NavigationStack:
    """History of view identifiers. Never empty."""

    def __init__(self, initial: str):
        if not initial:
            raise ValueError("Navigation history needs an initial view")
        self._views: List[str] = [initial]

    def push(self, view: str) -> None:
        if view == self.current():
            return
        self._views.append(view)

    def pop(self) -> Optional[str]:
        """Drop the current view. Returns the new current view, or None if nothing happened."""
        if len(self._views) <= 1:
            return None
        self._views.pop()
        return self.current()

    def current(self) -> str:
        return self._views[-1]

    def can_go_back(self) -> bool:
        return len(self._views) > 1

    @property
    def depth(self) -> int:
        return len(self._views)

    @property
    def history(self) -> Tuple[str, ...]:
        return tuple(self._views)


# ============================================================
# KEYBOARD
# ============================================================

_MODIFIERS = ("alt", "ctrl", "shift", "meta")


@dataclass
class KeyEvent:
    key: str
    alt: bool = False
    ctrl: bool = False
    shift: bool = False
    meta: bool = False
    default_prevented: bool = field(default=False, init=False)

    def prevent_default(self) -> None:
        self.default_prevented = True


@dataclass(frozen=True)
class KeyBinding:
    key: str
    alt: bool = False
    ctrl: bool = False
    shift: bool = False
    meta: bool = False

    @classmethod
    def parse(cls, combo: str) -> "KeyBinding":
        """
        Parse "alt+ArrowLeft" style combinations.
        Modifiers are case-insensitive; the key name is kept as written.
        """
        parts = [part.strip() for part in combo.split("+") if part.strip()]
        if not parts:
            raise ValueError(f"Empty key binding: {combo!r}")

        *modifiers, key = parts
        flags = {}
        for modifier in modifiers:
            name = modifier.lower()
            if name not in _MODIFIERS:
                raise ValueError(f"Unknown modifier {modifier!r} in {combo!r}")
            flags[name] = True
        return cls(key=key, **flags)

    def matches(self, event: KeyEvent) -> bool:
        """Named modifiers must be held; modifiers the binding does not name are ignored."""
        if event.key != self.key:
            return False
        return all(getattr(event, name) for name in _MODIFIERS if getattr(self, name))


KeyListener = Callable[[KeyEvent], None]


class KeyboardDispatcher:
    """Stand-in for the window-level keydown listener list."""

    def __init__(self):
        self._listeners: List[KeyListener] = []

    def add_listener(self, listener: KeyListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: KeyListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def dispatch(self, event: KeyEvent) -> KeyEvent:
        for listener in list(self._listeners):
            listener(event)
        return event


# ============================================================
# VIEW ROUTER
# ============================================================

class ViewRouter:
    """
    Top-level view router for the signed-in interface.

    mount() creates a fresh history and registers the back shortcut;
    unmount() throws the history away and unregisters it.
    """

    def __init__(self, keyboard: KeyboardDispatcher, default_view: str = "dashboard",
                 back_shortcut: str = "alt+ArrowLeft"):
        self.keyboard = keyboard
        self.default_view = default_view
        self.back_binding = KeyBinding.parse(back_shortcut)
        self._stack: Optional[NavigationStack] = None

    @property
    def is_mounted(self) -> bool:
        return self._stack is not None

    def mount(self) -> None:
        self._stack = NavigationStack(self.default_view)
        self.keyboard.add_listener(self._handle_keydown)

    def unmount(self) -> None:
        self.keyboard.remove_listener(self._handle_keydown)
        self._stack = None

    def on_session_change(self, state: SessionState) -> None:
        """Session listener: mount on sign-in, unmount on anything else."""
        if state.is_authenticated and not self.is_mounted:
            self.mount()
        elif not state.is_authenticated and self.is_mounted:
            self.unmount()

    def _require_stack(self) -> NavigationStack:
        if self._stack is None:
            raise NotAuthenticatedError()
        return self._stack

    # ------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------

    def navigate(self, view: str) -> str:
        stack = self._require_stack()
        stack.push(view)
        return stack.current()

    def go_back(self) -> str:
        stack = self._require_stack()
        stack.pop()
        return stack.current()

    @property
    def current_view(self) -> str:
        return self._require_stack().current()

    @property
    def can_go_back(self) -> bool:
        return self._require_stack().can_go_back()

    @property
    def history_depth(self) -> int:
        return self._require_stack().depth

    @property
    def history(self) -> Tuple[str, ...]:
        return self._require_stack().history

    def render(self, identity: Identity) -> ViewResponse:
        return resolve_view(self.current_view, identity.role)

    def _handle_keydown(self, event: KeyEvent) -> None:
        if not self.back_binding.matches(event):
            return
        stack = self._stack
        if stack is None or not stack.can_go_back():
            return
        event.prevent_default()
        stack.pop()
        logger.debug("Back shortcut -> %s", stack.current())
