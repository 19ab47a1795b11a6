"""Window and input events and a dispatcher that routes them by type."""

from __future__ import annotations

from enum import IntEnum, IntFlag
from typing import Callable, ClassVar, Type, TypeVar


class EventType(IntEnum):
    """Kinds of event."""

    NONE = 0
    WINDOW_CLOSE = 1
    WINDOW_RESIZE = 2
    WINDOW_FOCUS = 3
    WINDOW_LOST_FOCUS = 4
    WINDOW_MOVED = 5
    APP_TICK = 6
    APP_UPDATE = 7
    APP_RENDER = 8
    KEY_PRESSED = 9
    KEY_RELEASED = 10
    KEY_TYPED = 11
    MOUSE_BUTTON_PRESSED = 12
    MOUSE_BUTTON_RELEASED = 13
    MOUSE_MOVED = 14
    MOUSE_SCROLLED = 15

    @property
    def display_name(self) -> str:
        """CamelCase name of the event kind, such as ``KeyPressed``."""
        return self.name.title().replace("_", "")


class EventCategory(IntFlag):
    """Category bits an event can belong to."""

    NONE = 0
    APPLICATION = 1 << 0
    INPUT = 1 << 1
    KEYBOARD = 1 << 2
    MOUSE = 1 << 3
    MOUSE_BUTTON = 1 << 4


def _fmt(value: float) -> str:
    return f"{value:g}"


class Event:
    """Base of all events; subclasses set ``static_type`` and ``category``."""

    static_type: ClassVar[EventType] = EventType.NONE
    category: ClassVar[EventCategory] = EventCategory.NONE

    def __init__(self) -> None:
        self.handled = False

    @property
    def event_type(self) -> EventType:
        return type(self).static_type

    @property
    def name(self) -> str:
        return self.event_type.display_name

    @property
    def category_flags(self) -> EventCategory:
        return type(self).category

    def is_in_category(self, category: EventCategory) -> bool:
        """Whether the event carries any of the bits of ``category``."""
        return bool(self.category_flags & category)

    def __str__(self) -> str:
        return self.name


E = TypeVar("E", bound=Event)


class EventDispatcher:
    """Hands an event to a handler when the event has the handler's type."""

    def __init__(self, event: Event) -> None:
        self._event = event

    def dispatch(self, event_class: Type[E], func: Callable[[E], bool]) -> bool:
        """Call ``func`` if the event is of ``event_class``; return whether it was."""
        if self._event.event_type == event_class.static_type:
            self._event.handled = bool(func(self._event))  # type: ignore[arg-type]
            return True
        return False


class KeyEvent(Event):
    category = EventCategory.KEYBOARD | EventCategory.INPUT

    def __init__(self, key_code: int) -> None:
        super().__init__()
        self.key_code = key_code


class KeyPressedEvent(KeyEvent):
    static_type = EventType.KEY_PRESSED

    def __init__(self, key_code: int, repeat_count: int) -> None:
        super().__init__(key_code)
        self.repeat_count = repeat_count

    def __str__(self) -> str:
        return f"KeyPressedEvent: {self.key_code} ({self.repeat_count} repeats)"


class KeyReleasedEvent(KeyEvent):
    static_type = EventType.KEY_RELEASED

    def __str__(self) -> str:
        return f"KeyReleasedEvent: {self.key_code}"


class KeyTypedEvent(KeyEvent):
    static_type = EventType.KEY_TYPED

    def __str__(self) -> str:
        return f"KeyTypedEvent: {self.key_code}"


class MouseMovedEvent(Event):
    static_type = EventType.MOUSE_MOVED
    category = EventCategory.MOUSE | EventCategory.INPUT

    def __init__(self, x: float, y: float) -> None:
        super().__init__()
        self.x = x
        self.y = y

    def __str__(self) -> str:
        return f"MouseMovedEvent: {_fmt(self.x)}, {_fmt(self.y)}"


class MouseScrolledEvent(Event):
    static_type = EventType.MOUSE_SCROLLED
    category = EventCategory.MOUSE | EventCategory.INPUT | EventCategory.MOUSE_BUTTON

    def __init__(self, x_offset: float, y_offset: float) -> None:
        super().__init__()
        self.x_offset = x_offset
        self.y_offset = y_offset

    def __str__(self) -> str:
        return f"MouseScrolledEvent: {_fmt(self.x_offset)}, {_fmt(self.y_offset)}"


class MouseButtonEvent(Event):
    category = EventCategory.MOUSE | EventCategory.INPUT

    def __init__(self, button: int) -> None:
        super().__init__()
        self.button = button


class MouseButtonPressedEvent(MouseButtonEvent):
    static_type = EventType.MOUSE_BUTTON_PRESSED

    def __str__(self) -> str:
        return f"MouseButtonPressedEvent: {self.button}"


class MouseButtonReleasedEvent(MouseButtonEvent):
    static_type = EventType.MOUSE_BUTTON_RELEASED


class WindowResizeEvent(Event):
    static_type = EventType.WINDOW_RESIZE
    category = EventCategory.APPLICATION

    def __init__(self, width: int, height: int) -> None:
        super().__init__()
        self.width = width
        self.height = height

    def __str__(self) -> str:
        return f"WindowResizeEvent: {self.width}, {self.height}"


class WindowCloseEvent(Event):
    static_type = EventType.WINDOW_CLOSE
    category = EventCategory.APPLICATION


class AppTickEvent(Event):
    static_type = EventType.APP_TICK
    category = EventCategory.APPLICATION


class AppUpdateEvent(Event):
    static_type = EventType.APP_UPDATE
    category = EventCategory.APPLICATION


class AppRenderEvent(Event):
    static_type = EventType.APP_RENDER
    category = EventCategory.APPLICATION