"""Preset interval plans users can pick instead of typing minutes.

Each template maps onto a :class:`SessionConfig`.  The ``points_per_*``
fields are the suggested awards shown next to a template; whether they are
used is up to the reward strategy the application installs.
"""

from __future__ import annotations

from dataclasses import dataclass

from .types import SessionConfig

CATEGORIES = ("classic", "extended", "custom")


@dataclass(frozen=True)
class SessionTemplate:
    id: str
    name: str
    description: str
    focus_minutes: int
    short_break_minutes: int
    long_break_minutes: int
    sessions_until_long_break: int
    category: str
    points_per_focus: int
    points_per_short_break: int
    points_per_long_break: int

    def to_config(self) -> SessionConfig:
        return SessionConfig(
            focus_minutes=self.focus_minutes,
            short_break_minutes=self.short_break_minutes,
            long_break_minutes=self.long_break_minutes,
            sessions_until_long_break=self.sessions_until_long_break,
        ).validate()


TEMPLATES: tuple[SessionTemplate, ...] = (
    SessionTemplate(
        "classic-pomodoro", "Classic Pomodoro",
        "Traditional 25-minute focus sessions with short breaks",
        25, 5, 15, 4, "classic", 50, 10, 15,
    ),
    SessionTemplate(
        "extended-pomodoro", "Extended Pomodoro",
        "50-minute focus sessions for deep work",
        50, 10, 30, 4, "extended", 100, 20, 30,
    ),
    SessionTemplate(
        "ultradian-rhythm", "Ultradian Rhythm",
        "90-minute focus sessions aligned with natural brain cycles",
        90, 20, 45, 3, "extended", 180, 40, 60,
    ),
    SessionTemplate(
        "timeboxing", "Timeboxing",
        "45-minute focused work blocks with moderate breaks",
        45, 8, 20, 4, "extended", 90, 16, 25,
    ),
    SessionTemplate(
        "sprint-method", "Sprint Method",
        "75-minute intense work sessions for complex tasks",
        75, 15, 35, 3, "extended", 150, 30, 50,
    ),
    SessionTemplate(
        "micro-focus", "Micro Focus",
        "15-minute quick sessions for small tasks",
        15, 3, 8, 6, "classic", 30, 6, 10,
    ),
    SessionTemplate(
        "deep-work", "Deep Work",
        "120-minute extended sessions for complex projects",
        120, 25, 60, 2, "extended", 240, 50, 80,
    ),
    SessionTemplate(
        "custom", "Custom",
        "Set your own session durations",
        25, 5, 15, 4, "custom", 50, 10, 15,
    ),
)

DEFAULT_TEMPLATE_ID = "classic-pomodoro"

_BY_ID: dict[str, SessionTemplate] = {t.id: t for t in TEMPLATES}


def get_template(template_id: str) -> SessionTemplate | None:
    return _BY_ID.get(template_id)


def default_template() -> SessionTemplate:
    return _BY_ID[DEFAULT_TEMPLATE_ID]


def templates_by_category(category: str) -> list[SessionTemplate]:
    if category not in CATEGORIES:
        raise ValueError(f"unknown template category {category!r}")
    return [t for t in TEMPLATES if t.category == category]
