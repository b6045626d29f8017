"""Console front end: python -m boostly [command].

Commands
--------
status   show the current interval (catching up if a deadline passed)
start    start the next interval and exit; the deadline is persisted
pause / resume / skip / reset
run      start if needed, then tick in the foreground until it completes
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import asdict

from PyQt6.QtCore import QCoreApplication

from . import paths
from .database.db import init_db
from .logging_setup import configure_logging
from .session.context import SessionContext
from .session.types import InvalidConfigError, SessionState, SessionStatus
from .settings import load_settings

COMMANDS = ("status", "start", "pause", "resume", "skip", "reset", "run")


def _fmt_time(seconds: int) -> str:
    m, s = divmod(max(0, seconds), 60)
    return f"{m:02d}:{s:02d}"


def _describe(state: SessionState) -> str:
    return (
        f"{state.label} #{state.session_number} [{state.status.value}] "
        f"{_fmt_time(state.time_left_seconds)} left, "
        f"{state.completed_sessions} focus sessions done"
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="boostly", description=__doc__.splitlines()[0])
    parser.add_argument("command", nargs="?", default="status", choices=COMMANDS)
    parser.add_argument("--focus", type=int, dest="focus_minutes")
    parser.add_argument("--short", type=int, dest="short_break_minutes")
    parser.add_argument("--long", type=int, dest="long_break_minutes")
    parser.add_argument("--cadence", type=int, dest="sessions_until_long_break")
    parser.add_argument("--template", help="apply a preset, e.g. extended-pomodoro")
    parser.add_argument("--no-sound", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = load_settings()
    configure_logging(paths.APP_DIR, settings.log_level)
    init_db()

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName("Boostly")

    if args.no_sound:
        settings.sound_enabled = False
    context = SessionContext.open(settings=settings, parent=app)
    try:
        return _dispatch(args, app, context)
    finally:
        context.close()


def _dispatch(args: argparse.Namespace, app: QCoreApplication, context: SessionContext) -> int:
    core = context.core
    changes = {
        key: getattr(args, key)
        for key in (
            "focus_minutes", "short_break_minutes",
            "long_break_minutes", "sessions_until_long_break",
        )
        if getattr(args, key) is not None
    }
    if args.template:
        from .session.templates import get_template

        template = get_template(args.template)
        if template is None:
            print(f"unknown template: {args.template}", file=sys.stderr)
            return 2
        changes = {**asdict(template.to_config()), **changes}
    if changes:
        try:
            core.reconfigure(changes)
        except InvalidConfigError as exc:
            print(f"invalid config: {exc}", file=sys.stderr)
            return 2

    command = args.command
    if command == "start":
        core.start()
    elif command == "pause":
        core.pause()
    elif command == "resume":
        core.resume()
    elif command == "skip":
        core.skip()
    elif command == "reset":
        core.reset()
    elif command == "run":
        return _run(app, context)

    print(_describe(core.state))
    return 0


def _run(app: QCoreApplication, context: SessionContext) -> int:
    core, engine = context.core, context.engine
    if core.state.status is SessionStatus.PAUSED:
        core.resume()
    else:
        core.start()
    print(_describe(core.state))

    engine.tick.connect(
        lambda left: print(f"\r{core.session_label()}  {_fmt_time(left)}", end="", flush=True)
    )

    def _finished(interval) -> None:
        print(f"\n{interval.session_type.value} finished; next: {core.session_label()}")
        app.quit()

    engine.session_completed.connect(_finished)
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
