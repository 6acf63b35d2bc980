"""Entry point for the Mission Board command line."""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from missionboard_shared import MissionStatus, RewardType, StickerType
from missionboard_shared.models import PIN_LENGTH

from .app import AppMode, MissionBoardApp
from .config import Config, load_config
from .dates import Clock
from .pin import PinOutcome
from .store import JsonFileStore
from .timer import Countdown, format_remaining, run_countdown
from .voice import LogSpeaker, TemplateSummarizer, encouraging_phrase

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool, log_file: Path | None = None) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def _fail(message: str) -> None:
    logger.error(message)
    sys.exit(1)


def _open_app(config: Config) -> MissionBoardApp:
    return MissionBoardApp(
        store=JsonFileStore(config.data_dir),
        clock=Clock(),
        speaker=LogSpeaker(),
        summarizer=TemplateSummarizer(),
        default_pin=config.default_pin,
    )


def _unlock_parent(app: MissionBoardApp, pin: str | None) -> None:
    if pin is None:
        _fail("This command needs the parent PIN (--pin)")
    app.request_parent_mode()
    event = app.enter_pin(pin)
    if event.outcome != PinOutcome.UNLOCKED or app.mode != AppMode.PARENT:
        app.back()
        _fail("Wrong PIN")


def _report(changed: object, success: str, failure: str) -> None:
    if changed is None or changed is False:
        _fail(failure)
    print(success)


def cmd_status(app: MissionBoardApp, args: argparse.Namespace) -> None:
    state = app.state
    print(f"Child: {state.profile.name or '(not set)'}")
    print(f"Board: {state.current_month_id}  stickers: {state.total_stickers}  "
          f"bonus: {state.bonus_stickers}")
    print(f"Reward: {app.current_reward()}")
    active = app.active_mission
    if active:
        print(f"Active mission: {active.title} ({active.duration_minutes} min, {active.reward})")
    elif app.has_sticker_today:
        print("Today's sticker is already on the board. See you tomorrow!")
    elif app.can_award:
        print("All missions clear! Pick today's sticker.")
    else:
        print(f"Missions left today: {len(state.pending_missions)}")
    print(app.message)


def cmd_missions(app: MissionBoardApp, args: argparse.Namespace) -> None:
    if not app.state.missions:
        print("No missions yet. Add some in parent mode.")
        return
    for m in app.state.missions:
        label = encouraging_phrase(m.id) if m.status == MissionStatus.COMPLETED else m.title
        print(f"{m.id}  [{m.status:<9}] {m.duration_minutes:>3} min  {label}  -> {m.reward}")


def cmd_add(app: MissionBoardApp, args: argparse.Namespace) -> None:
    _unlock_parent(app, args.pin)
    mission = app.add_mission(args.title, args.minutes, args.reward)
    _report(mission, f"Added mission {mission.id if mission else ''}", "Could not add mission")


def cmd_delete(app: MissionBoardApp, args: argparse.Namespace) -> None:
    _unlock_parent(app, args.pin)
    _report(app.delete_mission(args.mission_id), "Mission deleted", "No such mission")


def cmd_clear(app: MissionBoardApp, args: argparse.Namespace) -> None:
    _unlock_parent(app, args.pin)
    _report(app.clear_missions(), "All missions deleted", "No missions to delete")


def cmd_start(app: MissionBoardApp, args: argparse.Namespace) -> None:
    countdown = app.start_mission(args.mission_id)
    _report(countdown, "Mission started", "Mission cannot start now")


def cmd_cancel(app: MissionBoardApp, args: argparse.Namespace) -> None:
    active = app.active_mission
    _report(active and app.cancel_mission(active.id), "Mission cancelled", "No active mission")


def cmd_run(app: MissionBoardApp, args: argparse.Namespace) -> None:
    """Count down the active mission in the foreground and complete it."""
    countdown = app.start_countdown()
    if countdown is None:
        _fail("No active mission")
    title = app.active_mission.title if app.active_mission else ""
    print(f"{title}: {format_remaining(countdown.remaining_seconds)}")

    def show(c: Countdown) -> None:
        if c.remaining_seconds % 60 == 0:
            print(f"{title}: {format_remaining(c.remaining_seconds)}")

    if run_countdown(countdown, interval_seconds=args.tick_seconds, on_tick=show):
        print("Mission complete!")
    else:
        print("Countdown stopped; the mission is still active")


def cmd_warp(app: MissionBoardApp, args: argparse.Namespace) -> None:
    if not app.request_time_warp():
        _fail("No active mission")
    event = app.enter_pin(args.pin)
    if event.outcome != PinOutcome.UNLOCKED:
        app.back()
        _fail("Wrong PIN")
    print("Time warp! Mission complete!")


def cmd_sticker(app: MissionBoardApp, args: argparse.Namespace) -> None:
    sticker = app.award_sticker(StickerType(args.sticker_type))
    _report(sticker, f"{args.sticker_type} sticker placed for today", "No sticker available now")


def cmd_bonus(app: MissionBoardApp, args: argparse.Namespace) -> None:
    sticker = app.use_bonus()
    _report(
        sticker,
        f"Bonus sticker placed on {sticker.date if sticker else ''}",
        "No bonus sticker or no empty day left",
    )


def cmd_grant(app: MissionBoardApp, args: argparse.Namespace) -> None:
    _unlock_parent(app, args.pin)
    _report(
        app.grant_bonus(args.count),
        f"Bonus balance: {app.state.bonus_stickers}",
        "Count must be positive",
    )


def cmd_rollover(app: MissionBoardApp, args: argparse.Namespace) -> None:
    _unlock_parent(app, args.pin)
    entry = app.rollover()
    if entry is None:
        _fail("Rollover failed")
    print(f"Archived {entry.month_id} ({entry.total_stickers} stickers); "
          f"new board {app.state.current_month_id}")


def cmd_archives(app: MissionBoardApp, args: argparse.Namespace) -> None:
    if not app.state.archives:
        print("No archived boards.")
        return
    for entry in app.state.archives:
        print(f"{entry.month_id}: {entry.total_stickers} stickers")


def cmd_board(app: MissionBoardApp, args: argparse.Namespace) -> None:
    cells = app.board()
    for week_start in range(0, len(cells), 7):
        row = cells[week_start:week_start + 7]
        print(" ".join(
            f"{c.day:>2}{'*' if c.filled else '.'}" for c in row
        ))
    for tier in app.tier_progress():
        mark = "x" if tier.achieved else " "
        print(f"[{mark}] {tier.step.stickers_threshold:>3}+  {tier.step.reward_text}")


def cmd_reward(app: MissionBoardApp, args: argparse.Namespace) -> None:
    if args.reward_command == "show":
        config = app.state.reward_config
        print(f"Type: {config.type}  current: {app.current_reward()}")
        for index, step in enumerate(config.steps):
            print(f"{index}: {step.stickers_threshold}+ -> {step.reward_text}")
        return

    _unlock_parent(app, args.pin)
    if args.reward_command == "add":
        _report(app.add_reward_step(args.threshold, args.text), "Step added",
                "Could not add step (at most 5)")
    elif args.reward_command == "remove":
        _report(app.remove_reward_step(args.index), "Step removed", "No such step")
    elif args.reward_command == "type":
        _report(app.set_reward_type(RewardType(args.reward_type)), "Reward type set",
                "Reward type unchanged")


def cmd_preset(app: MissionBoardApp, args: argparse.Namespace) -> None:
    if args.preset_command == "list":
        if not app.state.presets:
            print("No presets saved.")
        for preset in app.state.presets:
            print(f"{preset.id}  {preset.name} ({len(preset.missions)} missions)")
        return

    _unlock_parent(app, args.pin)
    if args.preset_command == "save":
        preset = app.save_preset(args.name)
        _report(preset, f"Saved preset {preset.id if preset else ''}", "Preset needs a name")
    elif args.preset_command == "load":
        _report(app.load_preset(args.preset_id), "Preset loaded", "No such preset")
    elif args.preset_command == "delete":
        _report(app.delete_preset(args.preset_id), "Preset deleted", "No such preset")


def cmd_profile(app: MissionBoardApp, args: argparse.Namespace) -> None:
    if not app.needs_onboarding:
        _unlock_parent(app, args.pin)
    _report(app.set_profile(args.name, args.photo), "Profile saved", "Name is required")


def cmd_pin(app: MissionBoardApp, args: argparse.Namespace) -> None:
    for value in (args.new, args.verify):
        if len(value) != PIN_LENGTH or not value.isdigit():
            _fail(f"A PIN is exactly {PIN_LENGTH} digits")

    _unlock_parent(app, args.current)
    app.begin_pin_change()
    for step, value in (("current", args.current), ("new", args.new), ("verify", args.verify)):
        event = app.enter_pin(value)
        if event.outcome == PinOutcome.MISMATCH:
            app.back()
            _fail(f"PIN change failed at {step} step")
    if event.outcome != PinOutcome.CHANGED:
        app.back()
        _fail("PIN change did not complete")
    app.finish_pin_change()
    print("PIN changed")


def cmd_stats(app: MissionBoardApp, args: argparse.Namespace) -> None:
    progress = app.month_progress()
    print(f"Progress: {progress.stickers_in_month}/{progress.day_of_month} days "
          f"({progress.completion_rate}%)")
    for stat in app.mission_stats():
        print(f"  {stat.title}: {stat.count} times ({stat.rate}%)")
    print(app.refresh_message())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Mission Board: missions, stickers and rewards for kids",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  missionboard profile Mina                     Name the child (first run)
  missionboard add "Read" 10 Candy --pin 1234   Add a mission
  missionboard start <id>                       Start a mission
  missionboard run                              Count it down
  missionboard sticker star                     Claim today's sticker
""",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=Path("config.json"),
        help="Path to configuration file",
    )
    parser.add_argument("--data-dir", type=Path, help="Override the data directory")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add(name: str, func, help_text: str, parent: bool = False) -> argparse.ArgumentParser:
        sub = subparsers.add_parser(name, help=help_text)
        if parent:
            sub.add_argument("--pin", help="Parent PIN")
        sub.set_defaults(func=func)
        return sub

    add("status", cmd_status, "Show today's overview")
    add("missions", cmd_missions, "List missions")

    sub = add("add", cmd_add, "Add a mission", parent=True)
    sub.add_argument("title")
    sub.add_argument("minutes", type=int)
    sub.add_argument("reward")

    sub = add("delete", cmd_delete, "Delete a mission", parent=True)
    sub.add_argument("mission_id")

    add("clear", cmd_clear, "Delete every mission", parent=True)

    sub = add("start", cmd_start, "Start a mission")
    sub.add_argument("mission_id")

    add("cancel", cmd_cancel, "Cancel the active mission")
    add("run", cmd_run, "Count down the active mission")

    sub = add("warp", cmd_warp, "Complete the active mission now (PIN)")
    sub.add_argument("--pin", required=True, help="Parent PIN")

    sub = add("sticker", cmd_sticker, "Claim today's sticker")
    sub.add_argument("sticker_type", choices=[t.value for t in StickerType])

    add("bonus", cmd_bonus, "Fill the earliest empty day with a bonus sticker")

    sub = add("grant", cmd_grant, "Give bonus stickers", parent=True)
    sub.add_argument("count", type=int)

    add("rollover", cmd_rollover, "Archive this board and start a new month", parent=True)
    add("archives", cmd_archives, "List archived boards")
    add("board", cmd_board, "Show the sticker board")

    sub = add("reward", cmd_reward, "Show or edit reward tiers")
    reward_sub = sub.add_subparsers(dest="reward_command", required=True)
    reward_sub.add_parser("show")
    step = reward_sub.add_parser("add")
    step.add_argument("--pin", help="Parent PIN")
    step.add_argument("threshold", type=int)
    step.add_argument("text")
    step = reward_sub.add_parser("remove")
    step.add_argument("--pin", help="Parent PIN")
    step.add_argument("index", type=int)
    step = reward_sub.add_parser("type")
    step.add_argument("--pin", help="Parent PIN")
    step.add_argument("reward_type", choices=[t.value for t in RewardType])

    sub = add("preset", cmd_preset, "Manage mission presets")
    preset_sub = sub.add_subparsers(dest="preset_command", required=True)
    preset_sub.add_parser("list")
    step = preset_sub.add_parser("save")
    step.add_argument("--pin", help="Parent PIN")
    step.add_argument("name")
    for action in ("load", "delete"):
        step = preset_sub.add_parser(action)
        step.add_argument("--pin", help="Parent PIN")
        step.add_argument("preset_id")

    sub = add("profile", cmd_profile, "Set the child's name", parent=True)
    sub.add_argument("name")
    sub.add_argument("--photo", help="Photo data reference")

    sub = add("pin", cmd_pin, "Change the parent PIN")
    sub.add_argument("--current", required=True)
    sub.add_argument("--new", required=True)
    sub.add_argument("--verify", required=True)

    add("stats", cmd_stats, "Monthly statistics")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ValidationError:
        setup_logging(args.verbose)
        logger.exception("Invalid configuration file: %s", args.config)
        sys.exit(1)

    if args.data_dir is not None:
        config.data_dir = args.data_dir
    setup_logging(args.verbose or config.verbose, config.log_file)
    args.tick_seconds = config.tick_seconds

    app = _open_app(config)
    args.func(app, args)


if __name__ == "__main__":
    main()
