import argparse
import logging
import sys
from pathlib import Path

from src.adapters.dev_jobs import create_dev_runner
from src.app_shell.config import Settings, validate_ops_rules
from src.app_shell.context import ServiceContext
from src.rules.loader import load_rules

logger = logging.getLogger("cli")


def get_context(settings: Settings) -> ServiceContext:
    if not Path(settings.rules_path).exists():
        logger.error("Rules file %s not found.", settings.rules_path)
        sys.exit(1)

    rules = load_rules(settings.rules_path)
    validate_ops_rules(rules, settings)
    return ServiceContext.create(settings.db_path, rules)


def handle_sweep(ctx: ServiceContext, args: argparse.Namespace) -> None:
    result = ctx.scheduler.run_trash_sweep()
    print(
        f"Removed {result.deleted_projects_count} projects and "
        f"{result.deleted_files_count} files from trash."
    )


def handle_publish(ctx: ServiceContext, args: argparse.Namespace) -> None:
    result = ctx.scheduler.run_due_publishes()
    print(
        f"Processed {result.processed} posts: {result.succeeded} posted, "
        f"{result.failed} failed, {result.skipped} skipped."
    )
    if not result.success:
        sys.exit(2)


def handle_stats(ctx: ServiceContext, args: argparse.Namespace) -> None:
    stats = ctx.trash.get_trash_stats(user_id=args.user)
    print(f"Projects in trash:   {stats.project_count}")
    print(f"Files in trash:      {stats.file_count}")
    print(f"Total size (bytes):  {stats.total_size}")
    print(f"Oldest item (days):  {stats.oldest_item_age_days}")
    print(f"Near expiry:         {stats.items_near_expiry_count}")


def handle_serve_scheduler(ctx: ServiceContext, args: argparse.Namespace) -> None:
    interval = args.interval or ctx.rules.scheduler.publish_poll_seconds
    runner = create_dev_runner(ctx.scheduler, poll_interval_seconds=interval)
    runner.trigger_now()
    runner.start()
    try:
        runner.wait()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        runner.stop()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Content Lifecycle Manager CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # sweep
    subparsers.add_parser("sweep", help="Permanently delete expired trash")

    # publish_due
    subparsers.add_parser("publish_due", help="Submit scheduled posts that are due")

    # stats
    stats_parser = subparsers.add_parser("stats", help="Show trash statistics")
    stats_parser.add_argument("--user", help="Only count items owned by this user")

    # serve-scheduler
    serve_parser = subparsers.add_parser(
        "serve-scheduler", help="Run publishes and the daily sweep in the foreground"
    )
    serve_parser.add_argument(
        "--interval", type=float, help="Poll interval in seconds (default from rules)"
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    ctx = get_context(Settings())

    if args.command == "sweep":
        handle_sweep(ctx, args)
    elif args.command == "publish_due":
        handle_publish(ctx, args)
    elif args.command == "stats":
        handle_stats(ctx, args)
    elif args.command == "serve-scheduler":
        handle_serve_scheduler(ctx, args)


if __name__ == "__main__":
    main()
