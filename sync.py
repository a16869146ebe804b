#!/usr/bin/env python3
"""
Folder Sync - mirror a folder into a backup destination.

Run one pair from the command line:
    sync.py /data/photos /mnt/backup/photos --delete --keep-versions

Or every enabled job of a settings file:
    sync.py --jobs foldersync.json
"""

import argparse
import sys
from pathlib import Path

from foldersync import __version__
from foldersync.config import JobSettings, SyncJob, SyncOptions
from foldersync.core.logging import TeeOutput
from foldersync.core.paths import get_log_path, get_settings_path
from foldersync.stats import PropertiesStore
from foldersync.sync import SyncError, Synchronizer
from foldersync.ui.widgets import display


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Folder Sync - mirror a folder into a backup destination"
    )
    parser.add_argument("source", nargs="?", help="Folder to back up")
    parser.add_argument("destination", nargs="?", help="Backup folder (must exist)")
    parser.add_argument("--jobs", metavar="PATH", nargs="?", const=str(get_settings_path()),
                        help="Run every enabled job of a settings file (default: foldersync.json)")
    parser.add_argument("--name", default="", help="Name shown in front of every output line")
    parser.add_argument("--dry-run", action="store_true", help="Report what would change without touching files")
    parser.add_argument("--delete", action="store_true", help="Delete destination entries missing from source")
    parser.add_argument("--keep-versions", action="store_true",
                        help="Rename replaced/deleted entries to <name>.bkYYYYMMDDHHMM")
    parser.add_argument("--no-size-check", action="store_true", help="Don't copy just because sizes differ")
    parser.add_argument("--no-date-check", action="store_true",
                        help="Don't copy just because modification times differ")
    parser.add_argument("--tolerance", type=int, default=0, metavar="MS",
                        help="Modification time difference (ms) still considered equal")
    parser.add_argument("--skip-empty-dirs", action="store_true",
                        help="Only create destination folders that receive files")
    parser.add_argument("--stats-file", metavar="PATH", help="Statistics file (default: tmp/estatisticas_copias.properties)")
    parser.add_argument("--log", metavar="PATH", help="Also write output to a log file ('auto' for tmp/logs/)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def options_from_args(args: argparse.Namespace) -> SyncOptions:
    return SyncOptions(
        simulate=args.dry_run,
        delete_stale=args.delete,
        preserve_old_versions=args.keep_versions,
        copy_if_sizes_differ=not args.no_size_check,
        copy_if_dates_differ=not args.no_date_check,
        date_tolerance_ms=max(0, args.tolerance),
        create_dirs_only_with_content=args.skip_empty_dirs,
    )


def jobs_from_args(args: argparse.Namespace, parser: argparse.ArgumentParser) -> list[SyncJob]:
    if args.jobs:
        if args.source or args.destination:
            parser.error("--jobs can't be combined with SOURCE/DESTINATION")
        path = Path(args.jobs)
        if not path.exists():
            parser.error(f"settings file not found: {path}")
        return JobSettings.load(path).enabled_jobs()

    if not args.source or not args.destination:
        parser.error("SOURCE and DESTINATION are required (or use --jobs)")
    return [SyncJob(name=args.name, source=args.source, destination=args.destination,
                    options=options_from_args(args))]


def run_job(job: SyncJob, stats_path: Path = None) -> bool:
    """Run one job and print its results. Returns True if it completed."""
    store = PropertiesStore(stats_path) if stats_path else None
    try:
        session = Synchronizer(job.source, job.destination, name=job.name,
                               options=job.options, store=store)
    except SyncError as e:
        display.fatal_error(f"{job.name} - " if job.name else "", str(e))
        return False

    display.session_start(session.name, session.source, session.destination, job.options.simulate)
    session.show_last_run()
    completed = session.sync_safe()
    session.show_results()
    return completed


def main(argv=None) -> int:
    """Entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    jobs = jobs_from_args(args, parser)

    tee = None
    if args.log:
        log_path = get_log_path() if args.log == "auto" else Path(args.log)
        tee = TeeOutput(log_path, version=__version__).install()

    try:
        stats_path = Path(args.stats_file) if args.stats_file else None
        if not jobs:
            print("No enabled jobs to run.")
        failed = [job.name or job.source for job in jobs if not run_job(job, stats_path)]
        if failed:
            print(f"Failed: {', '.join(failed)}")
            return 1
        return 0
    finally:
        if tee is not None:
            tee.close()


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\nCancelled by user.")
        sys.exit(1)
