"""lbstatus - main entry point."""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from . import __version__
from .lib import (
    CommandHandlers,
    CommitLookup,
    LbStatusError,
    ServiceRegistry,
    StatusAPIClient,
    StatusChecker,
    WatcherConfig,
    config_load_settings
)

logger = logging.getLogger(__name__)

DEFAULT_ENVIRONMENT = "production"

DESCRIPTION = """\
A tool for getting an overview of deployed commits in Lookback's micro services.

The "service" argument is the name of the GitHub repo, "environment" is usually
"testing" or "production" and defaults to "production". Use "-" for the default:
"lbstatus - lookback-ultron" checks production.
"""

EPILOG = """\
If you have the GitHub CLI installed ("gh"), the output is enriched with the
commit message of each deployed version.

Services are read from ~/.lbstatus when it exists, one service=url pair per line:

  player=https://$domain.$tld/play

Do NOT add the /ping endpoint to the URL. In the URL, $domain becomes "lookback"
or "$env.lookback", $tld becomes "com" (testing) or "io", and $svc_domain becomes
"svc.$env.lookback".

To bootstrap a ~/.lbstatus file run:

  lbstatus -l -b > ~/.lbstatus
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lbstatus",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("environment", nargs="?", help='environment to check (default: "production")')
    parser.add_argument("service", nargs="?", help="only check this service")
    parser.add_argument("-w", "--watch", action="store_true", help="keep polling and print changes only")
    parser.add_argument("-l", "--list", action="store_true", help="list the services checked")
    parser.add_argument("-b", "--bootstrap", action="store_true", help="with --list, print in ~/.lbstatus format")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging on stderr")
    parser.add_argument("--config", metavar="PATH", help="services file (default: ~/.lbstatus)")
    parser.add_argument("--version", action="version", version=f"lbstatus {__version__}")
    return parser


def _positional(value: Optional[str]) -> Optional[str]:
    # "-" means default
    if not value or value == "-":
        return None
    return value


async def _main(args: argparse.Namespace, config: WatcherConfig) -> int:
    services = ServiceRegistry.load_from_file(config.services_path)

    status_checker = StatusChecker(
        StatusAPIClient(timeout=config.request_timeout),
        CommitLookup(
            owner=config.github_owner,
            timeout=config.lookup_timeout,
            enabled=config.enrich_commits,
        ),
    )
    handlers = CommandHandlers(status_checker, services, check_interval=config.check_interval)

    try:
        if args.list:
            handlers.handle_list(bootstrap=args.bootstrap)
            return 0

        environment = _positional(args.environment) or DEFAULT_ENVIRONMENT
        service = _positional(args.service)

        if args.watch:
            await handlers.handle_watch(environment, service)
        else:
            await handlers.handle_status(environment, service)
        return 0
    finally:
        await status_checker.close()


def crash(msg: str, err: Optional[BaseException] = None) -> int:
    print(f"ERROR: {msg}", file=sys.stderr)
    if err is not None:
        print(repr(err), file=sys.stderr)
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    overrides = {"services_path": args.config} if args.config else {}

    try:
        config = config_load_settings(overrides)
        return asyncio.run(_main(args, config))
    except KeyboardInterrupt:
        return 130
    except LbStatusError as e:
        return crash(str(e))
    except Exception as e:
        logger.debug("Unhandled error", exc_info=True)
        return crash("Error when running lbstatus:", e)


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
