from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from apps.coop_monitor.logging_utils import configure_logging
from apps.operator.client import CoopMonitorClient, ControlApiError
from packages.imaging import EncodedFrame

logger = logging.getLogger("operator.cli")


def _cmd_health(args: argparse.Namespace) -> None:
    health = CoopMonitorClient(args.api_url).health()
    print(health.model_dump_json())


def _cmd_analyze(args: argparse.Namespace) -> None:
    response = CoopMonitorClient(args.api_url).analyze()
    print(json.dumps(response.result, indent=2))


def _cmd_frame(args: argparse.Namespace) -> None:
    frame = CoopMonitorClient(args.api_url).frame()
    image = EncodedFrame.from_base64(frame.image).to_image()
    output = Path(args.output)
    image.save(output)
    width, height = image.size
    logger.info("saved debug frame to %s", output)
    print({"path": str(output), "width": width, "height": height})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Coop monitor control CLI")
    parser.add_argument("--api-url", default="http://localhost:3000")
    parser.add_argument("--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    health = sub.add_parser("health", help="show server status and subscriber count")
    health.set_defaults(func=_cmd_health)

    analyze = sub.add_parser("analyze", help="run one analysis cycle now")
    analyze.set_defaults(func=_cmd_analyze)

    frame = sub.add_parser("frame", help="save the frame the server would analyze")
    frame.add_argument("--output", default="frame.jpg")
    frame.set_defaults(func=_cmd_frame)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)
    try:
        args.func(args)
    except ControlApiError as exc:
        raise SystemExit(f"request failed: {exc}") from exc


if __name__ == "__main__":
    main()
