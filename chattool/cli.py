import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console

from chattool import __version__
from chattool.api_client import CompletionClient
from chattool.commands import Dispatcher
from chattool.config_loader import SessionConfig, default_config_path, load_config, load_env_file
from chattool.errors import ConfigurationMissing, PathInvalid
from chattool.log_utils import close_logger, setup_logger
from chattool.session import start_chat


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chattool", description="Interactive chat with a remote model, fed from local files")
    parser.add_argument("--version", action="store_true", help="Print version and exit")
    parser.add_argument("--config", default="", help="YAML config path (default config/local.yaml or $CHATTOOL_CONFIG)")
    parser.add_argument("--root", default="", help="Initial root folder for /tree and /open (default: current directory)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.version:
        print(__version__)
        return 0
    cfg = load_config(Path(args.config) if args.config else default_config_path())
    load_env_file()
    logs_dir = Path(cfg.get("data_paths", {}).get("logs", "logs"))
    logger = setup_logger(logs_dir / "chattool.log")
    try:
        return _run(args, cfg, logger)
    finally:
        close_logger(logger)


def _run(args: argparse.Namespace, cfg: Dict[str, Any], logger: logging.Logger) -> int:
    try:
        config = SessionConfig.from_environment(cfg)
        if args.root:
            config.set_root(args.root)
    except (ConfigurationMissing, PathInvalid) as e:
        logger.error("startup_failed %s", type(e).__name__)
        print(str(e))
        return 1
    client = CompletionClient.from_config(cfg, config.credential)
    dispatcher = Dispatcher(client, settings=cfg, console=Console())
    try:
        return start_chat(cfg, config, dispatcher)
    except KeyboardInterrupt:
        logger.info("session_end reason=keyboard_interrupt")
        print("\nInterrupted.", file=sys.stderr)
        return 130
    except Exception as e:
        logger.exception("cli_exception")
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
