from __future__ import annotations
import argparse, logging
from typing import List, Optional

from dotenv import load_dotenv

from .config import DIRECTIONS, LAYOUTS, SyncConfig, resolve_config
from .errors import AuthorizationError, ConfigError, SheetsApiError, SyncError
from .issues import IssueLog
from .locale_files import LocaleFileStore
from .logger import setup_logger
from .oauth import OAuthCredentials
from .sheets_client import GoogleSheetsBackend
from .sync import sync_to_json, sync_to_sheet


def build_backend(cfg: SyncConfig, logger: logging.Logger) -> GoogleSheetsBackend:
    creds = OAuthCredentials.from_config(cfg, logger=logger)
    return GoogleSheetsBackend(
        cfg.sheet_id,
        creds.authorized_session(),
        max_retries=cfg.max_retries,
        backoff_base=cfg.backoff_base,
        timeout=cfg.timeout,
        logger=logger,
    )


def run_sync(cfg: SyncConfig, backend=None) -> IssueLog:
    logger = setup_logger(cfg.log_level)
    cfg.validate()
    logger.info(f"Starting i18n translation sync ({cfg.direction})...")

    issues = IssueLog(logger)
    backend = backend or build_backend(cfg, logger)
    files = LocaleFileStore(cfg.locales_dir, layout=cfg.layout, clean=cfg.clean_output,
                            dry_run=cfg.dry_run, issues=issues, logger=logger)
    try:
        if cfg.direction == "to-json":
            sync_to_json(backend, files, issues, logger)
        else:
            sync_to_sheet(backend, files, issues, logger, dry_run=cfg.dry_run)
    finally:
        if cfg.report_path:
            issues.dump(cfg.report_path)

    if len(issues):
        summary = ", ".join(f"{k}={v}" for k, v in sorted(issues.counts().items()))
        logger.info(f"Issues: {summary}")
    return issues


def run_auth(cfg: SyncConfig, code: Optional[str] = None, open_browser: bool = True, print_url: bool = False) -> bool:
    logger = setup_logger(cfg.log_level)
    cfg.validate(require_sheet=False)
    creds = OAuthCredentials.from_config(cfg, logger=logger)
    if print_url:
        logger.info(f"Open this URL, approve access, then run `i18n-sheets auth --code CODE`: {creds.auth_url()}")
        return True
    if code:
        creds.authorize(code)
        logger.info("Authorization successful!")
        return True
    return creds.run_local_server(open_browser=open_browser)


def _common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("-s", "--sheet-id", dest="sheet_id", default=None, help="Google Sheet ID (overrides GOOGLE_SHEET_ID)")
    p.add_argument("-c", "--credentials", dest="credentials_path", default=None,
                   help="Path to Google OAuth client credentials JSON (overrides GOOGLE_API_CREDENTIALS)")
    p.add_argument("--token", dest="token_path", default=None, help="Where the OAuth token is stored")
    p.add_argument("--config", default=None, help="Path to a YAML/JSON config file")
    p.add_argument("--log-level", dest="log_level", default=None)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="i18n-sheets",
                                 description="Sync i18n JSON locale files with a Google Sheet")
    sub = ap.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("sync", help="Run one sync in the given direction")
    _common_args(s)
    s.add_argument("-d", "--direction", choices=DIRECTIONS, default=None,
                   help="to-json (from Sheet to JSON) or to-sheet (from JSON to Sheet)")
    s.add_argument("-o", "--output-dir", dest="locales_dir", default=None,
                   help="Locales directory (overrides LOCALES_DIR)")
    s.add_argument("--layout", choices=LAYOUTS, default=None,
                   help="nested: <lang>/<category>.json, flat: <lang>.json")
    s.add_argument("--no-clean", dest="clean_output", action="store_const", const=False, default=None,
                   help="Keep existing locale files when writing")
    s.add_argument("--dry-run", dest="dry_run", action="store_const", const=True, default=None)
    s.add_argument("--report", dest="report_path", default=None, help="Write recoverable issues to this JSON file")
    s.add_argument("--max-retries", dest="max_retries", type=int, default=None)
    s.add_argument("--backoff-base", dest="backoff_base", type=float, default=None)

    a = sub.add_parser("auth", help="Authorize access to the spreadsheet and save the token")
    _common_args(a)
    a.add_argument("--port", dest="oauth_port", type=int, default=None, help="OAuth callback port (default 8591)")
    a.add_argument("--code", default=None, help="Exchange an authorization code instead of running the callback server")
    a.add_argument("--no-browser", action="store_true")
    a.add_argument("--print-url", action="store_true", help="Only print the consent URL (use with --code later)")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    logger = setup_logger(args.log_level or "INFO")
    overrides = {k: v for k, v in vars(args).items()
                 if k not in ("cmd", "config", "code", "no_browser", "print_url") and v is not None}
    try:
        cfg = resolve_config(overrides, config_path=args.config)
        if args.cmd == "auth":
            return 0 if run_auth(cfg, code=args.code, open_browser=not args.no_browser,
                                    print_url=args.print_url) else 1
        run_sync(cfg)
        return 0
    except (SyncError, SheetsApiError, AuthorizationError, ConfigError) as e:
        logger.error(f"Error during translation sync: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
