from __future__ import annotations
import logging
from typing import List, Optional

from .builder import TreeBuilder
from .flattener import TreeFlattener
from .issues import IssueLog
from .locale_files import LocaleFileStore
from .rows import RowTable
from .sheets_base import SheetBackend
from .tree import TranslationStore


def sync_to_json(
    backend: SheetBackend,
    files: LocaleFileStore,
    issues: Optional[IssueLog] = None,
    logger: logging.Logger | None = None,
) -> TranslationStore:
    """Sheet -> files. Any table-level error (EmptySheet, MissingKeyColumn) aborts before a file is touched."""
    logger = logger or logging.getLogger("i18n-sheets")
    issues = issues if issues is not None else IssueLog(logger)

    logger.info("Fetching Google Sheet pages...")
    names = backend.get_sheet_names()
    logger.info(f"Found {len(names)} pages: {', '.join(names)}")

    logger.info("Processing sheets data...")
    tables = [backend.get_sheet_data(name) for name in names]
    store = TreeBuilder(issues, logger).build(tables)

    logger.info("Writing translation files...")
    files.write_translation_files(store)
    logger.info("Translation sync to JSON completed successfully!")
    return store


def sync_to_sheet(
    backend: SheetBackend,
    files: LocaleFileStore,
    issues: Optional[IssueLog] = None,
    logger: logging.Logger | None = None,
    dry_run: bool = False,
) -> List[RowTable]:
    """Files -> sheet. Each category replaces the whole content of its tab."""
    logger = logger or logging.getLogger("i18n-sheets")
    issues = issues if issues is not None else IssueLog(logger)

    logger.info("Reading local translation files...")
    store = files.read_translation_files()

    logger.info("Converting to Google Sheets format...")
    tables = TreeFlattener(issues, logger).flatten(store)

    logger.info("Updating Google Sheets...")
    for table in tables:
        headers, rows = table.to_grid()
        if dry_run:
            logger.info(f"[dry-run] would update sheet {table.category}: {len(rows)} rows x {len(headers)} columns")
            continue
        backend.update_sheet_data(table.category, headers, rows)
    logger.info("Translation sync to Google Sheets completed successfully!")
    return tables
