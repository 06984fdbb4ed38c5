#!/usr/bin/env python3
"""
Import properties from media folders

Runs the folder importer against one or more local directories, or asks a
running API to import a directory it can see (--api-url).

Usage:
    python scripts/import_properties_from_folders.py "/data/Beachfront"
    python scripts/import_properties_from_folders.py /uploads/batch --api-url http://localhost:8000
"""
import argparse
import json
import logging
import os
import sys
from pathlib import Path

import requests

# Add backend to path
sys.path.append(str(Path(__file__).parent.parent))

from config.db_connection import engine, init_db
from services.folder_importer import FolderImporter, ImportInputError, ImportReport, summarize
from services.image_encoder import select_image_encoder
from services.media_storage import MediaStorage
from services.video_probe import select_video_probe

logger = logging.getLogger(__name__)


def import_via_api(api_url: str, folder_path: str, timeout: int = 600) -> dict:
    """Call the import endpoint of a running server"""
    endpoint = f"{api_url.rstrip('/')}/api/properties/import-folder"
    response = requests.post(endpoint, json={"folderPath": folder_path}, timeout=timeout)
    if response.status_code != 200:
        try:
            detail = response.json().get("detail")
        except ValueError:
            detail = response.text
        raise RuntimeError(f"Import failed with status {response.status_code}: {detail}")
    return response.json()


def import_locally(folder_paths, importer: FolderImporter = None):
    """Run the importer in this process; a root that cannot be imported counts as one failure"""
    if importer is None:
        init_db(engine)
        importer = FolderImporter(engine, MediaStorage(select_image_encoder()), select_video_probe())
    reports = []
    for folder_path in folder_paths:
        try:
            report = importer.import_path(folder_path)
        except ImportInputError as e:
            logger.error(f"Cannot import {folder_path}: {e}")
            report = ImportReport(total_folders=1)
            report.add_error(str(folder_path), str(e))
        for error in report.error_list:
            logger.error(f"  {error}")
        reports.append(report)
    return reports, summarize(reports)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Import properties from media folders")
    parser.add_argument("folders", nargs="+", help="Directories holding property folders")
    parser.add_argument("--api-url", default=os.getenv("API_URL"),
                        help="Post the import to this server instead of running it locally")
    args = parser.parse_args(argv)

    if args.api_url:
        failed = 0
        for folder_path in args.folders:
            try:
                result = import_via_api(args.api_url, folder_path)
            except (requests.exceptions.RequestException, RuntimeError) as e:
                logger.error(f"Error importing {folder_path}: {e}")
                failed += 1
                continue
            logger.info(json.dumps(result, indent=2))
            failed += result.get("failed", 0)
        return 1 if failed else 0

    _, totals = import_locally(args.folders)
    logger.info(
        f"Import completed: {totals['successful']} succeeded, {totals['failed']} failed, "
        f"{totals['total']} folder(s)"
    )
    return 1 if totals["failed"] else 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    sys.exit(main())
