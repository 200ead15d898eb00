# main.py
from __future__ import annotations

import argparse
import logging
import sys

from core.exceptions import DomainError
from infra.db.base import build_engine, build_session_factory
from infra.logging_config import setup_logging
from infra.migrate import run_migrations
from infra.operational_support import bind_trace_id
from infra.path import default_db_url
from infra.services import build_service_graph


logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Job costing report for one project")
    parser.add_argument("project_id", help="project to report on")
    parser.add_argument("--format", choices=("json", "excel"), default="json")
    parser.add_argument("--output", help="workbook path, required for --format excel")
    parser.add_argument("--db-url", default=None, help="overrides JC_DB_URL")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    setup_logging()
    db_url = args.db_url or default_db_url()

    with bind_trace_id():
        run_migrations(db_url)
        session = build_session_factory(build_engine(db_url))()
        try:
            services = build_service_graph(session)
            result = services.financials_service.export_financials(
                args.project_id,
                format=args.format,
                output_path=args.output,
            )
        except DomainError as exc:
            logger.error("Report failed [%s]: %s", exc.code, exc)
            return 1
        finally:
            session.close()

    print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
