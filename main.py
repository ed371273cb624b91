#!/usr/bin/env python3
"""
CLIENTDB - Client import and reconciliation service
====================================================

Single-command run:  python main.py

See config.py for all environment-variable tunables.
"""

import logging

from flask import Flask, jsonify

import config
from db import init_db, get_session
from api import api_bp


def create_app(db_url: str | None = None) -> Flask:
    """Flask application factory."""

    app = Flask(__name__)
    app.secret_key = config.SECRET

    # ── Initialise database ─────────────────────────────────────────
    init_db(db_url or config.DB_URL)

    # ── Register blueprints ─────────────────────────────────────────
    app.register_blueprint(api_bp)

    # ── Error handlers ──────────────────────────────────────────────
    @app.errorhandler(404)
    def _404(e):
        return jsonify({"error": "not found"}), 404

    @app.errorhandler(500)
    def _500(e):
        return jsonify({"error": "internal server error"}), 500

    return app


def _seed_if_empty():
    """Auto-import seed CSV when the database is empty."""
    from services.clients_service import ClientsService

    session = get_session()
    count = ClientsService.count(session)
    session.close()

    if count > 0:
        print(f"\n  Database has {count} clients.")
        return

    if not config.CSV_SEED_PATH.exists():
        print(f"\n  No seed CSV at {config.CSV_SEED_PATH} - starting empty.")
        return

    print(f"\n  Database empty → auto-importing {config.CSV_SEED_PATH.name} …")
    from import_engine.errors import ImportEngineError
    from services.import_service import run_import

    with open(config.CSV_SEED_PATH, "rb") as fh:
        content = fh.read()
    try:
        report = run_import(content, filename=config.CSV_SEED_PATH.name,
                            remember_mapping=False)
    except ImportEngineError as exc:
        print(f"  Seed import failed: {exc}")
        return

    print(f"  Done: {report.created} created, {report.updated} updated, "
          f"{report.skipped} skipped, {report.errors} errors / {report.total_rows} rows")
    errors = [i for i in report.issues if i.blocking]
    if errors:
        print(f"  First errors (max 10):")
        for issue in errors[:10]:
            print(f"    Row {issue.row}: {issue.message}")


def main():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("=" * 56)
    print("  CLIENTDB - Client Import Service")
    print("=" * 56)

    app = create_app()
    print(f"  Database: {config.DB_URL}")
    _seed_if_empty()

    print(f"\n  http://{config.HOST}:{config.PORT}/api/v1")
    print("=" * 56)

    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)


if __name__ == "__main__":
    main()
