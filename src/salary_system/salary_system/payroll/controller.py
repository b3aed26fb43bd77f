from __future__ import annotations

import logging
from datetime import date

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date, today_local
from ..common.money import money_str
from ..core.exceptions import StoreUnavailableError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _parse_date(name: str, default: date) -> date:
        raw = (request.args.get(name) or "").strip()
        if not raw:
            return default
        try:
            return parse_iso_date(raw)
        except ValueError as e:
            raise ValidationError(f"{name} must be YYYY-MM-DD, got {raw!r}") from e

    def _period() -> tuple[date, date]:
        today = today_local()
        return _parse_date("start", today.replace(day=1)), _parse_date("end", today)

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        return jsonify({"error": "invalid_request", "message": str(e)}), 400

    @app.errorhandler(StoreUnavailableError)
    def handle_store_unavailable(e: StoreUnavailableError):
        logger.error("Record store unavailable: %s", e)
        return jsonify({"error": "store_unavailable"}), 503

    @app.route("/api/teacher-salaries", methods=["GET"], endpoint="teacher_salaries")
    def teacher_salaries():
        start, end = _period()
        run = container.salary_service.calculate_payroll(start, end)
        return jsonify(
            {
                "period_start": start.isoformat(),
                "period_end": end.isoformat(),
                "complete": run.complete,
                "total_payroll": money_str(run.total_payroll),
                "teachers": [r.summary_row() for r in run.results],
                "failures": [{"teacher_id": f.teacher_id, "error": f.error} for f in run.failures],
            }
        )

    @app.route("/api/teacher-salaries/<teacher_id>", methods=["GET"], endpoint="teacher_salary_detail")
    def teacher_salary_detail(teacher_id: str):
        start, end = _period()
        result = container.salary_service.calculate_teacher_salary(teacher_id, start, end)
        return jsonify(result.to_dict())

    @app.route(
        "/api/teacher-salaries/<teacher_id>/legacy-comparison",
        methods=["GET"],
        endpoint="teacher_salary_legacy_comparison",
    )
    def teacher_salary_legacy_comparison(teacher_id: str):
        start, end = _period()
        result = container.salary_service.calculate_teacher_salary(teacher_id, start, end)
        return jsonify(container.legacy_comparison.compare(result).to_dict())

    @app.route("/api/teacher-salaries/cache/clear", methods=["POST"], endpoint="teacher_salary_cache_clear")
    def teacher_salary_cache_clear():
        payload = request.get_json(silent=True) or {}
        teacher_id = (payload.get("teacher_id") or request.form.get("teacher_id") or "").strip() or None
        dropped = container.salary_service.invalidate_cache(teacher_id)
        return jsonify({"success": True, "teacher_id": teacher_id, "cleared": dropped})
