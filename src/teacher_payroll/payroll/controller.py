from __future__ import annotations

import io

from flask import Flask, g, jsonify, request, send_file

from ..common.http import error_response, period_args, principal_required, resolve_tenant
from ..common.validators import optional_str
from ..core.enums import Capability
from ..core.exceptions import DomainError
from ..container import Container
from .export import export_report


def register(app: Flask, container: Container) -> None:
    salary_service = container.salary_service
    tenant_service = container.tenant_service

    def _salary(teacher_id: str, school=None):
        principal = g.principal
        try:
            principal.require_salary_access(teacher_id)
            tenant_id = resolve_tenant(tenant_service, principal, school)
            start, end = period_args()
            result = salary_service.calculate_salary(teacher_id, tenant_id, start, end)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "salary": result.to_dict()})

    @app.route("/api/salaries/<teacher_id>", methods=["GET"], endpoint="api_salary")
    @principal_required
    def api_salary(teacher_id: str):
        """Salary of one teacher.

        Figures are cached per period and only refreshed after
        POST /api/salaries/cache/clear.
        """
        return _salary(teacher_id)

    @app.route("/api/schools/<school>/salaries/<teacher_id>", methods=["GET"], endpoint="api_school_salary")
    @principal_required
    def api_school_salary(school: str, teacher_id: str):
        return _salary(teacher_id, school)

    @app.route("/api/salaries", methods=["GET"], endpoint="api_salaries")
    @principal_required
    def api_salaries():
        principal = g.principal
        try:
            principal.require(Capability.VIEW_ALL_SALARIES)
            tenant_id = resolve_tenant(tenant_service, principal, optional_str(request.args.get("school")))
            start, end = period_args()
            report = salary_service.calculate_all_salaries(tenant_id, start, end)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, **report.to_dict()})

    @app.route("/api/salaries/export", methods=["GET"], endpoint="api_salaries_export")
    @principal_required
    def api_salaries_export():
        principal = g.principal
        try:
            principal.require(Capability.EXPORT_SALARIES)
            tenant_id = resolve_tenant(tenant_service, principal, optional_str(request.args.get("school")))
            start, end = period_args()
            report = salary_service.calculate_all_salaries(tenant_id, start, end)
            exported = export_report(report, request.args.get("format") or "xlsx")
        except DomainError as e:
            return error_response(e)

        return send_file(
            io.BytesIO(exported.content),
            mimetype=exported.mimetype,
            as_attachment=True,
            download_name=exported.filename,
        )

    @app.route("/api/salaries/cache/clear", methods=["POST"], endpoint="api_salaries_cache_clear")
    @principal_required
    def api_salaries_cache_clear():
        principal = g.principal
        payload = request.get_json(silent=True) or {}
        try:
            principal.require(Capability.MANAGE_CACHE)
            teacher_id = optional_str(payload.get("teacher_id"))
            if payload.get("all"):
                removed = salary_service.clear_cache()
            else:
                tenant_id = resolve_tenant(tenant_service, principal, optional_str(payload.get("school")))
                removed = salary_service.clear_cache(tenant_id=tenant_id, teacher_id=teacher_id)
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "removed": removed})
