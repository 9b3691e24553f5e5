from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.http import error_response, period_args, principal_required, resolve_tenant
from ..common.validators import optional_str
from ..core.exceptions import DomainError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    waiver_service = container.waiver_service
    tenant_service = container.tenant_service

    @app.route("/api/waivers/preview", methods=["POST"], endpoint="api_waivers_preview")
    @principal_required
    def api_waivers_preview():
        payload = request.get_json(silent=True) or {}
        try:
            tenant_id = resolve_tenant(tenant_service, g.principal, optional_str(payload.get("school")))
            start, end = period_args(payload)
            candidates = waiver_service.preview(
                principal=g.principal,
                tenant_id=tenant_id,
                start=start,
                end=end,
                teacher_id=optional_str(payload.get("teacher_id")),
                deduction_type=payload.get("deduction_type"),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify({"success": True, "candidates": [c.to_dict() for c in candidates]})

    @app.route("/api/waivers", methods=["POST"], endpoint="api_waivers_create")
    @principal_required
    def api_waivers_create():
        """Waive charged deductions in a range.

        The salary cache is left alone; clear it for ``affected_teacher_ids``.
        """
        payload = request.get_json(silent=True) or {}
        try:
            tenant_id = resolve_tenant(tenant_service, g.principal, optional_str(payload.get("school")))
            start, end = period_args(payload)
            outcome = waiver_service.waive(
                principal=g.principal,
                tenant_id=tenant_id,
                start=start,
                end=end,
                reason=payload.get("reason") or "",
                teacher_id=optional_str(payload.get("teacher_id")),
                deduction_type=payload.get("deduction_type"),
            )
        except DomainError as e:
            return error_response(e)
        return jsonify(
            {
                "success": True,
                "created": outcome.created_ids,
                "skipped": outcome.skipped,
                "affected_teacher_ids": outcome.affected_teacher_ids,
            }
        ), 201
