from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.http import error_response, principal_required, resolve_tenant
from ..common.validators import optional_str, require_date
from ..core.exceptions import DomainError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    schedule_service = container.schedule_service
    tenant_service = container.tenant_service

    @app.route("/api/schedules/reassign", methods=["POST"], endpoint="api_schedules_reassign")
    @principal_required
    def api_schedules_reassign():
        payload = request.get_json(silent=True) or {}
        try:
            tenant_id = resolve_tenant(tenant_service, g.principal, optional_str(payload.get("school")))
            try:
                student_id = int(payload.get("student_id") or 0)
            except (TypeError, ValueError):
                raise ValidationError("Invalid student")
            new_teacher_id = optional_str(payload.get("new_teacher_id"))
            if not new_teacher_id:
                raise ValidationError("new_teacher_id is required")
            change_date = require_date(payload.get("change_date"), "change_date")

            result = schedule_service.reassign(
                principal=g.principal,
                tenant_id=tenant_id,
                student_id=student_id,
                new_teacher_id=new_teacher_id,
                change_date=change_date,
                day_package=payload.get("day_package"),
                time_slot=optional_str(payload.get("time_slot")),
            )
        except DomainError as e:
            return error_response(e)

        return jsonify(
            {
                "success": True,
                "assignment_id": result.assignment_id,
                "closed_assignment_ids": result.closed_assignment_ids,
                "conflicts": [
                    {"type": c.conflict_type, "teacher_id": c.teacher_id, "message": c.message}
                    for c in result.validation.conflicts
                ],
                "warnings": result.validation.warnings,
            }
        ), 201
