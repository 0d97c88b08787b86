# enquiry_app/routes/api.py

"""
JSON API for field definitions, built-in column labels and enquiry imports.

Authentication lives in the host application; it marks privileged callers by
setting ``flask.g.requester_is_privileged``.
"""

from functools import wraps

from flask import current_app, g, jsonify, request

from enquiry_app.fields.exceptions import (
    FieldNotFoundError,
    FieldSchemaError,
    UnsafeTypeChangeError,
)
from enquiry_app.importer.adapters import SpreadsheetReadError
from enquiry_app.importer.mapping import AliasConfigError
from enquiry_app.importer.utils import allowed_file, cleanup_upload, persist_upload
from enquiry_app.models import Enquiry, db
from enquiry_app.services import DynamicColumnService, EnquiryImportService, FieldSchemaService, SystemFieldService
from enquiry_app.utils.importer import is_importer_enabled

# JSON payload keys accepted by the field endpoints, mapped to service keywords.
_FIELD_PAYLOAD_KEYS = {
    "name": "name",
    "label": "label",
    "type": "type",
    "options": "options",
    "isRequired": "required",
    "required": "required",
    "description": "description",
    "isActive": "active",
    "active": "active",
}


def requester_is_privileged():
    return bool(g.get("requester_is_privileged", False))


def privileged_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not requester_is_privileged():
            return jsonify({"success": False, "error": "Only privileged users can manage fields"}), 403
        return view(*args, **kwargs)

    return wrapped


def _schema_error_response(exc):
    if isinstance(exc, FieldNotFoundError):
        return jsonify({"success": False, "error": str(exc)}), 404
    payload = {"success": False, "error": str(exc)}
    if isinstance(exc, UnsafeTypeChangeError):
        payload.update({"reason": exc.reason, "recordsExamined": exc.records_examined})
    return jsonify(payload), 400


def _field_changes(payload):
    changes = {}
    for key, value in (payload or {}).items():
        target = _FIELD_PAYLOAD_KEYS.get(key)
        if target is not None:
            changes[target] = value
    return changes


def _parse_bool(value):
    return str(value or "").strip().lower() in {"1", "true", "yes", "on"}


def register_api_routes(app):
    """Register API routes"""

    @app.route("/api/custom-fields", methods=["GET"])
    def api_list_custom_fields():
        """List active field definitions (``?includeInactive=true`` for all)."""
        include_inactive = _parse_bool(request.args.get("includeInactive"))
        fields = FieldSchemaService.list_fields(include_inactive=include_inactive)
        return jsonify({"success": True, "data": [field.to_dict() for field in fields]})

    @app.route("/api/custom-fields", methods=["POST"])
    @privileged_required
    def api_create_custom_field():
        payload = request.get_json(silent=True) or {}
        changes = _field_changes(payload)
        try:
            field = FieldSchemaService.create_field(
                changes.get("name"),
                changes.get("label"),
                field_type=changes.get("type") or "text",
                options=changes.get("options"),
                required=bool(changes.get("required", False)),
                description=changes.get("description"),
            )
        except FieldSchemaError as exc:
            return _schema_error_response(exc)
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error creating custom field: {str(e)}", exc_info=True)
            return jsonify({"success": False, "error": "An error occurred while creating the field"}), 500
        return jsonify({"success": True, "data": field.to_dict()}), 201

    @app.route("/api/custom-fields/<string:name>", methods=["PUT"])
    @privileged_required
    def api_update_custom_field(name):
        payload = request.get_json(silent=True) or {}
        try:
            field = FieldSchemaService.update_field(name, **_field_changes(payload))
        except FieldSchemaError as exc:
            return _schema_error_response(exc)
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error updating custom field {name}: {str(e)}", exc_info=True)
            return jsonify({"success": False, "error": "An error occurred while updating the field"}), 500
        return jsonify({"success": True, "data": field.to_dict()})

    @app.route("/api/custom-fields/<string:name>", methods=["DELETE"])
    @privileged_required
    def api_delete_custom_field(name):
        force = _parse_bool(request.args.get("force"))
        try:
            outcome = FieldSchemaService.delete_field(name, force=force)
        except FieldSchemaError as exc:
            return _schema_error_response(exc)
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error deleting custom field {name}: {str(e)}", exc_info=True)
            return jsonify({"success": False, "error": "An error occurred while deleting the field"}), 500

        if outcome.requires_force:
            return (
                jsonify(
                    {
                        "success": False,
                        "message": (
                            f"This field is used in {outcome.affected_count} enquiries. "
                            "Deleting it will remove data from those records."
                        ),
                        **outcome.as_dict(),
                    }
                ),
                409,
            )
        return jsonify({"success": True, "message": "Custom field deleted successfully", **outcome.as_dict()})

    @app.route("/api/system-fields", methods=["GET"])
    def api_list_system_fields():
        fields = SystemFieldService.list_fields()
        return jsonify({"success": True, "data": [field.to_dict() for field in fields]})

    @app.route("/api/system-fields/<string:name>", methods=["PUT"])
    @privileged_required
    def api_update_system_field(name):
        payload = request.get_json(silent=True) or {}
        active = payload.get("isActive", payload.get("active"))
        try:
            field = SystemFieldService.update_field(
                name,
                label=payload.get("label"),
                active=None if active is None else bool(active),
            )
        except FieldSchemaError as exc:
            return _schema_error_response(exc)
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error updating system field {name}: {str(e)}", exc_info=True)
            return jsonify({"success": False, "error": "An error occurred while updating the field"}), 500
        return jsonify({"success": True, "message": "System field updated successfully", "data": field.to_dict()})

    @app.route("/api/system-fields/<string:name>", methods=["DELETE"])
    @privileged_required
    def api_reset_system_field(name):
        """Built-in columns are never dropped; deleting one restores its default label."""
        try:
            field = SystemFieldService.reset_field(name)
        except FieldSchemaError as exc:
            return _schema_error_response(exc)
        except Exception as e:
            db.session.rollback()
            current_app.logger.error(f"Error resetting system field {name}: {str(e)}", exc_info=True)
            return jsonify({"success": False, "error": "An error occurred while resetting the field"}), 500
        return jsonify({"success": True, "message": "System field reset to default", "data": field.to_dict()})

    @app.route("/api/enquiries/bulk-import", methods=["POST"])
    def api_bulk_import_enquiries():
        """Import rows posted as JSON or an uploaded .csv/.xlsx file."""
        if not is_importer_enabled():
            return jsonify({"success": False, "error": "Importer is disabled"}), 404

        privileged = requester_is_privileged()
        upload = request.files.get("file")
        try:
            if upload is not None:
                return _import_upload(upload, privileged)

            payload = request.get_json(silent=True) or {}
            rows = payload.get("rows")
            if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
                return jsonify({"success": False, "error": "'rows' must be a list of objects"}), 400
            result = EnquiryImportService.import_batch(
                rows,
                privileged=privileged,
                natural_key_column=payload.get("naturalKeyColumn"),
            )
        except AliasConfigError as e:
            current_app.logger.error(f"Header alias configuration is invalid: {str(e)}")
            return jsonify({"success": False, "error": str(e)}), 500
        return jsonify({"success": True, "message": "Import completed", "data": result.as_dict()})

    def _import_upload(upload, privileged):
        if not allowed_file(upload.filename or ""):
            return jsonify({"success": False, "error": "Please upload a .csv or .xlsx file"}), 400
        header_row = request.form.get("headerRow", type=int)
        stored_path = persist_upload(upload, current_app)
        try:
            result = EnquiryImportService.import_file(
                stored_path,
                privileged=privileged,
                natural_key_column=request.form.get("naturalKeyColumn") or None,
                sheet=request.form.get("sheet") or None,
                header_row=header_row,
            )
        except SpreadsheetReadError as exc:
            return jsonify({"success": False, "error": str(exc)}), 400
        finally:
            cleanup_upload(stored_path)
        return jsonify({"success": True, "message": "Import completed", "data": result.as_dict()})

    @app.route("/api/enquiries/dynamic-columns", methods=["GET"])
    def api_dynamic_columns():
        columns = DynamicColumnService.list_columns()
        return jsonify({"success": True, "data": [column.as_dict() for column in columns]})

    @app.route("/api/enquiries/<path:enquiry_number>", methods=["GET"])
    def api_get_enquiry(enquiry_number):
        enquiry = db.session.query(Enquiry).filter_by(enquiry_number=enquiry_number).one_or_none()
        if enquiry is None:
            return jsonify({"success": False, "error": f"Enquiry '{enquiry_number}' not found"}), 404
        return jsonify({"success": True, "data": DynamicColumnService.serialize_enquiry(enquiry)})
