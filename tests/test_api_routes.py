import io

from enquiry_app.fields.values import NumberValue, TextValue, encode_value
from enquiry_app.models import Enquiry, FieldDefinition, db


class TestCustomFieldsAPI:
    """Test /api/custom-fields endpoints"""

    def test_list_starts_empty(self, client):
        response = client.get("/api/custom-fields")
        assert response.status_code == 200
        assert response.get_json() == {"success": True, "data": []}

    def test_create_requires_privilege(self, client):
        response = client.post("/api/custom-fields", json={"name": "region", "label": "Region"})
        assert response.status_code == 403
        assert db.session.query(FieldDefinition).count() == 0

    def test_create_field(self, client, privileged_headers):
        response = client.post(
            "/api/custom-fields",
            json={"name": "priority", "label": "Priority", "type": "select", "options": ["High", "Low"], "isRequired": True},
            headers=privileged_headers,
        )

        assert response.status_code == 201
        data = response.get_json()["data"]
        assert data["name"] == "priority"
        assert data["type"] == "select"
        assert data["options"] == ["High", "Low"]
        assert data["isRequired"] is True
        assert data["isActive"] is True

    def test_create_rejects_bad_names_and_duplicates(self, client, privileged_headers, make_field):
        make_field("region")

        bad = client.post("/api/custom-fields", json={"name": "Bad Name", "label": "Bad"}, headers=privileged_headers)
        duplicate = client.post("/api/custom-fields", json={"name": "region", "label": "Region"}, headers=privileged_headers)

        assert bad.status_code == 400
        assert "lowercase" in bad.get_json()["error"]
        assert duplicate.status_code == 400
        assert "already exists" in duplicate.get_json()["error"]

    def test_list_hides_inactive_unless_asked(self, client, make_field):
        make_field("region")
        make_field("legacy", is_active=False)

        active = client.get("/api/custom-fields").get_json()["data"]
        everything = client.get("/api/custom-fields?includeInactive=true").get_json()["data"]

        assert [field["name"] for field in active] == ["region"]
        assert sorted(field["name"] for field in everything) == ["legacy", "region"]

    def test_update_field(self, client, privileged_headers, make_field):
        make_field("region")

        response = client.put(
            "/api/custom-fields/region",
            json={"label": "Sales Region", "isActive": False},
            headers=privileged_headers,
        )

        assert response.status_code == 200
        data = response.get_json()["data"]
        assert data["label"] == "Sales Region"
        assert data["isActive"] is False

    def test_update_name_is_rejected(self, client, privileged_headers, make_field):
        make_field("region")
        response = client.put("/api/custom-fields/region", json={"name": "area"}, headers=privileged_headers)
        assert response.status_code == 400
        assert "cannot be changed" in response.get_json()["error"]

    def test_update_accepts_the_unchanged_name(self, client, privileged_headers, make_field):
        make_field("region")
        response = client.put(
            "/api/custom-fields/region",
            json={"name": "region", "label": "Area"},
            headers=privileged_headers,
        )
        assert response.status_code == 200
        assert response.get_json()["data"]["label"] == "Area"

    def test_unsafe_type_change_reports_reason(self, client, privileged_headers, make_field, make_enquiry):
        make_field("grade")
        make_enquiry("E-1", {"grade": encode_value(TextValue("A"))})
        make_enquiry("E-2", {"grade": encode_value(TextValue("Z"))})

        response = client.put(
            "/api/custom-fields/grade",
            json={"type": "select", "options": ["A", "B"]},
            headers=privileged_headers,
        )

        assert response.status_code == 400
        body = response.get_json()
        assert body["recordsExamined"] == 2
        assert "'Z'" in body["reason"]

    def test_update_unknown_field(self, client, privileged_headers):
        response = client.put("/api/custom-fields/missing", json={"label": "X"}, headers=privileged_headers)
        assert response.status_code == 404

    def test_delete_needs_force_when_in_use(self, client, privileged_headers, make_field, make_enquiry):
        make_field("region")
        make_enquiry("E-1", {"region": encode_value(TextValue("North"))})
        make_enquiry("E-2", {"region": encode_value(TextValue("South"))})

        first = client.delete("/api/custom-fields/region", headers=privileged_headers)

        assert first.status_code == 409
        body = first.get_json()
        assert body["requiresForce"] is True
        assert body["affectedCount"] == 2
        assert body["deleted"] is False
        assert db.session.query(FieldDefinition).filter_by(name="region").count() == 1

        forced = client.delete("/api/custom-fields/region?force=true", headers=privileged_headers)

        assert forced.status_code == 200
        assert forced.get_json()["deleted"] is True
        assert db.session.query(FieldDefinition).count() == 0
        assert all("region" not in e.dynamic_fields for e in db.session.query(Enquiry))

    def test_delete_requires_privilege(self, client, make_field):
        make_field("region")
        assert client.delete("/api/custom-fields/region?force=true").status_code == 403


class TestBulkImportAPI:
    """Test /api/enquiries/bulk-import endpoint"""

    def test_json_rows(self, client):
        response = client.post(
            "/api/enquiries/bulk-import",
            json={"rows": [{"Enq No.": "E-1", "Region": "North"}, {"Enq No.": "", "Region": "South"}]},
        )

        assert response.status_code == 200
        body = response.get_json()
        assert body["message"] == "Import completed"
        assert body["data"]["total"] == 2
        assert body["data"]["created"] == 1
        assert body["data"]["skipped"] == 1
        assert body["data"]["errors"] == []
        assert db.session.query(FieldDefinition).count() == 0

    def test_privileged_json_rows_create_definitions(self, client, privileged_headers):
        client.post(
            "/api/enquiries/bulk-import",
            json={"rows": [{"Ref": "R-1", "Region": "North"}], "naturalKeyColumn": "Ref"},
            headers=privileged_headers,
        )

        assert db.session.query(Enquiry).filter_by(enquiry_number="R-1").count() == 1
        assert [d.name for d in db.session.query(FieldDefinition)] == ["region"]

    def test_rows_must_be_a_list_of_objects(self, client):
        response = client.post("/api/enquiries/bulk-import", json={"rows": "E-1"})
        assert response.status_code == 400

    def test_csv_upload(self, client):
        payload = b"Enq No.,Customer Name,Qty\nE-1,Acme,5\nE-2,Globex,7\n"
        response = client.post(
            "/api/enquiries/bulk-import",
            data={"file": (io.BytesIO(payload), "enquiries.csv")},
            content_type="multipart/form-data",
        )

        assert response.status_code == 200
        assert response.get_json()["data"]["created"] == 2
        enquiry = db.session.query(Enquiry).filter_by(enquiry_number="E-2").one()
        assert enquiry.customer_name == "Globex"
        assert enquiry.dynamic_fields == {"qty": encode_value(TextValue("7"))}

    def test_upload_rejects_other_extensions(self, client):
        response = client.post(
            "/api/enquiries/bulk-import",
            data={"file": (io.BytesIO(b"hello"), "enquiries.pdf")},
            content_type="multipart/form-data",
        )
        assert response.status_code == 400

    def test_oversized_upload_is_rejected(self, client, app):
        app.config["MAX_CONTENT_LENGTH"] = 256
        payload = b"Enq No.,Remarks\n" + b"E-1," + b"x" * 1024 + b"\n"

        response = client.post(
            "/api/enquiries/bulk-import",
            data={"file": (io.BytesIO(payload), "enquiries.csv")},
            content_type="multipart/form-data",
        )

        assert response.status_code == 413
        assert response.get_json()["error"] == "Uploaded file is too large"
        assert db.session.query(Enquiry).count() == 0

    def test_disabled_importer(self, client, app):
        app.config["IMPORTER_ENABLED"] = False
        response = client.post("/api/enquiries/bulk-import", json={"rows": []})
        assert response.status_code == 404


class TestEnquiryAPI:
    """Test enquiry read endpoints"""

    def test_get_enquiry_includes_orphaned_fields(self, client, make_field, make_enquiry):
        make_field("qty", "Quantity", field_type="number")
        make_enquiry("E-1", {"qty": encode_value(NumberValue(4.0)), "legacy_note": "kept"})

        response = client.get("/api/enquiries/E-1")

        assert response.status_code == 200
        data = response.get_json()["data"]
        assert data["enquiryNumber"] == "E-1"
        assert data["dynamicFields"]["qty"] == {"kind": "number", "value": 4.0, "display": "4"}
        assert data["dynamicFields"]["legacy_note"] == {"kind": "text", "value": "kept", "display": "kept"}

    def test_get_enquiry_number_with_slashes(self, client):
        client.post("/api/enquiries/bulk-import", json={"rows": [{"Enq No.": "SE/24/001", "Region": "West"}]})

        response = client.get("/api/enquiries/SE/24/001")

        assert response.status_code == 200
        data = response.get_json()["data"]
        assert data["enquiryNumber"] == "SE/24/001"
        assert data["dynamicFields"]["region"]["value"] == "West"

    def test_get_missing_enquiry(self, client):
        assert client.get("/api/enquiries/nope").status_code == 404

    def test_dynamic_columns(self, client, make_field, make_enquiry):
        make_field("region")
        make_enquiry("E-1", {"region": encode_value(TextValue("North")), "orphan": encode_value(TextValue("x"))})

        data = client.get("/api/enquiries/dynamic-columns").get_json()["data"]

        assert [(c["name"], c["isDefined"]) for c in data] == [("region", True), ("orphan", False)]


class TestSystemFieldsAPI:
    """Test /api/system-fields endpoints"""

    def test_list_system_fields(self, client):
        response = client.get("/api/system-fields")

        assert response.status_code == 200
        data = response.get_json()["data"]
        assert {"name": "customer_name", "label": "Customer"}.items() <= next(
            item for item in data if item["name"] == "customer_name"
        ).items()
        assert all(item["isSystem"] for item in data)

    def test_update_requires_privilege(self, client):
        response = client.put("/api/system-fields/customer_name", json={"label": "Client"})
        assert response.status_code == 403

    def test_update_label(self, client, privileged_headers):
        response = client.put("/api/system-fields/customer_name", json={"label": "Client"}, headers=privileged_headers)

        assert response.status_code == 200
        assert response.get_json()["data"]["label"] == "Client"

    def test_update_rejects_blank_label_and_unknown_column(self, client, privileged_headers):
        blank = client.put("/api/system-fields/customer_name", json={"label": " "}, headers=privileged_headers)
        unknown = client.put("/api/system-fields/nope", json={"label": "Nope"}, headers=privileged_headers)

        assert blank.status_code == 400
        assert unknown.status_code == 404

    def test_delete_resets_to_default(self, client, privileged_headers):
        client.put(
            "/api/system-fields/remarks",
            json={"label": "Notes", "isActive": False},
            headers=privileged_headers,
        )

        response = client.delete("/api/system-fields/remarks", headers=privileged_headers)

        assert response.status_code == 200
        data = response.get_json()["data"]
        assert data["label"] == "Remarks"
        assert data["isActive"] is True
