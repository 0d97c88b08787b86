import os
from pathlib import Path

import pytest

from enquiry_app.importer.contracts import get_enquiry_alias_map
from enquiry_app.importer.mapping import AliasConfigError, get_active_alias_map, load_alias_overrides
from enquiry_app.models import Enquiry, db
from enquiry_app.services import EnquiryImportService


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "aliases.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_list_overrides_extend_and_replace_swaps(tmp_path):
    path = _write(
        tmp_path,
        """
version: 2
aliases:
  enquiry_number:
    - "Enquiry Ref"
  customer_name:
    replace: true
    aliases: ["Buyer", "Buyer Name"]
""",
    )

    spec = load_alias_overrides(path)
    merged = spec.apply(get_enquiry_alias_map())

    assert spec.version == 2
    assert len(spec.checksum) == 64
    assert merged["enquiry_number"][-1] == "Enquiry Ref"
    assert merged["enquiry_number"][0] == "Enq No."
    assert merged["customer_name"] == ("Buyer", "Buyer Name")


@pytest.mark.parametrize(
    "text, message",
    [
        ("aliases:\n  colour: [Paint]\n", "Unknown canonical field"),
        ("aliases:\n  remarks: Notes\n", "must be a list"),
        ("aliases:\n  remarks: ['', 'Notes']\n", "blank"),
        ("aliases:\n  remarks:\n    replace: true\n    aliases: []\n", "requires at least one"),
        ("- just\n- a list\n", "mapping at the top level"),
        ("aliases: [unclosed\n", "Failed to parse"),
    ],
)
def test_invalid_alias_files(tmp_path, text, message):
    with pytest.raises(AliasConfigError, match=message):
        load_alias_overrides(_write(tmp_path, text))


def test_missing_alias_file(tmp_path):
    with pytest.raises(AliasConfigError):
        load_alias_overrides(tmp_path / "nope.yaml")


def test_active_map_reloads_when_the_file_changes(app, tmp_path):
    path = _write(tmp_path, "aliases:\n  remarks: ['Observations']\n")
    app.config["IMPORTER_ALIAS_PATH"] = str(path)

    assert "Observations" in get_active_alias_map()["remarks"]

    path.write_text("aliases:\n  remarks: ['Feedback']\n", encoding="utf-8")
    stat = path.stat()
    os.utime(path, (stat.st_atime, stat.st_mtime + 5))

    aliases = get_active_alias_map()["remarks"]
    assert "Feedback" in aliases
    assert "Observations" not in aliases


def test_import_honours_configured_aliases(app, tmp_path):
    path = _write(tmp_path, "aliases:\n  enquiry_number: ['Enquiry Ref']\n  remarks: ['Observations']\n")
    app.config["IMPORTER_ALIAS_PATH"] = str(path)

    result = EnquiryImportService.import_batch([{"Enquiry Ref": "X-1", "Observations": "Call back"}])

    assert result.created == 1
    enquiry = db.session.query(Enquiry).filter_by(enquiry_number="X-1").one()
    assert enquiry.remarks == "Call back"
    assert enquiry.dynamic_fields == {}
