"""
Tests for resudoc.utils.docx — container checks and the paragraph/run adapter.

Run: python3 -m pytest test_docx_utils.py
From: python/
"""

import zipfile
from io import BytesIO

import pytest
from docx import Document
from docx.oxml import OxmlElement
from docx.oxml.ns import qn

from resudoc.errors import InvalidFormat, ProcessingFailure
from resudoc.utils.docx import (
    check_container_signature,
    get_paragraph_runs,
    get_paragraph_text,
    iter_paragraphs,
    load_docx,
    remove_run,
    save_docx,
    set_run_text,
)


def _doc_to_bytes(doc):
    buf = BytesIO()
    doc.save(buf)
    return buf.getvalue()


def _add_hyperlink_run(paragraph, text):
    hyperlink = OxmlElement("w:hyperlink")
    r = OxmlElement("w:r")
    t = OxmlElement("w:t")
    t.text = text
    t.set(qn("xml:space"), "preserve")
    r.append(t)
    hyperlink.append(r)
    paragraph._p.append(hyperlink)
    return hyperlink


def _add_inserted_run(parent_element, text):
    """Appends a tracked insertion <w:ins><w:r><w:t>text</w:t></w:r></w:ins> to `parent_element`."""
    ins = OxmlElement("w:ins")
    ins.set(qn("w:id"), "101")
    ins.set(qn("w:author"), "Reviewer")
    ins.set(qn("w:date"), "2025-01-01T00:00:00Z")
    r = OxmlElement("w:r")
    t = OxmlElement("w:t")
    t.text = text
    t.set(qn("xml:space"), "preserve")
    r.append(t)
    ins.append(r)
    parent_element.append(ins)
    return ins


def test_rejects_empty_input():
    with pytest.raises(InvalidFormat):
        load_docx(b"")
    with pytest.raises(InvalidFormat):
        load_docx(None)
    print("PASS: empty input rejected")


def test_rejects_bad_signature():
    """Anything not starting with PK\\x03\\x04 fails before parsing."""
    with pytest.raises(InvalidFormat):
        load_docx(b"%PDF-1.7 not a docx")
    with pytest.raises(InvalidFormat):
        load_docx(b"PK")
    print("PASS: bad signature rejected")


def test_rejects_oversized_input():
    with pytest.raises(InvalidFormat):
        check_container_signature(b"PK\x03\x04" + b"\0" * 100, max_bytes=50)
    # Zero disables the limit
    check_container_signature(b"PK\x03\x04" + b"\0" * 100, max_bytes=0)
    print("PASS: size limit")


def test_zip_that_is_not_docx_is_processing_failure():
    buf = BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr("hello.txt", "not a word document")
    data = buf.getvalue()
    assert data[:4] == b"PK\x03\x04"

    with pytest.raises(ProcessingFailure):
        load_docx(data)
    print("PASS: non-docx zip is a processing failure")


def test_paragraph_text_is_concatenated_runs():
    doc = Document()
    p = doc.add_paragraph()
    p.add_run("Managed ")
    p.add_run("a ")
    p.add_run("team")

    loaded = load_docx(_doc_to_bytes(doc))
    paragraphs = list(iter_paragraphs(loaded))
    assert len(paragraphs) == 1
    assert len(get_paragraph_runs(paragraphs[0])) == 3
    assert get_paragraph_text(paragraphs[0]) == "Managed a team"
    print("PASS: paragraph text")


def test_hyperlink_runs_are_included_in_order():
    doc = Document()
    p = doc.add_paragraph()
    p.add_run("See ")
    _add_hyperlink_run(p, "github.com/me")
    p.add_run(" for code")

    assert get_paragraph_text(p) == "See github.com/me for code"
    assert [r.text for r in get_paragraph_runs(p)] == ["See ", "github.com/me", " for code"]
    print("PASS: hyperlink runs")


def test_remove_run_drops_empty_hyperlink():
    doc = Document()
    p = doc.add_paragraph()
    p.add_run("See ")
    _add_hyperlink_run(p, "link")

    remove_run(p, 1)

    assert get_paragraph_text(p) == "See "
    assert p._p.find(qn("w:hyperlink")) is None
    print("PASS: emptied hyperlink removed")


def test_inserted_runs_are_visible_in_order():
    """Runs inside <w:ins> count, including an insertion nested in a hyperlink."""
    doc = Document()
    p = doc.add_paragraph()
    p.add_run("Managed ")
    _add_inserted_run(p._p, "a team")
    hyperlink = _add_hyperlink_run(p, " at ")
    _add_inserted_run(hyperlink, "Acme")

    assert [r.text for r in get_paragraph_runs(p)] == ["Managed ", "a team", " at ", "Acme"]
    assert get_paragraph_text(p) == "Managed a team at Acme"
    print("PASS: inserted runs")


def test_deleted_runs_are_not_visible():
    doc = Document()
    p = doc.add_paragraph()
    p.add_run("Managed a team")
    deletion = OxmlElement("w:del")
    deletion.set(qn("w:id"), "7")
    deletion.set(qn("w:author"), "Reviewer")
    r = OxmlElement("w:r")
    dt = OxmlElement("w:delText")
    dt.text = " of two"
    r.append(dt)
    deletion.append(r)
    p._p.append(deletion)

    assert get_paragraph_text(p) == "Managed a team"
    print("PASS: deleted runs skipped")


def test_remove_run_drops_empty_insertion():
    doc = Document()
    p = doc.add_paragraph()
    p.add_run("Managed ")
    _add_inserted_run(p._p, "a team")

    remove_run(p, 1)

    assert get_paragraph_text(p) == "Managed "
    assert p._p.find(qn("w:ins")) is None
    print("PASS: emptied insertion removed")


def test_remove_run_unwinds_nested_wrappers():
    doc = Document()
    p = doc.add_paragraph()
    p.add_run("See ")
    hyperlink = OxmlElement("w:hyperlink")
    _add_inserted_run(hyperlink, "portfolio")
    p._p.append(hyperlink)

    remove_run(p, 1)

    assert get_paragraph_text(p) == "See "
    assert p._p.find(qn("w:hyperlink")) is None
    print("PASS: nested wrappers removed")


def test_set_run_text_keeps_formatting():
    doc = Document()
    p = doc.add_paragraph()
    run = p.add_run("old")
    run.bold = True
    run.italic = True

    set_run_text(get_paragraph_runs(p)[0], "new text")

    reread = get_paragraph_runs(p)[0]
    assert reread.text == "new text"
    assert reread.bold is True
    assert reread.italic is True
    print("PASS: set_run_text keeps rPr")


def test_save_round_trip_keeps_paragraph_text():
    doc = Document()
    doc.add_paragraph("Managed a team")
    doc.add_paragraph("Led development")

    loaded = load_docx(save_docx(load_docx(_doc_to_bytes(doc))))
    assert [get_paragraph_text(p) for p in iter_paragraphs(loaded)] == ["Managed a team", "Led development"]
    print("PASS: save round trip")


if __name__ == "__main__":
    for test in (
        test_rejects_empty_input,
        test_rejects_bad_signature,
        test_rejects_oversized_input,
        test_zip_that_is_not_docx_is_processing_failure,
        test_paragraph_text_is_concatenated_runs,
        test_hyperlink_runs_are_included_in_order,
        test_remove_run_drops_empty_hyperlink,
        test_inserted_runs_are_visible_in_order,
        test_deleted_runs_are_not_visible,
        test_remove_run_drops_empty_insertion,
        test_remove_run_unwinds_nested_wrappers,
        test_set_run_text_keeps_formatting,
        test_save_round_trip_keeps_paragraph_text,
    ):
        test()
