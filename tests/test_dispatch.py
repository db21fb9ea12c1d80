import asyncio
import io
from datetime import datetime

from pypdf import PdfReader

from conftest import FakeSender, image_payload
from piscineo.domain.interventions import service as service_module
from piscineo.domain.interventions.service import (
    PDF_CONTENT_TYPE,
    InterventionReportService,
    build_report_filename,
    build_report_subject,
    generate_and_send_intervention_pdf,
    send_intervention_report,
)
from piscineo.services.report_pdf import ReportRenderError


def test_filename_uses_client_name_and_date(make_record):
    assert build_report_filename(make_record()) == "rapport_intervention_Dupont_Jean_12-juin-2025.pdf"


def test_filename_is_sanitized(make_record):
    record = make_record(client={"firstName": "Jean Pierre", "lastName": "De/La Tour"})
    assert build_report_filename(record) == (
        "rapport_intervention_DeLa_Tour_Jean_Pierre_12-juin-2025.pdf"
    )


def test_subject_contains_formatted_date(make_record):
    assert build_report_subject(make_record()) == "Rapport d'intervention Piscineo - 12 juin 2025"


def test_missing_email_fails_without_calling_transport(make_record, fake_sender):
    record = make_record(client={"email": ""})
    assert asyncio.run(send_intervention_report(record, b"%PDF-1.4", send_func=fake_sender)) is False
    assert fake_sender.calls == []


def test_report_is_sent_as_pdf_attachment(make_record, fake_sender):
    record = make_record()
    assert asyncio.run(send_intervention_report(record, b"%PDF-1.4 bytes", send_func=fake_sender))

    assert len(fake_sender.calls) == 1
    call = fake_sender.calls[0]
    assert call["to"] == "jean.dupont@example.com"
    assert "12 juin 2025" in call["subject"]
    assert "Bonjour Jean Dupont" in call["text_content"]
    assert "<mjml>" in call["mjml_content"]
    assert call["attachments"] == [
        {
            "filename": "rapport_intervention_Dupont_Jean_12-juin-2025.pdf",
            "content": b"%PDF-1.4 bytes",
            "content_type": PDF_CONTENT_TYPE,
        }
    ]


def test_client_name_is_escaped_in_html_body(make_record, fake_sender):
    record = make_record(client={"firstName": "<b>Jean</b>"})
    asyncio.run(send_intervention_report(record, b"%PDF", send_func=fake_sender))
    mjml_content = fake_sender.calls[0]["mjml_content"]
    assert "&lt;b&gt;Jean&lt;/b&gt;" in mjml_content
    assert "<b>Jean</b>" not in mjml_content


def test_transport_failure_is_reported_as_false(make_record):
    sender = FakeSender(error=ConnectionError("SMTP down"))
    assert asyncio.run(send_intervention_report(make_record(), b"%PDF", send_func=sender)) is False
    assert len(sender.calls) == 1


def test_generate_and_send_end_to_end(make_record, fake_sender):
    record = make_record(
        description="Nettoyage standard",
        date=datetime(2025, 6, 12),
        photos=[image_payload("JPEG"), image_payload("PNG")],
        signature=image_payload("PNG"),
    )
    result = asyncio.run(generate_and_send_intervention_pdf(record, send_func=fake_sender, logo=""))

    assert result
    assert result.success is True
    assert result.stage is None
    assert result.filename == "rapport_intervention_Dupont_Jean_12-juin-2025.pdf"

    attachment = fake_sender.calls[0]["attachments"][0]
    assert attachment["content_type"] == "application/pdf"
    assert len(PdfReader(io.BytesIO(attachment["content"])).pages) == 3


def test_generate_and_send_missing_email(make_record, fake_sender):
    record = make_record(client={"email": None})
    result = asyncio.run(generate_and_send_intervention_pdf(record, send_func=fake_sender, logo=""))
    assert not result
    assert result.stage == "missing_email"
    assert fake_sender.calls == []


def test_generate_and_send_render_failure(make_record, fake_sender, monkeypatch):
    def broken_render(record, logo=None, company_name=None):
        raise ReportRenderError("font embedding failed")

    monkeypatch.setattr(service_module, "generate_intervention_pdf", broken_render)
    result = asyncio.run(
        generate_and_send_intervention_pdf(make_record(), send_func=fake_sender, logo="")
    )
    assert not result
    assert result.stage == "render"
    assert "font embedding failed" in result.error
    assert fake_sender.calls == []


def test_generate_and_send_transport_failure(make_record):
    sender = FakeSender(error=RuntimeError("Failed to send email"))
    result = asyncio.run(generate_and_send_intervention_pdf(make_record(), send_func=sender, logo=""))
    assert not result
    assert result.stage == "send"


def test_service_reads_configured_logo_when_none_given(make_record, monkeypatch):
    calls = []

    def fake_read_logo():
        calls.append(True)
        return None

    monkeypatch.setattr(service_module, "read_logo", fake_read_logo)
    pdf = InterventionReportService().render(make_record())
    assert pdf.startswith(b"%PDF")
    assert calls == [True]
