"""Intervention report service - render the PDF and e-mail it to the client"""

import logging
from typing import Any, Awaitable, Callable, Optional

from ...config import COMPANY_NAME
from ...email_service import send_email
from ...email_templates import intervention_report_template, intervention_report_text
from ...services.report_pdf import generate_intervention_pdf, read_logo
from ...services.report_pdf.images import ImagePayload
from ...utils.formatting import format_date
from ...utils.sanitization import sanitize_filename_part
from .schemas import ReportDispatchResult, ReportRecord

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"

SendFunc = Callable[..., Awaitable[Any]]


def build_report_filename(record: ReportRecord) -> str:
    """rapport_intervention_<Last>_<First>_<date>.pdf"""
    client = record.client
    client_name = sanitize_filename_part(f"{client.lastName}_{client.firstName}")
    date_part = sanitize_filename_part(format_date(record.date).replace("/", "-").replace(" ", "-"))
    return f"rapport_intervention_{client_name}_{date_part}.pdf"


def build_report_subject(record: ReportRecord, company_name: str = COMPANY_NAME) -> str:
    return f"Rapport d'intervention {company_name} - {format_date(record.date)}"


class InterventionReportService:
    """Renders intervention reports and sends them to clients"""

    def __init__(
        self,
        send_func: SendFunc = send_email,
        logo: Optional[ImagePayload] = None,
        company_name: str = COMPANY_NAME,
    ):
        self.send_func = send_func
        self.logo = logo
        self.company_name = company_name

    def render(self, record: ReportRecord) -> bytes:
        """Render the report PDF, raises ReportRenderError on failure"""
        logo = self.logo if self.logo is not None else read_logo()
        return generate_intervention_pdf(record, logo=logo, company_name=self.company_name)

    async def send(self, record: ReportRecord, pdf_bytes: bytes) -> bool:
        """
        E-mail rendered report bytes to the client.

        Returns False without contacting the transport when the client has no
        e-mail address; transport errors are logged and reported as False.
        """
        client = record.client
        if not client.email:
            logger.error(
                f"❌ Cannot send report {record.id}: client {client.full_name} has no email address"
            )
            return False

        date_label = format_date(record.date)
        filename = build_report_filename(record)

        try:
            logger.info(f"📧 Sending intervention report {filename} to {client.email}")
            await self.send_func(
                to=client.email,
                subject=build_report_subject(record, self.company_name),
                mjml_content=intervention_report_template(
                    client.full_name, date_label, self.company_name
                ),
                text_content=intervention_report_text(
                    client.full_name, date_label, self.company_name
                ),
                attachments=[
                    {
                        "filename": filename,
                        "content": pdf_bytes,
                        "content_type": PDF_CONTENT_TYPE,
                    }
                ],
            )
        except Exception as e:
            logger.error(f"❌ Failed to send intervention report to {client.email}: {e}")
            return False

        logger.info(f"✅ Intervention report sent to {client.email}")
        return True

    async def generate_and_send(self, record: ReportRecord) -> ReportDispatchResult:
        """
        Render the report and e-mail it. Never raises.

        The result is falsy on any failure and names the failing stage.
        """
        filename = build_report_filename(record)

        if not record.client.email:
            logger.error(f"❌ Cannot send report {record.id}: client email is missing")
            return ReportDispatchResult(
                success=False, stage="missing_email", error="Client email is missing"
            )

        try:
            pdf_bytes = self.render(record)
        except Exception as e:
            logger.error(f"❌ Error while generating intervention report {record.id}: {e}")
            return ReportDispatchResult(success=False, stage="render", error=str(e), filename=filename)

        if not await self.send(record, pdf_bytes):
            return ReportDispatchResult(
                success=False, stage="send", error="Email could not be sent", filename=filename
            )

        return ReportDispatchResult(success=True, filename=filename)


async def send_intervention_report(
    record: ReportRecord, pdf_bytes: bytes, send_func: SendFunc = send_email
) -> bool:
    """E-mail already rendered report bytes to the client"""
    return await InterventionReportService(send_func=send_func).send(record, pdf_bytes)


async def generate_and_send_intervention_pdf(
    record: ReportRecord,
    send_func: SendFunc = send_email,
    logo: Optional[ImagePayload] = None,
) -> ReportDispatchResult:
    """Render an intervention report and e-mail it to the client"""
    return await InterventionReportService(send_func=send_func, logo=logo).generate_and_send(record)
