"""
MJML Email Templates
Email bodies sent with intervention reports, MJML for responsive HTML
plus a plain-text alternative
"""

from datetime import datetime
from typing import Optional

from .config import COMPANY_NAME
from .utils.sanitization import sanitize_string

# App theme colors - pool blue / slate
THEME = {
    "primary": "#0284c7",
    "primary_dark": "#0369a1",
    "primary_light": "#e0f2fe",
    "background": "#f8fafc",
    "card_bg": "#ffffff",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
}


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    company_name: str = COMPANY_NAME,
    year: Optional[int] = None,
) -> str:
    """Base MJML template wrapper for all emails"""
    year = year or datetime.now().year
    company = sanitize_string(company_name)

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="Arial, 'Helvetica Neue', sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="{THEME['primary']}" padding="24px 20px">
          <mj-column>
            <mj-text font-size="22px" font-weight="700" color="#ffffff" padding="0">
              {company}
            </mj-text>
          </mj-column>
        </mj-section>

        <!-- Main Content -->
        <mj-section background-color="{THEME['card_bg']}" padding="32px 40px 40px 40px">
          <mj-column>
            <mj-text font-size="22px" font-weight="600" color="{THEME['text_primary']}" line-height="1.3" padding="0 0 16px 0">
              {title}
            </mj-text>

            {content_sections}
          </mj-column>
        </mj-section>

        <!-- Footer -->
        <mj-section padding="24px 20px">
          <mj-column>
            <mj-divider border-color="{THEME['border']}" border-width="1px" padding="0 0 16px 0" />
            <mj-text align="center" font-size="13px" color="{THEME['text_muted']}" padding="0">
              © {year} {company} - Tous droits réservés
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def intervention_report_template(
    client_name: str,
    intervention_date: str,
    company_name: str = COMPANY_NAME,
) -> str:
    """Intervention report MJML template, the PDF travels as an attachment"""
    name = sanitize_string(client_name)
    date_label = sanitize_string(intervention_date)
    company = sanitize_string(company_name)

    content = f"""
    <mj-text>
      Bonjour {name},
    </mj-text>

    <mj-text>
      Veuillez trouver ci-joint le rapport de l'intervention réalisée le
      <strong>{date_label}</strong>.
    </mj-text>

    <mj-text>
      Nous vous remercions pour votre confiance.
    </mj-text>

    <mj-text color="{THEME['text_muted']}">
      L'équipe {company}
    </mj-text>
    """

    return get_base_template(
        title=f"Rapport d'intervention {company}",
        preview_text=f"Rapport de l'intervention du {date_label}",
        content_sections=content,
        company_name=company_name,
    )


def intervention_report_text(
    client_name: str,
    intervention_date: str,
    company_name: str = COMPANY_NAME,
) -> str:
    """Plain-text alternative of intervention_report_template"""
    return (
        f"Bonjour {client_name},\n\n"
        f"Veuillez trouver ci-joint le rapport de l'intervention réalisée le {intervention_date}.\n\n"
        "Nous vous remercions pour votre confiance.\n\n"
        f"L'équipe {company_name}\n"
    )
