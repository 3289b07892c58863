# app/services/certificates.py
from __future__ import annotations

import io
import base64
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Protocol
from urllib.parse import quote

import qrcode  # type: ignore
from jinja2 import Environment, BaseLoader, select_autoescape
from starlette.concurrency import run_in_threadpool
from xhtml2pdf import pisa  # type: ignore

from app.core.config import settings
from app.core.errors import RenderError
from app.schemas.certificate import CertificateRecord

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"

# A4 paisagem, uma página; layout do certificado impresso do instituto
DEFAULT_TEMPLATE = """
<!doctype html>
<html>
<head>
<meta charset="utf-8">
<style>
  @page {
    size: a4 landscape;
    margin: 0;
    {% if background_url %}background-image: url('{{ background_url }}');{% endif %}
  }
  body { font-family: Times-Roman, serif; color: #1f2937; margin: 0; }
  .sheet { padding: 60px 70px 40px 70px; text-align: center; }
  .institute { font-size: 14px; letter-spacing: 3px; text-transform: uppercase; }
  .title { font-size: 54px; font-weight: bold; letter-spacing: 10px; color: #a16207; margin-top: 30px; }
  .lead { font-size: 16px; margin-top: 24px; }
  .name { font-size: 38px; font-weight: bold; text-transform: uppercase; color: #854d0e; margin: 14px 0; }
  .value { font-weight: bold; text-transform: uppercase; }
  .small { font-size: 13px; }
  .footer { margin-top: 60px; width: 100%; font-size: 13px; }
  .signature { border-top: 1px dotted #a16207; padding-top: 4px; text-transform: uppercase; letter-spacing: 2px; }
</style>
</head>
<body>
  <div class="sheet">
    <div class="institute">{{ institute_name }}</div>
    <div class="title">CERTIFICATE</div>
    <p class="lead">This certificate is proudly presented to</p>
    <div class="name">{{ cert.student_name }}</div>
    <p class="lead">S/O, D/O <span class="value">{{ cert.guardian_name }}</span></p>
    <p class="lead">for successfully completing the <span class="value">{{ cert.course_name }}</span> course
       with grade <span class="value">{{ cert.grade }}</span>.</p>
    <p class="small">Duration: <span class="value">{{ cert.duration }}</span> |
       Regd. No: <span class="value">{{ cert.registration_no }}</span> |
       Place: <span class="value">{{ cert.place }}</span></p>
    <table class="footer">
      <tr>
        <td style="text-align: left; vertical-align: bottom;">
          Date: {{ issue_date }}<br>
          S.No.: {{ cert.serial_no or "N/A" }}
        </td>
        <td style="text-align: center; vertical-align: bottom;">
          {% if qr_data_uri %}<img src="{{ qr_data_uri }}" width="90" height="90"><br>
          <span class="small">Scan to verify</span>{% endif %}
        </td>
        <td style="text-align: center; vertical-align: bottom; width: 220px;">
          <div class="signature">Director Signature</div>
        </td>
      </tr>
    </table>
  </div>
</body>
</html>
""".strip()


@dataclass(frozen=True)
class RenderedCertificate:
    filename: str
    content: bytes
    media_type: str = PDF_MEDIA_TYPE


class ArtifactRenderer(Protocol):
    async def render(self, record: CertificateRecord) -> RenderedCertificate:
        ...


def certificate_filename(record: CertificateRecord) -> str:
    return f"Certificate-{record.student_name}-{record.registration_no}.pdf"


def verification_url(registration_no: str, base_url: str) -> str:
    return f"{base_url.rstrip('/')}/verify-certificate?registrationNo={quote(registration_no)}"


def _qr_data_uri(text: str) -> str:
    img = qrcode.make(text)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    b64 = base64.b64encode(buf.getvalue()).decode("ascii")
    return f"data:image/png;base64,{b64}"


def _render_html(template: str, ctx: Dict) -> str:
    env = Environment(
        loader=BaseLoader(),
        autoescape=select_autoescape(["html", "xml"]),
        enable_async=False,
    )
    tpl = env.from_string(template)
    return tpl.render(**ctx)


def _html_to_pdf_bytes(html: str) -> bytes:
    out = io.BytesIO()
    status = pisa.CreatePDF(io.StringIO(html), dest=out, encoding="utf-8")
    if status.err:
        raise RenderError(details={"pisa_errors": int(status.err)})
    return out.getvalue()


class PdfCertificateRenderer:
    """Gera o PDF do certificado (HTML Jinja2 -> xhtml2pdf).

    `background_url` / `public_base_url` = None usam o valor de settings;
    string vazia desliga a imagem de fundo / o QR de verificação.
    """

    def __init__(
        self,
        *,
        template: Optional[str] = None,
        institute_name: Optional[str] = None,
        background_url: Optional[str] = None,
        public_base_url: Optional[str] = None,
    ):
        self.template = template or DEFAULT_TEMPLATE
        self.institute_name = institute_name if institute_name is not None else settings.INSTITUTE_NAME
        self.background_url = background_url if background_url is not None else settings.CERTIFICATE_BACKGROUND_URL
        self.public_base_url = public_base_url if public_base_url is not None else settings.PUBLIC_BASE_URL

    def build_html(self, record: CertificateRecord) -> str:
        qr = _qr_data_uri(verification_url(record.registration_no, self.public_base_url)) if self.public_base_url else None
        ctx = dict(
            cert=record,
            institute_name=self.institute_name,
            issue_date=record.issue_date.strftime("%d.%m.%Y"),
            background_url=self.background_url,
            qr_data_uri=qr,
        )
        return _render_html(self.template, ctx)

    def render_sync(self, record: CertificateRecord) -> RenderedCertificate:
        try:
            pdf_bytes = _html_to_pdf_bytes(self.build_html(record))
        except RenderError:
            logger.error("PDF rendering reported errors for %s", record.registration_no)
            raise
        except Exception as exc:
            logger.exception("PDF rendering failed for %s", record.registration_no)
            raise RenderError(details=type(exc).__name__) from exc
        if not pdf_bytes:
            raise RenderError(details="empty document")
        return RenderedCertificate(filename=certificate_filename(record), content=pdf_bytes)

    async def render(self, record: CertificateRecord) -> RenderedCertificate:
        return await run_in_threadpool(self.render_sync, record)
