"""HTML renderer - turns a document model into a printable, self-contained page"""

import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from proposal_gateway.domain.document import DocumentModel
from proposal_gateway.domain.exceptions import DocumentRenderError
from proposal_gateway.domain.fees import format_amount, format_fixed_column, format_rate

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
PROPOSAL_TEMPLATE = "proposal.html"


def _build_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=True,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["rate"] = format_rate
    env.filters["fixed_column"] = format_fixed_column
    env.filters["amount"] = format_amount
    return env


_env = _build_environment()


def render_document(document: DocumentModel, print_on_load: bool = False) -> str:
    """
    Render a document model to a complete HTML page with inline styles.

    All company and client text is HTML-escaped, including the logo `src`
    attribute (an `&` in a logo URL is written as `&amp;`, which browsers
    decode back to the same URL). Equal documents render to
    identical strings. `print_on_load` appends a script that opens the
    browser print dialog once the page loads.

    Raises:
        DocumentRenderError: If the template is missing or fails to render
    """
    fee_tables = [document.card_fee_table]
    if document.additional_fee_table is not None:
        fee_tables.append(document.additional_fee_table)

    try:
        template = _env.get_template(PROPOSAL_TEMPLATE)
        return template.render(
            header=document.header,
            recipient=document.recipient,
            fee_tables=fee_tables,
            settlement=document.settlement,
            footer=document.footer,
            print_on_load=print_on_load,
        )
    except TemplateError as e:
        logger.error("Failed to render proposal document: %s", e)
        raise DocumentRenderError(f"Failed to render proposal document: {e}") from e
