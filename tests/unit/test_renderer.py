"""Unit tests for HTML rendering"""

from dataclasses import replace
from datetime import date

import pytest
from proposal_gateway.domain.catalog import default_settlement_terms
from proposal_gateway.domain.document import assemble_document
from proposal_gateway.domain.exceptions import DocumentRenderError
from proposal_gateway.domain.models import (
    AdditionalFee,
    CardFee,
    ClientInfo,
    CompanyInfo,
    PercentageFixedCharge,
    ProposalData,
    ReserveHoldCharge,
)
from proposal_gateway.rendering import html as html_renderer
from proposal_gateway.rendering.html import render_document


def _render(proposal: ProposalData, **kwargs) -> str:
    return render_document(assemble_document(proposal), **kwargs)


def test_card_fee_row(sample_proposal: ProposalData):
    html = _render(sample_proposal)

    assert "<tr><td>VISA</td><td>2.9%</td><td>0.30</td><td>USD</td></tr>" in html


def test_reserve_row_shows_days(sample_proposal: ProposalData):
    html = _render(sample_proposal)

    assert "<tr><td>Reserve</td><td>10%</td><td>180 days</td><td>USD</td></tr>" in html


def test_reserve_never_shows_a_fixed_amount(sample_proposal: ProposalData):
    proposal = replace(
        sample_proposal,
        additional_fees=[AdditionalFee("Reserve", True, ReserveHoldCharge(10, 180, "USD"))],
    )

    html = _render(proposal)

    assert "<td>Reserve</td><td>10%</td><td>180 days</td>" in html
    assert "<td>Reserve</td><td>10%</td><td>0.00</td>" not in html


def test_disabled_fees_are_not_rendered(sample_proposal: ProposalData):
    html = _render(sample_proposal)

    assert "MasterCard" not in html
    assert "Chargeback Fee" not in html


def test_zero_fees_render_as_zero():
    proposal = ProposalData(
        company=CompanyInfo(name="Co", email="a@co.test"),
        client=ClientInfo(),
        proposal_date=date(2024, 1, 1),
        valid_until=date(2024, 1, 2),
        card_fees=[CardFee("JCB", True, 0, 0, "EUR")],
        additional_fees=[],
        settlement_terms=default_settlement_terms(),
    )

    html = _render(proposal)

    assert "<tr><td>JCB</td><td>0%</td><td>0.00</td><td>EUR</td></tr>" in html


def test_additional_section_absent_when_empty(sample_proposal: ProposalData):
    proposal = replace(
        sample_proposal,
        additional_fees=[AdditionalFee("Dispute Fee", False, PercentageFixedCharge(0, 25, "USD"))],
    )

    html = _render(proposal)

    assert "Additional Fees" not in html
    assert "Fee Type" not in html
    assert "Schedule A - Card Processing Fees" in html


def test_settlement_and_footer(sample_proposal: ProposalData):
    html = _render(sample_proposal)

    assert "<strong>Settlement Period:</strong> T+2 Business Days" in html
    assert "<strong>Settlement Fee:</strong> 0 USD" in html
    assert "<strong>Minimum Settlement:</strong> 100 USD" in html
    assert "This proposal is valid until 2024-01-31. Terms and conditions apply." in html
    assert "please contact us at finance@linx.fi" in html


def test_render_is_deterministic(sample_proposal: ProposalData):
    document = assemble_document(sample_proposal)

    assert render_document(document) == render_document(document)


def test_print_script_only_when_requested(sample_proposal: ProposalData):
    document = assemble_document(sample_proposal)

    assert "window.print()" not in render_document(document)
    assert "window.print()" in render_document(document, print_on_load=True)


def test_user_text_is_escaped(sample_proposal: ProposalData):
    proposal = replace(
        sample_proposal,
        company=replace(sample_proposal.company, name="<script>alert(1)</script>"),
        client=replace(sample_proposal.client, company='Smith & "Sons"'),
    )

    html = _render(proposal)

    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
    assert "Smith &amp; &#34;Sons&#34;" in html


def test_logo_omitted_when_missing(sample_proposal: ProposalData):
    proposal = replace(sample_proposal, company=replace(sample_proposal.company, logo=None))

    assert "<img" not in _render(proposal)
    assert '<img src="/linx-logo.png" alt="Company Logo">' in _render(sample_proposal)


def test_missing_template_raises_render_error(sample_proposal: ProposalData, monkeypatch):
    monkeypatch.setattr(html_renderer, "PROPOSAL_TEMPLATE", "missing.html")

    with pytest.raises(DocumentRenderError):
        _render(sample_proposal)


def test_logo_url_ampersand_is_entity_encoded(sample_proposal: ProposalData):
    proposal = replace(
        sample_proposal,
        company=replace(sample_proposal.company, logo="/logo.png?w=200&h=80"),
    )

    assert '<img src="/logo.png?w=200&amp;h=80" alt="Company Logo">' in _render(proposal)
