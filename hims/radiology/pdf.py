# hims/radiology/pdf.py
from __future__ import annotations

from hims.common import pdf
from hims.radiology.models import RadiologyReport


def build_radiology_report(report: RadiologyReport) -> bytes:
    order_test = report.order_test
    order = order_test.lab_order
    patient = order.patient

    story = pdf.header(f"Radiology Report: {order_test.service.name}")
    story.append(
        pdf.key_value_table(
            [
                ("Patient", patient.name),
                ("UHID", patient.uhid),
                ("Age / Gender", f"{patient.age_display} / {patient.gender}"),
                ("Accession No", order.accession_no),
                ("Referred By", order.doctor.display_name if order.doctor else None),
            ]
        )
    )
    if report.methodology:
        story += [pdf.section("Methodology"), pdf.paragraph(report.methodology)]
    story += [pdf.section("Findings"), pdf.paragraph(report.findings)]
    story += [pdf.section("Impression"), pdf.paragraph(report.impression)]
    if report.authorized_at:
        story.append(pdf.paragraph(f"Authorized on {report.authorized_at.strftime('%d-%m-%Y %H:%M')}"))
    else:
        story.append(pdf.paragraph("Provisional report (not authorized)"))

    return pdf.render(story, title=f"Radiology Report {order.accession_no}")
