# hims/lab/pdf.py
from __future__ import annotations

from reportlab.lib.units import inch
from reportlab.platypus import Spacer

from hims.common import pdf
from hims.lab.models import LabOrder


def _patient_rows(order: LabOrder) -> list[tuple[str, object]]:
    patient = order.patient
    return [
        ("Patient", patient.name),
        ("UHID", patient.uhid),
        ("Age / Gender", f"{patient.age_display} / {patient.gender}"),
        ("Accession No", order.accession_no),
        ("Referred By", order.doctor.display_name if order.doctor else None),
        ("Order Date", order.order_date.strftime("%d-%m-%Y %H:%M")),
    ]


def _flag(result) -> str:
    if not result.interpretation or result.interpretation == "normal":
        return ""
    return result.get_interpretation_display()


def build_lab_report(order: LabOrder, tests) -> bytes:
    story = pdf.header("Laboratory Report")
    story.append(pdf.key_value_table(_patient_rows(order)))

    for order_test in tests:
        story.append(pdf.section(order_test.service.name))
        rows = [
            (r.parameter.parameter_name, r.value, r.unit, r.reference_range, _flag(r))
            for r in order_test.results.all()
        ]
        story.append(
            pdf.grid_table(
                ["Parameter", "Result", "Unit", "Reference Range", "Flag"],
                rows,
                col_widths=[2.2 * inch, 1.1 * inch, 0.9 * inch, 1.5 * inch, 1.0 * inch],
            )
        )
        if order_test.quality_flags != "Normal":
            story.append(pdf.paragraph(f"Sample quality: {order_test.quality_flags}"))
        if order_test.remarks:
            story.append(pdf.paragraph(f"Remarks: {order_test.remarks}"))
        if order_test.authorized_at:
            story.append(pdf.paragraph(f"Authorized on {order_test.authorized_at.strftime('%d-%m-%Y %H:%M')}"))
        story.append(Spacer(1, 0.15 * inch))

    return pdf.render(story, title=f"Lab Report {order.accession_no}")
