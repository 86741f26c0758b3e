# hims/clinical/pdf.py
from __future__ import annotations

from reportlab.lib.units import inch

from hims.clinical.models import Prescription
from hims.common import pdf


def build_prescription(prescription: Prescription) -> bytes:
    patient = prescription.patient
    visit = prescription.visit
    doctor = prescription.doctor

    story = pdf.header("Prescription")
    story.append(
        pdf.key_value_table(
            [
                ("UHID", patient.uhid),
                ("Visit No", visit.code),
                ("Patient", patient.name),
                ("Relative", f"{patient.relation} {patient.relative_name}".strip()),
                ("Age / Gender", f"{patient.age_display} / {patient.gender}"),
                ("Mobile", patient.mobile_number),
                ("Doctor", doctor.name_with_specialization if doctor else None),
                ("Referred By", visit.referred_by),
                ("Date", prescription.created_at.strftime("%d-%m-%Y")),
            ]
        )
    )

    if prescription.provisional_diagnosis:
        story += [pdf.section("Provisional Diagnosis"), pdf.paragraph(prescription.provisional_diagnosis)]
    if prescription.final_diagnosis:
        story += [pdf.section("Final Diagnosis"), pdf.paragraph(prescription.final_diagnosis)]

    story.append(pdf.section("Medicines"))
    rows = [
        (
            i,
            m.get("medicine_name"),
            m.get("dosage"),
            m.get("frequency"),
            m.get("duration"),
            m.get("instructions"),
        )
        for i, m in enumerate(prescription.medicines or [], start=1)
    ]
    story.append(
        pdf.grid_table(
            ["#", "Medicine", "Dosage", "Frequency", "Duration", "Instructions"],
            rows,
            col_widths=[0.4 * inch, 2.0 * inch, 0.9 * inch, 1.0 * inch, 0.9 * inch, 1.5 * inch],
        )
    )

    for title, text in (
        ("Investigations Advised", prescription.investigation_advised),
        ("Treatment", prescription.treatment),
        ("Notes", prescription.notes),
    ):
        if text:
            story += [pdf.section(title), pdf.paragraph(text)]
    if prescription.follow_up_date:
        story.append(pdf.paragraph(f"Follow up on {prescription.follow_up_date.strftime('%d-%m-%Y')}"))

    return pdf.render(story, title=f"Prescription {visit.code}")
