# hims/billing/pdf.py
from __future__ import annotations

from reportlab.lib.units import inch

from hims.billing.models import IpdAdmission, OpdBill
from hims.common import pdf

LINE_HEAD = ["#", "Service", "Price", "Qty", "Amount"]
LINE_WIDTHS = [0.4 * inch, 3.4 * inch, 1.0 * inch, 0.6 * inch, 1.1 * inch]


def _lines(items) -> list[tuple]:
    return [(i, item.service.name, item.price, item.quantity, item.amount) for i, item in enumerate(items, start=1)]


def _fmt(dt) -> str | None:
    return dt.strftime("%d-%m-%Y %H:%M") if dt else None


def build_opd_bill(bill: OpdBill) -> bytes:
    patient = bill.patient
    story = pdf.header(f"OPD Bill {bill.bill_id}")
    story.append(
        pdf.key_value_table(
            [
                ("Patient", patient.name),
                ("UHID", patient.uhid),
                ("Age / Gender", f"{patient.age_display} / {patient.gender}"),
                ("Mobile", patient.mobile_number),
                ("Consultant", bill.consultant_doctor.display_name),
                ("Bill Date", _fmt(bill.bill_date)),
                ("Payment Mode", bill.get_payment_mode_display()),
                ("Status", bill.get_status_display()),
            ]
        )
    )
    story.append(pdf.section("Services"))
    story.append(pdf.grid_table(LINE_HEAD, _lines(bill.items.all()), col_widths=LINE_WIDTHS))
    story.append(
        pdf.totals_table(
            [
                ("Gross Amount", bill.gross_amount),
                ("Discount", bill.discount),
                ("Paid Amount", bill.paid_amount),
                ("Due Amount", bill.due_amount),
                ("Net Amount", bill.net_amount),
            ]
        )
    )
    return pdf.render(story, title=f"OPD Bill {bill.bill_id}")


def build_ipd_bill(admission: IpdAdmission) -> bytes:
    patient = admission.patient
    bed = admission.bed
    story = pdf.header(f"IPD Bill {admission.bill_number}")
    story.append(
        pdf.key_value_table(
            [
                ("Patient", patient.name),
                ("UHID", patient.uhid),
                ("Age / Gender", f"{patient.age_display} / {patient.gender}"),
                ("Referring Doctor", admission.referring_doctor.display_name),
                ("Bed", f"{bed.ward.name} / {bed.bed_number}"),
                ("Status", admission.patient_status),
                ("Admitted", _fmt(admission.admitted_at)),
                ("Discharged", _fmt(admission.discharged_at)),
            ]
        )
    )
    story.append(pdf.section("Services"))
    story.append(pdf.grid_table(LINE_HEAD, _lines(admission.items.all()), col_widths=LINE_WIDTHS))
    story.append(
        pdf.totals_table(
            [
                ("Total Amount", admission.total_amount),
                ("Discount", admission.discount),
                ("Paid Amount", admission.paid_amount),
                ("Due Amount", admission.due_amount),
                ("Net Amount", admission.net_amount),
            ]
        )
    )
    return pdf.render(story, title=f"IPD Bill {admission.bill_number}")
