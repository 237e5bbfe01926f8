# file: services/pdf_export.py

import re
from datetime import date
from typing import List, Optional
from urllib.parse import quote

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from app.models.itinerary import ItineraryItem, TripDetails
from app.services import itinerary_store, trip_days

ACCENT = (16, 185, 129)
MUTED = (107, 114, 128)


def _latin1(text: str) -> str:
    # Core PDF fonts only cover latin-1.
    return (text or "").encode("latin-1", "ignore").decode("latin-1")


def pdf_filename(trip_name: str) -> str:
    return re.sub(r"\s+", "-", (trip_name or "trip").strip()) + "-itinerary.pdf"


def content_disposition(filename: str) -> str:
    """
    Attachment header with an ASCII `filename` fallback and the full name as
    an RFC 5987 `filename*` parameter. Header values must stay latin-1.
    """
    fallback = re.sub(r"[^A-Za-z0-9._-]+", "-", filename)
    fallback = re.sub(r"-{2,}", "-", fallback).strip("-") or "itinerary.pdf"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def format_trip_date(value: Optional[str]) -> str:
    parsed = trip_days.parse_trip_date(value)
    if parsed is None:
        return "Not specified"
    return f"{parsed.strftime('%B')} {parsed.day}, {parsed.year}"


def format_price(price: Optional[float]) -> str:
    return f"${price:,.2f}"


def _line(pdf: FPDF, text: str, height: float = 7):
    pdf.multi_cell(0, height, _latin1(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT)


def build_trip_pdf(trip: TripDetails, items: List[ItineraryItem]) -> bytes:
    total_days = trip_days.total_days(trip.startDate, trip.endDate, items)
    total_cost = itinerary_store.total_cost(items)

    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    pdf.set_font("Helvetica", "B", 22)
    pdf.set_text_color(*ACCENT)
    pdf.cell(0, 12, _latin1(trip.name), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font("Helvetica", size=13)
    pdf.set_text_color(*MUTED)
    pdf.cell(0, 8, "Your Island Adventure Itinerary", align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(8)

    pdf.set_font("Helvetica", "B", 16)
    pdf.set_text_color(*ACCENT)
    pdf.cell(0, 10, "Trip Overview", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font("Helvetica", size=11)
    pdf.set_text_color(0, 0, 0)
    _line(pdf, f"Start Date: {format_trip_date(trip.startDate)}")
    _line(pdf, f"End Date: {format_trip_date(trip.endDate)}")
    _line(pdf, f"Travelers: {trip.travelers}")
    _line(pdf, f"Budget: {format_price(trip.budget) if trip.budget else 'Not specified'}")
    _line(pdf, f"Duration: {total_days} day{'s' if total_days != 1 else ''}")
    pdf.ln(6)

    for day in range(1, total_days + 1):
        day_items = itinerary_store.items_for_day(items, day)
        if not day_items:
            continue
        pdf.set_font("Helvetica", "B", 14)
        pdf.set_text_color(*ACCENT)
        pdf.cell(0, 9, f"Day {day}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        for item in day_items:
            pdf.set_font("Helvetica", "B", 11)
            pdf.set_text_color(0, 0, 0)
            _line(pdf, item.title)
            pdf.set_font("Helvetica", size=10)
            pdf.set_text_color(*MUTED)
            _line(pdf, f"{item.time or ''} - {item.duration or 'Flexible'}", height=6)
            _line(pdf, item.location or "Location not specified", height=6)
            if item.description:
                _line(pdf, item.description, height=6)
            if item.price > 0:
                _line(pdf, format_price(item.price), height=6)
            pdf.ln(2)
        pdf.ln(4)

    pdf.set_font("Helvetica", "B", 16)
    pdf.set_text_color(*ACCENT)
    pdf.cell(0, 10, "Trip Summary", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font("Helvetica", size=11)
    pdf.set_text_color(0, 0, 0)
    _line(pdf, f"Total Activities: {len(items)}")
    _line(pdf, f"Total Cost: {format_price(total_cost)}")
    pdf.ln(8)

    pdf.set_font("Helvetica", size=9)
    pdf.set_text_color(*MUTED)
    pdf.cell(0, 6, f"Generated on {date.today().isoformat()}", align="C",
             new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    return bytes(pdf.output())
