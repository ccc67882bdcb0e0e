# billing/documents.py
"""
Billing agreement PDF (reportlab). Amounts go through format_amount so the
document and the JSON summary print identical numbers.
"""
import logging
import os
from io import BytesIO

from django.conf import settings
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer, Image

from .services import format_amount

logger = logging.getLogger(__name__)

LABELS = {
    'en': {
        'title': "Course Registration & Billing Agreement",
        'client': "Client Information",
        'name_en': "Name (English)",
        'name_ar': "Name (Arabic)",
        'phone': "Contact Number",
        'course': "Course Information",
        'package': "Course Package",
        'bill_date': "Bill Date",
        'start_date': "Course Start Date",
        'time_slot': "Time Slot",
        'levels': "Number of Levels",
        'fees': "Fees",
        'total_fee': "Total Fee",
        'discount': "Discount",
        'after_discount': "Fee After Discount",
        'paid': "Amount Paid",
        'remaining': "Amount Remaining",
        'first': "First Payment",
        'second': "Second Payment",
        'deadline': "Payment Deadline",
        'signature': "Client Signature",
        'currency': "SAR",
    },
    'ar': {
        'title': "اتفاقية التسجيل والفوترة",
        'client': "معلومات العميل",
        'name_en': "الاسم (بالإنجليزية)",
        'name_ar': "الاسم (بالعربية)",
        'phone': "رقم التواصل",
        'course': "معلومات الدورة",
        'package': "الباقة",
        'bill_date': "تاريخ الفاتورة",
        'start_date': "تاريخ بدء الدورة",
        'time_slot': "الموعد",
        'levels': "عدد المستويات",
        'fees': "الرسوم",
        'total_fee': "الرسوم الإجمالية",
        'discount': "الخصم",
        'after_discount': "الرسوم بعد الخصم",
        'paid': "المبلغ المدفوع",
        'remaining': "المبلغ المتبقي",
        'first': "الدفعة الأولى",
        'second': "الدفعة الثانية",
        'deadline': "آخر موعد للسداد",
        'signature': "توقيع العميل",
        'currency': "ر.س",
    },
}


class BillingPDFGenerator:
    """Renders a BillingRecord (or a BillingDetails preview plus its student) to PDF bytes."""

    BODY_FONT = 'Helvetica'
    BOLD_FONT = 'Helvetica-Bold'

    def __init__(self, storage=None):
        self.storage = storage
        self.body_font, self.bold_font = self._register_fonts()

    def _register_fonts(self):
        # Arabic glyphs need a TTF; Helvetica covers Latin only.
        font_path = getattr(settings, 'BILLING_PDF_FONT_PATH', '')
        if font_path and os.path.exists(font_path):
            pdfmetrics.registerFont(TTFont('InstituteFont', font_path))
            return 'InstituteFont', 'InstituteFont'
        return self.BODY_FONT, self.BOLD_FONT

    def _styles(self, language):
        styles = getSampleStyleSheet()
        align = TA_RIGHT if language == 'ar' else TA_LEFT
        return {
            'title': ParagraphStyle(
                'BillingTitle', parent=styles['Heading1'], fontName=self.bold_font,
                fontSize=16, alignment=TA_CENTER, spaceAfter=12,
                textColor=colors.HexColor('#2c3e50')
            ),
            'section': ParagraphStyle(
                'BillingSection', parent=styles['Heading2'], fontName=self.bold_font,
                fontSize=11, alignment=align, spaceBefore=8, spaceAfter=4,
                textColor=colors.HexColor('#3498db')
            ),
            'cell': ParagraphStyle(
                'BillingCell', parent=styles['Normal'], fontName=self.body_font,
                fontSize=9, alignment=align
            ),
        }

    @staticmethod
    def _fields(source, student=None):
        """Flatten a record or a preview into printable values."""
        def value(name, default=''):
            return getattr(source, name, default)

        name_en = value('student_name_en') or (student.full_name_en if student else '')
        name_ar = value('student_name_ar') or (student.full_name_ar if student else '')
        phone = value('phone') or (student.phone1 if student else '')
        level_count = value('level_count', None) or value('months', '')

        return {
            'name_en': name_en,
            'name_ar': name_ar,
            'phone': phone,
            'package': value('course_package'),
            'bill_date': value('registration_date'),
            'start_date': value('course_start_date'),
            'time_slot': value('time_slot') or '-',
            'levels': level_count,
            'total_fee': value('total_fee'),
            'discount': value('discount_percentage'),
            'after_discount': value('fee_after_discount'),
            'paid': value('amount_paid'),
            'remaining': value('amount_remaining'),
            'first': value('first_payment', None),
            'second': value('second_payment', None),
            'deadline': value('payment_deadline', None),
            'signature_path': value('signature_url'),
        }

    def _table(self, rows, styles, language):
        if language == 'ar':
            rows = [[v, k] for k, v in rows]
            widths = [3.5 * inch, 2.5 * inch]
        else:
            widths = [2.5 * inch, 3.5 * inch]

        data = [[Paragraph(str(a), styles['cell']), Paragraph(str(b), styles['cell'])] for a, b in rows]
        table = Table(data, colWidths=widths)
        table.setStyle(TableStyle([
            ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#e0e0e0')),
            ('BACKGROUND', (0, 0), (-1, -1), colors.HexColor('#f8f9fa')),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('LEFTPADDING', (0, 0), (-1, -1), 5),
            ('RIGHTPADDING', (0, 0), (-1, -1), 5),
        ]))
        return table

    def _signature(self, path):
        if not path or self.storage is None:
            return None
        try:
            content = self.storage.read(path)
        except OSError as e:
            logger.warning(f"Signature {path} unavailable for PDF: {e}")
            return None
        return Image(BytesIO(content), width=2 * inch, height=0.8 * inch)

    def render(self, source, language: str = 'en', student=None) -> bytes:
        language = language if language in LABELS else 'en'
        labels = LABELS[language]
        styles = self._styles(language)
        fields = self._fields(source, student)
        currency = labels['currency']

        def money(amount):
            return f"{format_amount(amount)} {currency}" if amount is not None else '-'

        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=30,
            leftMargin=30,
            topMargin=30,
            bottomMargin=30,
            title=f"{labels['title']} - {fields['name_en']}"
        )

        elements = [
            Paragraph(labels['title'], styles['title']),
            Spacer(1, 10),
            Paragraph(labels['client'], styles['section']),
            self._table([
                (labels['name_en'], fields['name_en']),
                (labels['name_ar'], fields['name_ar']),
                (labels['phone'], fields['phone']),
            ], styles, language),
            Paragraph(labels['course'], styles['section']),
            self._table([
                (labels['package'], fields['package']),
                (labels['bill_date'], fields['bill_date']),
                (labels['start_date'], fields['start_date']),
                (labels['time_slot'], fields['time_slot']),
                (labels['levels'], fields['levels']),
            ], styles, language),
            Paragraph(labels['fees'], styles['section']),
            self._table([
                (labels['total_fee'], money(fields['total_fee'])),
                (labels['discount'], f"{fields['discount']}%"),
                (labels['after_discount'], money(fields['after_discount'])),
                (labels['paid'], money(fields['paid'])),
                (labels['remaining'], money(fields['remaining'])),
                (labels['first'], money(fields['first'])),
                (labels['second'], money(fields['second'])),
                (labels['deadline'], fields['deadline'] or '-'),
            ], styles, language),
            Spacer(1, 20),
            Paragraph(labels['signature'], styles['section']),
        ]

        signature = self._signature(fields['signature_path'])
        if signature is not None:
            elements.append(signature)

        doc.build(elements)
        pdf = buffer.getvalue()
        buffer.close()
        return pdf
