from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from io import BytesIO
from typing import Optional, Tuple

from PIL import Image, ImageDraw, ImageFont
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Max, Min
from django.utils import timezone

from apps.core.academics.models import CourseClass, Enrollment
from apps.core.attendance.eligibility import EAD_ELIGIBLE_PERCENTAGE, MODALITY_EAD
from apps.core.attendance.models import AttendanceEntry
from apps.core.attendance.services import student_eligibility

from .models import Certificate

logger = logging.getLogger(__name__)

PAGE_SIZE = (1754, 1240)

MONTH_NAMES = (
    'janeiro', 'fevereiro', 'março', 'abril', 'maio', 'junho',
    'julho', 'agosto', 'setembro', 'outubro', 'novembro', 'dezembro',
)

_UNITS = (
    '', 'um', 'dois', 'três', 'quatro', 'cinco', 'seis', 'sete', 'oito', 'nove',
    'dez', 'onze', 'doze', 'treze', 'catorze', 'quinze', 'dezesseis',
    'dezessete', 'dezoito', 'dezenove',
)
_TENS = (
    '', '', 'vinte', 'trinta', 'quarenta', 'cinquenta', 'sessenta',
    'setenta', 'oitenta', 'noventa',
)
_HUNDREDS = (
    '', 'cento', 'duzentos', 'trezentos', 'quatrocentos', 'quinhentos',
    'seiscentos', 'setecentos', 'oitocentos', 'novecentos',
)


@dataclass(frozen=True)
class CertificateData:
    student_name: str
    course_name: str
    module_names: Tuple[str, ...]
    workload_hours: int
    start_date: date
    end_date: date
    modality: str


def assemble_certificate_data(*, student, course_class: CourseClass) -> CertificateData:
    """
    Collect what the certificate renderer needs for one student in one class.

    The period spans the student's recorded class dates; with no attendance
    rows (EAD classes, or nothing recorded yet) both ends fall back to today.
    """
    course = course_class.course
    span = AttendanceEntry.objects.filter(
        course_class=course_class,
        student=student,
    ).aggregate(start=Min('class_date'), end=Max('class_date'))

    today = timezone.localdate()
    return CertificateData(
        student_name=student.full_name,
        course_name=course.name,
        module_names=tuple(course.module_names),
        workload_hours=course.workload,
        start_date=span['start'] or today,
        end_date=span['end'] or today,
        modality=course_class.modality,
    )


@transaction.atomic
def issue_certificate(*, enrollment: Enrollment, issue_date: Optional[date] = None) -> Certificate:
    result = student_eligibility(enrollment=enrollment)
    if not result.is_eligible:
        raise ValidationError(
            f'{enrollment.student.full_name} não atende aos critérios para emissão do certificado.'
        )

    if enrollment.course_class.modality == MODALITY_EAD:
        percentage = EAD_ELIGIBLE_PERCENTAGE
    else:
        percentage = result.rounded_percentage

    certificate, created = Certificate.objects.update_or_create(
        course_class=enrollment.course_class,
        student=enrollment.student,
        defaults={
            'issue_date': issue_date or timezone.localdate(),
            'attendance_percentage': percentage,
        },
    )
    logger.info(
        '%s certificate for student %s in class %s (%s%%)',
        'Issued' if created else 'Re-issued',
        enrollment.student_id,
        enrollment.course_class_id,
        percentage,
    )
    return certificate


def number_in_words(number: int) -> str:
    if number < 0:
        return 'número inválido'
    if number > 999:
        return 'muitas'
    if number == 0:
        return 'zero'
    if number == 100:
        return 'cem'

    parts = []
    rest = number
    if rest >= 100:
        parts.append(_HUNDREDS[rest // 100])
        rest %= 100

    if rest:
        if rest < 20:
            parts.append(_UNITS[rest])
        else:
            tens = _TENS[rest // 10]
            if rest % 10:
                tens = f'{tens} e {_UNITS[rest % 10]}'
            parts.append(tens)

    return ' e '.join(parts)


def workload_in_words(hours) -> str:
    """Spell a workload out in Portuguese, e.g. 120 -> 'Cento e vinte horas'."""
    hours = int(hours or 0)
    if hours <= 0:
        text = 'carga horária não especificada'
    else:
        text = f"{number_in_words(hours)} {'hora' if hours == 1 else 'horas'}"
    return text[:1].upper() + text[1:]


def format_date_br(value: date) -> str:
    return value.strftime('%d/%m/%Y')


def format_long_date_br(value: date) -> str:
    return f'{value.day:02d} de {MONTH_NAMES[value.month - 1]} de {value.year}'


def certificate_filename(student_name: str) -> str:
    slug = re.sub(r'\s+', '_', student_name.strip())
    return f'Certificado_{slug}.pdf'


def _font(size):
    return ImageFont.load_default(size=size)


def _centered(draw, y, text, font, fill='black'):
    left, _, right, _ = draw.textbbox((0, 0), text, font=font)
    draw.text(((PAGE_SIZE[0] - (right - left)) / 2, y), text, font=font, fill=fill)


def _wrap(draw, text, font, max_width):
    lines = []
    current = ''
    for word in text.split():
        candidate = f'{current} {word}'.strip()
        left, _, right, _ = draw.textbbox((0, 0), candidate, font=font)
        if right - left <= max_width or not current:
            current = candidate
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def _frame(draw):
    width, height = PAGE_SIZE
    draw.rectangle((30, 30, width - 30, height - 30), outline=(30, 64, 175), width=6)
    draw.rectangle((50, 50, width - 50, height - 50), outline=(96, 165, 250), width=2)


def _modality_phrase(modality):
    if modality == MODALITY_EAD:
        return 'na modalidade EAD'
    return 'pela plataforma de videoconferência'


def build_certificate_images(data: CertificateData, issued_on: Optional[date] = None):
    issuer = getattr(settings, 'CERTIFICATE_ISSUER_NAME', '')
    city = getattr(settings, 'CERTIFICATE_CITY', '')
    signatory = getattr(settings, 'CERTIFICATE_SIGNATORY_NAME', '')
    signatory_title = getattr(settings, 'CERTIFICATE_SIGNATORY_TITLE', '')
    issued_on = issued_on or timezone.localdate()

    front = Image.new('RGB', PAGE_SIZE, color='white')
    draw = ImageDraw.Draw(front)
    _frame(draw)

    _centered(draw, 110, issuer, _font(30), fill=(71, 85, 105))
    _centered(draw, 220, 'CERTIFICADO DE CONCLUSÃO', _font(72))
    _centered(draw, 380, data.student_name.upper(), _font(56))

    body = (
        f'Concluiu o curso de {data.course_name}, realizado no período de '
        f'{format_date_br(data.start_date)} a {format_date_br(data.end_date)}, '
        f'{_modality_phrase(data.modality)}, promovido pelo {issuer}, com carga horária de '
        f'{data.workload_hours} ({workload_in_words(data.workload_hours)}).'
    )
    body_font = _font(34)
    y = 500
    for line in _wrap(draw, body, body_font, PAGE_SIZE[0] - 360):
        _centered(draw, y, line, body_font)
        y += 52

    footer_font = _font(26)
    place = f'{city}, {format_long_date_br(issued_on)}.' if city else f'{format_long_date_br(issued_on)}.'
    draw.text((160, 1020), place, font=footer_font, fill=(71, 85, 105))
    draw.line((1080, 1010, 1560, 1010), fill=(148, 163, 184), width=3)
    if signatory:
        draw.text((1080, 1025), signatory, font=footer_font, fill='black')
    if signatory_title:
        draw.text((1080, 1065), signatory_title, font=_font(22), fill=(71, 85, 105))

    back = Image.new('RGB', PAGE_SIZE, color='white')
    draw = ImageDraw.Draw(back)
    _frame(draw)
    _centered(draw, 110, 'CONTEÚDO PROGRAMÁTICO', _font(56))
    _centered(draw, 200, data.course_name, _font(36), fill=(71, 85, 105))

    module_font = _font(30)
    y = 300
    if not data.module_names:
        _centered(draw, y, 'Nenhum módulo cadastrado.', module_font, fill=(100, 116, 139))
    for index, name in enumerate(data.module_names, start=1):
        for line in _wrap(draw, f'{index}. {name}', module_font, PAGE_SIZE[0] - 400):
            draw.text((200, y), line, font=module_font, fill='black')
            y += 44

    return [front, back]


def image_to_pdf_bytes(images):
    if not images:
        return b''
    rgb_images = [img.convert('RGB') for img in images]
    output = BytesIO()
    rgb_images[0].save(output, format='PDF', save_all=True, append_images=rgb_images[1:])
    return output.getvalue()


def generate_certificate_pdf(data: CertificateData, issued_on: Optional[date] = None) -> bytes:
    return image_to_pdf_bytes(build_certificate_images(data, issued_on=issued_on))
