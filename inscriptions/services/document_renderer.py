"""PDF generation for the two legal documents of a registration.

Both documents share one layout: A4 page, fixed margin, paired logos in the
top corners, a centered title, then titled sections written top to bottom
with a moving vertical cursor, the signature image and a dated footer.
Rendering only returns bytes; storing them is the caller's business.
"""
import base64
import os
import re

import pymupdf

from inscriptions.services.categories import display_name
from inscriptions.services.errors import MissingAsset, RenderFailure
from inscriptions.utils.datetime_utils import (
    format_date_fr,
    format_datetime_fr,
    local_now,
)

PAGE_WIDTH, PAGE_HEIGHT = pymupdf.paper_size('a4')
MARGIN = 50
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN
LEADING = 1.35

FONT = 'helv'
FONT_BOLD = 'hebo'

LOGO_SIZE = 60
LOGO_Y = 30
LOGO_POSITIONS = (50, 485)
TITLE_Y = 100
TITLE_SIZE = 18
HEADING_SIZE = 14
TEXT_SIZE = 12
LEGAL_SIZE = 11
SIGNATURE_X = 70
SIGNATURE_WIDTH = 180
SIGNATURE_HEIGHT = 80
FOOTER_SIZE = 10

_DATA_URI_PREFIX = re.compile(r'^data:image/[\w.+-]+;base64,')

AUTHORIZATION_TITLE = "AUTORISATION DE DROIT À L'IMAGE ET DE TRANSPORT"
SANITARY_TITLE = 'FICHE SANITAIRE DE LIAISON'

IMAGE_RIGHTS_TEXT = (
    "J'autorise les {association} à réaliser des photos et vidéos de mon "
    "enfant dans le cadre des activités. J'autorise leur diffusion interne, "
    "sur le site web et les réseaux sociaux, à des fins de communication. "
    "Cette autorisation est donnée à titre gracieux, pour une durée "
    "illimitée, dans le respect du RGPD."
)
TRANSPORT_TEXT = (
    "J'autorise mon enfant à être transporté dans des véhicules conduits "
    "par des responsables bénévoles."
)

SEX_LABELS = {'male': 'Masculin', 'female': 'Féminin'}
VACCINE_LABELS = {'bcg': 'BCG'}


def decode_data_uri(uri):
    """Raw image bytes of a ``data:image/...;base64,`` URI (or bare base64)."""
    payload = _DATA_URI_PREFIX.sub('', (uri or '').strip())
    return base64.b64decode(payload)


def yes_no(flag):
    return 'Oui' if flag else 'Non'


def wrap_text(text, width, fontname=FONT, fontsize=TEXT_SIZE):
    """Split text into lines no wider than ``width`` points."""
    lines = []
    for paragraph in str(text).split('\n'):
        words = paragraph.split()
        if not words:
            lines.append('')
            continue
        current = words[0]
        for word in words[1:]:
            candidate = f'{current} {word}'
            if pymupdf.get_text_length(candidate, fontname=fontname,
                                    fontsize=fontsize) <= width:
                current = candidate
            else:
                lines.append(current)
                current = word
        lines.append(current)
    return lines


class _Canvas:
    """Cursor-based writer over a PyMuPDF document."""

    def __init__(self, title, author):
        self.doc = pymupdf.open()
        self.doc.set_metadata({'title': title, 'author': author,
                               'creator': author})
        self.page = None
        self.y = MARGIN
        self.new_page()

    def new_page(self):
        self.page = self.doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
        self.y = MARGIN

    def ensure_space(self, height):
        if self.y + height > PAGE_HEIGHT - MARGIN:
            self.new_page()

    def move_down(self, lines=1, size=TEXT_SIZE):
        self.y += size * LEADING * lines

    def logos(self, path):
        for x in LOGO_POSITIONS:
            rect = pymupdf.Rect(x, LOGO_Y, x + LOGO_SIZE, LOGO_Y + LOGO_SIZE)
            self.page.insert_image(rect, filename=path, keep_proportion=True)

    def title(self, text):
        self.y = TITLE_Y
        for line in wrap_text(text, CONTENT_WIDTH, FONT_BOLD, TITLE_SIZE):
            width = pymupdf.get_text_length(line, fontname=FONT_BOLD,
                                         fontsize=TITLE_SIZE)
            self.page.insert_text(((PAGE_WIDTH - width) / 2, self.y), line,
                                  fontname=FONT_BOLD, fontsize=TITLE_SIZE)
            self.y += TITLE_SIZE * LEADING
        self.move_down(2)

    def text(self, text, size=TEXT_SIZE, fontname=FONT, x=MARGIN):
        for line in wrap_text(text, PAGE_WIDTH - MARGIN - x, fontname, size):
            self.ensure_space(size * LEADING)
            self.page.insert_text((x, self.y + size), line,
                                  fontname=fontname, fontsize=size)
            self.y += size * LEADING

    def heading(self, label):
        self.ensure_space(HEADING_SIZE * LEADING * 3)
        baseline = self.y + HEADING_SIZE
        self.page.insert_text((MARGIN, baseline), label, fontname=FONT_BOLD,
                              fontsize=HEADING_SIZE)
        width = pymupdf.get_text_length(label, fontname=FONT_BOLD,
                                     fontsize=HEADING_SIZE)
        self.page.draw_line(pymupdf.Point(MARGIN, baseline + 2),
                            pymupdf.Point(MARGIN + width, baseline + 2),
                            width=0.8)
        self.y += HEADING_SIZE * LEADING

    def section(self, label, lines, size=TEXT_SIZE):
        self.heading(label)
        for line in lines:
            self.text(line, size=size)
        self.move_down()

    def image(self, data, x=SIGNATURE_X, width=SIGNATURE_WIDTH,
              height=SIGNATURE_HEIGHT):
        self.ensure_space(height)
        rect = pymupdf.Rect(x, self.y, x + width, self.y + height)
        self.page.insert_image(rect, stream=data, keep_proportion=True)
        self.y += height

    def footer(self, place, issued_at):
        self.move_down()
        self.text(f'Fait à : {place}', size=FOOTER_SIZE, x=SIGNATURE_X)
        self.text(f'Le : {format_datetime_fr(issued_at)}', size=FOOTER_SIZE,
                  x=SIGNATURE_X)

    def tobytes(self):
        return self.doc.tobytes(garbage=3, deflate=True)

    def close(self):
        self.doc.close()


class DocumentRenderer:
    """Renders the authorization and sanitary PDFs of a Registration.

    Holds configuration only. ``logo_path`` may be empty to draw no logos;
    when set, the file must exist.
    """

    def __init__(self, logo_path=None, association_name='Scouts et Guides de Cluses',
                 category_rules=None):
        self.logo_path = logo_path
        self.association_name = association_name
        self.category_rules = category_rules or {}

    @classmethod
    def from_config(cls, config):
        return cls(logo_path=config.get('LOGO_PATH'),
                   association_name=config.get('ASSOCIATION_NAME'),
                   category_rules=config.get('CATEGORY_RULES'))

    def render_authorization(self, record, issued_at=None):
        return self._render(AUTHORIZATION_TITLE, self._authorization_body,
                            record, issued_at)

    def render_sanitary(self, record, issued_at=None):
        return self._render(SANITARY_TITLE, self._sanitary_body, record,
                            issued_at)

    def _render(self, title, body, record, issued_at):
        if self.logo_path and not os.path.isfile(self.logo_path):
            raise MissingAsset(self.logo_path)

        canvas = None
        try:
            canvas = _Canvas(title, self.association_name)
            if self.logo_path:
                canvas.logos(self.logo_path)
            canvas.title(title)
            signature = body(canvas, record)
            if signature:
                canvas.image(decode_data_uri(signature))
            canvas.footer(record.signing_place, issued_at or local_now())
            return canvas.tobytes()
        except Exception as e:
            raise RenderFailure(
                f"Impossible de générer le document « {title} » : {e}") from e
        finally:
            if canvas is not None:
                canvas.close()

    def _category_label(self, category):
        return display_name(category, self.category_rules)

    def _authorization_body(self, canvas, record):
        canvas.section("IDENTITÉ DE L'ENFANT", [
            f'Nom : {record.last_name}',
            f'Prénom : {record.first_name}',
            f'Né(e) le : {format_date_fr(record.birth_date)}',
            f'Catégorie : {self._category_label(record.category)}',
        ])
        canvas.section('REPRÉSENTANT LÉGAL', [
            f'Nom et prénom : {record.parent_full_name}',
            f'Adresse : {record.parent_address or record.address}',
            f'Téléphone : {record.mobile_phone}',
            f'Email : {record.parent_email or record.email}',
        ])
        canvas.section("DROIT À L'IMAGE", [
            IMAGE_RIGHTS_TEXT.format(association=self.association_name),
            f"Droit à l'image : {yes_no(record.image_rights)}",
            f'Droit de diffusion : {yes_no(record.diffusion_rights)}',
            f'Mention : {record.image_rights_acknowledgment}',
        ], size=LEGAL_SIZE)
        canvas.section('TRANSPORT', [
            TRANSPORT_TEXT,
            f'Autorisation de transport : {yes_no(record.transport_authorization)}',
            f'Mention : {record.registration_acknowledgment}',
        ], size=LEGAL_SIZE)
        canvas.heading('SIGNATURE DU REPRÉSENTANT LÉGAL')
        canvas.text(f'Signé le : {format_datetime_fr(record.image_rights_signed_at)}',
                    size=FOOTER_SIZE)
        return record.image_rights_signature

    def _sanitary_body(self, canvas, record):
        canvas.section('ENFANT', [
            f'Enfant : {record.full_name} - {record.age} ans',
            f'Né(e) le : {format_date_fr(record.birth_date)}',
            f"Sexe : {SEX_LABELS.get(record.sex, 'Non renseigné')}",
            f'Catégorie : {self._category_label(record.category)}',
            f'Téléphone : {record.mobile_phone}',
        ])

        vaccines = dict(record.vaccines or {})
        other = vaccines.pop('autres', '')
        lines = [f'Vaccins obligatoires : {yes_no(record.mandatory_vaccines)}']
        lines += [f'{VACCINE_LABELS.get(name, name.capitalize())} : {status}'
                  for name, status in vaccines.items()]
        if other:
            lines.append(f'Autres : {other}')
        canvas.section('VACCINATIONS', lines, size=LEGAL_SIZE)

        lines = [
            f'Alimentaires : {yes_no(record.food_allergy)}',
            f'Médicamenteuses : {yes_no(record.medication_allergy)}',
            f'Autres : {yes_no(record.other_allergy)}',
        ]
        if record.allergy_details:
            lines.append(f'Précisions : {record.allergy_details}')
        canvas.section('ALLERGIES', lines, size=LEGAL_SIZE)

        if record.health_issue:
            issue = f'Oui - {record.health_issue_details}'
        else:
            issue = 'Non'
        lines = [
            f'Traitement médical : {yes_no(record.on_treatment)}',
            f'Problème de santé : {issue}',
        ]
        if record.parent_recommendations:
            lines.append(f'Recommandations des parents : {record.parent_recommendations}')
        if record.physician_name:
            lines.append(f'Médecin traitant : {record.physician_name}')
        canvas.section('SANTÉ', lines, size=LEGAL_SIZE)

        lines = [f'Responsable : {record.parent_full_name}']
        for label, guardian in (('Responsable 1', record.primary_guardian),
                                ('Responsable 2', record.secondary_guardian)):
            if guardian:
                lines.append(_guardian_line(label, guardian))
        for label, contact in (("Contact d'urgence", record.emergency_contact),
                               ("Contact d'urgence secondaire",
                                record.secondary_emergency_contact)):
            if contact:
                lines.append(_contact_line(label, contact))
        canvas.section("RESPONSABLES ET CONTACTS D'URGENCE", lines,
                       size=LEGAL_SIZE)

        canvas.heading('SIGNATURE DU REPRÉSENTANT LÉGAL')
        canvas.text(f'Signé le : {format_datetime_fr(record.sanitary_signed_at)}',
                    size=FOOTER_SIZE)
        return record.sanitary_signature


def _guardian_line(label, guardian):
    name = f"{guardian.get('last_name', '')} {guardian.get('first_name', '')}".strip()
    phones = ', '.join(p for p in (guardian.get('mobile_phone'),
                                   guardian.get('home_phone'),
                                   guardian.get('work_phone')) if p)
    return f'{label} : {name} - {phones}' if phones else f'{label} : {name}'


def _contact_line(label, contact):
    name = f"{contact.get('last_name', '')} {contact.get('first_name', '')}".strip()
    relation = f" ({contact['relation']})" if contact.get('relation') else ''
    return f"{label} : {name}{relation} - {contact.get('phone', '')}"
