from __future__ import annotations

import fitz

from submittal_api.branding import DEFAULT_BRAND, BrandProfile
from submittal_api.schemas import ProjectData
from submittal_api.services.page_layout import (
    CHECKBOX_SIZE,
    COVER_FIELD_LAYOUT,
    FOOTER_BASELINE,
    FOOTER_LINE_SPACING,
    LABEL_X,
    MARGIN_X,
    PAGE_HEIGHT,
    PAGE_NUMBER_FONT_SIZE,
    PAGE_WIDTH,
    PRODUCT_BASELINE,
    STATUS_HEADING_BASELINE,
    SUBMITTAL_HEADING_BASELINE,
    VALUE_X,
    VERSION_BASELINE,
    CheckboxSpec,
    FieldBox,
    cover_field_values,
    page_number_baseline,
    status_checkboxes,
    submittal_checkboxes,
)

REGULAR_FONT = "helv"
BOLD_FONT = "hebo"
_WHITE = (1.0, 1.0, 1.0)
_BLACK = (0.0, 0.0, 0.0)
_CAPTION_GRAY = (0.6, 0.6, 0.6)
_ERROR_TEXT = (0.6, 0.2, 0.2)


class PageRenderer:
    """Appends generated pages (cover, divider, error) to a composite PDF."""

    def __init__(self, brand: BrandProfile | None = None) -> None:
        self._brand = brand or DEFAULT_BRAND

    @property
    def brand(self) -> BrandProfile:
        return self._brand

    @staticmethod
    def _new_page(document: fitz.Document) -> fitz.Page:
        return document.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)

    @staticmethod
    def _text(
        page: fitz.Page,
        x: float,
        y: float,
        text: str,
        *,
        size: float,
        bold: bool = False,
        color: tuple[float, float, float] = _BLACK,
    ) -> None:
        page.insert_text(
            (x, y),
            text,
            fontsize=size,
            fontname=BOLD_FONT if bold else REGULAR_FONT,
            color=color,
        )

    def _draw_field(self, page: fitz.Page, box: FieldBox, value: str) -> None:
        brand = self._brand
        self._text(page, LABEL_X, box.text_baseline, box.label, size=10, color=brand.text_color)
        page.draw_rect(
            fitz.Rect(box.rect),
            color=brand.border_color,
            fill=brand.field_fill_color,
            width=0.5,
        )
        self._text(page, box.x + 5, box.text_baseline, value or "", size=10, color=_BLACK)
        bottom = box.top + box.height
        page.draw_line(
            fitz.Point(LABEL_X, bottom),
            fitz.Point(box.x + box.width, bottom),
            color=brand.border_color,
            width=0.5,
        )

    def _draw_checkbox(self, page: fitz.Page, spec: CheckboxSpec) -> None:
        brand = self._brand
        page.draw_rect(fitz.Rect(spec.rect), color=brand.border_color, width=1)
        baseline = spec.top + CHECKBOX_SIZE - 2
        if spec.checked:
            page.draw_rect(
                fitz.Rect(
                    spec.x + 2,
                    spec.top + 2,
                    spec.x + CHECKBOX_SIZE - 2,
                    spec.top + CHECKBOX_SIZE - 2,
                ),
                color=None,
                fill=brand.accent_color,
                width=0,
            )
            self._text(page, spec.x + 3, baseline, "X", size=9, bold=True, color=_WHITE)
        self._text(
            page,
            spec.x + CHECKBOX_SIZE + 5,
            baseline,
            spec.label,
            size=9,
            color=brand.text_color,
        )

    def render_cover_page(
        self, document: fitz.Document, project: ProjectData
    ) -> tuple[CheckboxSpec, ...]:
        """Append the submittal cover sheet and return the checkboxes drawn on it.

        The cover is a fixed-layout form: every element sits at a constant
        offset, and long values are allowed to overflow their boxes.
        """
        brand = self._brand
        page = self._new_page(document)
        width = page.rect.width

        self._text(page, MARGIN_X, 50, brand.brand_name, size=24, bold=True, color=brand.accent_color)
        page.draw_rect(
            fitz.Rect(width - 150, 40, width - 50, 60),
            color=None,
            fill=brand.accent_color,
            width=0,
        )
        self._text(page, width - 145, 54, brand.section_label, size=10, bold=True, color=_WHITE)

        first_title, second_title = brand.title_lines
        self._text(page, MARGIN_X, 100, first_title, size=12, color=brand.text_color)
        self._text(page, MARGIN_X, 115, second_title, size=12, color=brand.text_color)

        values = cover_field_values(project)
        for box in COVER_FIELD_LAYOUT:
            self._draw_field(page, box, values[box.key])

        self._text(
            page, LABEL_X, STATUS_HEADING_BASELINE, "Status / Action",
            size=10, bold=True, color=brand.text_color,
        )
        status_specs = status_checkboxes(project)
        for spec in status_specs:
            self._draw_checkbox(page, spec)

        self._text(
            page, LABEL_X, SUBMITTAL_HEADING_BASELINE, "Submittal Type (check all that apply)",
            size=10, bold=True, color=brand.text_color,
        )
        submittal_specs = submittal_checkboxes(project)
        for spec in submittal_specs:
            self._draw_checkbox(page, spec)

        self._text(page, LABEL_X, PRODUCT_BASELINE, "Product:", size=10, bold=True, color=brand.text_color)
        self._text(page, VALUE_X, PRODUCT_BASELINE, project.product, size=10, color=brand.text_color)

        self._text(
            page, LABEL_X, FOOTER_BASELINE, brand.organization_name,
            size=9, bold=True, color=brand.text_color,
        )
        footer_lines = (brand.address_line, brand.phone_line, brand.support_line)
        for offset, line in enumerate(footer_lines, start=1):
            self._text(
                page,
                LABEL_X,
                FOOTER_BASELINE + offset * FOOTER_LINE_SPACING,
                line,
                size=8,
                color=brand.muted_color,
            )

        version_width = fitz.get_text_length(
            brand.version_caption, fontname=REGULAR_FONT, fontsize=7
        )
        self._text(
            page,
            width - version_width - MARGIN_X,
            VERSION_BASELINE,
            brand.version_caption,
            size=7,
            color=brand.muted_color,
        )
        return status_specs + submittal_specs

    def render_divider_page(
        self,
        document: fitz.Document,
        document_name: str,
        document_type: str,
        page_number: int,
    ) -> None:
        # page_number is the position at creation time; the footer stamp is authoritative.
        page = self._new_page(document)
        self._text(page, MARGIN_X, 100, "SECTION DIVIDER", size=16, bold=True, color=self._brand.accent_color)
        self._text(page, MARGIN_X, 150, document_name, size=20, bold=True)
        self._text(page, MARGIN_X, 180, f"Type: {document_type}", size=12, color=self._brand.muted_color)
        self._text(page, MARGIN_X, 200, f"Page {page_number}", size=10, color=_CAPTION_GRAY)

    def render_error_page(
        self,
        document: fitz.Document,
        document_name: str,
        error_message: str,
    ) -> None:
        page = self._new_page(document)
        self._text(page, MARGIN_X, 100, "DOCUMENT ERROR", size=16, bold=True, color=self._brand.error_color)
        self._text(page, MARGIN_X, 150, document_name, size=14, bold=True)
        self._text(page, MARGIN_X, 180, f"Error: {error_message}", size=12, color=_ERROR_TEXT)
        self._text(
            page, MARGIN_X, 220, self._brand.error_instructions,
            size=10, color=self._brand.muted_color,
        )

    def apply_page_numbers(self, document: fitz.Document) -> None:
        """Stamp every page with its 1-based position in the final sequence.

        Numbers are drawn at a fixed footer position derived from the page size,
        so repeating the pass overwrites rather than increments. The position is
        computed in the visible (rotated) page and mapped back to unrotated page
        space, so rotated source pages show the number upright in their footer.
        """
        for page_index in range(document.page_count):
            page = document.load_page(page_index)
            label = str(page_index + 1)
            page_rect = page.rect
            right, baseline = page_number_baseline(page_rect.width, page_rect.height)
            label_width = fitz.get_text_length(
                label, fontname=REGULAR_FONT, fontsize=PAGE_NUMBER_FONT_SIZE
            )
            origin = fitz.Point(right - label_width, baseline) * page.derotation_matrix
            page.insert_text(
                origin,
                label,
                fontsize=PAGE_NUMBER_FONT_SIZE,
                fontname=REGULAR_FONT,
                color=self._brand.muted_color,
                rotate=page.rotation,
                overlay=True,
            )
