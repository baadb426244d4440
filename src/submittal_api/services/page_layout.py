"""Fixed page geometry for generated packet pages.

Coordinates are PDF points measured from the top-left corner of a US Letter
page, matching PyMuPDF's page space. Text positions are baselines.
"""

from __future__ import annotations

from dataclasses import dataclass

from submittal_api.schemas import ProjectData

PAGE_WIDTH = 612.0
PAGE_HEIGHT = 792.0
MARGIN_X = 50.0

LABEL_X = MARGIN_X
VALUE_X = 200.0
FIELD_HEIGHT = 25.0
FIELD_WIDTH = PAGE_WIDTH - VALUE_X - MARGIN_X
FIELDS_TOP = 125.0

CHECKBOX_SIZE = 12.0
CHECKBOX_COLUMN_SPACING = 130.0
STATUS_HEADING_BASELINE = 310.0
STATUS_ROWS_TOP = 318.0
STATUS_ROW_SPACING = 18.0
SUBMITTAL_HEADING_BASELINE = 378.0
SUBMITTAL_ROWS_TOP = 386.0
SUBMITTAL_ROW_SPACING = 16.0
PRODUCT_BASELINE = 632.0
FOOTER_BASELINE = 672.0
FOOTER_LINE_SPACING = 12.0
VERSION_BASELINE = 742.0

PAGE_NUMBER_RIGHT_MARGIN = 40.0
PAGE_NUMBER_BOTTOM_OFFSET = 30.0
PAGE_NUMBER_FONT_SIZE = 10.0


@dataclass(frozen=True)
class FieldBox:
    key: str
    label: str
    x: float
    top: float
    width: float
    height: float

    @property
    def rect(self) -> tuple[float, float, float, float]:
        return (self.x, self.top, self.x + self.width, self.top + self.height)

    @property
    def text_baseline(self) -> float:
        return self.top + self.height - 8.0


@dataclass(frozen=True)
class CheckboxSpec:
    key: str
    label: str
    checked: bool
    x: float
    top: float

    @property
    def rect(self) -> tuple[float, float, float, float]:
        return (self.x, self.top, self.x + CHECKBOX_SIZE, self.top + CHECKBOX_SIZE)


def _field(index: int, key: str, label: str) -> FieldBox:
    return FieldBox(
        key=key,
        label=label,
        x=VALUE_X,
        top=FIELDS_TOP + index * FIELD_HEIGHT,
        width=FIELD_WIDTH,
        height=FIELD_HEIGHT,
    )


COVER_FIELD_LAYOUT: tuple[FieldBox, ...] = (
    _field(0, "submitted_to", "Submitted To"),
    _field(1, "project_name", "Project Name"),
    _field(2, "project_number", "Project Number"),
    _field(3, "prepared_by", "Prepared By"),
    _field(4, "phone_email", "Phone/Email"),
    _field(5, "date", "Date"),
)

# (attribute, label, column, row)
STATUS_SLOTS: tuple[tuple[str, str, int, int], ...] = (
    ("for_review", "For Review", 0, 0),
    ("for_approval", "For Approval", 1, 0),
    ("for_record", "For Record", 0, 1),
    ("for_information_only", "For Information Only", 1, 1),
)

SUBMITTAL_TYPE_ROWS: tuple[tuple[str, str], ...] = (
    ("tds", "TDS"),
    ("three_part_specs", "3-Part Specs"),
    ("test_report_icc_esr5194", "Test Report ICC-ESR 5194"),
    ("test_report_icc_esl1645", "Test Report ICC-ESL 1645"),
    ("fire_assembly", "Fire Assembly"),
    ("fire_assembly01", "  Fire Assembly 01"),
    ("fire_assembly02", "  Fire Assembly 02"),
    ("fire_assembly03", "  Fire Assembly 03"),
    ("msds", "Material Safety Data Sheet (MSDS)"),
    ("leed_guide", "LEED Guide"),
    ("installation_guide", "Installation Guide"),
    ("warranty", "Warranty"),
    ("samples", "Samples"),
    ("other", "Other:"),
)


def cover_field_values(project: ProjectData) -> dict[str, str]:
    return {
        "submitted_to": project.submitted_to,
        "project_name": project.project_name,
        "project_number": project.project_number or "",
        "prepared_by": project.prepared_by,
        "phone_email": f"{project.phone_number} / {project.email_address}",
        "date": project.date,
    }


def status_checkboxes(project: ProjectData) -> tuple[CheckboxSpec, ...]:
    return tuple(
        CheckboxSpec(
            key=key,
            label=label,
            checked=bool(getattr(project.status, key)),
            x=VALUE_X + column * CHECKBOX_COLUMN_SPACING,
            top=STATUS_ROWS_TOP + row * STATUS_ROW_SPACING,
        )
        for key, label, column, row in STATUS_SLOTS
    )


def submittal_checkboxes(project: ProjectData) -> tuple[CheckboxSpec, ...]:
    submittal_type = project.submittal_type
    specs: list[CheckboxSpec] = []
    for index, (key, label) in enumerate(SUBMITTAL_TYPE_ROWS):
        if key == "other":
            label = f"{label} {submittal_type.other_text or ''}"
        specs.append(
            CheckboxSpec(
                key=key,
                label=label,
                checked=bool(getattr(submittal_type, key)),
                x=VALUE_X,
                top=SUBMITTAL_ROWS_TOP + index * SUBMITTAL_ROW_SPACING,
            )
        )
    return tuple(specs)


def page_number_baseline(page_width: float, page_height: float) -> tuple[float, float]:
    """Right edge and baseline of the footer page number for a page size."""
    return (
        page_width - PAGE_NUMBER_RIGHT_MARGIN,
        page_height - PAGE_NUMBER_BOTTOM_OFFSET,
    )


def page_number_rect(page_width: float, page_height: float) -> tuple[float, float, float, float]:
    right, baseline = page_number_baseline(page_width, page_height)
    return (right - 100.0, baseline - 14.0, right + 2.0, baseline + 4.0)
