from __future__ import annotations

from submittal_api.schemas import ProjectData
from submittal_api.services.page_layout import (
    COVER_FIELD_LAYOUT,
    PAGE_HEIGHT,
    PAGE_WIDTH,
    SUBMITTAL_TYPE_ROWS,
    cover_field_values,
    page_number_baseline,
    status_checkboxes,
    submittal_checkboxes,
)


def _project(**overrides) -> ProjectData:
    payload = {
        "projectName": "Harbor Point Tower",
        "submittedTo": "Coastal Architects",
        "preparedBy": "J. Rivera",
        "phoneNumber": "555-0100",
        "emailAddress": "jr@example.test",
        "date": "10/01/2025",
    }
    payload.update(overrides)
    return ProjectData.model_validate(payload)


def test_cover_field_values_cover_every_field_box() -> None:
    values = cover_field_values(_project())

    assert set(values) == {box.key for box in COVER_FIELD_LAYOUT}
    assert values["phone_email"] == "555-0100 / jr@example.test"
    assert values["project_number"] == ""
    assert values["date"] == "10/01/2025"


def test_cover_fields_are_stacked_without_overlap() -> None:
    tops = [box.top for box in COVER_FIELD_LAYOUT]

    assert tops == sorted(tops)
    for upper, lower in zip(COVER_FIELD_LAYOUT, COVER_FIELD_LAYOUT[1:]):
        assert upper.top + upper.height <= lower.top


def test_status_checkboxes_mark_only_selected_statuses() -> None:
    specs = status_checkboxes(
        _project(status={"forReview": True, "forInformationOnly": True})
    )

    assert [spec.key for spec in specs] == [
        "for_review",
        "for_approval",
        "for_record",
        "for_information_only",
    ]
    assert [spec.key for spec in specs if spec.checked] == ["for_review", "for_information_only"]
    assert len({(spec.x, spec.top) for spec in specs}) == 4


def test_submittal_checkboxes_follow_fixed_row_order() -> None:
    specs = submittal_checkboxes(
        _project(
            submittalType={
                "tds": True,
                "fireAssembly02": True,
                "other": True,
                "otherText": "Mock-up panel",
            }
        )
    )

    assert [spec.key for spec in specs] == [key for key, _ in SUBMITTAL_TYPE_ROWS]
    assert [spec.key for spec in specs if spec.checked] == ["tds", "fire_assembly02", "other"]
    assert specs[-1].label == "Other: Mock-up panel"
    assert [spec.top for spec in specs] == sorted(spec.top for spec in specs)


def test_checkbox_plans_are_all_unchecked_by_default() -> None:
    project = _project()

    assert not any(spec.checked for spec in status_checkboxes(project))
    assert not any(spec.checked for spec in submittal_checkboxes(project))
    assert submittal_checkboxes(project)[-1].label == "Other: "


def test_page_number_baseline_sits_inside_bottom_right_margin() -> None:
    right, baseline = page_number_baseline(PAGE_WIDTH, PAGE_HEIGHT)

    assert right == PAGE_WIDTH - 40
    assert baseline == PAGE_HEIGHT - 30
    assert page_number_baseline(842.0, 595.0) == (802.0, 565.0)
