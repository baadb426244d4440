from __future__ import annotations

from dataclasses import dataclass

Color = tuple[float, float, float]


@dataclass(frozen=True)
class BrandProfile:
    """Fixed text and colours stamped onto generated pages."""

    brand_name: str = "NEXGEN"
    section_label: str = "SECTION 06 16 26"
    title_lines: tuple[str, str] = (
        "MAXTERRA® MgO Non-Combustible Structural",
        "Floor Panels Submittal Form",
    )
    default_product: str = "3/4-in (20mm)"
    organization_name: str = "NEXGEN® Building Products, LLC"
    address_line: str = "1504 Manhattan Ave West, #300 Brandon, FL 34205"
    phone_line: str = "(727) 634-5534"
    support_line: str = "Technical Support: support@nexgenbp.com"
    version_caption: str = (
        "Version 1.0 October 2025 © 2025 NEXGEN Building Products"
    )
    error_instructions: str = "Please contact support if this error persists."
    accent_color: Color = (0.0, 0.6, 0.8)
    text_color: Color = (0.2, 0.2, 0.2)
    muted_color: Color = (0.4, 0.4, 0.4)
    field_fill_color: Color = (0.84, 0.9, 0.96)
    border_color: Color = (0.7, 0.7, 0.7)
    error_color: Color = (0.8, 0.2, 0.2)


DEFAULT_BRAND = BrandProfile()
