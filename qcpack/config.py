"""
Configuration for QC pack generation.
"""

from dataclasses import dataclass

from qcpack.exceptions import ConfigurationError


@dataclass
class PackConfig:
    """
    Configuration for building a QC pack.

    All options have sensible defaults. Create a config only
    if you need to customize behavior.

    Example:
        >>> config = PackConfig(page_offset=2, audible_mode=True)
        >>> result = qcpack.build_qc_pack("report.xlsx", "script.pdf", config)
    """

    # Added to every page number stated in the report (front matter etc.)
    page_offset: int = 0

    # Audible projects prefix notes with MR:/MW:/ML: roles
    audible_mode: bool = False

    # Location options
    locate_phrases: bool = True  # False = list notes only, draw no marks
    bridge_pages: bool = True  # Retry with the next/previous page joined on

    # Notes box
    show_provenance: bool = True  # Append "track/mm:ss" under each note
    notes_font_size: float = 10.0
    notes_box_width_ratio: float = 0.4  # Share of the page width used for text

    def __post_init__(self):
        """Validate configuration."""
        if not isinstance(self.page_offset, int) or isinstance(self.page_offset, bool):
            raise ConfigurationError(
                f"page_offset must be an integer, got {self.page_offset!r}"
            )
        if self.notes_font_size <= 0:
            raise ConfigurationError(
                f"notes_font_size must be positive, got {self.notes_font_size}"
            )
        if not 0.0 < self.notes_box_width_ratio <= 1.0:
            raise ConfigurationError(
                f"notes_box_width_ratio must be in (0, 1], got {self.notes_box_width_ratio}"
            )
