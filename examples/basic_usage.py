#!/usr/bin/env python3
"""
Basic qcpack Usage Example

This example demonstrates the core workflow:
1. Build a QC pack from a report and a script
2. Customize the pack with PackConfig
3. Inspect corrections before assembling
4. Use the AI fallback for hard-to-find phrases
"""

import logging

from qcpack import build_qc_pack, load_corrections
from qcpack.config import PackConfig


def main():
    # ─────────────────────────────────────────────────────────────────────────
    # 1. Basic Pack
    # ─────────────────────────────────────────────────────────────────────────

    result = build_qc_pack("path/to/qc_report.xlsx", "path/to/script.pdf")
    result.save("output/qc_pack.pdf")

    print(f"Pack: {result.page_count} pages ({result.pages})")
    for diagnostic in result.diagnostics:
        print(f"  {diagnostic}")

    # ─────────────────────────────────────────────────────────────────────────
    # 2. Custom Configuration
    # ─────────────────────────────────────────────────────────────────────────

    config = PackConfig(
        page_offset=4,  # Report page 1 is PDF page 5
        audible_mode=True,  # MR:/MW:/ML: prefixes
        show_provenance=False,  # Hide track/time under each note
    )

    result = build_qc_pack("path/to/qc_report.csv", "path/to/script.pdf", config)
    result.save("output/qc_pack_audible.pdf")


def inspect_corrections_example():
    """Review what the report contains before building."""
    corrections = load_corrections("path/to/qc_report.xlsx")

    for correction in corrections:
        print(f"{correction.id} p.{correction.page} [{correction.correction_type.value}]")
        print(f"  Context: {correction.context_phrase}")
        print(f"  Note: {correction.notes}")
        if correction.words_for_emphasis:
            print(f"  Circle: {' '.join(correction.words_for_emphasis)}")


def ai_fallback_example():
    """Let an LLM suggest the page sentence when text search fails.

    Requires the ``ai`` extra and OPENAI_API_KEY.
    """
    from qcpack.locate import OpenAISentenceMatcher

    matcher = OpenAISentenceMatcher()
    result = build_qc_pack("path/to/qc_report.xlsx", "path/to/script.pdf", matcher=matcher)
    result.save("output/qc_pack.pdf")


if __name__ == "__main__":
    # Note: These examples use placeholder paths.
    # Replace with actual report and script paths to run.
    logging.basicConfig(level=logging.INFO)
    print("qcpack Usage Examples")
    print("=" * 50)
    print("\nSee the code for detailed examples of:")
    print("  - Building a pack")
    print("  - Custom configuration")
    print("  - Inspecting corrections")
    print("  - AI sentence matching")
