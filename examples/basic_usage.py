#!/usr/bin/env python3
"""
Basic Usage Example

Demonstrates recording voice intakes and reading back deduplicated patients.

Usage:
    python examples/basic_usage.py

Requirements:
    - pip install voice-intake
"""

import json

from voice_intake import IntakePipeline


def main():
    # In-memory store; nothing is written to disk
    pipeline = IntakePipeline.in_memory()

    transcripts = [
        "Hi, my name is John Smith. My phone number is (555) 123-4567, "
        "and I live at 12 Oak Street.",
        "My name is Jane Smith, call me at 555 123 4567.",
        "My name is Jane Doe. My number is 555-123-4567. I live on Elm Road.",
        "My first name is Bob. My last name is Jones. Contact number is 555 987 6543.",
    ]

    for transcript in transcripts:
        visit = pipeline.submit_voice_transcript(transcript)
        status = "new" if visit.is_new_patient else "returning"
        print(f"Visit {visit.id}: {visit.first_name} {visit.last_name} ({status})")

    print("\n--- Unique patients (latest visit per phone) ---")
    for visit in pipeline.list_unique_patients():
        print(json.dumps(visit.to_dict()))

    first_visit_stats = pipeline.get_stats(1)
    print(f"\nStats for visit 1: {first_visit_stats.to_dict()}")


if __name__ == "__main__":
    main()
