#!/usr/bin/env python3
"""
Process Audio File Example

Demonstrates transcribing an intake recording and storing the visit.

Usage:
    python examples/process_audio_file.py <audio_file> [--store visits.json]

Requirements:
    - ELEVEN_API_KEY environment variable set
    - Audio file in WAV, MP3, or other format the speech service accepts
"""

import argparse
import json
import sys
from pathlib import Path

from voice_intake import IntakeConfig, IntakePipeline
from voice_intake.errors import TranscriptionError


def main():
    parser = argparse.ArgumentParser(description="Transcribe an intake recording")
    parser.add_argument("audio_file", type=Path, help="Audio file to process")
    parser.add_argument("--store", "-s", type=Path, default=Path("data/visits.json"), help="JSON visit store")
    parser.add_argument("--config", "-c", type=Path, help="Config file")
    args = parser.parse_args()

    if not args.audio_file.exists():
        print(f"Error: File not found: {args.audio_file}")
        sys.exit(1)

    # Create pipeline
    if args.config:
        pipeline = IntakePipeline.from_config(args.config)
    else:
        config = IntakeConfig.from_env()
        config.store.backend = "json"
        config.store.path = str(args.store)
        pipeline = IntakePipeline(config)

    print(f"Processing: {args.audio_file}")

    try:
        visit = pipeline.submit_voice_file(args.audio_file)
    except TranscriptionError as e:
        print(f"Transcription failed: {e}")
        sys.exit(1)

    print(json.dumps(visit.to_dict(), indent=2))

    stats = pipeline.get_stats(visit.id)
    print(f"\n--- Visit {stats.visit_count} for this phone number ---")


if __name__ == "__main__":
    main()
