#!/usr/bin/env python3
"""Example: Quickstart for grounding-labels

Classify grounding documents, pick the grounding an LLM may use, and
label the generated response with the most sensitive source label.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install grounding-labels
"""
from __future__ import annotations

import grounding_labels as gl


def main() -> None:
    print(f"grounding-labels version: {gl.__version__}")

    # Step 1: Label a single piece of text
    labeler = gl.Labeler()
    response = labeler.classify_text("Employee SSN 123-45-6789")
    print(f"\n{labeler!r}")
    print(f"  label={response.label.name} grounding={response.allow_grounding}")

    # Step 2: Label raw grounding documents
    service = labeler.service
    grounding = gl.GroundingDataProcessor(service)
    documents = [
        grounding.process_raw_data("Quarterly meeting notes", source="wiki"),
        grounding.process_raw_data("The annual budget for next year", source="finance"),
        grounding.process_raw_data("Card 4111 1111 1111 1111", source="crm"),
    ]

    print("\nGrounding documents:")
    for document in documents:
        label = document.label
        print(f"  [{label.name if label else '-'}] {document.source}: {document.content}")

    # Step 3: Keep only what may ground a response, then label the response
    usable = grounding.filter_grounding_data(documents)
    print(f"\nUsable for grounding: {len(usable)}/{len(documents)}")

    responses = gl.LLMResponseProcessor(service)
    answer = responses.process_response("Meeting notes and budget summary.", usable)
    print(f"\nResponse label: {answer.label.name}")
    print(answer.formatted_response)


if __name__ == "__main__":
    main()
