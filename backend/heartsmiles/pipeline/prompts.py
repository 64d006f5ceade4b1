"""
LLM prompts for spreadsheet record extraction.

All prompts used for model-based extraction are centralised here.
This makes it easy to iterate on prompts without touching step logic.
"""

from __future__ import annotations

import json
from typing import Any

from heartsmiles.core.constants import EntityKind


# ═══════════════════════════════════════════════════════════
#  Participant Extraction Prompt
# ═══════════════════════════════════════════════════════════

PARTICIPANT_PROMPT = """
You are an AI assistant helping to process youth participant data for a nonprofit organization called HeartSmiles.

Please analyze the following data and extract participant information. Return a JSON array of participant objects with the following structure:
{
  "participants": [
    {
      "name": "Full name of participant",
      "dateOfBirth": "YYYY-MM-DD format",
      "address": "Full address",
      "referralDate": "YYYY-MM-DD format",
      "school": "School name",
      "identificationNumber": "Unique ID number",
      "programs": ["program1", "program2"],
      "notes": ["note1", "note2"]
    }
  ]
}

Rules:
1. If a date is ambiguous, use the most recent reasonable date
2. If multiple programs are mentioned, include all of them
3. If no clear identification number exists, create a temporary one based on name and school
4. If information is missing, use empty string ""
5. Ensure all dates are in YYYY-MM-DD format
6. Clean up any inconsistent formatting
7. If you see multiple rows for the same person, combine them into one participant object
""".strip()

PARTICIPANT_SYSTEM_PROMPT = (
    "You are a data processing assistant specializing in extracting structured "
    "participant information from various data formats. Always return valid JSON."
)


# ═══════════════════════════════════════════════════════════
#  Program Extraction Prompt
# ═══════════════════════════════════════════════════════════

PROGRAM_PROMPT = """
You are an AI assistant helping to process program data for a nonprofit organization called HeartSmiles.

Please analyze the following data and extract program information. Return a JSON array of program objects with the following structure:
{
  "programs": [
    {
      "name": "Program name",
      "description": "Detailed description of the program",
      "participants": ["participant1", "participant2"]
    }
  ]
}

Rules:
1. If multiple similar programs exist, combine them if they're the same program
2. Create meaningful descriptions if none exist
3. Extract participant names if mentioned
4. If information is missing, use empty string ""
5. Clean up any inconsistent formatting
""".strip()

PROGRAM_SYSTEM_PROMPT = (
    "You are a data processing assistant specializing in extracting structured "
    "program information from various data formats. Always return valid JSON."
)


_PROMPTS = {
    EntityKind.PARTICIPANT: (PARTICIPANT_PROMPT, PARTICIPANT_SYSTEM_PROMPT),
    EntityKind.PROGRAM: (PROGRAM_PROMPT, PROGRAM_SYSTEM_PROMPT),
}

# Key the model wraps its records under, e.g. {"participants": [...]}
RESPONSE_KEYS = {
    EntityKind.PARTICIPANT: "participants",
    EntityKind.PROGRAM: "programs",
}


def build_prompt(kind: EntityKind, rows: list[dict[str, Any]]) -> tuple[str, str]:
    """Return (system_prompt, user_prompt) with the rows embedded as JSON."""
    template, system_prompt = _PROMPTS[kind]
    user_prompt = (
        f"{template}\n\n"
        f"Data to process:\n{json.dumps(rows, indent=2, ensure_ascii=False)}\n\n"
        "Please return ONLY the JSON response, no additional text or formatting."
    )
    return system_prompt, user_prompt
