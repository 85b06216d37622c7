"""
Utterance Loader

Loads labeled test utterances from JSON files.
Supports both a bare JSON array and an object with an "utterances" array.
"""

import json


def load_utterances(file_path: str) -> list[dict]:
    """
    Load labeled utterances from a JSON file

    Args:
        file_path: Path to the utterances JSON file

    Returns:
        list[dict]: Utterances with text, intent and entities

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not an array of utterance objects
        KeyError: If an utterance is missing its text
    """
    with open(file_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict) and "utterances" in data:
        data = data["utterances"]

    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of utterances: {file_path}")

    for index, utterance in enumerate(data):
        if not isinstance(utterance, dict):
            raise ValueError(f"Utterance {index} is not a JSON object: {file_path}")
        # Validate required fields
        if "text" not in utterance:
            raise KeyError(f"Required field 'text' is missing from utterance {index}: {file_path}")

    return data
