"""Embedded catalog dataset: every templates/ file in one JSON object.

Text files are stored as strings. Anything that is not valid UTF-8 is
stored as ``{"base64": "..."}`` so binary skill assets survive the trip.

This module only uses the standard library; the wheel build hook loads it
by path before the package's dependencies are installed.
"""

import base64
import json
from pathlib import Path

BINARY_KEY = "base64"


def build_embedded_dataset(root: Path) -> dict[str, str | bytes]:
    """Collect every file under a templates directory.

    Keys are sorted so the dataset is reproducible.

    Args:
        root: Templates directory containing agents/, skills/, commands/

    Returns:
        Ordered mapping of posix key to file content; str for text files,
        bytes for everything else
    """
    dataset: dict[str, str | bytes] = {}
    for path in sorted(p for p in root.rglob("*") if p.is_file()):
        key = path.relative_to(root).as_posix()
        data = path.read_bytes()
        try:
            dataset[key] = data.decode("utf-8")
        except UnicodeDecodeError:
            dataset[key] = data
    return dataset


def encode_value(value: str | bytes) -> str | dict[str, str]:
    if isinstance(value, bytes):
        return {BINARY_KEY: base64.b64encode(value).decode("ascii")}
    return value


def decode_value(key: str, value: object) -> str | bytes:
    if isinstance(value, str):
        return value
    if isinstance(value, dict) and isinstance(value.get(BINARY_KEY), str):
        return base64.b64decode(value[BINARY_KEY])
    raise ValueError(f"Embedded dataset entry {key} must be a string or a base64 object")


def write_embedded_dataset(root: Path, dest: Path) -> int:
    """Write the embedded dataset for a templates directory to a JSON file.

    Returns:
        Number of embedded files
    """
    dataset = build_embedded_dataset(root)
    encoded = {key: encode_value(value) for key, value in dataset.items()}
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(json.dumps(encoded, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return len(dataset)


def load_embedded_dataset(path: Path) -> dict[str, str | bytes]:
    """Read an embedded dataset JSON file, keeping key order.

    Raises:
        ValueError: If the file is not a JSON object of known entries
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Embedded dataset {path} must be a JSON object")
    return {str(k): decode_value(str(k), v) for k, v in data.items()}
