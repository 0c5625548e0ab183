# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only
import json

from pathlib import Path
from typing import Any


def save_json(path: str | Path, data: Any) -> None:
    """
    Write `data` as JSON with sorted keys, two-space indent and a final newline.

    Missing parent directories are created and an existing file is replaced,
    so regenerating a key file gives byte-identical output.

    Args:
        path: Destination file.
        data: A JSON-serializable value.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(data, indent=2, sort_keys=True)
    path.write_text(text + "\n", encoding="utf-8")


def load_json(path: str | Path) -> Any:
    """
    Read and parse a UTF-8 JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the content is not JSON.
    """
    return json.loads(Path(path).read_text(encoding="utf-8"))
