from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson


def load_json(path: Path) -> Any:
    return orjson.loads(path.read_bytes())


def dump_json_bytes(payload: Any, indent: bool = True) -> bytes:
    option = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(payload, option=option | orjson.OPT_APPEND_NEWLINE)


def write_json_atomic(path: Path, payload: Any, indent: bool = True) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    tmp_path.write_bytes(dump_json_bytes(payload, indent=indent))
    tmp_path.replace(path)
