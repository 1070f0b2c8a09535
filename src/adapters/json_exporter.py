"""Escritura JSON a disco.

Por qué un único helper:
- SP config y sesión se escriben igual: UTF-8, formato estable, permisos 0600.
- La escritura es atómica (temp + rename): nunca queda un fichero a medias.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

PRIVATE_FILE_MODE = 0o600


def export_json_atomic(*, payload: dict[str, Any], output_path: Path, mode: int = PRIVATE_FILE_MODE) -> Path:
    """Escribe `payload` en `output_path` de forma atómica."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n"

    fd, tmp_name = tempfile.mkstemp(prefix=f".{output_path.name}.", suffix=".tmp", dir=output_path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        try:
            os.chmod(tmp_path, mode)
        except OSError:
            # Windows / FS sin permisos POSIX.
            pass
        os.replace(tmp_path, output_path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return output_path


def load_json_object(path: Path) -> dict[str, Any]:
    """Lee un JSON cuyo nivel superior debe ser un objeto."""

    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a JSON object")
    return data
