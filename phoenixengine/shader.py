"""Shader source handling: splitting combined files by stage and cache naming."""

from __future__ import annotations

import logging
import os
import re
from enum import IntEnum
from pathlib import Path
from typing import Dict, Union

logger = logging.getLogger(__name__)

TYPE_TOKEN = "#type"
CACHE_DIRECTORY = "assets/cache/shader/opengl"

_NOT_NEWLINE = re.compile(r"[^\r\n]")
_NEWLINE = re.compile(r"[\r\n]")


class ShaderStage(IntEnum):
    """Shader stages, numbered with their OpenGL enum values."""

    FRAGMENT = 0x8B30
    VERTEX = 0x8B31

    @property
    def gl_name(self) -> str:
        """The OpenGL constant name of the stage."""
        return f"GL_{self.name}_SHADER"

    @property
    def short_name(self) -> str:
        return "vert" if self is ShaderStage.VERTEX else "frag"


def shader_type_from_string(type_name: str) -> ShaderStage:
    """Stage named after ``#type``: ``vertex``, ``fragment`` or ``pixel``."""
    if type_name == "vertex":
        return ShaderStage.VERTEX
    if type_name in ("fragment", "pixel"):
        return ShaderStage.FRAGMENT
    raise ValueError(f"Unknown shader type: {type_name!r}")


def preprocess(source: str) -> Dict[ShaderStage, str]:
    """Split a combined shader file into per-stage sources at ``#type`` lines."""
    sources: Dict[ShaderStage, str] = {}
    pos = source.find(TYPE_TOKEN)
    while pos != -1:
        eol_match = _NEWLINE.search(source, pos)
        if eol_match is None:
            raise ValueError("Syntax error: '#type' line without a line end")
        eol = eol_match.start()
        begin = pos + len(TYPE_TOKEN) + 1
        stage = shader_type_from_string(source[begin:eol])

        code_match = _NOT_NEWLINE.search(source, eol)
        if code_match is None:
            raise ValueError("Syntax error: '#type' line without shader code")
        code_start = code_match.start()
        pos = source.find(TYPE_TOKEN, code_start)
        sources[stage] = source[code_start:] if pos == -1 else source[code_start:pos]
    return sources


def shader_name_from_path(filepath: str) -> str:
    """File name of ``filepath`` without directories or its last extension."""
    start = max(filepath.rfind("/"), filepath.rfind("\\")) + 1
    dot = filepath.rfind(".")
    if dot == -1 or dot < start:
        return filepath[start:]
    return filepath[start:dot]


def read_file(filepath: Union[str, "os.PathLike[str]"]) -> str:
    """Whole file as text, line ends untouched; empty when it cannot be read."""
    try:
        data = Path(filepath).read_bytes()
    except OSError:
        logger.error("Could not open file '%s'", filepath)
        return ""
    return data.decode("utf-8", errors="replace")


def cached_file_extension(stage: ShaderStage, target: str) -> str:
    """Extension of a cached binary for ``stage`` built for ``opengl`` or ``vulkan``."""
    if target not in ("opengl", "vulkan"):
        raise ValueError(f"Unknown shader cache target: {target!r}")
    return f".cached_{target}.{ShaderStage(stage).short_name}"