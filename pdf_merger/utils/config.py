"""Settings describing a single merge run."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

DEFAULT_OUTPUT_NAME = "merged.pdf"
MIN_INPUT_FILES = 2


@dataclass(slots=True)
class MergeSettings:
    """Input files, base directory and output location for a merge."""

    files: List[Path] = field(default_factory=list)
    base_dir: Path = Path(".")
    output_dir: Optional[Path] = None
    output_name: str = DEFAULT_OUTPUT_NAME
    debug: bool = False

    def input_paths(self) -> List[Path]:
        """Resolve every input file name against the base directory."""
        return [self.base_dir / name for name in self.files]

    def output_path(self) -> Path:
        """Return where the merged document is written."""
        directory = self.output_dir if self.output_dir is not None else self.base_dir
        return directory / self.output_name

    def debug_dir(self) -> Path:
        return self.output_path().parent / "debug"
