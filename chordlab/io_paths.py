# chordlab/io_paths.py
from pathlib import Path

from .config import OUTPUTS_DIR


def ensure_outputs_dir(outputs_dir: Path = OUTPUTS_DIR) -> Path:
    outputs_dir.mkdir(parents=True, exist_ok=True)
    return outputs_dir


def output_stem_for(path: Path, outputs_dir: Path = OUTPUTS_DIR) -> Path:
    """
    outputs/<stem>, without suffix. Example:
      input:  /.../prelude_in_c.mid  ->  outputs/prelude_in_c
    """
    return ensure_outputs_dir(outputs_dir) / Path(path).stem
