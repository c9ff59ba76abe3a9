# hybridocr/raster_backends/gm_backend.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..runner import ProcessRunner, cli_path, resolve_binary
from .base import BaseRasterizer

MEMORY_ARGS = ["-limit", "memory", "256MiB", "-limit", "map", "512MiB"]


class GraphicsMagickRasterizer(BaseRasterizer):
    """
    Rasterizes through `gm convert` (GraphicsMagick, which delegates PDF
    reading to Ghostscript).

    Kwargs supported (all optional):
      - density: render resolution in DPI (default 400)
      - gm_cmd: full path to the gm binary, else GM_CMD or PATH
    """

    def __init__(self, runner: ProcessRunner, density: int = 400, gm_cmd: Optional[str] = None, **kwargs):
        self.runner = runner
        self.density = int(density)
        self.cmd = gm_cmd or resolve_binary("gm", "GM_CMD") or "gm"

    def rasterize(self, pdf: Path, tiff: Path, scratch: Path, page: Optional[int] = None) -> None:
        args = [self.cmd, "convert", "-despeckle"]
        source = cli_path(pdf)
        if page is not None:
            # one frame per file, picked by 0-based index
            args.append("+adjoin")
            source = f"{source}[{page - 1}]"
        args += MEMORY_ARGS
        args += ["-density", f"{self.density}x{self.density}", "-colorspace", "GRAY"]
        args += [source, cli_path(tiff)]
        self.runner.run(args, env={"MAGICK_TMPDIR": str(scratch), "OMP_NUM_THREADS": "2"})
