"""Configuration dataclasses for plinkbed.

Holds the output settings shared by CLI commands that write files.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class OutputConfig:
    """Configuration for output files and directories.

    Attributes:
        outdir: Output directory for exported files. Created on demand.
        prefix: Prefix for output filenames (e.g., "plink" produces
            "plink.ped" and "plink.map").
        verbose: Enable verbose/debug output to console.
    """

    outdir: Path = field(default_factory=lambda: Path("output"))
    prefix: str = "plink"
    verbose: bool = False

    @property
    def export_prefix(self) -> Path:
        """Path prefix passed to the .ped/.map writer: {outdir}/{prefix}."""
        return self.outdir / self.prefix

    def ensure_outdir(self) -> None:
        """Create output directory if it doesn't exist."""
        self.outdir.mkdir(parents=True, exist_ok=True)
