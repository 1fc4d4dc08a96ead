"""
Models for a reconciliation run
"""

from enum import Enum
from pathlib import Path
from sqlmodel import SQLModel


class ReconcilePolicy(str, Enum):
    """
    How a file record is judged broken.

    METADATA flags an inaccessible uri, a size mismatch, or a name or
    nickname differing from the on-disk filename. ACCESS only flags an
    inaccessible uri.
    """

    METADATA = "metadata"
    ACCESS = "access"


class ReconcilerConfig(SQLModel):
    """Everything a reconciliation run needs, read once from the command line"""

    token: str
    project_id: str
    project_dir: str
    policy: ReconcilePolicy = ReconcilePolicy.METADATA
    dry_run: bool = False
    polished_bam_subdir: str = "Data/PolishedBams"
    complete_vcf_subdir: str = "VCF/Complete"

    @property
    def data_dir(self) -> str:
        """Canonical CRAM/CRAI directory"""
        return str(Path(self.project_dir) / self.polished_bam_subdir)

    @property
    def vcf_dir(self) -> str:
        """Directory holding the completed .vcf.gz and its .tbi"""
        return str(Path(self.project_dir) / self.complete_vcf_subdir)


class ReconcileStats(SQLModel):
    samples: int = 0
    checked: int = 0
    ok: int = 0
    repaired: int = 0
    irreparable: int = 0
    skipped: int = 0
    errors: int = 0
