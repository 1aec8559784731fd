from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

JobState = Literal["processing", "done", "failed"]


class JobStatus(BaseModel):
    job_id: str
    status: JobState
    filename: Optional[str] = None
    grid_size: int
    stylized: bool = False
    total_beads: Optional[int] = None
    colours: Optional[int] = None
    usage: Dict[str, int] = Field(default_factory=dict)
    error: Optional[str] = None


class ExportRequest(BaseModel):
    formats: List[Literal["json", "csv", "usage_csv", "png", "pdf"]] = ["pdf", "usage_csv"]
    zoom: float = Field(1, gt=0, le=4)


class LegendEntry(BaseModel):
    code: str
    name: Optional[str] = None
    hex: Optional[str] = None
    rgb: Optional[List[int]] = None
    count: int
    percent: float
