"""Local storage locations for stories, the vector index, results and reports."""

from pathlib import Path

from pydantic import BaseModel


class StorageConfig(BaseModel, frozen=True):
    stories_path: Path
    vector_store_path: Path
    results_dir: Path
    reports_dir: Path

    def relative_to(self, base: Path) -> "StorageConfig":
        """Anchor relative locations at base; absolute ones are kept."""
        return StorageConfig(
            stories_path=base / self.stories_path,
            vector_store_path=base / self.vector_store_path,
            results_dir=base / self.results_dir,
            reports_dir=base / self.reports_dir,
        )
