"""Writes individual project files to disk."""

from __future__ import annotations

from pathlib import Path

from projgen.models import ProjectFile


class ProjectFileWriter:
    """Writes a ``ProjectFile`` below a project root.

    Independent of the descriptor; the project writer calls it once per file
    after the descriptor has been saved.
    """

    def write(self, project_file: ProjectFile, project_root: str | Path) -> Path:
        """Write the file, creating parent directories as needed.

        Returns:
            The absolute path of the written file.
        """
        root = Path(project_root).resolve()
        target = (root / project_file.path.replace("\\", "/")).resolve()
        if root not in target.parents:
            raise ValueError(f"Project file '{project_file.path}' resolves outside {root}")

        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(project_file.content, encoding="utf-8")
        return target
