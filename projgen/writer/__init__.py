"""projgen writer -- turns a ``Project`` into a project directory.

Quick usage::

    from projgen.writer import ProjectWriter
    from projgen.models import Project

    project = Project(name="Calc", target_frameworks=["net6.0", "net472"])
    descriptor = await ProjectWriter().write_project(project, "/tmp/Calc")
"""

from projgen.writer.file_writer import ProjectFileWriter
from projgen.writer.project_writer import (
    ProjectCreationNotPossibleError,
    ProjectWriter,
    Stage,
)

__all__ = [
    "ProjectCreationNotPossibleError",
    "ProjectFileWriter",
    "ProjectWriter",
    "Stage",
]
