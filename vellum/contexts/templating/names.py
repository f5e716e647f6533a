"""
Template Names and Folders

Template identifiers are either a plain file name ("profile") resolved against
the default directory, or a folder-qualified name ("emails::welcome") resolved
against a registered folder, optionally falling back to the default directory.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from vellum.contexts.templating.exceptions import FolderError, InvalidTemplateNameError, TemplateNotFound

FOLDER_SEPARATOR = "::"


@dataclass(frozen=True)
class Folder:
    """
    A named template directory.

    Attributes:
        name: Folder namespace used in identifiers
        path: Directory holding the folder's templates
        fallback: Look in the default directory when a file is missing here
    """

    name: str
    path: Path
    fallback: bool = False


class Folders:
    """Collection of template folders."""

    def __init__(self):
        self._folders: Dict[str, Folder] = {}

    def add(self, name: str, path: Path, fallback: bool = False) -> Folder:
        """
        Add a template folder.

        Raises:
            FolderError: If the name is taken or the directory does not exist
        """
        if self.exists(name):
            raise FolderError(f'The template folder "{name}" is already being used.')

        path = Path(path)
        if not path.is_dir():
            raise FolderError(f'The specified directory path "{path}" does not exist.')

        folder = Folder(name=name, path=path, fallback=fallback)
        self._folders[name] = folder
        return folder

    def remove(self, name: str) -> None:
        if not self.exists(name):
            raise FolderError(f'The template folder "{name}" was not found.')
        del self._folders[name]

    def get(self, name: str) -> Folder:
        if not self.exists(name):
            raise FolderError(f'The template folder "{name}" was not found.')
        return self._folders[name]

    def exists(self, name: str) -> bool:
        return name in self._folders

    def __iter__(self):
        return iter(self._folders.values())


@dataclass(frozen=True)
class TemplateName:
    """
    A parsed template identifier.

    Attributes:
        name: Identifier as given (e.g., 'emails::welcome')
        file: File name with the engine's extension appended
        folder: Folder the identifier names, if any
    """

    name: str
    file: str
    folder: Optional[Folder] = None

    @classmethod
    def parse(cls, name: str, folders: Folders, file_extension: Optional[str] = None) -> "TemplateName":
        """
        Parse an identifier.

        Args:
            name: Identifier such as 'profile' or 'emails::welcome'
            folders: Registered folders
            file_extension: Extension appended to the file name (none if empty)

        Raises:
            InvalidTemplateNameError: If the name is empty or uses "::" more than once
            FolderError: If the named folder is not registered
        """
        parts = name.split(FOLDER_SEPARATOR)

        if len(parts) > 2:
            raise InvalidTemplateNameError(
                f'The template name "{name}" is not valid. '
                f'Do not use the folder namespace separator "{FOLDER_SEPARATOR}" more than once.'
            )

        folder = None
        file = parts[-1]
        if len(parts) == 2:
            if not parts[0]:
                raise InvalidTemplateNameError(
                    f'The template name "{name}" is not valid. The folder name cannot be empty.'
                )
            folder = folders.get(parts[0])

        if not file:
            raise InvalidTemplateNameError(
                f'The template name "{name}" is not valid. The template name cannot be empty.'
            )

        if file_extension:
            file = f"{file}.{file_extension}"

        return cls(name=name, file=file, folder=folder)

    def candidate_paths(self, directory: Optional[Path]) -> List[Path]:
        """
        Paths to try for this name, in order.

        Args:
            directory: The engine's default directory (may be None)

        Returns:
            Candidate paths (empty when the name needs the default directory
            and none is set)
        """
        if self.folder is None:
            return [] if directory is None else [directory / self.file]

        paths = [self.folder.path / self.file]
        if self.folder.fallback and directory is not None:
            paths.append(directory / self.file)
        return paths


def resolve_template_path(name: TemplateName, directory: Optional[Path]) -> Path:
    """
    Return the first candidate path that exists.

    Raises:
        TemplateNotFound: With every candidate path, if none exists
    """
    paths = name.candidate_paths(directory)

    if not paths:
        raise TemplateNotFound(
            name.name,
            message=f'The template "{name.name}" could not be found: the default directory has not been defined.',
        )

    for path in paths:
        if path.is_file():
            return path

    raise TemplateNotFound(name.name, paths)
