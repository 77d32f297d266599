from fastapi import HTTPException, status
from pathlib import Path, PureWindowsPath

def storage_name(declared_name: str) -> str:
    """
    Reduce a client-declared filename to a bare name that stays inside the
    storage directory.

    Both separators are stripped, so "../x.txt" and "C:\\tmp\\x.txt" are
    stored as "x.txt".
    """
    name = PureWindowsPath(declared_name).name
    name = Path(name).name
    if name in ("", ".", ".."):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid filename: {declared_name!r}"
        )
    return name

def ensure_directory_exists(directory_path: Path) -> None:
    """
    Ensure that a directory exists, creating it if necessary.
    """
    directory_path.mkdir(parents=True, exist_ok=True)
