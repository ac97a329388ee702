# agent_sandbox/file_utils.py
from pathlib import Path
from typing import Union

def is_binary_file(file_path: Union[str, Path], peek_size: int = 1024) -> bool:
    """Checks if a file is likely binary by looking for null bytes."""
    try:
        with open(file_path, 'rb') as f:
            chunk = f.read(peek_size)
        if b'\0' in chunk:
            return True
        return False
    except OSError:
        return True # Err on the side of caution

def _size_limit_message(max_file_size_bytes: int) -> str:
    if max_file_size_bytes >= 1024 * 1024:
        return f"{max_file_size_bytes // (1024 * 1024)}MB size limit"
    return f"{max_file_size_bytes} byte size limit"

def read_local_file(file_path: Union[str, Path], max_file_size_bytes: int) -> str:
    """Return the text content of a local file.
    Any valid UTF-8 is returned as is, NUL bytes included. Undecodable content is
    refused as binary when it contains a null byte, otherwise UnicodeDecodeError propagates.
    Raises FileNotFoundError, IsADirectoryError, ValueError (binary or too large) or OSError.
    The path must already have been checked by the PathGuard.
    """
    path = Path(file_path)
    if path.is_dir():
        raise IsADirectoryError(f"Is a directory: '{path}'")
    size = path.stat().st_size
    if size > max_file_size_bytes:
        raise ValueError(f"File exceeds {_size_limit_message(max_file_size_bytes)} ({size} bytes)")
    with open(path, "rb") as f:
        data = f.read()
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        if is_binary_file(path):
            raise ValueError(f"Refusing to read binary file '{path.name}'") from None
        raise

def write_local_file(file_path: Union[str, Path], content: str, max_file_size_bytes: int) -> None:
    """Create (or overwrite) a file with the given content, creating parent directories."""
    path = Path(file_path)
    if len(content.encode("utf-8")) > max_file_size_bytes:
        raise ValueError(f"File content exceeds {_size_limit_message(max_file_size_bytes)}")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except OSError as e:
        raise OSError(f"Failed to write file '{path}': {e.strerror or e}") from e
