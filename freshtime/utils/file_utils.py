"""File I/O utility functions for freshtime."""
import csv
import json
import os
from typing import Any

import markdown

from ..errors import FreshtimeError

def read_json(path: str) -> Any:
    """Read and decode a JSON file.

    Args:
        path: File path

    Returns:
        Decoded JSON value

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not valid JSON
    """
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)

def write_json(path: str, data: Any):
    """Write data as indented JSON, replacing the whole file.

    Args:
        path: File path
        data: JSON-serializable value
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2)
        f.write("\n")

def write_csv(filename: str, headers: list, rows: list):
    """Write data to a CSV file.

    Args:
        filename: Output file name
        headers: Column headers
        rows: Data rows

    Raises:
        FreshtimeError: If the file cannot be written
    """
    try:
        with open(filename, 'w', newline='') as f:
            writer = csv.writer(f)
            writer.writerow(headers)
            writer.writerows(rows)
    except OSError as e:
        raise FreshtimeError(f"Failed to write to '{filename}': {e}") from e

def write_markdown(md_path: str, content: str, title: str, overwrite: bool = False):
    """Write content to a Markdown file.

    Args:
        md_path: Output file path
        content: Markdown content
        title: Heading written at the top of a new file
        overwrite: Whether to overwrite the file if it exists

    Raises:
        FreshtimeError: If the file cannot be written or is not valid Markdown
    """
    file_exists = os.path.exists(md_path)
    if file_exists and not overwrite:
        mode = 'a'
        print(f"[INFO] File '{md_path}' exists. Appending output.")
    elif file_exists and overwrite:
        mode = 'w'
        print(f"[INFO] File '{md_path}' exists. Overwriting as requested.")
    else:
        mode = 'w'
        print(f"[INFO] File '{md_path}' does not exist. Creating new file.")

    try:
        with open(md_path, mode, encoding='utf-8') as f:
            if mode == 'w' or os.stat(md_path).st_size == 0:
                f.write(f"# {title}\n\n")
            f.write(content)
    except OSError as e:
        raise FreshtimeError(f"Failed to write to '{md_path}': {e}") from e

    # Validate by converting to HTML
    with open(md_path, 'r', encoding='utf-8') as f:
        md_text = f.read()
    try:
        markdown.markdown(md_text)
    except Exception as e:
        raise FreshtimeError(f"Markdown validation failed for '{md_path}': {e}") from e
