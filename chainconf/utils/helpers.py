import json
import os


def create_dirs(path: str) -> None:
    """
    Create all parent directories for a given path.

    Args:
        path: File path for which to create parent directories
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)


def write_json(path: str, data: dict) -> None:
    create_dirs(path)
    with open(path, mode="w") as output_file:
        json.dump(data, output_file, indent=2)
        output_file.write("\n")
